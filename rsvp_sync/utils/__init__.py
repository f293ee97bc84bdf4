"""
Utility modules for RSVP sheet sync.
"""

from .models import (
    RawMessage, MessageThread, RsvpRecord, AppendStatus, AppendResult,
    ProcessingStats
)
from .errors import RsvpSyncError, ParseFailure, ExtractionError, RunError
from .interfaces import MessageSource, RowStore, LabelSink, NotificationSink
from .logger import setup_logger, get_logger, RsvpLogger

__all__ = [
    'RawMessage', 'MessageThread', 'RsvpRecord', 'AppendStatus', 'AppendResult',
    'ProcessingStats', 'RsvpSyncError', 'ParseFailure', 'ExtractionError', 'RunError',
    'MessageSource', 'RowStore', 'LabelSink', 'NotificationSink',
    'setup_logger', 'get_logger', 'RsvpLogger'
]
