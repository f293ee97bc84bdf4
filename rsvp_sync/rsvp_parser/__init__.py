"""
RSVP extraction strategies and the cascade that runs them.
"""

from .fields import FieldExtractor, extract_field, MAX_FIELD_LENGTH
from .base import BaseRsvpParser, address_from_sender
from .structured import StructuredParser
from .natural_language import NaturalLanguageParser
from .form_notification import FormNotificationParser
from .pipeline import ExtractionPipeline

__all__ = [
    'FieldExtractor', 'extract_field', 'MAX_FIELD_LENGTH',
    'BaseRsvpParser', 'address_from_sender',
    'StructuredParser', 'NaturalLanguageParser', 'FormNotificationParser',
    'ExtractionPipeline'
]
