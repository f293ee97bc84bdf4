"""
Row store access and deduplicating appends.
"""

from .appender import DeduplicatingAppender
from .sheets_client import SheetsRowStore, column_letter

__all__ = ['DeduplicatingAppender', 'SheetsRowStore', 'column_letter']
