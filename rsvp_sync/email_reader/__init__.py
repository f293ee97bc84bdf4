"""
Mailbox access for RSVP emails.
"""

from .gmail_client import GmailClient, build_search_query

__all__ = ['GmailClient', 'build_search_query']
