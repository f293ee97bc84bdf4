"""
RSVP Sheet Sync.

Reads event RSVP emails from a mailbox, extracts guest details with a
cascade of parsing heuristics and appends new guests to a spreadsheet
without duplicating rows.
"""

__version__ = "1.0.0"
__description__ = "Automated RSVP email extraction and spreadsheet synchronization"
