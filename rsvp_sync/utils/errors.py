"""
Exception types for the RSVP sheet sync system.
"""
from typing import Optional


class RsvpSyncError(Exception):
    """Base class for RSVP sync errors."""


class ParseFailure(RsvpSyncError):
    """No extraction strategy produced a record with a name."""

    def __init__(self, message_id: Optional[str], subject: str = ""):
        self.message_id = message_id
        self.subject = subject
        super().__init__(f"Could not extract a guest name from message {message_id}")


class ExtractionError(RsvpSyncError):
    """Unexpected fault while handling a single message."""

    def __init__(self, message_id: Optional[str], cause: Exception):
        self.message_id = message_id
        self.cause = cause
        super().__init__(f"Failed to process message {message_id}: {cause}")


class RunError(RsvpSyncError):
    """Fault outside the per-message loop that aborts the run."""
