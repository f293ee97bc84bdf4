"""
Data models for the RSVP sheet sync system.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, List
from enum import Enum


@dataclass
class RawMessage:
    """A single inbound email, read once per run."""
    message_id: str
    subject: str
    sender: str
    received_at: Optional[datetime]
    body: str
    thread_id: Optional[str] = None


@dataclass
class MessageThread:
    """A group of messages that is labeled as one unit."""
    thread_id: str
    messages: List[RawMessage] = field(default_factory=list)


@dataclass
class RsvpRecord:
    """Guest details extracted from an RSVP email.

    Only ``name`` is required for the record to be usable. Optional fields
    stay ``None`` until the appender fills in defaults at write time.
    """
    name: str
    email: Optional[str] = None
    celebrating: Optional[str] = None
    notes: Optional[str] = None
    timestamp: Optional[datetime] = None
    source: Optional[str] = None

    @property
    def is_usable(self) -> bool:
        return bool(self.name and self.name.strip())

    def __str__(self) -> str:
        return (f"RsvpRecord(name='{self.name}', "
                f"email='{self.email}', "
                f"celebrating='{self.celebrating}', "
                f"source='{self.source}')")


class AppendStatus(Enum):
    """Outcome of an append attempt."""
    WRITTEN = "written"
    DUPLICATE = "duplicate"


@dataclass
class AppendResult:
    """Result of a deduplicating append."""
    status: AppendStatus
    record: RsvpRecord
    matched_on: Optional[str] = None
    row: Optional[List[str]] = None
    dry_run: bool = False

    @property
    def written(self) -> bool:
        return self.status is AppendStatus.WRITTEN

    @property
    def is_duplicate(self) -> bool:
        return self.status is AppendStatus.DUPLICATE


@dataclass
class ProcessingStats:
    """Statistics for a single run."""
    messages_processed: int = 0
    records_parsed: int = 0
    new_rows: int = 0
    duplicate_rows: int = 0
    parse_failures: int = 0
    errors: int = 0
    threads_labeled: int = 0
    strategies: Dict[str, int] = field(default_factory=dict)

    def reset(self):
        """Reset all statistics."""
        self.messages_processed = 0
        self.records_parsed = 0
        self.new_rows = 0
        self.duplicate_rows = 0
        self.parse_failures = 0
        self.errors = 0
        self.threads_labeled = 0
        self.strategies.clear()

    def add_strategy_count(self, strategy: str):
        """Add count for the strategy that produced a record."""
        if strategy not in self.strategies:
            self.strategies[strategy] = 0
        self.strategies[strategy] += 1

    def to_dict(self) -> Dict[str, object]:
        return {
            'messages_processed': self.messages_processed,
            'records_parsed': self.records_parsed,
            'new_rows': self.new_rows,
            'duplicate_rows': self.duplicate_rows,
            'parse_failures': self.parse_failures,
            'errors': self.errors,
            'threads_labeled': self.threads_labeled,
            'strategies': dict(self.strategies),
        }
