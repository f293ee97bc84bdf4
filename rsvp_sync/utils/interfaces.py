"""
Collaborator interfaces the RSVP core reads from and writes to.
"""
from abc import ABC, abstractmethod
from typing import List, Sequence

from .models import MessageThread


class MessageSource(ABC):
    """Mailbox that can be searched for message threads."""

    @abstractmethod
    def search(self, query: str, offset: int = 0, limit: int = 50) -> List[MessageThread]:
        """Return up to ``limit`` threads matching ``query``, skipping ``offset``."""


class RowStore(ABC):
    """Append-only table with a header row."""

    @abstractmethod
    def read_column(self, col_index: int) -> List[str]:
        """Return every cell of a zero-based column, header included."""

    @abstractmethod
    def append_row(self, values: Sequence[str]) -> None:
        """Append one row after the last populated row."""

    @abstractmethod
    def ensure_header(self, header: Sequence[str]) -> None:
        """Write ``header`` as the first row if it is not already there."""


class LabelSink(ABC):
    """Tags processed threads. Bookkeeping only."""

    @abstractmethod
    def apply_label(self, thread_id: str, label: str) -> None:
        pass

    @abstractmethod
    def remove_label(self, thread_id: str, label: str) -> None:
        pass


class NotificationSink(ABC):
    """Delivers operator messages."""

    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> None:
        pass
