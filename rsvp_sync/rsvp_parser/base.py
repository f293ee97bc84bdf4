"""
Common interface for RSVP extraction strategies.
"""
import re
from abc import ABC, abstractmethod
from email.utils import parseaddr
from typing import Optional

from ..utils.models import RawMessage, RsvpRecord

EMAIL_PATTERN = re.compile(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}')


def find_address(text: Optional[str]) -> Optional[str]:
    """Return the first email address found in ``text``."""
    if not text:
        return None
    match = EMAIL_PATTERN.search(text)
    return match.group(0) if match else None


def address_from_sender(sender: Optional[str]) -> Optional[str]:
    """
    Pull the bare address out of a From header.

    Handles both ``"Jane Okoro" <jane@x.com>`` and a plain ``jane@x.com``.
    """
    if not sender:
        return None
    _, addr = parseaddr(sender)
    if addr and "@" in addr:
        return addr.strip()
    return find_address(sender)


class BaseRsvpParser(ABC):
    """A single step of the extraction cascade."""

    #: Name recorded on records this strategy produces
    name = "base"

    @abstractmethod
    def try_parse(self, message: RawMessage) -> Optional[RsvpRecord]:
        """Return a usable record, or None to let the next strategy try."""
