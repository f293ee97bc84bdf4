"""
Pattern and roster based extraction for prose RSVP emails.

Names are found with three heuristics, tried in order:

1. "I'm Jane Okoro" / "I am Jane Okoro"
2. "my name is Jane Okoro"
3. a signature line made of exactly two capitalized words near the end

Only the lead-in phrase is matched case-insensitively; the name itself must
be two capitalized words. The celebrating field is filled from a configured
roster of honoree names found anywhere in the body.
"""
import re
from datetime import datetime
from typing import Optional, List

from .base import BaseRsvpParser, address_from_sender
from ..utils.models import RawMessage, RsvpRecord
from ..utils.logger import get_logger
from config.settings import ParserConfig

_TWO_CAPITALIZED = r"([A-Z][a-z]+[ \t]+[A-Z][a-z]+)\b"

INTRO_PATTERNS = [
    re.compile(r"\b(?i:i['’]m|i\s+am)\s+" + _TWO_CAPITALIZED),
    re.compile(r"\b(?i:my\s+name\s+is)\s+" + _TWO_CAPITALIZED),
]

SIGNATURE_PATTERN = re.compile(r"[A-Z][a-z]+\s+[A-Z][a-z]+")


class NaturalLanguageParser(BaseRsvpParser):
    """Best-effort parser for free-form RSVP replies."""

    name = "natural_language"

    def __init__(self, config: ParserConfig):
        self.config = config
        self.logger = get_logger("natural_language_parser")

    def parse(
        self,
        body: str,
        subject: str,
        sender: str,
        timestamp: Optional[datetime]
    ) -> Optional[RsvpRecord]:
        """
        Extract a record from prose.

        Args:
            body: Plain text email body
            subject: Message subject, kept for log context
            sender: Raw From header, the only source of the email address
            timestamp: When the message was received

        Returns:
            RsvpRecord, or None if no name heuristic matched
        """
        name = self._extract_name(body or "")
        if not name:
            self.logger.debug("No name found in prose", subject=subject)
            return None

        return RsvpRecord(
            name=name,
            email=address_from_sender(sender),
            celebrating=self._extract_celebrating(body),
            notes=self.config.notes_placeholder,
            timestamp=timestamp,
            source=self.name,
        )

    def try_parse(self, message: RawMessage) -> Optional[RsvpRecord]:
        return self.parse(message.body, message.subject, message.sender, message.received_at)

    def _extract_name(self, body: str) -> Optional[str]:
        for pattern in INTRO_PATTERNS:
            match = pattern.search(body)
            if match:
                return match.group(1)

        return self._extract_signature(body)

    def _extract_signature(self, body: str) -> Optional[str]:
        if self.config.signature_lines <= 0:
            return None
        # Blank lines count towards the window
        for line in body.splitlines()[-self.config.signature_lines:]:
            line = line.strip()
            if SIGNATURE_PATTERN.fullmatch(line):
                return line
        return None

    def _extract_celebrating(self, body: str) -> Optional[str]:
        body_lower = body.lower()
        found: List[str] = [
            celebrant for celebrant in self.config.celebrants
            if celebrant.strip() and celebrant.lower() in body_lower
        ]
        return ", ".join(found) if found else None
