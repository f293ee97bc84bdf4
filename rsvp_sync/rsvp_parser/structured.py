"""
Parser for key/value style RSVP bodies such as form-generated emails.
"""
from datetime import datetime
from typing import Optional

from .base import BaseRsvpParser, address_from_sender, find_address
from .fields import FieldExtractor
from ..utils.models import RawMessage, RsvpRecord
from ..utils.logger import get_logger
from config.settings import ParserConfig


class StructuredParser(BaseRsvpParser):
    """Reads ``Label: value`` lines using per-field synonym lists."""

    name = "structured"

    def __init__(self, config: ParserConfig, extractor: Optional[FieldExtractor] = None):
        self.config = config
        self.extractor = extractor or FieldExtractor(config.max_field_length)
        self.logger = get_logger("structured_parser")

    def parse(self, body: str, sender: str, timestamp: Optional[datetime]) -> RsvpRecord:
        """
        Extract every field the body labels explicitly.

        Args:
            body: Plain text email body
            sender: Raw From header, used when the body has no email field
            timestamp: When the message was received

        Returns:
            RsvpRecord whose name may be empty; callers check ``is_usable``
        """
        synonyms = self.config.field_synonyms

        name = self.extractor.extract(body, synonyms["name"])
        email = find_address(self.extractor.extract(body, synonyms["email"]))
        if not email:
            email = address_from_sender(sender)

        record = RsvpRecord(
            name=name or "",
            email=email,
            celebrating=self.extractor.extract(body, synonyms["celebrating"]),
            notes=self.extractor.extract(body, synonyms["notes"]),
            timestamp=timestamp,
            source=self.name,
        )

        self.logger.debug("Structured fields extracted",
                          has_name=record.is_usable,
                          has_email=bool(record.email))
        return record

    def try_parse(self, message: RawMessage) -> Optional[RsvpRecord]:
        record = self.parse(message.body, message.sender, message.received_at)
        return record if record.is_usable else None
