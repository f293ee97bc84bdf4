"""
Strategy cascade that turns a raw RSVP email into a record.
"""
from typing import Optional, List, Sequence

from .base import BaseRsvpParser
from .structured import StructuredParser
from .natural_language import NaturalLanguageParser
from .form_notification import FormNotificationParser
from ..utils.models import RawMessage, RsvpRecord
from ..utils.logger import get_logger
from config.settings import ParserConfig


class ExtractionPipeline:
    """Runs parsing strategies in priority order; the first usable record wins."""

    def __init__(self, strategies: Sequence[BaseRsvpParser]):
        self.strategies: List[BaseRsvpParser] = list(strategies)
        self.logger = get_logger("extraction_pipeline")

    @classmethod
    def default(cls, config: ParserConfig) -> "ExtractionPipeline":
        """Structured fields first, then prose, then form notifications."""
        structured = StructuredParser(config)
        return cls([
            structured,
            NaturalLanguageParser(config),
            FormNotificationParser(config, structured),
        ])

    def extract(self, message: RawMessage) -> Optional[RsvpRecord]:
        """
        Extract an RSVP record from a message.

        Exceptions raised by a strategy are not caught here; the caller
        accounts for them per message.

        Args:
            message: Message to parse

        Returns:
            Record with a non-empty name, or None if every strategy failed
        """
        for strategy in self.strategies:
            record = strategy.try_parse(message)
            if record is None or not record.is_usable:
                continue

            record.name = record.name.strip()
            if record.source is None:
                record.source = strategy.name
            if record.timestamp is None:
                record.timestamp = message.received_at

            self.logger.debug("Strategy matched",
                              strategy=record.source,
                              message_id=message.message_id)
            return record

        self.logger.debug("No strategy matched", message_id=message.message_id)
        return None
