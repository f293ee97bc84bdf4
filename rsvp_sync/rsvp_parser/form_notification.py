"""
Parser for RSVPs forwarded by a third-party form service.
"""
from datetime import datetime
from typing import Optional

from .base import BaseRsvpParser
from .structured import StructuredParser
from ..utils.models import RawMessage, RsvpRecord
from ..utils.logger import get_logger
from config.settings import ParserConfig


class FormNotificationParser(BaseRsvpParser):
    """Recognizes form-service notification bodies and reads their fields."""

    name = "form_notification"

    def __init__(self, config: ParserConfig, structured: Optional[StructuredParser] = None):
        self.config = config
        self.structured = structured or StructuredParser(config)
        self.logger = get_logger("form_notification_parser")

    def is_form_notification(self, body: str) -> bool:
        return any(marker and marker in body for marker in self.config.form_markers)

    def parse(self, body: str, sender: str, timestamp: Optional[datetime]) -> Optional[RsvpRecord]:
        """
        Parse a form notification body.

        Returns:
            RsvpRecord with a name, or None if the body is not a form
            notification or carries no name field
        """
        if not body or not self.is_form_notification(body):
            return None

        record = self.structured.parse(body, sender, timestamp)
        if not record.is_usable:
            self.logger.debug("Form notification without a name field")
            return None

        record.source = self.name
        return record

    def try_parse(self, message: RawMessage) -> Optional[RsvpRecord]:
        return self.parse(message.body, message.sender, message.received_at)
