"""
Idempotent append of RSVP records to the row store.
"""
from datetime import datetime, timezone
from typing import Optional, List, Callable, Set, Dict

from ..utils.models import RsvpRecord, AppendResult, AppendStatus
from ..utils.interfaces import RowStore
from ..utils.logger import get_logger
from config.settings import SheetsConfig, AppConfig


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DeduplicatingAppender:
    """Appends a record unless its email or its name is already in the sheet."""

    def __init__(
        self,
        store: RowStore,
        sheets_config: SheetsConfig,
        app_config: AppConfig,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.store = store
        self.sheets_config = sheets_config
        self.app_config = app_config
        self.clock = clock
        self.logger = get_logger("deduplicating_appender")

        # Values of rows a dry run would have written
        self._pending: Dict[str, Set[str]] = {"name": set(), "email": set()}

    def ensure_header(self):
        """Write the fixed header row if the sheet does not have it yet."""
        self.store.ensure_header(list(self.sheets_config.header))

    def _existing_values(self, field: str) -> Set[str]:
        column = self.store.read_column(self.sheets_config.columns[field])
        # First row is the header
        existing = {str(value).strip() for value in column[1:] if str(value).strip()}
        return existing | self._pending[field]

    def find_duplicate(self, record: RsvpRecord) -> Optional[str]:
        """
        Check the store for a row matching the record.

        A row matches on either field alone. Returns the field that matched
        ("email" or "name"), or None.
        """
        email = (record.email or "").strip()
        if email and email != self.app_config.default_email:
            existing_emails = self._existing_values("email")
            existing_emails.discard(self.app_config.default_email)
            if email in existing_emails:
                return "email"

        name = record.name.strip()
        if name and name in self._existing_values("name"):
            return "name"

        return None

    def to_row(self, record: RsvpRecord) -> List[str]:
        """Serialize a record, filling in defaults for absent fields."""
        timestamp = record.timestamp or self.clock()
        values = {
            "name": record.name.strip(),
            "email": record.email or self.app_config.default_email,
            "celebrating": record.celebrating or self.app_config.default_celebrating,
            "notes": record.notes or self.app_config.default_notes,
            "timestamp": timestamp.isoformat(timespec="seconds"),
        }

        row = [""] * len(self.sheets_config.header)
        for field, index in self.sheets_config.columns.items():
            row[index] = values[field]
        return row

    def append(self, record: RsvpRecord, dry_run: bool = False) -> AppendResult:
        """
        Append a record unless it is already recorded.

        Args:
            record: Record with a non-empty name
            dry_run: If True, check for duplicates but don't write

        Returns:
            AppendResult with WRITTEN or DUPLICATE status
        """
        if not record.is_usable:
            raise ValueError("Cannot append an RSVP record without a name")

        matched_on = self.find_duplicate(record)
        if matched_on:
            self.logger.info("RSVP already recorded",
                             name=record.name,
                             email=record.email,
                             matched_on=matched_on)
            return AppendResult(
                status=AppendStatus.DUPLICATE,
                record=record,
                matched_on=matched_on,
                dry_run=dry_run
            )

        row = self.to_row(record)
        if dry_run:
            self.logger.info("DRY RUN: Would append RSVP row", name=record.name)
            self._pending["name"].add(record.name.strip())
            if record.email and record.email.strip():
                self._pending["email"].add(record.email.strip())
        else:
            self.store.append_row(row)
            self.logger.info("Appended RSVP row", name=record.name, email=record.email)

        return AppendResult(
            status=AppendStatus.WRITTEN,
            record=record,
            row=row,
            dry_run=dry_run
        )
