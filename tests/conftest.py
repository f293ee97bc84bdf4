"""
Shared fixtures and in-memory collaborators for the test suite.
"""
import pytest
from datetime import datetime, timezone
from typing import List, Optional

from config.settings import ParserConfig, SheetsConfig, AppConfig, GmailConfig, NotificationConfig
from rsvp_sync.utils.interfaces import RowStore, NotificationSink
from rsvp_sync.utils.models import RawMessage, MessageThread

HEADER = ["Name", "Email", "Celebrating", "Notes", "Timestamp"]


class FakeRowStore(RowStore):
    """List-of-rows store with the same semantics as the sheet."""

    def __init__(self, rows: Optional[List[List[str]]] = None):
        self.rows = [list(row) for row in rows or []]
        self.appended = 0

    def read_column(self, col_index):
        return [row[col_index] if col_index < len(row) else "" for row in self.rows]

    def append_row(self, values):
        self.rows.append(list(values))
        self.appended += 1

    def ensure_header(self, header):
        if not self.rows:
            self.rows.append(list(header))
        elif self.rows[0] != list(header):
            self.rows[0] = list(header)

    @property
    def data_rows(self):
        return self.rows[1:]


class FakeMailbox:
    """Stands in for GmailClient: serves fixed threads and records labels."""

    def __init__(self, threads: Optional[List[MessageThread]] = None, connect_ok: bool = True):
        self.threads = threads or []
        self.connect_ok = connect_ok
        self.labels = {}
        self.queries = []
        self.disconnected = False

    def connect(self):
        return self.connect_ok

    def disconnect(self):
        self.disconnected = True

    def search(self, query, offset=0, limit=50):
        self.queries.append(query)
        return self.threads[offset:offset + limit]

    def apply_label(self, thread_id, label):
        self.labels.setdefault(thread_id, set()).add(label)

    def remove_label(self, thread_id, label):
        self.labels.get(thread_id, set()).discard(label)


class RecordingSink(NotificationSink):
    def __init__(self, fail: bool = False):
        self.sent = []
        self.fail = fail

    def send(self, to, subject, body):
        if self.fail:
            raise ConnectionError("SMTP unavailable")
        self.sent.append({'to': to, 'subject': subject, 'body': body})


@pytest.fixture
def parser_config():
    return ParserConfig(celebrants=("Ada Okafor", "Bola Ahmed", "Chidi Obi"))


@pytest.fixture
def sheets_config():
    return SheetsConfig(spreadsheet_id="sheet-123", sheet_name="RSVPs")


@pytest.fixture
def app_config():
    return AppConfig(max_emails_per_run=50)


@pytest.fixture
def gmail_config():
    return GmailConfig(
        credentials_file="unused.json",
        search_keywords=("RSVP",),
        processed_label="RSVP/Processed",
        since_days=30,
    )


@pytest.fixture
def notification_config():
    return NotificationConfig(operator_email="host@example.com", send_summary=True)


@pytest.fixture
def received_at():
    return datetime(2024, 5, 4, 18, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_message(received_at):
    """Factory for RawMessage objects."""
    def _make(body, subject="RSVP", sender="Guest <guest@example.com>",
              message_id="m1", thread_id="t1"):
        return RawMessage(
            message_id=message_id,
            thread_id=thread_id,
            subject=subject,
            sender=sender,
            received_at=received_at,
            body=body,
        )
    return _make


@pytest.fixture
def empty_store():
    return FakeRowStore([HEADER])
