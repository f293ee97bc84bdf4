# notifications/notifier.py
from datetime import datetime, timezone
from typing import Optional

from ..utils.interfaces import NotificationSink
from ..utils.logger import get_logger
from ..utils.models import ProcessingStats


class Notifier:
    """Sends run summaries and failures to the operator. Never raises."""

    def __init__(self, sink: NotificationSink, operator_email: Optional[str]):
        self.sink = sink
        self.operator_email = operator_email
        self.logger = get_logger("notifier")

    def _send(self, subject: str, body: str, event: str) -> bool:
        if not self.operator_email:
            self.logger.debug("No operator address configured", kind=event)
            return False
        try:
            self.sink.send(to=self.operator_email, subject=subject, body=body)
            self.logger.info(f"{event}_sent", to=self.operator_email)
            return True
        except Exception as e:
            self.logger.error(f"{event}_failed", error=str(e), to=self.operator_email)
            return False

    def send_summary(self, stats: ProcessingStats) -> bool:
        """Email the counters of a finished run."""
        subject = f"RSVP sync: {stats.new_rows} new, {stats.errors} errors"
        body = (
            f"RSVP sync finished at {datetime.now(timezone.utc).isoformat(timespec='seconds')}\n\n"
            f"Messages processed: {stats.messages_processed}\n"
            f"RSVPs parsed: {stats.records_parsed}\n"
            f"New rows: {stats.new_rows}\n"
            f"Duplicates skipped: {stats.duplicate_rows}\n"
            f"Unparseable messages: {stats.parse_failures}\n"
            f"Errors: {stats.errors}\n"
        )
        if stats.strategies:
            body += "\nBy strategy:\n"
            body += "".join(f"  {name}: {count}\n" for name, count in stats.strategies.items())

        return self._send(subject, body, "summary")

    def send_error(self, error: Exception, context: str = "") -> bool:
        """Email the operator that a run was aborted."""
        subject = "RSVP sync failed"
        body = (
            f"The RSVP sync run was aborted.\n\n"
            f"Error: {type(error).__name__}: {error}\n"
            f"Context: {context or 'n/a'}\n\n"
            f"Rows already appended and labels already applied were kept.\n"
        )
        return self._send(subject, body, "error_notification")
