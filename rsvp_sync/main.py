"""
Main orchestrator for the RSVP sheet sync system.
"""
import click
from typing import Optional, List, Dict, Any

from .email_reader.gmail_client import GmailClient, build_search_query
from .rsvp_parser.pipeline import ExtractionPipeline
from .sheets_sync.appender import DeduplicatingAppender
from .sheets_sync.sheets_client import SheetsRowStore
from .notifications.email_client import EmailClient
from .notifications.notifier import Notifier
from .utils.models import RawMessage, MessageThread
from .utils.interfaces import RowStore
from .utils.errors import ParseFailure, ExtractionError, RunError
from .utils.logger import setup_logger, RsvpLogger
from config.settings import (
    gmail_config, sheets_config, notification_config, app_config, parser_config,
    GmailConfig, SheetsConfig, NotificationConfig, AppConfig, ParserConfig
)


class RsvpAutomation:
    """Reads RSVP emails, extracts guest details and appends them to the sheet."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_file: Optional[str] = None,
        gmail_client: Optional[GmailClient] = None,
        row_store: Optional[RowStore] = None,
        notifier: Optional[Notifier] = None,
        pipeline: Optional[ExtractionPipeline] = None,
        gmail_cfg: GmailConfig = gmail_config,
        sheets_cfg: SheetsConfig = sheets_config,
        notification_cfg: NotificationConfig = notification_config,
        app_cfg: AppConfig = app_config,
        parser_cfg: ParserConfig = parser_config,
    ):
        self.logger = setup_logger("rsvp_automation", log_level, log_file)
        self.rsvp_logger = RsvpLogger(self.logger)

        self.gmail_cfg = gmail_cfg
        self.sheets_cfg = sheets_cfg
        self.notification_cfg = notification_cfg
        self.app_cfg = app_cfg

        self.gmail_client = gmail_client or GmailClient(gmail_cfg)
        self.pipeline = pipeline or ExtractionPipeline.default(parser_cfg)
        self.notifier = notifier or Notifier(
            EmailClient(notification_cfg), notification_cfg.operator_email
        )
        # Built on first use so missing credentials surface as a run error
        self.row_store = row_store

    def _get_appender(self) -> DeduplicatingAppender:
        if self.row_store is None:
            self.row_store = SheetsRowStore(self.sheets_cfg)
        return DeduplicatingAppender(self.row_store, self.sheets_cfg, self.app_cfg)

    def process_messages(
        self,
        limit: Optional[int] = None,
        since_days: Optional[int] = None,
        dry_run: bool = False,
        notify: bool = True
    ) -> Dict[str, Any]:
        """
        Main method to process RSVP emails and append new guests.

        Args:
            limit: Maximum number of messages to process (defaults to the run cap)
            since_days: Number of days to look back
            dry_run: If True, don't write rows, apply labels or send notifications
            notify: If False, skip operator notifications

        Returns:
            Dictionary with processing results
        """
        self.rsvp_logger.reset_stats()
        cap = limit if limit is not None else self.app_cfg.max_emails_per_run
        send_notifications = notify and not dry_run

        try:
            self.logger.info("Starting RSVP processing",
                             limit=cap,
                             since_days=since_days,
                             dry_run=dry_run)

            if not self.gmail_client.connect():
                raise RunError("Failed to connect to Gmail")

            appender = self._get_appender()
            if not dry_run:
                appender.ensure_header()

            query = build_search_query(
                self.gmail_cfg.search_keywords,
                self.gmail_cfg.processed_label,
                since_days if since_days is not None else self.gmail_cfg.since_days,
            )
            threads = self.gmail_client.search(query, offset=0, limit=cap)

            failed_messages: List[Dict[str, Any]] = []
            if not threads:
                self.logger.info("No RSVP emails found matching criteria")
            else:
                self.logger.info(f"Found {len(threads)} threads to process")

            remaining = cap
            for thread in threads:
                if remaining <= 0:
                    self.logger.info("Run size cap reached", cap=cap)
                    break
                remaining = self._process_thread(thread, appender, remaining, dry_run, failed_messages)

            self.rsvp_logger.print_summary()

            stats = self.rsvp_logger.stats
            if (send_notifications and self.notification_cfg.send_summary
                    and (stats.new_rows or stats.errors)):
                self.notifier.send_summary(stats)

            return {
                'messages_processed': stats.messages_processed,
                'records_parsed': stats.records_parsed,
                'new_rows': stats.new_rows,
                'duplicate_rows': stats.duplicate_rows,
                'parse_failures': stats.parse_failures,
                'errors': stats.errors,
                'threads_labeled': stats.threads_labeled,
                'failed_messages': failed_messages,
                'dry_run': dry_run
            }

        except Exception as e:
            self.logger.error("Error in RSVP processing", error=str(e))
            self.rsvp_logger.log_error(e, "Main processing error")
            if send_notifications:
                self.notifier.send_error(e, "Main processing error")
            return {'error': str(e)}

        finally:
            self.gmail_client.disconnect()

    def _process_thread(
        self,
        thread: MessageThread,
        appender: DeduplicatingAppender,
        remaining: int,
        dry_run: bool,
        failed_messages: List[Dict[str, Any]]
    ) -> int:
        """Process one thread and label it if every message went through.

        Returns the number of messages still allowed in this run.
        """
        try:
            thread_ok = True
            for message in thread.messages:
                if remaining <= 0:
                    thread_ok = False
                    break
                remaining -= 1
                if not self._process_message(message, appender, dry_run, failed_messages):
                    thread_ok = False

            if thread_ok and not dry_run:
                self.gmail_client.apply_label(thread.thread_id, self.gmail_cfg.processed_label)
                self.rsvp_logger.log_thread_labeled(thread.thread_id, self.gmail_cfg.processed_label)

        except Exception as e:
            self.rsvp_logger.log_error(e, f"Thread processing failed: {thread.thread_id}")

        return remaining

    def _process_message(
        self,
        message: RawMessage,
        appender: DeduplicatingAppender,
        dry_run: bool,
        failed_messages: List[Dict[str, Any]]
    ) -> bool:
        """Parse and append a single message. Returns False on failure."""
        self.rsvp_logger.log_message_processed(message.message_id, message.thread_id)

        try:
            record = self.pipeline.extract(message)
            if record is None:
                failure = ParseFailure(message.message_id, message.subject)
                self.rsvp_logger.log_parse_failure(failure, message.message_id)
                failed_messages.append({
                    'message_id': message.message_id,
                    'subject': message.subject,
                    'error': str(failure)
                })
                return False

            self.rsvp_logger.log_record_parsed(record)
            result = appender.append(record, dry_run=dry_run)
            if result.written:
                self.rsvp_logger.log_new_row(result)
            else:
                self.rsvp_logger.log_duplicate_row(result)
            return True

        except Exception as e:
            error = ExtractionError(message.message_id, e)
            failed_messages.append({
                'message_id': message.message_id,
                'subject': message.subject,
                'error': str(e)
            })
            self.rsvp_logger.log_error(error, f"Message processing failed: {message.message_id}")
            return False


@click.command()
@click.option('--limit', type=int,
              help='Maximum number of messages to process (defaults to MAX_EMAILS_PER_RUN)')
@click.option('--since-days', type=int,
              help='Number of days to look back for emails')
@click.option('--dry-run', is_flag=True,
              help='Parse and check for duplicates without writing to the sheet')
@click.option('--no-notify', is_flag=True,
              help='Do not email the operator')
@click.option('--log-level',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default=lambda: app_config.log_level.upper(), show_default='LOG_LEVEL or INFO',
              help='Logging level')
@click.option('--log-file', type=str,
              help='Log file path (optional)')
def main(limit, since_days, dry_run, no_notify, log_level, log_file):
    """
    RSVP Sheet Sync.

    Reads RSVP emails, extracts guest details and appends new guests
    to the RSVP spreadsheet.
    """
    try:
        automation = RsvpAutomation(log_level, log_file)

        results = automation.process_messages(
            limit=limit,
            since_days=since_days,
            dry_run=dry_run,
            notify=not no_notify
        )
    except Exception as e:
        click.echo(f"Fatal error: {str(e)}")
        click.get_current_context().exit(1)

    if 'error' in results:
        click.echo(f"Error: {results['error']}")
        click.get_current_context().exit(1)

    click.echo(f"\nProcessing completed:")
    click.echo(f"  Messages processed: {results['messages_processed']}")
    click.echo(f"  RSVPs parsed: {results['records_parsed']}")
    click.echo(f"  New rows: {results['new_rows']}")
    click.echo(f"  Duplicates skipped: {results['duplicate_rows']}")
    click.echo(f"  Unparseable: {results['parse_failures']}")
    click.echo(f"  Failed messages: {len(results['failed_messages'])}")

    if dry_run:
        click.echo("\n⚠️  DRY RUN MODE - No rows were written and no labels applied")

    return 0


if __name__ == "__main__":
    main()
