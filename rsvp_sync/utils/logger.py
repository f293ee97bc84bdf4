"""
Logging utility for the RSVP sheet sync system.
"""
import logging
import sys
from typing import Optional
from colorama import Fore, Style, init
import structlog

from .models import ProcessingStats, RsvpRecord, AppendResult

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class ColorizedFormatter(logging.Formatter):
    """Custom formatter with colorized output."""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.MAGENTA + Style.BRIGHT,
    }

    def format(self, record):
        # Colour a copy; the file handler formats the same record
        record = logging.makeLogRecord(record.__dict__)
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{Style.RESET_ALL}"

        if record.levelno >= logging.WARNING:
            record.msg = f"{Fore.RED}{record.msg}{Style.RESET_ALL}"
        elif record.levelno == logging.INFO:
            record.msg = f"{Fore.GREEN}{record.msg}{Style.RESET_ALL}"

        return super().format(record)


def setup_logger(
    name: str = "rsvp_sync",
    level: str = "INFO",
    log_file: Optional[str] = None
) -> structlog.BoundLogger:
    """
    Set up structured logging with colorized console output.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging to file

    Returns:
        Configured structured logger
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if log_file else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger(name)

    # Component loggers are children of the root logger, so levels and
    # handlers are set there.
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    if not any(getattr(h, "_rsvp_sync", False) for h in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(ColorizedFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        console_handler._rsvp_sync = True
        root_logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            file_handler._rsvp_sync = True
            root_logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "rsvp_sync") -> structlog.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)


class RsvpLogger:
    """Specialized logger for RSVP runs with summary tracking."""

    def __init__(self, logger: structlog.BoundLogger):
        self.logger = logger
        self.stats = ProcessingStats()

    def log_message_processed(self, message_id: str, thread_id: Optional[str] = None):
        """Log when a message is picked up."""
        self.stats.messages_processed += 1
        self.logger.info("Message processed", message_id=message_id, thread_id=thread_id)

    def log_record_parsed(self, record: RsvpRecord):
        """Log when a message yields a usable record."""
        self.stats.records_parsed += 1
        self.stats.add_strategy_count(record.source or "unknown")
        self.logger.info(
            "RSVP parsed successfully",
            name=record.name,
            email=record.email,
            strategy=record.source
        )

    def log_new_row(self, result: AppendResult):
        """Log when a record is appended to the sheet."""
        self.stats.new_rows += 1
        self.logger.info(
            "New RSVP row added",
            name=result.record.name,
            email=result.record.email,
            dry_run=result.dry_run
        )

    def log_duplicate_row(self, result: AppendResult):
        """Log when a record is already in the sheet."""
        self.stats.duplicate_rows += 1
        self.logger.warning(
            "Duplicate RSVP found",
            name=result.record.name,
            email=result.record.email,
            matched_on=result.matched_on
        )

    def log_parse_failure(self, error: Exception, message_id: str):
        """Log a message no strategy could parse."""
        self.stats.parse_failures += 1
        self.stats.errors += 1
        self.logger.warning(
            "Unparseable RSVP message",
            message_id=message_id,
            error=str(error)
        )

    def log_thread_labeled(self, thread_id: str, label: str):
        self.stats.threads_labeled += 1
        self.logger.info("Thread labeled", thread_id=thread_id, label=label)

    def log_error(self, error: Exception, context: str = ""):
        """Log an error."""
        self.stats.errors += 1
        self.logger.error(
            "Error occurred",
            error=str(error),
            error_type=type(error).__name__,
            context=context
        )

    def print_summary(self):
        """Print a summary of all operations."""
        self.logger.info("Processing summary", **self.stats.to_dict())

        print(f"\n{Fore.CYAN}{'='*50}")
        print(f"{Fore.WHITE}RSVP SYNC SUMMARY")
        print(f"{Fore.CYAN}{'='*50}")
        print(f"{Fore.GREEN}✓ Messages processed: {self.stats.messages_processed}")
        print(f"{Fore.GREEN}✓ RSVPs parsed: {self.stats.records_parsed}")
        print(f"{Fore.BLUE}✓ New rows: {self.stats.new_rows}")
        print(f"{Fore.YELLOW}⚠ Duplicates skipped: {self.stats.duplicate_rows}")
        print(f"{Fore.YELLOW}⚠ Unparseable: {self.stats.parse_failures}")
        print(f"{Fore.RED}✗ Errors: {self.stats.errors}")

        if self.stats.strategies:
            print(f"\n{Fore.WHITE}By Strategy:")
            for strategy, count in self.stats.strategies.items():
                print(f"  {Fore.CYAN}{strategy}: {count}")

        print(f"{Fore.CYAN}{'='*50}\n")

    def reset_stats(self):
        """Reset statistics."""
        self.stats.reset()
