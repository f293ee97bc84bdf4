"""
Configuration settings for the RSVP sheet sync system.
"""
import os
from typing import Dict, List, Tuple
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_list(name: str, default: str = "") -> Tuple[str, ...]:
    """Read a comma separated environment variable into a tuple."""
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _env_bool(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class GmailConfig:
    """Gmail API configuration settings."""
    credentials_file: str = os.getenv("GOOGLE_CREDENTIALS_FILE", "config/google_credentials.json")
    delegated_user: str = os.getenv("GMAIL_DELEGATED_USER", "")
    search_keywords: Tuple[str, ...] = _env_list("RSVP_SEARCH_KEYWORDS", "RSVP")
    processed_label: str = os.getenv("RSVP_PROCESSED_LABEL", "RSVP/Processed")
    since_days: int = int(os.getenv("RSVP_SINCE_DAYS", "30"))


@dataclass
class SheetsConfig:
    """Google Sheets destination settings."""
    credentials_file: str = os.getenv("GOOGLE_CREDENTIALS_FILE", "config/google_credentials.json")
    spreadsheet_id: str = os.getenv("RSVP_SPREADSHEET_ID", "")
    sheet_name: str = os.getenv("RSVP_SHEET_NAME", "RSVPs")

    header: Tuple[str, ...] = ("Name", "Email", "Celebrating", "Notes", "Timestamp")

    # Zero-based column index per record field
    columns: Dict[str, int] = None

    def __post_init__(self):
        if self.columns is None:
            self.columns = {
                "name": 0,
                "email": 1,
                "celebrating": 2,
                "notes": 3,
                "timestamp": 4,
            }


@dataclass
class NotificationConfig:
    """SMTP and operator notification settings."""
    smtp_server: str = os.getenv("SMTP_SERVER", "smtp.gmail.com")
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    smtp_user: str = os.getenv("SMTP_USER", "")
    smtp_password: str = os.getenv("SMTP_PASSWORD", "")
    operator_email: str = os.getenv("RSVP_OPERATOR_EMAIL", "")
    send_summary: bool = _env_bool("RSVP_SEND_SUMMARY", "true")


@dataclass
class AppConfig:
    """Application configuration settings."""
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    max_emails_per_run: int = int(os.getenv("MAX_EMAILS_PER_RUN", "50"))

    # Values written in place of absent record fields
    default_email: str = "not provided"
    default_celebrating: str = "not specified"
    default_notes: str = "none"


@dataclass
class ParserConfig:
    """Settings for the RSVP extraction strategies."""
    celebrants: Tuple[str, ...] = _env_list("RSVP_CELEBRANTS")
    form_markers: Tuple[str, ...] = _env_list("RSVP_FORM_MARKERS", "New submission from,Formspree")
    max_field_length: int = 200
    signature_lines: int = 5
    notes_placeholder: str = "Extracted from email body"

    # Ordered label synonyms per record field
    field_synonyms: Dict[str, List[str]] = None

    def __post_init__(self):
        if self.field_synonyms is None:
            self.field_synonyms = {
                "name": ["name", "full name", "guest name", "your name"],
                "email": ["email address", "email", "e-mail"],
                "celebrating": ["celebrating", "celebrant", "attending for", "guest of"],
                "notes": ["notes", "note", "message", "comments", "additional notes"],
            }


gmail_config = GmailConfig()
sheets_config = SheetsConfig()
notification_config = NotificationConfig()
app_config = AppConfig()
parser_config = ParserConfig()
