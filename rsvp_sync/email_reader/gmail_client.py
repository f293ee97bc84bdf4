"""
Gmail API client for reading RSVP emails and labeling processed threads.
"""
import base64
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Dict, List, Optional, Sequence, Any

from bs4 import BeautifulSoup
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from google.oauth2 import service_account

from ..utils.models import RawMessage, MessageThread
from ..utils.interfaces import MessageSource, LabelSink
from ..utils.logger import get_logger
from config.settings import GmailConfig

GMAIL_SCOPES = ["https://www.googleapis.com/auth/gmail.modify"]


def build_search_query(
    keywords: Sequence[str],
    processed_label: Optional[str] = None,
    since_days: Optional[int] = None
) -> str:
    """
    Build a Gmail search query for RSVP threads.

    Example: (["RSVP", "Birthday"], "RSVP/Processed", 30)
    => 'subject:(RSVP OR Birthday) -label:"RSVP/Processed" newer_than:30d'
    """
    terms = []

    quoted = [f'"{kw}"' if " " in kw else kw for kw in keywords if kw]
    if quoted:
        terms.append(f"subject:({' OR '.join(quoted)})")

    if processed_label:
        terms.append(f'-label:"{processed_label}"')

    if since_days:
        terms.append(f"newer_than:{since_days}d")

    return " ".join(terms)


class GmailClient(MessageSource, LabelSink):
    """Gmail API client for reading RSVP emails."""

    def __init__(self, config: GmailConfig, service=None):
        self.config = config
        self.logger = get_logger("gmail_client")
        self.service = service
        self.connected = service is not None
        self._label_ids: Dict[str, str] = {}

    def connect(self) -> bool:
        """Build the Gmail API service from service account credentials."""
        if self.connected:
            return True

        try:
            self.logger.info("Connecting to Gmail API", user=self.config.delegated_user)
            creds = service_account.Credentials.from_service_account_file(
                self.config.credentials_file, scopes=GMAIL_SCOPES
            )
            if self.config.delegated_user:
                creds = creds.with_subject(self.config.delegated_user)

            self.service = build("gmail", "v1", credentials=creds, cache_discovery=False)
            self.connected = True
            self.logger.info("Successfully connected to Gmail")
            return True
        except Exception as e:
            self.logger.error("Failed to connect to Gmail", error=str(e))
            self.connected = False
            return False

    def default_query(self) -> str:
        return build_search_query(
            self.config.search_keywords,
            self.config.processed_label,
            self.config.since_days,
        )

    def _list_thread_ids(self, query: str, wanted: int) -> List[str]:
        thread_ids: List[str] = []
        page_token = None

        while len(thread_ids) < wanted:
            resp = self.service.users().threads().list(
                userId="me",
                q=query,
                maxResults=min(500, wanted - len(thread_ids)),
                pageToken=page_token,
            ).execute()

            thread_ids.extend(t["id"] for t in resp.get("threads", []) or [])
            page_token = resp.get("nextPageToken")
            if not page_token:
                break

        return thread_ids

    def search(self, query: str, offset: int = 0, limit: int = 50) -> List[MessageThread]:
        """
        Search for threads matching a Gmail query.

        Args:
            query: Gmail search query
            offset: Number of matching threads to skip
            limit: Maximum number of threads to return

        Returns:
            Threads in the order Gmail returns them (newest first)
        """
        if not self.connected:
            raise ConnectionError("Not connected to Gmail")

        try:
            self.logger.info("Searching threads", query=query, offset=offset, limit=limit)
            thread_ids = self._list_thread_ids(query, offset + limit)[offset:offset + limit]

            threads = [self.fetch_thread(thread_id) for thread_id in thread_ids]
            self.logger.info("Found threads", count=len(threads))
            return threads
        except HttpError as e:
            self.logger.error("Error searching threads", query=query, error=str(e))
            raise

    def fetch_thread(self, thread_id: str) -> MessageThread:
        """Fetch a thread with every message body decoded."""
        data = self.service.users().threads().get(
            userId="me", id=thread_id, format="full"
        ).execute()

        messages = [self._to_raw_message(msg, thread_id) for msg in data.get("messages", [])]
        return MessageThread(thread_id=thread_id, messages=messages)

    def _to_raw_message(self, msg: Dict[str, Any], thread_id: str) -> RawMessage:
        payload = msg.get("payload", {})
        headers = {h["name"].lower(): h["value"] for h in payload.get("headers", [])}

        return RawMessage(
            message_id=msg.get("id", ""),
            thread_id=thread_id,
            subject=headers.get("subject", ""),
            sender=headers.get("from", ""),
            received_at=self._parse_date(headers.get("date"), msg.get("internalDate")),
            body=self._extract_body(payload),
        )

    def _parse_date(self, date_header: Optional[str], internal_date: Optional[str]) -> datetime:
        if date_header:
            try:
                return parsedate_to_datetime(date_header)
            except (TypeError, ValueError):
                pass
        if internal_date:
            return datetime.fromtimestamp(int(internal_date) / 1000, tz=timezone.utc)
        return datetime.now(timezone.utc)

    def _decode_part(self, part: Dict[str, Any]) -> str:
        data = part.get("body", {}).get("data")
        if not data:
            return ""
        padded = data + "=" * (-len(data) % 4)
        return base64.urlsafe_b64decode(padded).decode("utf-8", errors="ignore")

    def _extract_body(self, payload: Dict[str, Any]) -> str:
        """Return the plain text body, converting HTML when there is no text part."""
        body_text = ""
        body_html = ""

        stack = [payload]
        while stack:
            part = stack.pop(0)
            filename = part.get("filename")
            mime_type = part.get("mimeType", "")

            if filename:
                continue
            if mime_type == "text/plain":
                body_text += self._decode_part(part)
            elif mime_type == "text/html":
                body_html += self._decode_part(part)

            stack.extend(part.get("parts", []) or [])

        if body_text.strip():
            return body_text
        if body_html:
            return BeautifulSoup(body_html, "html.parser").get_text("\n")
        return ""

    def get_or_create_label(self, label: str) -> str:
        """Return the ID of a user label, creating it if needed."""
        if label in self._label_ids:
            return self._label_ids[label]

        labels = self.service.users().labels().list(userId="me").execute()
        for existing in labels.get("labels", []):
            self._label_ids[existing["name"]] = existing["id"]

        if label not in self._label_ids:
            created = self.service.users().labels().create(
                userId="me",
                body={
                    "name": label,
                    "labelListVisibility": "labelShow",
                    "messageListVisibility": "show",
                },
            ).execute()
            self._label_ids[label] = created["id"]
            self.logger.info("Created Gmail label", label=label)

        return self._label_ids[label]

    def apply_label(self, thread_id: str, label: str) -> None:
        label_id = self.get_or_create_label(label)
        self.service.users().threads().modify(
            userId="me", id=thread_id, body={"addLabelIds": [label_id]}
        ).execute()
        self.logger.debug("Applied label", thread_id=thread_id, label=label)

    def remove_label(self, thread_id: str, label: str) -> None:
        label_id = self.get_or_create_label(label)
        self.service.users().threads().modify(
            userId="me", id=thread_id, body={"removeLabelIds": [label_id]}
        ).execute()
        self.logger.debug("Removed label", thread_id=thread_id, label=label)

    def disconnect(self):
        """Drop the API service."""
        if self.service is not None:
            close = getattr(self.service, "close", None)
            if callable(close):
                close()
        self.service = None
        self.connected = False
        self.logger.info("Disconnected from Gmail")

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
