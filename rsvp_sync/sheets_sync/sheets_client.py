"""
Google Sheets row store for RSVP records.
"""
from typing import List, Optional, Sequence

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from google.oauth2 import service_account

from ..utils.interfaces import RowStore
from ..utils.logger import get_logger
from config.settings import SheetsConfig

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def column_letter(col_index: int) -> str:
    """Convert a zero-based column index to A1 notation (0 -> A, 26 -> AA)."""
    if col_index < 0:
        raise ValueError(f"Column index must be non-negative, got {col_index}")
    letters = ""
    n = col_index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


class SheetsRowStore(RowStore):
    """Append-only table backed by one worksheet of a spreadsheet."""

    def __init__(self, config: SheetsConfig, service=None):
        self.config = config
        self.logger = get_logger("sheets_client")
        if service is None:
            creds = service_account.Credentials.from_service_account_file(
                config.credentials_file, scopes=SHEETS_SCOPES
            )
            service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        self.service = service

    def _range(self, a1: str) -> str:
        return f"'{self.config.sheet_name}'!{a1}"

    def _values(self):
        return self.service.spreadsheets().values()

    def read_column(self, col_index: int) -> List[str]:
        """Read one whole column, header cell included."""
        letter = column_letter(col_index)
        try:
            result = self._values().get(
                spreadsheetId=self.config.spreadsheet_id,
                range=self._range(f"{letter}:{letter}"),
                majorDimension="COLUMNS",
            ).execute()
        except HttpError as e:
            self.logger.error("Failed to read sheet column", column=letter, error=str(e))
            raise

        columns = result.get("values", [])
        return [str(value) for value in columns[0]] if columns else []

    def append_row(self, values: Sequence[str]) -> None:
        try:
            self._values().append(
                spreadsheetId=self.config.spreadsheet_id,
                range=self._range("A1"),
                valueInputOption="RAW",
                insertDataOption="INSERT_ROWS",
                body={"values": [list(values)]},
            ).execute()
        except HttpError as e:
            self.logger.error("Failed to append sheet row", error=str(e))
            raise

        self.logger.debug("Appended sheet row", sheet=self.config.sheet_name)

    def read_header(self, width: int) -> Optional[List[str]]:
        a1 = f"A1:{column_letter(width - 1)}1"
        result = self._values().get(
            spreadsheetId=self.config.spreadsheet_id,
            range=self._range(a1),
        ).execute()
        rows = result.get("values", [])
        return [str(value) for value in rows[0]] if rows else None

    def ensure_header(self, header: Sequence[str]) -> None:
        """Write ``header`` into row 1 unless it already matches."""
        header = list(header)
        try:
            current = self.read_header(len(header))
            if current == header:
                return

            self._values().update(
                spreadsheetId=self.config.spreadsheet_id,
                range=self._range(f"A1:{column_letter(len(header) - 1)}1"),
                valueInputOption="RAW",
                body={"values": [header]},
            ).execute()
        except HttpError as e:
            self.logger.error("Failed to ensure sheet header", error=str(e))
            raise

        self.logger.info("Sheet header written", sheet=self.config.sheet_name, previous=current)
