"""
Run configuration for the sheet-driven commands.

Each command gets one frozen dataclass listing every option with its
default. validate() is called once, before any API call, and raises
ConfigError for anything a run cannot proceed without.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gsheet_automator.errors import ConfigError

DEFAULT_RECIPIENT_COLUMN = "Recipient email"
DEFAULT_EMAIL_SENT_COLUMN = "Email sent"
DEFAULT_FILE_NAME_COLUMN = "File name"
DEFAULT_FILE_URL_COLUMN = "File URL"
DEFAULT_FOLDER_NAME_COLUMN = "Folder name"
DEFAULT_FOLDER_URL_COLUMN = "Folder URL"


def _require(value: Optional[str], name: str) -> None:
    if value is None or str(value).strip() == "":
        raise ConfigError(f"{name} is required.")


def _distinct_columns(source: str, status: str) -> None:
    if source == status:
        raise ConfigError(
            f"The input column and the status column must differ (both are '{source}')."
        )


@dataclass(frozen=True)
class SheetTarget:
    """
    A worksheet inside a spreadsheet.

    tab=None selects the first worksheet. A named tab that does not exist is
    an error rather than a silent fallback.
    """

    spreadsheet_id: str
    tab: Optional[str] = None

    def validate(self) -> None:
        _require(self.spreadsheet_id, "spreadsheet_id")
        if self.tab is not None and self.tab.strip() == "":
            raise ConfigError("tab must not be blank; omit it to use the first worksheet.")


@dataclass(frozen=True)
class MailMergeConfig:
    sheet: SheetTarget
    subject: str
    recipient_column: str = DEFAULT_RECIPIENT_COLUMN
    status_column: str = DEFAULT_EMAIL_SENT_COLUMN
    sender: Optional[str] = None
    cc: Optional[str] = None
    bcc: Optional[str] = None
    reply_to: Optional[str] = None

    def validate(self) -> None:
        self.sheet.validate()
        _require(self.subject, "subject")
        _require(self.recipient_column, "recipient_column")
        _require(self.status_column, "status_column")
        _distinct_columns(self.recipient_column, self.status_column)


@dataclass(frozen=True)
class CopyConfig:
    sheet: SheetTarget
    template_file_id: str
    destination_folder_id: str
    name_column: str = DEFAULT_FILE_NAME_COLUMN
    url_column: str = DEFAULT_FILE_URL_COLUMN

    def validate(self) -> None:
        self.sheet.validate()
        _require(self.template_file_id, "template_file_id")
        _require(self.destination_folder_id, "destination_folder_id")
        _require(self.name_column, "name_column")
        _require(self.url_column, "url_column")
        _distinct_columns(self.name_column, self.url_column)


@dataclass(frozen=True)
class FolderConfig:
    sheet: SheetTarget
    destination_folder_id: str
    name_column: str = DEFAULT_FOLDER_NAME_COLUMN
    url_column: str = DEFAULT_FOLDER_URL_COLUMN

    def validate(self) -> None:
        self.sheet.validate()
        _require(self.destination_folder_id, "destination_folder_id")
        _require(self.name_column, "name_column")
        _require(self.url_column, "url_column")
        _distinct_columns(self.name_column, self.url_column)
