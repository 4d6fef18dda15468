"""
Worksheet access for batch runs.

SheetTab reads a worksheet's display values through gspread, takes a
snapshot of the rows hidden by an active filter through the Sheets API and
writes a single-column block back in one rate-limited, retried request.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set

import gspread
from gspread.utils import rowcol_to_a1

from gsheet_automator.config import SheetTarget
from gsheet_automator.errors import ConfigError
from gsheet_automator.gsheets_api import GSheetsAPI, quote_sheet_title

logger = logging.getLogger(__name__)


class SheetTab:
    def __init__(self, worksheet, sheets_api: GSheetsAPI):
        self.worksheet = worksheet
        self.sheets_api = sheets_api
        self._hidden_rows: Optional[Set[int]] = None

    @classmethod
    def open(cls, target: SheetTarget, creds) -> SheetTab:
        """
        Open the worksheet named by ``target``.

        Raises:
            ConfigError: If the named tab does not exist
        """
        gspread_client = gspread.authorize(creds)
        spreadsheet = gspread_client.open_by_key(target.spreadsheet_id)
        if target.tab is None:
            worksheet = spreadsheet.sheet1
        else:
            try:
                worksheet = spreadsheet.worksheet(target.tab)
            except gspread.exceptions.WorksheetNotFound:
                raise ConfigError(
                    f"Sheet named '{target.tab}' was not found in '{target.spreadsheet_id}'."
                ) from None
        return cls(worksheet, GSheetsAPI.get_instance(creds))

    @property
    def title(self) -> str:
        return self.worksheet.title

    @property
    def spreadsheet_id(self) -> str:
        return self.worksheet.spreadsheet.id

    def read_range(self) -> List[List[str]]:
        """Display-formatted values of the whole data range, header row included."""
        return self.worksheet.get_all_values()

    def load_hidden_rows(self) -> Set[int]:
        """Snapshot the rows hidden by an active filter."""
        self._hidden_rows = self.sheets_api.hidden_rows(self.spreadsheet_id, self.title)
        return self._hidden_rows

    def is_row_suppressed(self, row: int) -> bool:
        if self._hidden_rows is None:
            self.load_hidden_rows()
        return row in self._hidden_rows

    def write_column(self, start_row: int, column: int, values: Sequence[Sequence[str]]):
        """
        Write a contiguous single-column block in one request.

        Args:
            start_row: 1-based row of the first value
            column: 1-based column index
            values: One single-cell row per value
        """
        if not values:
            return None
        range_name = (
            f"{quote_sheet_title(self.title)}!"
            f"{rowcol_to_a1(start_row, column)}:"
            f"{rowcol_to_a1(start_row + len(values) - 1, column)}"
        )
        logger.debug(f"Writing {len(values)} value(s) to {range_name}")
        return self.sheets_api.update_values(
            self.spreadsheet_id, range_name, [list(v) for v in values]
        )
