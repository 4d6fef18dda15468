#!/usr/bin/env python3
"""
Google Sheets API service with token bucket rate limiting.

This module provides a singleton GSheetsAPI service that wraps Google Sheets API calls
with rate limiting (60 reads/min, 60 writes/min) and automatic retry logic for 429 errors.
"""

from __future__ import annotations
import logging
import threading
from typing import Optional, Set
from googleapiclient.discovery import build

from gsheet_automator.token_bucket import TokenBucket
from gsheet_automator.utils import retry_with_exponential_backoff

logger = logging.getLogger(__name__)


def quote_sheet_title(title: str) -> str:
    """Quote a worksheet title for use in A1 notation."""
    return "'" + title.replace("'", "''") + "'"


class GSheetsAPI:
    """
    Singleton service that wraps Google Sheets API with rate limiting and retry logic.
    """

    _instance: Optional[GSheetsAPI] = None
    _lock = threading.Lock()

    def __init__(self, creds):
        """
        Initialize GSheetsAPI service.

        Args:
            creds: Google OAuth credentials
        """
        self.creds = creds
        self.service = build("sheets", "v4", credentials=creds)
        # 60 reads/min, 60 writes/min (conservative per-user limits)
        self.token_bucket = TokenBucket({"read": 60.0, "write": 60.0})

    @classmethod
    def get_instance(cls, creds) -> GSheetsAPI:
        """
        Get or create the singleton instance of GSheetsAPI.

        Args:
            creds: Google OAuth credentials

        Returns:
            GSheetsAPI instance
        """
        if cls._instance is None:
            with cls._lock:
                # Double-check pattern
                if cls._instance is None:
                    cls._instance = cls(creds)
        return cls._instance

    def get_spreadsheet(self, spreadsheet_id: str, **kwargs):
        """
        Get a spreadsheet by ID (rate-limited read operation).

        Args:
            spreadsheet_id: ID of the spreadsheet
            **kwargs: Additional arguments to pass to the API call (ranges, fields, ...)

        Returns:
            Spreadsheet resource dictionary
        """
        self.token_bucket.acquire("read")

        def _get():
            return (
                self.service.spreadsheets()
                .get(spreadsheetId=spreadsheet_id, **kwargs)
                .execute()
            )

        return retry_with_exponential_backoff(_get)

    def update_values(
        self,
        spreadsheet_id: str,
        range_name: str,
        values: list,
        value_input_option: str = "RAW",
        **kwargs,
    ):
        """
        Update values in a range of a spreadsheet (rate-limited write operation).

        Args:
            spreadsheet_id: ID of the spreadsheet
            range_name: A1 notation range (e.g., "Sheet1!A1:B2")
            values: List of rows, where each row is a list of values
            value_input_option: How to interpret input values (RAW or USER_ENTERED)
            **kwargs: Additional arguments to pass to the API call

        Returns:
            UpdateValuesResponse
        """
        self.token_bucket.acquire("write")

        def _update():
            body = {"values": values}
            return (
                self.service.spreadsheets()
                .values()
                .update(
                    spreadsheetId=spreadsheet_id,
                    range=range_name,
                    valueInputOption=value_input_option,
                    body=body,
                    **kwargs,
                )
                .execute()
            )

        return retry_with_exponential_backoff(_update)

    def hidden_rows(self, spreadsheet_id: str, sheet_title: str) -> Set[int]:
        """
        Rows of a worksheet currently hidden by an active filter.

        Args:
            spreadsheet_id: ID of the spreadsheet
            sheet_title: Title of the worksheet

        Returns:
            set: 1-based row numbers hidden by a filter
        """
        spreadsheet = self.get_spreadsheet(
            spreadsheet_id,
            ranges=[quote_sheet_title(sheet_title)],
            fields="sheets(properties(title),data(startRow,rowMetadata(hiddenByFilter)))",
        )

        hidden: Set[int] = set()
        for sheet in spreadsheet.get("sheets", []):
            if sheet.get("properties", {}).get("title") != sheet_title:
                continue
            for grid in sheet.get("data", []):
                start_row = grid.get("startRow", 0)
                for offset, metadata in enumerate(grid.get("rowMetadata", [])):
                    if metadata.get("hiddenByFilter"):
                        hidden.add(start_row + offset + 1)

        logger.debug(f"Rows hidden by filter in '{sheet_title}': {sorted(hidden)}")
        return hidden
