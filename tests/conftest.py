"""
Pytest fixtures for gsheet_automator tests.
"""

from __future__ import annotations

import pytest

from gsheet_automator.gdrive_api import GDriveAPI
from gsheet_automator.gmail_api import GmailAPI
from gsheet_automator.gsheets_api import GSheetsAPI


class FakeSheetTab:
    """
    In-memory stand-in for SheetTab.

    write_column() updates the stored values so that a second run sees what
    the first one wrote.
    """

    def __init__(self, values, hidden_rows=(), title="Data"):
        self.values = [list(row) for row in values]
        self.hidden_rows = set(hidden_rows)
        self.title = title
        self.writes = []

    def read_range(self):
        return [list(row) for row in self.values]

    def is_row_suppressed(self, row):
        return row in self.hidden_rows

    def write_column(self, start_row, column, values):
        self.writes.append((start_row, column, [list(v) for v in values]))
        for offset, (value,) in enumerate(values):
            row = self.values[start_row - 1 + offset]
            while len(row) < column:
                row.append("")
            row[column - 1] = value


@pytest.fixture(autouse=True)
def reset_api_singletons():
    """Each test builds its own API services."""
    GSheetsAPI._instance = None
    GDriveAPI._instance = None
    GmailAPI._instance = None
    yield
    GSheetsAPI._instance = None
    GDriveAPI._instance = None
    GmailAPI._instance = None


@pytest.fixture
def make_tab():
    """Factory for in-memory worksheets."""
    return FakeSheetTab


@pytest.fixture
def mail_merge_values():
    return [
        ["Name", "Recipient email", "Email sent"],
        ["Alice", "alice@example.com", ""],
        ["Bob", "bob@example.com", "2025-01-01 09:00:00"],
        ["Carol", "carol@example.com", ""],
    ]
