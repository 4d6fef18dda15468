"""
Per-row eligibility rules for a batch run.

A row is processed only when its driving field (recipient, file name, ...) is
filled in, its status cell is still empty and it is not hidden by an active
filter. Rows that already carry a status are left alone, which is what makes
re-running a batch safe.
"""

from __future__ import annotations

from typing import Callable, Optional

from gsheet_automator.records import Record

SKIP_ALREADY_DONE = "already completed"
SKIP_HIDDEN = "hidden by filter"


def skip_reason(
    record: Record,
    status_column: str,
    is_row_suppressed: Callable[[int], bool],
    source_column: Optional[str] = None,
) -> Optional[str]:
    """
    Explain why a record should not be processed.

    Returns:
        str or None: The skip reason, or None when the record is eligible
    """
    if source_column is not None and record.get(source_column).strip() == "":
        return f"missing {source_column}"
    if record.get(status_column) != "":
        return SKIP_ALREADY_DONE
    if is_row_suppressed(record.row):
        return SKIP_HIDDEN
    return None


def is_eligible(
    record: Record,
    status_column: str,
    is_row_suppressed: Callable[[int], bool],
    source_column: Optional[str] = None,
) -> bool:
    return skip_reason(record, status_column, is_row_suppressed, source_column) is None
