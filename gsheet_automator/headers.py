"""
Header row validation.

A batch run only starts once the header row has a usable shape and every
column the run depends on is present. Both checks raise ShapeError subclasses
so that callers can abort before any row is touched.
"""

from __future__ import annotations

from typing import Dict, Iterable, Sequence, Set

from gsheet_automator.errors import (
    DuplicateColumnError,
    InsufficientHeadersError,
    MissingColumnError,
)

MIN_UNIQUE_HEADERS = 2


def validate_header_row(header_row: Sequence[str]) -> Set[str]:
    """
    Check that the header row has at least two unique, non-blank headers.

    Args:
        header_row: First row of the range

    Returns:
        set: The unique non-blank headers

    Raises:
        InsufficientHeadersError: If fewer than two unique headers remain
    """
    unique = {str(h) for h in header_row if h is not None and str(h).strip() != ""}
    if len(unique) < MIN_UNIQUE_HEADERS:
        raise InsufficientHeadersError(header_row)
    return unique


def require_column(header_row: Sequence[str], name: str) -> int:
    """Return the 0-based index of ``name`` in the header row."""
    try:
        return list(header_row).index(name)
    except ValueError:
        raise MissingColumnError(name) from None


def require_columns(header_row: Sequence[str], names: Iterable[str]) -> Dict[str, int]:
    columns: Dict[str, int] = {}
    for name in names:
        if name in columns:
            continue
        columns[name] = require_column(header_row, name)
    return columns


def require_unique_columns(header_row: Sequence[str], names: Iterable[str]) -> None:
    """
    Reject headers that appear more than once among ``names``.

    A record keeps the right-most value of a repeated header, while writes
    target the first one, so columns that are both read and written must be
    unambiguous.

    Raises:
        DuplicateColumnError: If one of the names appears twice or more
    """
    headers = list(header_row)
    for name in names:
        if headers.count(name) > 1:
            raise DuplicateColumnError(name)
