"""
Conversion of raw sheet rows into header-keyed records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Sequence

# Row 1 holds the headers, so the first data row sits on sheet row 2
FIRST_DATA_ROW = 2


@dataclass(frozen=True)
class Record:
    """One data row keyed by header name, tagged with its 1-based sheet row."""

    row: int
    values: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, name: str) -> str:
        return self.values.get(name, "")

    def __getitem__(self, name: str) -> str:
        return self.values[name]

    def __contains__(self, name: object) -> bool:
        return name in self.values


def _cell_to_str(value) -> str:
    if value is None:
        return ""
    return str(value)


def map_rows(
    header_row: Sequence[str],
    data_rows: Sequence[Sequence],
    first_row: int = FIRST_DATA_ROW,
) -> List[Record]:
    """
    Zip every data row with the header row.

    Rows shorter than the header yield empty strings for the missing trailing
    fields; cells beyond the header width are ignored. When a header appears
    twice, the right-most column wins.

    Args:
        header_row: Header names in column order
        data_rows: Rows below the header, in sheet order
        first_row: Sheet row number of data_rows[0]

    Returns:
        list: One Record per data row, in the same order
    """
    headers = [_cell_to_str(h) for h in header_row]
    records: List[Record] = []
    for offset, row in enumerate(data_rows):
        values = {}
        for col_idx, header in enumerate(headers):
            cell = row[col_idx] if col_idx < len(row) else ""
            values[header] = _cell_to_str(cell)
        records.append(Record(row=first_row + offset, values=values))
    return records
