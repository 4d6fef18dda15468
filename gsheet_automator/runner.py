"""
Glue between a worksheet and the batch engine.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from gsheet_automator.batch import BatchResult, RowAction, run_batch
from gsheet_automator.errors import InsufficientHeadersError
from gsheet_automator.records import FIRST_DATA_ROW
from gsheet_automator.sheet_tab import SheetTab
from gsheet_automator.template import Template, placeholders

logger = logging.getLogger(__name__)


def process_sheet(
    tab: SheetTab,
    *,
    status_column: str,
    action: RowAction,
    source_column: Optional[str] = None,
    required_columns: Iterable[str] = (),
    template: Optional[Template] = None,
) -> BatchResult:
    """
    Read the tab, run the batch and write the status column back once.

    Args:
        tab: Worksheet holding a header row and data rows
        status_column: Header of the column that receives the outcomes
        action: Side effect for one eligible row
        source_column: Header of the driving field that must be non-empty
        required_columns: Extra headers that must exist
        template: Rendered per row when given

    Returns:
        BatchResult: The outcomes that were written back

    Raises:
        ShapeError: If the header row is malformed or a column is missing
    """
    values = tab.read_range()
    if not values:
        raise InsufficientHeadersError([])

    header_row, data_rows = values[0], values[1:]
    logger.debug(f"Headers array: {header_row!r}")
    if template is not None:
        missing = [name for name in placeholders(template) if name not in header_row]
        if missing:
            logger.warning(f"⚠️  Template fields missing from the header row render empty: {missing}")

    result = run_batch(
        header_row,
        data_rows,
        status_column=status_column,
        is_row_suppressed=tab.is_row_suppressed,
        action=action,
        required_columns=required_columns,
        template=template,
        source_column=source_column,
    )

    if result.outcomes:
        tab.write_column(
            FIRST_DATA_ROW, result.status_column_index + 1, result.column_values()
        )
        logger.info(f"Finished writing {len(result.outcomes)} outcome(s) to '{status_column}'")
    return result
