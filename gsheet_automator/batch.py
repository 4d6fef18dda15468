"""
Row-driven batch processing.

run_batch() validates the header row, maps every data row to a Record and
walks the records in sheet order. Eligible rows are rendered (when a template
is given) and handed to the caller's action; everything else is skipped with
its current status value so that the final write-back leaves it unchanged.
A failing action only marks its own row as failed.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence

from gsheet_automator.eligibility import skip_reason
from gsheet_automator.headers import require_columns, require_unique_columns, validate_header_row
from gsheet_automator.records import Record, map_rows
from gsheet_automator.template import RenderedMessage, Template, render

logger = logging.getLogger(__name__)

RowAction = Callable[[Record, Optional[RenderedMessage]], str]


@dataclass(frozen=True)
class RowOutcome:
    row: int

    @property
    def cell_value(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Skipped(RowOutcome):
    value: str = ""
    reason: str = ""

    @property
    def cell_value(self) -> str:
        return self.value


@dataclass(frozen=True)
class Success(RowOutcome):
    artifact: str = ""

    @property
    def cell_value(self) -> str:
        return self.artifact


@dataclass(frozen=True)
class Failure(RowOutcome):
    message: str = ""

    @property
    def cell_value(self) -> str:
        return self.message


@dataclass
class BatchResult:
    """Ordered outcomes of one run plus where they belong in the sheet."""

    status_column: str
    status_column_index: int
    outcomes: List[RowOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Success))

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Failure))

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Skipped))

    def column_values(self) -> List[List[str]]:
        """Status cells as single-cell rows, ready for one column write."""
        return [[o.cell_value] for o in self.outcomes]

    def summary(self) -> str:
        return (
            f"{self.succeeded} succeeded, {self.failed} failed, "
            f"{self.skipped} skipped"
        )


def error_message(error: BaseException) -> str:
    """Text written to a row's status cell when its action fails."""
    reason = getattr(error, "reason", None)
    if isinstance(reason, str) and reason:
        return reason
    return str(error) or type(error).__name__


def run_batch(
    header_row: Sequence[str],
    data_rows: Sequence[Sequence],
    *,
    status_column: str,
    is_row_suppressed: Callable[[int], bool],
    action: RowAction,
    required_columns: Iterable[str] = (),
    template: Optional[Template] = None,
    source_column: Optional[str] = None,
) -> BatchResult:
    """
    Process every data row once and collect one outcome per row.

    Args:
        header_row: First row of the range
        data_rows: Remaining rows, in sheet order
        status_column: Header of the column that receives the outcomes
        is_row_suppressed: Returns True for sheet rows hidden by a filter
        action: Side effect for one eligible row; returns the artifact
            reference written to the status cell; None counts as a failure
        required_columns: Extra headers that must exist before anything runs
        template: Rendered per row and passed to the action when given
        source_column: Header of the driving field that must be non-empty

    Returns:
        BatchResult: One outcome per data row, in input order

    Raises:
        ShapeError: If the header row is malformed, a column is missing or the
            status or source column header is repeated
    """
    validate_header_row(header_row)
    unique_columns = [status_column]
    if source_column is not None:
        unique_columns.append(source_column)
    columns = require_columns(header_row, list(required_columns) + unique_columns)
    require_unique_columns(header_row, unique_columns)

    records = map_rows(header_row, data_rows)
    result = BatchResult(
        status_column=status_column,
        status_column_index=columns[status_column],
    )

    for record in records:
        reason = skip_reason(record, status_column, is_row_suppressed, source_column)
        if reason is not None:
            logger.debug(f"Skipping row {record.row} - {reason}")
            result.outcomes.append(
                Skipped(row=record.row, value=record.get(status_column), reason=reason)
            )
            continue

        started = time.perf_counter()
        try:
            rendered = render(template, record) if template is not None else None
            artifact = action(record, rendered)
            if artifact is None:
                raise ValueError("Action returned no result")
        except Exception as e:
            message = error_message(e)
            logger.error(f"Row {record.row} failed: {message}")
            result.outcomes.append(Failure(row=record.row, message=message))
        else:
            logger.info(f"Row {record.row} processed: {artifact}")
            result.outcomes.append(Success(row=record.row, artifact=str(artifact)))
        finally:
            logger.debug(
                f"Row {record.row} processing time: {time.perf_counter() - started:.3f}s"
            )

    return result
