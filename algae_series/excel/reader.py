from __future__ import annotations

import io
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from ..errors import EmptyWorkbookError, FetchError
from ..models.row_data import NormalizedRecord

"""Workbook reader and row normalizer.

read_workbook() turns workbook bytes into a raw grid (rows of Python cell
values, header not applied). normalize_sheet() applies a located header row:
blank header cells get a column-letter placeholder, duplicates get a numeric
suffix, blank rows are dropped and every remaining row becomes a
NormalizedRecord keyed by the full header.
"""

__all__ = [
    "RawGrid",
    "SheetData",
    "read_workbook",
    "placeholder_for",
    "dedupe_labels",
    "normalize_sheet",
]

logger = logging.getLogger(__name__)

RawGrid = list[list[Any]]


@dataclass(frozen=True)
class SheetData:
    header_row_index: int
    columns: tuple[str, ...]
    rows: tuple[NormalizedRecord, ...]


def read_workbook(content: bytes, source: str = "<bytes>") -> RawGrid:
    """Parse the first worksheet of a workbook into a raw grid.

    Parameters
    ----------
    content: Workbook bytes (xlsx/xlsm/xls/ods; engine picked by pandas)
    source: Name used in error messages

    Raises
    ------
    FetchError: bytes are not a readable workbook
    EmptyWorkbookError: the workbook has no worksheet or the first one has no rows
    """
    try:
        xls = pd.ExcelFile(io.BytesIO(content))
        if not xls.sheet_names:
            raise EmptyWorkbookError(f"workbook '{source}' has no worksheets")
        sheet_name = xls.sheet_names[0]
        # Read without a header; the header row is located afterwards.
        # Only empty cells are NA: "NA", "None", "n/a" etc. stay text
        df = xls.parse(sheet_name, header=None, keep_default_na=False, na_values=[""])
    except EmptyWorkbookError:
        raise
    except Exception as e:
        raise FetchError(source, "parse", str(e)) from e

    if df.shape[0] == 0:
        raise EmptyWorkbookError(f"worksheet '{sheet_name}' in '{source}' contains no rows")

    # object dtype turns numpy scalars into Python ones; NaN becomes None
    frame = df.astype(object).where(df.notna(), None)
    grid = [list(row) for row in frame.itertuples(index=False, name=None)]
    logger.debug(f"read sheet '{sheet_name}' from {source}: {len(grid)} rows x {df.shape[1]} cols")
    return grid


def placeholder_for(index: int) -> str:
    """Column letters for a 0-based column position (0 -> A, 26 -> AA)."""
    if index < 0:
        raise ValueError(f"column index must be >= 0, got {index}")
    letters = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


def dedupe_labels(labels: Sequence[str]) -> list[str]:
    """Make labels unique; later duplicates get ``_1``, ``_2``, ... suffixes."""
    used: set[str] = set()
    counters: dict[str, int] = {}
    result: list[str] = []
    for label in labels:
        candidate = label
        if candidate in used:
            n = counters.get(label, 0)
            while candidate in used:
                n += 1
                candidate = f"{label}_{n}"
            counters[label] = n
        used.add(candidate)
        result.append(candidate)
    return result


def _label_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def _blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and value.strip() == "":
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def normalize_sheet(grid: Sequence[Sequence[Any]], header_row_index: int) -> SheetData:
    """Apply the header row at ``header_row_index`` to the rows below it.

    Steps:
    1. Header width is the widest row in the grid
    2. Blank header cells get placeholder_for(column), then labels are deduped
    3. Rows after the header that are entirely blank are dropped
    4. Each remaining row maps every label to its cell (None past the row end)
    """
    if not 0 <= header_row_index < len(grid):
        raise ValueError(f"header row index {header_row_index} out of range for {len(grid)} rows")

    width = max((len(row) for row in grid), default=0)
    header_cells = list(grid[header_row_index])
    header_cells += [None] * (width - len(header_cells))
    labels = [_label_text(cell) or placeholder_for(idx) for idx, cell in enumerate(header_cells)]
    columns = tuple(dedupe_labels(labels))

    rows: list[NormalizedRecord] = []
    # row_number is 1-based, so the first data row is header index + 2
    for row_number, raw in enumerate(grid[header_row_index + 1 :], start=header_row_index + 2):
        cells = [_blank_to_none(cell) for cell in raw]
        if all(cell is None for cell in cells):
            continue
        values = {
            col: cells[idx] if idx < len(cells) else None
            for idx, col in enumerate(columns)
        }
        rows.append(NormalizedRecord(row_number=row_number, values=values))

    return SheetData(header_row_index=header_row_index, columns=columns, rows=tuple(rows))
