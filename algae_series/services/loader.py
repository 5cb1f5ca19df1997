from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..config.loader import SeriesConfig
from ..excel.fetch import fetch_workbook
from ..excel.header_locator import MIN_HEADER_SCORE, locate_header_row
from ..excel.reader import normalize_sheet, read_workbook
from ..models.dataset import Dataset
from ..models.role_map import Role
from .column_mapper import MatchRule, build_extra_rules, require_roles, resolve_roles

"""Load pipeline orchestration.

fetch -> read first worksheet -> locate header -> normalize rows -> resolve
roles. The pipeline runs once per load, sequentially; any structural failure
raises a DatasetLoadError subclass and no partial Dataset is produced.
"""

__all__ = [
    "build_dataset",
    "load_dataset",
]

logger = logging.getLogger(__name__)


def build_dataset(
    grid: Sequence[Sequence[Any]],
    source: str = "<grid>",
    *,
    min_header_score: int = MIN_HEADER_SCORE,
    extra_rules: dict[Role, tuple[MatchRule, ...]] | None = None,
) -> Dataset:
    """Run header location, normalization and role resolution on a raw grid.

    Raises:
        EmptyWorkbookError: grid has no rows
        HeaderNotFoundError: no row scores at least ``min_header_score``
        MissingRequiredColumnError: date/taxon/primary metric/site unresolved
    """
    header_row_index = locate_header_row(grid, min_score=min_header_score)
    sheet = normalize_sheet(grid, header_row_index)
    roles = require_roles(resolve_roles(sheet.columns, extra_rules))
    logger.info(
        f"loaded {source}: header at row {header_row_index + 1}, "
        f"{len(sheet.columns)} columns, {len(sheet.rows)} records"
    )
    return Dataset(
        source=source,
        header_row_index=header_row_index,
        columns=sheet.columns,
        records=sheet.rows,
        roles=roles,
    )


def load_dataset(source: str, config: SeriesConfig | None = None) -> Dataset:
    """Fetch ``source`` and run the whole pipeline on its first worksheet.

    Raises:
        FetchError: bytes could not be retrieved or parsed
        plus everything build_dataset() raises
    """
    cfg = config or SeriesConfig()
    logger.info(f"Loading workbook from: {source}")
    content = fetch_workbook(source, timeout=cfg.timeout_seconds)
    grid = read_workbook(content, source)
    return build_dataset(
        grid,
        source,
        min_header_score=cfg.min_header_score,
        extra_rules=build_extra_rules(cfg.role_patterns),
    )
