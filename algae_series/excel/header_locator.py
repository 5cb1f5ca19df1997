from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any

from ..errors import EmptyWorkbookError, HeaderNotFoundError

"""Content-driven header row detection.

Workbooks carry free-text titles and blank separator rows above the real
header, and the number of those rows drifts between revisions of the same
file. Instead of a fixed row index each row is scored by how many of its cells
look like known column names; the best-scoring row wins.
"""

__all__ = [
    "HEADER_PATTERNS",
    "MIN_HEADER_SCORE",
    "normalize_header_cell",
    "score_row",
    "locate_header_row",
]

logger = logging.getLogger(__name__)

# Applied to normalized cell text (lowercase, no whitespace, no underscores).
HEADER_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("date", re.compile(r"date|sampled|collected|^day$|^time$")),
    ("taxon", re.compile(r"taxon|taxa|species|organism|scientificname|algae|algal")),
    ("metric", re.compile(r"cells|perml|/ml|biovolume|density|abundance|concentration|count|units")),
    ("rank", re.compile(r"^(genus|genera|family|order|class|phylum|division|kingdom|group)")),
    ("site", re.compile(r"site|station|location|depth|lake|reservoir|waterbody|river|stream")),
    ("project", re.compile(r"project|lab|sampleid|^id$|^sample$|method|analyst|notes|comment")),
]

# Fewer hits than this means no row is a plausible header (title rows and data
# rows rarely hit more than one or two patterns).
MIN_HEADER_SCORE = 5

_STRIP_RE = re.compile(r"[\s_]+")


def normalize_header_cell(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return _STRIP_RE.sub("", value.lower())


def score_row(row: Sequence[Any]) -> int:
    """Count cells in ``row`` that match at least one header pattern.

    Each cell contributes at most one point no matter how many patterns it hits.
    """
    score = 0
    for cell in row:
        text = normalize_header_cell(cell)
        if not text:
            continue
        if any(pattern.search(text) for _, pattern in HEADER_PATTERNS):
            score += 1
    return score


def locate_header_row(grid: Sequence[Sequence[Any]], min_score: int = MIN_HEADER_SCORE) -> int:
    """Return the 0-based index of the most header-like row in ``grid``.

    Args:
        grid: Raw worksheet rows
        min_score: Minimum number of matching cells for a row to count as header

    Returns:
        Index of the first row with the strictly highest score

    Raises:
        EmptyWorkbookError: grid has no rows
        HeaderNotFoundError: best score is below ``min_score``
    """
    if not grid:
        raise EmptyWorkbookError("worksheet contains no rows")

    best_index = -1
    best_score = 0
    for idx, row in enumerate(grid):
        score = score_row(row)
        if score > best_score:
            best_index, best_score = idx, score

    if best_score < min_score:
        raise HeaderNotFoundError(best_score, min_score)
    logger.debug(f"header row located at index {best_index} (score={best_score})")
    return best_index
