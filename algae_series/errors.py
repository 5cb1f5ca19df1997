from __future__ import annotations

from collections.abc import Iterable

"""Fatal load errors.

Structural problems (nothing fetched, empty sheet, no header, missing required
column) make the dataset unusable and stop the pipeline. Per-cell coercion
problems are never raised; see services.aggregator.
"""

__all__ = [
    "DatasetLoadError",
    "FetchError",
    "EmptyWorkbookError",
    "HeaderNotFoundError",
    "MissingRequiredColumnError",
]


class DatasetLoadError(Exception):
    """Base class for errors that abort a dataset load."""


class FetchError(DatasetLoadError):
    """Raised when workbook bytes cannot be retrieved or parsed."""

    def __init__(self, source: str, status: str | int, detail: str | None = None) -> None:
        self.source = source
        self.status = status
        self.detail = detail
        message = f"failed to fetch '{source}' (status={status})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class EmptyWorkbookError(DatasetLoadError):
    """Raised when the first worksheet has no rows at all."""


class HeaderNotFoundError(DatasetLoadError):
    """Raised when no row looks enough like a header row."""

    def __init__(self, best_score: int, threshold: int) -> None:
        self.best_score = best_score
        self.threshold = threshold
        super().__init__(
            f"no header row found (best score {best_score}, need at least {threshold})"
        )


class MissingRequiredColumnError(DatasetLoadError):
    """Raised when required semantic roles could not be bound to a column."""

    def __init__(self, roles: Iterable[str]) -> None:
        self.roles = list(roles)
        super().__init__(f"missing required column(s) for role(s): {', '.join(self.roles)}")
