from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import pandas as pd

"""TimeSeries model handed to the charting layer."""

__all__ = [
    "SeriesPoint",
    "TimeSeries",
]


@dataclass(frozen=True)
class SeriesPoint:
    date: str  # canonical YYYY-MM-DD
    value: float


@dataclass(frozen=True)
class TimeSeries:
    """Date-ordered sums for one (site, metric, genus) filter.

    Points are strictly increasing by canonical date with no duplicates. The
    series is recomputed on every filter change and never cached.
    """
    label: str  # display label for the requested metric
    column: str  # header label the values were read from
    points: tuple[SeriesPoint, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[SeriesPoint]:
        return iter(self.points)

    @property
    def dates(self) -> list[str]:
        return [p.date for p in self.points]

    @property
    def values(self) -> list[float]:
        return [p.value for p in self.points]

    @property
    def total(self) -> float:
        return sum(self.values)

    def to_frame(self) -> pd.DataFrame:
        """Return the series as a two-column DataFrame (date, label)."""
        return pd.DataFrame({"date": self.dates, self.label: self.values})
