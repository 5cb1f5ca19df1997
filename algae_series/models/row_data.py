from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

"""NormalizedRecord model.

A NormalizedRecord is one worksheet data row after header resolution. Its key
set is always the full header label set; cells that were blank or beyond the
row's width are present with a None value.
"""

__all__ = [
    "NormalizedRecord",
]


@dataclass(frozen=True)
class NormalizedRecord:
    """One data row keyed by resolved header label.

    row_number is the 1-based worksheet row the record came from, so issues
    can be traced back to the source file.
    """
    row_number: int
    values: Mapping[str, Any]

    def __post_init__(self) -> None:
        # Records are shared by every aggregation; freeze the mapping too
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __getitem__(self, label: str) -> Any:
        return self.values[label]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def get(self, label: str | None, default: Any = None) -> Any:
        if label is None:
            return default
        return self.values.get(label, default)

    def keys(self) -> set[str]:
        return set(self.values)
