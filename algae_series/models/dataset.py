from __future__ import annotations

from collections.abc import MutableSequence
from dataclasses import dataclass

from .issue_record import IssueRecord
from .role_map import Role, RoleMap
from .row_data import NormalizedRecord
from .time_series import TimeSeries

"""Dataset model: everything derived from one workbook load."""

__all__ = [
    "Dataset",
]


@dataclass(frozen=True)
class Dataset:
    """Immutable result of the load pipeline.

    The records are the shared read-only resource queried by every later
    filter/aggregate call; nothing here is mutated after the load.
    """
    source: str
    header_row_index: int  # 0-based index into the raw grid
    columns: tuple[str, ...]
    records: tuple[NormalizedRecord, ...]
    roles: RoleMap

    def series(
        self,
        site: str,
        metric_role: Role = Role.PRIMARY_METRIC,
        genus: str | None = None,
        issues: MutableSequence[IssueRecord] | None = None,
    ) -> TimeSeries:
        from ..services.aggregator import aggregate_series

        return aggregate_series(self.records, self.roles, site, metric_role, genus, issues=issues)

    def sites(self) -> list[str]:
        from ..services.aggregator import distinct_values

        return distinct_values(self.records, self.roles.site)

    def genera(self) -> list[str]:
        from ..services.aggregator import distinct_values

        return distinct_values(self.records, self.roles.genus)
