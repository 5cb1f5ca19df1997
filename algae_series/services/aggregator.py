from __future__ import annotations

import logging
import math
import numbers
import re
from collections.abc import Iterable, MutableSequence
from typing import Any

from ..errors import MissingRequiredColumnError
from ..models.issue_record import DATE_UNPARSEABLE, NUMBER_UNPARSEABLE, IssueRecord
from ..models.role_map import METRIC_LABELS, METRIC_ROLES, Role, RoleMap
from ..models.row_data import NormalizedRecord
from ..models.time_series import SeriesPoint, TimeSeries
from .dates import canonical_date

"""Series aggregation over normalized records.

Records are filtered by exact site and optional genus substring, then the
requested metric is summed per canonical date. Bad cells never abort the
series: a record whose date cannot be coerced is dropped, a metric that
cannot be parsed counts as 0.
"""

__all__ = [
    "cell_text",
    "coerce_number",
    "distinct_values",
    "aggregate_series",
]

logger = logging.getLogger(__name__)

# Leading float, like "1,200 cells" -> 1200 once separators are stripped
_LEADING_FLOAT_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def cell_text(value: Any) -> str:
    """Trimmed text form of a cell used for site/genus comparisons."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def coerce_number(value: Any) -> float | None:
    """Return the numeric value of a metric cell, or None if it has none.

    Numbers are used as-is. Text has thousands separators removed and its
    leading float parsed. Non-finite results and everything else (None, bool,
    other objects) are None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_FLOAT_RE.match(value.strip().replace(",", ""))
        if match is None:
            return None
        number = float(match.group(0))
    else:
        return None
    # NaN and overflowed text like "1e999" cannot be summed meaningfully
    return number if math.isfinite(number) else None


def distinct_values(records: Iterable[NormalizedRecord], label: str | None) -> list[str]:
    """Sorted distinct non-blank texts found under ``label``."""
    if label is None:
        return []
    return sorted({text for text in (cell_text(r.get(label)) for r in records) if text})


def _bound_label(roles: RoleMap, role: Role) -> str:
    label = roles.label_for(role)
    if label is None:
        raise MissingRequiredColumnError([role.value])
    return label


def aggregate_series(
    records: Iterable[NormalizedRecord],
    roles: RoleMap,
    site: str,
    metric_role: Role = Role.PRIMARY_METRIC,
    genus: str | None = None,
    *,
    issues: MutableSequence[IssueRecord] | None = None,
) -> TimeSeries:
    """Sum ``metric_role`` per canonical date for one site.

    Args:
        records: Normalized records of the loaded dataset
        roles: Role bindings of the dataset
        site: Site value to keep (exact, case-sensitive, cell text trimmed)
        metric_role: One of the metric roles
        genus: Optional case-insensitive substring filter on the genus column
        issues: Optional collector for recovered per-cell problems

    Returns:
        TimeSeries ordered by ascending date, one point per date

    Raises:
        ValueError: metric_role is not a metric role
        MissingRequiredColumnError: the metric (or site/date) role is unbound
    """
    if metric_role not in METRIC_ROLES:
        raise ValueError(f"not a metric role: {metric_role.value}")
    metric_label = _bound_label(roles, metric_role)
    site_label = _bound_label(roles, Role.SITE)
    date_label = _bound_label(roles, Role.DATE)

    needle = genus.strip().lower() if genus and genus.strip() else None
    if needle is not None and roles.genus is None:
        logger.warning("genus filter given but no genus column was resolved; no records match")

    sums: dict[str, float] = {}
    dropped = 0
    for record in records:
        if cell_text(record.get(site_label)) != site:
            continue
        if needle is not None and needle not in cell_text(record.get(roles.genus)).lower():
            continue

        raw_date = record.get(date_label)
        day = canonical_date(raw_date)
        if not day:
            dropped += 1
            if issues is not None:
                issues.append(IssueRecord.create(record.row_number, date_label, DATE_UNPARSEABLE, raw_date))
            continue

        raw_value = record.get(metric_label)
        amount = coerce_number(raw_value)
        if amount is None:
            if raw_value is not None and issues is not None:
                issues.append(IssueRecord.create(record.row_number, metric_label, NUMBER_UNPARSEABLE, raw_value))
            amount = 0.0
        sums[day] = sums.get(day, 0.0) + amount

    if dropped:
        logger.debug(f"{dropped} record(s) for site={site!r} skipped: unparseable date")
    points = tuple(SeriesPoint(date=day, value=sums[day]) for day in sorted(sums))
    return TimeSeries(label=METRIC_LABELS[metric_role], column=metric_label, points=points)
