from __future__ import annotations

import math

from ..models.dataset import Dataset
from ..models.time_series import TimeSeries

"""SUMMARY line rendering for loads and series.

Formats:
SUMMARY source={source} header_row={n} columns={n} records={n} sites={n}
SUMMARY label="{label}" column="{column}" points={n} total={total}
"""


def format_number(value: float) -> str:
    """Integral values without a decimal point; inf/nan as Python spells them."""
    if not math.isfinite(value):
        return str(value)
    if value == int(value):
        return str(int(value))
    return f"{value:.10g}"


def render_summary_line(dataset: Dataset) -> str:
    """Render the load SUMMARY line.

    header_row is reported 1-based to match what a spreadsheet shows.

    Examples:
        >>> from algae_series.models import Dataset, RoleMap
        >>> render_summary_line(Dataset("a.xlsx", 2, ("Date",), (), RoleMap()))
        'SUMMARY source=a.xlsx header_row=3 columns=1 records=0 sites=0'
    """
    return (
        f"SUMMARY source={dataset.source} "
        f"header_row={dataset.header_row_index + 1} "
        f"columns={len(dataset.columns)} "
        f"records={len(dataset.records)} "
        f"sites={len(dataset.sites())}"
    )


def render_series_line(series: TimeSeries) -> str:
    total = format_number(series.total) if series.points else "0"
    return (
        f'SUMMARY label="{series.label}" '
        f'column="{series.column}" '
        f"points={len(series)} "
        f"total={total}"
    )
