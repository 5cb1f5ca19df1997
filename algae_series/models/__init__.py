"""Domain models for the algae workbook ingestion pipeline.

Raw worksheet cells flow through header location and row normalization into
NormalizedRecords; a RoleMap binds semantic roles to header labels; the
aggregator turns records into a TimeSeries.
"""

from .dataset import Dataset
from .issue_record import IssueRecord
from .role_map import METRIC_LABELS, METRIC_ROLES, REQUIRED_ROLES, Role, RoleMap
from .row_data import NormalizedRecord
from .time_series import SeriesPoint, TimeSeries

__all__ = [
    # Row level
    "NormalizedRecord",
    "IssueRecord",
    # Column roles
    "Role",
    "RoleMap",
    "REQUIRED_ROLES",
    "METRIC_ROLES",
    "METRIC_LABELS",
    # Results
    "Dataset",
    "SeriesPoint",
    "TimeSeries",
]
