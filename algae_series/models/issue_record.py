from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any

"""IssueRecord model for data-quality logging.

Per-cell coercion failures never abort an aggregation. They are recovered
locally and, when a collector is supplied, recorded here so the source file
can be corrected later.
"""

__all__ = [
    "IssueRecord",
    "DATE_UNPARSEABLE",
    "NUMBER_UNPARSEABLE",
]

DATE_UNPARSEABLE = "DATE_UNPARSEABLE"
NUMBER_UNPARSEABLE = "NUMBER_UNPARSEABLE"


@dataclass(frozen=True)
class IssueRecord:
    """Structured data-quality record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        row: 1-based worksheet row number of the offending record
        column: Header label of the offending cell
        issue_type: Issue classification in UPPER_SNAKE_CASE format
        value: repr() of the raw cell value
    """
    timestamp: str
    row: int
    column: str
    issue_type: str
    value: str

    @staticmethod
    def create(row: int, column: str, issue_type: str, value: Any) -> IssueRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return IssueRecord(
            timestamp=ts,
            row=row,
            column=column,
            issue_type=issue_type,
            value=repr(value),
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
