from __future__ import annotations

import json
import re
from pathlib import Path

from algae_series.logging.issue_log import IssueLogBuffer
from algae_series.models import NormalizedRecord, RoleMap
from algae_series.models.issue_record import IssueRecord
from algae_series.services.aggregator import aggregate_series

"""Issue log JSON Lines contract: fixed key set and value types."""

REQUIRED_KEYS = {"timestamp", "row", "column", "issue_type", "value"}
TS_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")


def test_issue_lines_have_exact_keys(tmp_path: Path):
    roles = RoleMap(date="Date", taxon="Taxon", primary_metric="Cells", site="Site")
    records = [
        NormalizedRecord(4, {"Date": "??", "Taxon": "x", "Cells": 1, "Site": "Lake A"}),
        NormalizedRecord(5, {"Date": "2023-05-01", "Taxon": "x", "Cells": "lots", "Site": "Lake A"}),
    ]
    issues: list[IssueRecord] = []
    aggregate_series(records, roles, "Lake A", issues=issues)

    buf = IssueLogBuffer(logs_dir=tmp_path)
    buf.extend(issues)
    path = buf.flush()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    for line in lines:
        obj = json.loads(line)
        assert set(obj) == REQUIRED_KEYS
        assert TS_RE.match(obj["timestamp"])
        assert isinstance(obj["row"], int)
        assert isinstance(obj["column"], str)
        assert re.fullmatch(r"[A-Z]+(_[A-Z]+)*", obj["issue_type"])
        assert isinstance(obj["value"], str)
    first, second = (json.loads(line) for line in lines)
    assert (first["row"], first["column"], first["value"]) == (4, "Date", "'??'")
    assert (second["row"], second["column"], second["value"]) == (5, "Cells", "'lots'")


def test_blank_metric_is_not_an_issue():
    roles = RoleMap(date="Date", taxon="Taxon", primary_metric="Cells", site="Site")
    records = [NormalizedRecord(4, {"Date": "2023-05-01", "Taxon": "x", "Cells": None, "Site": "Lake A"})]
    issues: list[IssueRecord] = []

    series = aggregate_series(records, roles, "Lake A", issues=issues)

    assert series.values == [0.0]
    assert issues == []
