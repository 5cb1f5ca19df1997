from __future__ import annotations

import pytest

from algae_series.models.row_data import NormalizedRecord


def test_record_creation():
    record = NormalizedRecord(row_number=5, values={"Site": "Lake A", "Taxon": None})

    assert record.row_number == 5
    assert record.values == {"Site": "Lake A", "Taxon": None}
    assert record["Site"] == "Lake A"
    assert record.keys() == {"Site", "Taxon"}
    assert len(record) == 2
    assert list(record) == ["Site", "Taxon"]


def test_record_values_are_read_only():
    source = {"Site": "Lake A"}
    record = NormalizedRecord(row_number=2, values=source)

    with pytest.raises(TypeError):
        record.values["Site"] = "Lake B"  # type: ignore[index]
    # later changes to the source dict do not leak in
    source["Site"] = "Lake B"
    assert record["Site"] == "Lake A"


def test_record_is_frozen():
    record = NormalizedRecord(row_number=2, values={})
    with pytest.raises(AttributeError):
        record.row_number = 3  # type: ignore[misc]


def test_get_with_missing_or_none_label():
    record = NormalizedRecord(row_number=2, values={"Site": "Lake A"})
    assert record.get("Genus") is None
    assert record.get(None) is None
    assert record.get(None, "x") == "x"
    with pytest.raises(KeyError):
        record["Genus"]
