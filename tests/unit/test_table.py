from __future__ import annotations

from algae_series.models import Dataset, NormalizedRecord, RoleMap
from algae_series.services.loader import build_dataset
from algae_series.services.table import records_to_frame


def test_records_to_frame_keeps_header_order(sample_grid, header):
    frame = records_to_frame(build_dataset(sample_grid))

    assert list(frame.columns) == header
    assert len(frame) == 5
    assert frame["Date Sampled"].tolist() == [
        "2023-05-01",
        "2023-05-01",
        "2023-04-15",
        "2023-05-01",
        "2023-06-03",
    ]
    assert frame.loc[4, "Cells per mL"] == "1,250"


def test_unparseable_dates_keep_raw_value():
    roles = RoleMap(date="Date", site="Site")
    records = (
        NormalizedRecord(2, {"Date": 45047, "Site": "Lake A"}),
        NormalizedRecord(3, {"Date": "not recorded", "Site": "Lake A"}),
        NormalizedRecord(4, {"Date": None, "Site": "Lake B"}),
    )
    frame = records_to_frame(Dataset("grid", 0, ("Date", "Site"), records, roles))

    assert frame["Date"].tolist() == ["2023-05-01", "not recorded", None]
