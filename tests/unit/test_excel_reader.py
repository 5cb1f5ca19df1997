from __future__ import annotations

import io
from datetime import datetime

import pandas as pd
import pytest

from algae_series.errors import EmptyWorkbookError, FetchError
from algae_series.excel.reader import dedupe_labels, normalize_sheet, placeholder_for, read_workbook


def _make_excel_bytes(sheets: dict[str, list[list[object]]]) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return buffer.getvalue()


@pytest.mark.parametrize(
    "index, expected",
    [(0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (27, "AB"), (51, "AZ"), (52, "BA"), (701, "ZZ"), (702, "AAA")],
)
def test_placeholder_for(index, expected):
    assert placeholder_for(index) == expected


def test_placeholder_rejects_negative_index():
    with pytest.raises(ValueError):
        placeholder_for(-1)


def test_dedupe_labels_suffixes_later_duplicates():
    assert dedupe_labels(["a", "b", "a", "a"]) == ["a", "b", "a_1", "a_2"]


def test_dedupe_labels_skips_taken_suffix():
    assert dedupe_labels(["a", "a_1", "a"]) == ["a", "a_1", "a_2"]
    result = dedupe_labels(["a", "a", "a_1"])
    assert result == ["a", "a_1", "a_1_1"]
    assert len(set(result)) == 3


def test_normalize_sheet_basic(sample_grid, header):
    sheet = normalize_sheet(sample_grid, 3)
    assert sheet.header_row_index == 3
    assert sheet.columns == tuple(header)
    # trailing blank row is dropped
    assert len(sheet.rows) == 5
    first = sheet.rows[0]
    assert first.row_number == 5
    assert first["Site"] == "Lake A"
    assert first["Cells per mL"] == 1200


def test_blank_header_cells_get_column_letters():
    grid = [["Date", None, "Site", "  ", "Taxon"], [1, 2, 3, 4, 5]]
    sheet = normalize_sheet(grid, 0)
    assert sheet.columns == ("Date", "B", "Site", "D", "Taxon")
    assert sheet.rows[0]["B"] == 2


def test_placeholder_colliding_with_real_label_is_deduped():
    grid = [["B", None, "Site"], [1, 2, 3]]
    sheet = normalize_sheet(grid, 0)
    assert sheet.columns == ("B", "B_1", "Site")


def test_duplicate_headers_are_suffixed():
    grid = [["Site", "Count", "Count"], ["Lake A", 1, 2]]
    sheet = normalize_sheet(grid, 0)
    assert sheet.columns == ("Site", "Count", "Count_1")
    assert sheet.rows[0]["Count_1"] == 2


def test_numeric_header_cells_become_text():
    grid = [["Site", 2023.0, 12.5], ["Lake A", 1, 2]]
    assert normalize_sheet(grid, 0).columns == ("Site", "2023", "12.5")


def test_jagged_rows_keep_full_key_set():
    grid = [
        ["Title"],
        ["Date", "Site", "Taxon"],
        ["2023-05-01"],
        ["2023-05-02", "Lake A", "Microcystis", "extra"],
        [],
        ["2023-05-03", "", "Anabaena"],
    ]
    sheet = normalize_sheet(grid, 1)
    # widest row defines the header width
    assert sheet.columns == ("Date", "Site", "Taxon", "D")
    assert len(sheet.rows) == 3
    for record in sheet.rows:
        assert record.keys() == set(sheet.columns)
    assert sheet.rows[0]["Site"] is None
    assert sheet.rows[1]["D"] == "extra"
    assert sheet.rows[2]["Site"] is None
    assert [r.row_number for r in sheet.rows] == [3, 4, 6]


def test_rows_of_blank_strings_are_dropped():
    grid = [["Date", "Site"], ["", "   "], [None, None], [None, "Lake A"]]
    sheet = normalize_sheet(grid, 0)
    assert len(sheet.rows) == 1
    assert sheet.rows[0]["Site"] == "Lake A"


def test_header_index_out_of_range():
    with pytest.raises(ValueError):
        normalize_sheet([["Date"]], 3)


def test_read_workbook_first_sheet_as_grid():
    content = _make_excel_bytes(
        {
            "Samples": [
                ["Algae data"],
                ["Date", "Site", "Cells per mL"],
                [datetime(2023, 5, 1), "Lake A", 1200],
            ],
            "Other": [["ignored"]],
        }
    )
    grid = read_workbook(content, "algae.xlsx")
    assert grid[0][0] == "Algae data"
    assert grid[0][1] is None
    assert grid[1] == ["Date", "Site", "Cells per mL"]
    assert grid[2][1] == "Lake A"
    assert grid[2][2] == 1200
    assert pd.Timestamp(grid[2][0]) == pd.Timestamp("2023-05-01")


def test_read_workbook_rejects_non_workbook_bytes():
    with pytest.raises(FetchError) as exc_info:
        read_workbook(b"definitely not a spreadsheet", "bad.xlsx")
    assert exc_info.value.status == "parse"
    assert "bad.xlsx" in str(exc_info.value)


def test_read_workbook_empty_sheet():
    content = _make_excel_bytes({"Empty": []})
    with pytest.raises(EmptyWorkbookError):
        read_workbook(content, "empty.xlsx")


def test_read_workbook_keeps_na_like_text():
    content = _make_excel_bytes(
        {
            "Samples": [
                ["Date", "Site", "Taxon", "Genus", "Cells per mL"],
                [datetime(2023, 5, 1), "NA", "None", "NULL", "n/a"],
                [datetime(2023, 5, 2), "Lake A", "nan", None, 3],
            ]
        }
    )
    grid = read_workbook(content, "algae.xlsx")
    assert grid[1][1:] == ["NA", "None", "NULL", "n/a"]
    assert grid[2][2] == "nan"
    # a truly empty cell is still absent
    assert grid[2][3] is None
