# Shared pytest fixtures
from __future__ import annotations

import logging
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from algae_series.logging.init import LOGGER_NAME, reset_logging

HEADER = ["Date Sampled", "Site", "Taxon", "Genus", "Cells per mL", "Biovolume", "Units per mL", "Project"]

DATA_ROWS = [
    [datetime(2023, 5, 1), "Lake A", "Microcystis aeruginosa", "Microcystis", 1200, 35.5, 40, "P1"],
    [datetime(2023, 5, 1), "Lake A", "Pseudo-nitzschia sp.", "Pseudo-nitzschia", 300, 10, 5, "P1"],
    [datetime(2023, 4, 15), "Lake A", "Aphanizomenon flos-aquae", "Aphanizomenon", 800, 20, 12, "P1"],
    [datetime(2023, 5, 1), "Lake B", "Microcystis aeruginosa", "Microcystis", 5000, 100, 90, "P1"],
    [datetime(2023, 6, 3), "Lake A", "Pseudo-nitzschia sp.", "Pseudo-nitzschia", "1,250", 12, 7, "P1"],
]


@pytest.fixture(autouse=True)
def _clean_app_logger():
    """Each test starts and ends without the CLI handler bound to a stale stdout."""
    reset_logging()
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def header() -> list[str]:
    return list(HEADER)


@pytest.fixture()
def sample_grid() -> list[list[object]]:
    """Two title rows, a blank separator, the header, data and a trailing blank row."""
    return [
        ["Algae Monitoring Program"],
        ["Generated 2023-07-01"],
        [],
        list(HEADER),
        *[list(r) for r in DATA_ROWS],
        [None, None, ""],
    ]


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source: ./data/algae_data.xlsx
min_header_score: 5
timeout_seconds: 30
role_patterns:
  site:
    - "^sampling point$"
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "series.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
