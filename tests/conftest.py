# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("COST_ANALYZER_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./reports
exchange_rate: 32.5
watts_per_piece: 8.41
sheet_keyword: 單位成本
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "analyzer.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def cost_grid() -> list[list[object]]:
    """Two-period cost sheet.

    - header row at index 5: 202601 at column 1, 202602 at column 3
    - sub-header: 實際 at columns 2 and 4
    - row index 2: inbound quantity 15000 / 12000
    - the 總計 row must never become an item
    """
    return [
        ["電池單位成本表", "", "", "", ""],
        ["單位: TWD/pcs", "", "", "", ""],
        ["", 15000, "", 12000, ""],
        ["備註", "", "", "", ""],
        ["備註", "", "", "", ""],
        ["項次", "202601", "", "202602", ""],
        ["", "預算", "實際", "預算", "實際"],
        ["1", "矽片", 500000, "", 480000],
        ["3.1", "銀漿", 20000, "", 21000],
        ["3.2", "鋁漿", 15000, "", 16000],
        ["4", "總計", 999999, "", 999999],
    ]
