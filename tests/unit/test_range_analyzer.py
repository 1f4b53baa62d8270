from __future__ import annotations

import pytest

from cost_analyzer.services.ingestor import ingest
from cost_analyzer.services.range_analyzer import analyze_range

"""Unit tests for multi-period range analysis."""


@pytest.fixture()
def three_period_grid() -> list[list[object]]:
    # 202602 has a header column but no 實際 cost values -> still analyzed (zero cost)
    return [
        ["項次", "名稱", "202601", "202602", "202603"],
        ["", "", "實際", "實際", "實際"],
        ["", "", 100, 200, 300],
        ["1", "A", 10, "", 30],
        ["3.1", "B", 5, "", 6],
    ]


def test_range_is_ascending_and_order_independent(three_period_grid):
    metadata = ingest(three_period_grid)
    forward = analyze_range(metadata, "202601", "202603")
    backward = analyze_range(metadata, "202603", "202601")
    assert [r.period for r in forward] == ["202601", "202602", "202603"]
    assert forward == backward


def test_range_selects_only_periods_within_bounds(three_period_grid):
    metadata = ingest(three_period_grid)
    results = analyze_range(metadata, "202602", "202699")
    assert [r.period for r in results] == ["202602", "202603"]
    assert results[1].unit_cost == 36
    assert results[1].period_total_cost == 300 * 36


def test_range_single_period(three_period_grid):
    results = analyze_range(ingest(three_period_grid), "202601", "202601")
    assert len(results) == 1
    assert results[0].unit_cost == 15


@pytest.mark.parametrize("start, end", [("abc", "202601"), ("202601", ""), ("2026-01", "202603")])
def test_range_invalid_bounds_give_empty_list(three_period_grid, start, end):
    assert analyze_range(ingest(three_period_grid), start, end) == []


def test_range_outside_detected_periods(three_period_grid):
    assert analyze_range(ingest(three_period_grid), "202401", "202412") == []


def test_range_uses_period_strings_from_metadata(cost_grid):
    metadata = ingest(cost_grid)
    results = analyze_range(metadata, " 202601 ", "202602")
    assert [r.period for r in results] == ["202601", "202602"]
    assert [r.inbound_quantity for r in results] == [15000, 12000]
