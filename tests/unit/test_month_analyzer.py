from __future__ import annotations

import pytest

from cost_analyzer.models.analysis_result import CostItem
from cost_analyzer.services.exporter import build_export_rows
from cost_analyzer.services.ingestor import ingest
from cost_analyzer.services.month_analyzer import (
    ITEM_SCAN_LAST_ROW,
    TOP_ITEMS_LIMIT,
    analyze_month,
    is_cost_item_code,
)

"""Unit tests for single-period analysis."""


def _grid(
    items: list[list[object]],
    inbound: object = 100,
    sub_header: list[object] | None = None,
) -> list[list[object]]:
    """Minimal sheet: items are [code, name, budget, actual].

    Header at index 0 (202601 at column 2), sub-header at index 1 (實際 at
    column 3), inbound quantity at row index 2 under the period column.
    """
    return [
        ["項次", "名稱", "202601", ""],
        sub_header if sub_header is not None else ["", "", "預算", "實際"],
        ["", "", inbound, ""],
        *items,
    ]


def test_end_to_end_example(cost_grid):
    result = analyze_month(ingest(cost_grid), "202601")
    assert result is not None
    assert result.period == "202601"
    assert result.inbound_quantity == 15000
    assert result.unit_cost == 535000
    assert result.period_total_cost == 8_025_000_000
    assert [(i.code, i.value) for i in result.top_items] == [("1", 500000), ("3.1", 20000), ("3.2", 15000)]
    assert all("總計" not in i.name for i in result.top_items)


def test_second_period_uses_its_own_actual_column(cost_grid):
    result = analyze_month(ingest(cost_grid), "202602")
    assert result is not None
    assert result.inbound_quantity == 12000
    assert result.unit_cost == 480000 + 21000 + 16000
    assert result.top_items[0] == CostItem(code="1", name="矽片", value=480000, source_row=8)


def test_missing_period_returns_none(cost_grid):
    metadata = ingest(cost_grid)
    assert analyze_month(metadata, "202603") is None
    # compared as text, not as numbers
    assert analyze_month(metadata, "0202601") is None


@pytest.mark.parametrize(
    "code, kept",
    [
        ("0", True),
        ("1", True),
        ("2", True),
        ("2.", True),
        ("2.5", False),
        ("3", False),
        ("3.1", True),
        ("4.", False),
        ("12.3", True),
        ("abc", False),
    ],
)
def test_item_code_classification(code, kept):
    assert is_cost_item_code(code) is kept


def test_classification_applied_to_rows():
    grid = _grid(
        [
            ["1", "A", "", 10],
            ["2.5", "B", "", 10],
            ["3", "C", "", 10],
            ["3.1", "D", "", 10],
            ["4.", "E", "", 10],
            ["", "F", "", 10],
            ["x", "G", "", 10],
        ]
    )
    result = analyze_month(ingest(grid), "202601")
    assert [i.code for i in result.top_items] == ["1", "3.1"]


def test_numeric_code_cells_read_from_workbook():
    """1.0 / 3.1 floats from a workbook classify like the text '1' / '3.1'."""
    grid = _grid([[1.0, "A", "", 10], [3.0, "B", "", 10], [3.1, "C", "", 10]])
    result = analyze_month(ingest(grid), "202601")
    assert [i.code for i in result.top_items] == ["1", "3.1"]


def test_total_labels_always_excluded():
    grid = _grid(
        [
            ["1", "材料合計", "", 50],
            ["3.1", "製造總計", "", 60],
            ["3.2", "人工", "", 5],
        ]
    )
    result = analyze_month(ingest(grid), "202601")
    assert [i.code for i in result.top_items] == ["3.2"]
    assert result.unit_cost == 5


def test_non_positive_or_unparseable_cost_excluded():
    grid = _grid(
        [
            ["1", "A", "", 0],
            ["2", "B", "", -5],
            ["3.1", "C", "", "n/a"],
            ["3.2", "D", "", "1,250"],
        ]
    )
    result = analyze_month(ingest(grid), "202601")
    assert [(i.code, i.value) for i in result.top_items] == [("3.2", 1250.0)]


def test_cost_column_defaults_to_period_column():
    grid = _grid([["1", "A", 7, 99]], sub_header=["", "", "預算", ""])
    result = analyze_month(ingest(grid), "202601")
    assert result.unit_cost == 7
    assert result.inbound_quantity == 100


def test_cost_column_search_window_is_ten_columns():
    header = ["項次", "202601"] + [""] * 12
    sub_header = [""] * 11 + ["實際"] + [""] * 2  # column 11 is outside [1, 11)
    item = ["1", 3] + [""] * 12
    item[11] = 99
    grid = [header, sub_header, ["", 1], item]
    result = analyze_month(ingest(grid), "202601")
    assert result.unit_cost == 3


def test_name_falls_back_to_code():
    result = analyze_month(ingest(_grid([["1", "", "", 10]])), "202601")
    assert result.top_items[0].name == "1"


def test_inbound_quantity_row_two_parses_separators():
    result = analyze_month(ingest(_grid([["1", "A", "", 2]], inbound="1,500")), "202601")
    assert result.inbound_quantity == 1500
    assert result.period_total_cost == 3000


def test_inbound_quantity_keyword_fallback_to_cost_column():
    grid = _grid(
        [
            ["", "工單\n入庫量", "", 400],
            ["1", "A", "", 10],
        ],
        inbound="",
    )
    result = analyze_month(ingest(grid), "202601")
    assert result.inbound_quantity == 400
    assert result.period_total_cost == 4000
    assert [i.code for i in result.top_items] == ["1"]


def test_inbound_quantity_keyword_prefers_period_column():
    grid = _grid([["入庫數量", "", 250, 300], ["1", "A", 1, 10]], inbound=0)
    result = analyze_month(ingest(grid), "202601")
    assert result.inbound_quantity == 250
    assert result.unit_cost == 10


def test_keyword_row_does_not_override_fixed_row():
    grid = _grid([["", "入庫量", "", 999], ["1", "A", "", 10]], inbound=100)
    result = analyze_month(ingest(grid), "202601")
    assert result.inbound_quantity == 100
    # the keyword row is never an item
    assert [i.code for i in result.top_items] == ["1"]


def test_rows_after_index_66_are_ignored():
    filler = [["", "", "", ""] for _ in range(ITEM_SCAN_LAST_ROW - 2)]
    grid = _grid(filler)
    assert len(grid) == ITEM_SCAN_LAST_ROW + 1
    grid[ITEM_SCAN_LAST_ROW] = ["1", "last", "", 5]
    grid.append(["2", "beyond", "", 500])
    result = analyze_month(ingest(grid), "202601")
    assert [i.name for i in result.top_items] == ["last"]
    assert result.top_items[0].source_row == ITEM_SCAN_LAST_ROW + 1


def test_unit_cost_sums_all_items_beyond_top_20():
    items = [[f"3.{n}", f"item{n}", "", n] for n in range(1, 31)]
    result = analyze_month(ingest(_grid(items)), "202601")
    assert len(result.top_items) == TOP_ITEMS_LIMIT
    assert result.unit_cost == sum(range(1, 31))
    assert result.period_total_cost == 100 * sum(range(1, 31))
    assert [i.value for i in result.top_items] == list(range(30, 10, -1))


def test_ties_keep_row_order():
    items = [["3.1", "a", "", 5], ["3.2", "b", "", 9], ["3.3", "c", "", 5], ["3.4", "d", "", 5]]
    result = analyze_month(ingest(_grid(items)), "202601")
    assert [i.name for i in result.top_items] == ["b", "a", "c", "d"]


def test_no_items_gives_zero_cost():
    result = analyze_month(ingest(_grid([])), "202601")
    assert result.unit_cost == 0
    assert result.period_total_cost == 0
    assert result.top_items == ()


def test_overflowing_cost_cell_is_treated_as_absent():
    grid = _grid([["1", "A", "", "1e400"], ["3.1", "B", "", 10]])
    result = analyze_month(ingest(grid), "202601")
    assert [i.code for i in result.top_items] == ["3.1"]
    assert result.unit_cost == 10

    rows = build_export_rows(result, "202601", 32.5, 8.41)
    assert rows[7] == ["單位成本 (TWD)", 10.0, "10.00"]
