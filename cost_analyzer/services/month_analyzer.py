from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence

from ..models.analysis_result import AnalysisResult, CostItem
from ..models.cell import Cell, cell_at, cell_text, parse_number, to_number
from ..models.sheet_metadata import SheetMetadata

"""Single-period analysis over an ingested cost sheet.

Expected layout (columns are 0-based):

- header row: period codes, one column per period
- sub-header row (header + 1): budget / 實際 (actual) labels under each period
- row index 2: inbound quantity per period column
- column 0: item code (項次), column 1: item name
- item rows: header + 2 up to row index 66

Item codes encode the hierarchy: 0-2 are top-level lines kept as integers,
3 and above are only kept through their decimal sub-items (3.1, 3.2, ...).
"""

__all__ = [
    "COST_COLUMN_WINDOW",
    "INBOUND_QUANTITY_ROW",
    "ITEM_SCAN_LAST_ROW",
    "TOP_ITEMS_LIMIT",
    "analyze_month",
    "is_cost_item_code",
]

logger = logging.getLogger(__name__)

INBOUND_QUANTITY_ROW = 2
COST_COLUMN_WINDOW = 10
ITEM_SCAN_LAST_ROW = 66  # inclusive
TOP_ITEMS_LIMIT = 20

ACTUAL_MARKER = "實際"
QUANTITY_KEYWORDS = ("入庫量", "工單入庫量", "入庫數量")
TOTAL_MARKERS = ("總計", "合計")

_INTEGER_FORM = re.compile(r"\d+\.?")
_WHITESPACE = re.compile(r"\s+")


def _find_period_column(header_row: Sequence[Cell], target: str) -> int | None:
    for col, cell in enumerate(header_row):
        if cell_text(cell).strip() == target:
            return col
    return None


def _find_cost_column(sub_header_row: Sequence[Cell] | None, period_col: int) -> int:
    """First column under the period labelled 實際, else the period column."""
    if sub_header_row is not None:
        stop = min(period_col + COST_COLUMN_WINDOW, len(sub_header_row))
        for col in range(period_col, stop):
            if ACTUAL_MARKER in cell_text(sub_header_row[col]):
                return col
    return period_col


def is_cost_item_code(code: str) -> bool:
    """Classify an item code by its numeric value and written form.

    >>> [is_cost_item_code(c) for c in ("1", "2.5", "3", "3.1", "4.")]
    [True, False, False, True, False]
    """
    number = parse_number(code, thousands=False)
    if number is None or math.isinf(number):
        return False
    major = math.floor(number)
    if major <= 2:
        return _INTEGER_FORM.fullmatch(code) is not None
    return "." in code and not code.endswith(".")


def analyze_month(metadata: SheetMetadata, target_period: str) -> AnalysisResult | None:
    """Extract and aggregate the cost items of one period.

    Args:
        metadata: ingested sheet
        target_period: period code, compared as text against the header row

    Returns:
        AnalysisResult, or None when the period has no column in the header row
    """
    grid = metadata.grid
    target = str(target_period).strip()
    period_col = _find_period_column(metadata.header_row, target)
    if period_col is None:
        logger.debug(f"period {target} not found in header row")
        return None
    cost_col = _find_cost_column(metadata.sub_header_row, period_col)

    inbound_quantity = 0.0
    # 固定レイアウト前提: 3行目 (index 2) が入庫量
    if len(grid) > INBOUND_QUANTITY_ROW:
        quantity = to_number(cell_at(grid[INBOUND_QUANTITY_ROW], period_col))
        if quantity > 0:
            inbound_quantity = quantity
            logger.debug(f"inbound quantity {quantity} taken from fixed row {INBOUND_QUANTITY_ROW}")

    items: list[CostItem] = []
    last_row = min(ITEM_SCAN_LAST_ROW, len(grid) - 1)
    for index in range(metadata.header_row_index + 2, last_row + 1):
        row = grid[index]
        code = cell_text(cell_at(row, 0)).strip()
        name = cell_text(cell_at(row, 1)).strip()
        cost_value = to_number(cell_at(row, cost_col))

        label = _WHITESPACE.sub("", code + name)
        if any(keyword in label for keyword in QUANTITY_KEYWORDS):
            if inbound_quantity <= 0:
                period_value = to_number(cell_at(row, period_col))
                if period_value > 0:
                    inbound_quantity = period_value
                elif cost_value > 0:
                    inbound_quantity = cost_value
            continue

        if not code or not is_cost_item_code(code):
            continue
        if any(marker in name for marker in TOTAL_MARKERS):
            continue
        if cost_value > 0:
            items.append(CostItem(code=code, name=name or code, value=cost_value, source_row=index + 1))

    unit_cost = sum(item.value for item in items)
    ranked = sorted(items, key=lambda item: item.value, reverse=True)
    logger.debug(f"period {target}: {len(items)} items, cost column={cost_col}")

    return AnalysisResult(
        period=str(target_period),
        inbound_quantity=inbound_quantity,
        unit_cost=unit_cost,
        period_total_cost=inbound_quantity * unit_cost,
        top_items=tuple(ranked[:TOP_ITEMS_LIMIT]),
    )
