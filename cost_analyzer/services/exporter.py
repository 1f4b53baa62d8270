from __future__ import annotations

from collections.abc import Sequence

from ..models.analysis_result import AnalysisResult, PeriodSummary
from ..models.cell import Cell, cell_text, format_fixed

"""Report export: flatten analysis results into worksheet rows.

The rows are plain lists of cells; turning them into a workbook is the codec's
job (see cost_analyzer.excel.writer). Layout, top to bottom:

1. metadata block (period label, exchange rate, watts per piece)
2. summary block, one column per period plus a total / weighted-average column
3. one Top 20 detail block per period

Efficiency index = US cents per watt = cost / exchange_rate / watts_per_piece * 100.
"""

__all__ = [
    "COLUMN_WIDTHS",
    "NO_DATA_MARKER",
    "REPORT_SHEET_NAME",
    "UNAVAILABLE",
    "build_export_rows",
    "efficiency_index",
    "report_filename",
    "summarize_results",
]

REPORT_SHEET_NAME = "分析報告"
UNAVAILABLE = "-"
NO_DATA_MARKER = "無資料"
# Rank/label, code/period 1, name/period 2, TWD, US cents, extra summary columns
COLUMN_WIDTHS = (10, 20, 35, 15, 15, 15, 15)

DETAIL_HEADER = ["排名", "項目代號", "項目名稱", "金額 (TWD)", "美分 (US¢/W)"]


def efficiency_index(value: float, exchange_rate: float, watts_per_piece: float) -> str:
    """Cents per watt with 3 decimals, or the unavailable placeholder.

    >>> efficiency_index(32.5, 32.5, 8.41)
    '11.891'
    >>> efficiency_index(32.5, 0, 8.41)
    '-'
    """
    if value > 0 and exchange_rate > 0 and watts_per_piece > 0:
        usd_per_watt = (value / exchange_rate) / watts_per_piece
        return format_fixed(usd_per_watt * 100, 3)
    return UNAVAILABLE


def summarize_results(results: Sequence[AnalysisResult]) -> PeriodSummary:
    """Sum inbound quantity and total cost; unit cost is volume-weighted."""
    total_inbound = sum(r.inbound_quantity for r in results)
    total_cost = sum(r.period_total_cost for r in results)
    weighted = total_cost / total_inbound if total_inbound > 0 else 0.0
    return PeriodSummary(
        total_inbound=total_inbound,
        total_cost=total_cost,
        weighted_unit_cost=weighted,
    )


def report_filename(period_label: str) -> str:
    """Download name of the exported workbook."""
    return f"成本分析_{period_label}.xlsx"


def build_export_rows(
    results: AnalysisResult | Sequence[AnalysisResult],
    period_label: str,
    exchange_rate: float = 0.0,
    watts_per_piece: float = 0.0,
) -> list[list[Cell]]:
    """Build the export table for one or more period results.

    Parameters
    ----------
    results: a single result or results in display order (oldest first)
    period_label: "202601" or "202601-202603"
    exchange_rate: TWD per USD, 0 when unknown
    watts_per_piece: watts per produced piece, 0 when unknown
    """
    result_list = [results] if isinstance(results, AnalysisResult) else list(results)

    def cents(value: float) -> str:
        return efficiency_index(value, exchange_rate, watts_per_piece)

    rows: list[list[Cell]] = [
        ["分析報告", f"期間: {period_label}"],
        ["匯率", exchange_rate or UNAVAILABLE],
        ["每片瓦數", watts_per_piece or UNAVAILABLE],
        [],
    ]

    summary = summarize_results(result_list)
    rows.append(["【期間匯總 / 分月總表】"])
    rows.append(["項目", *(r.period for r in result_list), "合計/加權平均"])
    rows.append(["入庫量 (pcs)", *(r.inbound_quantity for r in result_list), summary.total_inbound])
    rows.append(
        ["單位成本 (TWD)", *(r.unit_cost for r in result_list), format_fixed(summary.weighted_unit_cost, 2)]
    )
    rows.append(
        ["美分 (US¢/W)", *(cents(r.unit_cost) for r in result_list), cents(summary.weighted_unit_cost)]
    )
    rows.append(["當月總成本 (TWD)", *(r.period_total_cost for r in result_list), summary.total_cost])
    rows.extend([[], []])

    for result in result_list:
        rows.append([f"【{result.period}】 Top 20 成本明細"])
        rows.append([f"當月入庫量: {cell_text(result.inbound_quantity)}"])
        rows.append(list(DETAIL_HEADER))
        if not result.top_items:
            rows.append([NO_DATA_MARKER])
        for rank, item in enumerate(result.top_items, start=1):
            rows.append([rank, item.code, item.name, item.value, cents(item.value)])
        rows.extend([[], []])

    return rows
