from __future__ import annotations

from dataclasses import dataclass

"""Analysis result models.

CostItem / AnalysisResult are produced by the month analyzer, PeriodSummary by
the exporter when several results are aggregated. All of them are frozen value
objects; nothing downstream edits a result after it is built.
"""

__all__ = [
    "CostItem",
    "AnalysisResult",
    "PeriodSummary",
]


@dataclass(frozen=True)
class CostItem:
    """One qualifying cost line of a period."""
    code: str  # 項次 (column A, trimmed text)
    name: str  # 項目名稱 (column B, falls back to code)
    value: float  # actual cost, always > 0
    source_row: int  # 1-based worksheet row


@dataclass(frozen=True)
class AnalysisResult:
    """Per-period analysis output.

    ``unit_cost`` sums every qualifying item of the period while
    ``top_items`` keeps only the 20 largest of them for display.
    """
    period: str
    inbound_quantity: float
    unit_cost: float
    period_total_cost: float  # inbound_quantity * unit_cost
    top_items: tuple[CostItem, ...] = ()


@dataclass(frozen=True)
class PeriodSummary:
    """Aggregate over one or more AnalysisResult values."""
    total_inbound: float
    total_cost: float
    weighted_unit_cost: float  # total_cost / total_inbound, 0 when no inbound
