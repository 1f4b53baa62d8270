from __future__ import annotations

import logging

from ..models.analysis_result import AnalysisResult
from ..models.sheet_metadata import SheetMetadata
from .month_analyzer import analyze_month

"""Multi-period analysis: run the month analyzer over an inclusive range."""

__all__ = [
    "analyze_range",
]

logger = logging.getLogger(__name__)


def _parse_bound(value: str) -> int | None:
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def analyze_range(metadata: SheetMetadata, start_period: str, end_period: str) -> list[AnalysisResult]:
    """Analyze every detected period between two bounds, oldest first.

    Bounds may be given in either order. An unparseable bound yields an empty
    list; periods whose analysis produces nothing are left out silently.
    """
    start = _parse_bound(start_period)
    end = _parse_bound(end_period)
    if start is None or end is None:
        logger.debug(f"invalid range bounds: {start_period!r} / {end_period!r}")
        return []

    low, high = min(start, end), max(start, end)
    selected = sorted((p for p in metadata.periods if low <= int(p) <= high), key=int)

    results: list[AnalysisResult] = []
    for period in selected:
        # metadata.periods の文字列をそのまま渡す
        result = analyze_month(metadata, period)
        if result is not None:
            results.append(result)
    return results
