from __future__ import annotations

from collections.abc import Sequence

from ..models.analysis_result import AnalysisResult
from ..models.cell import cell_text, format_fixed
from ..models.config_models import ExportParameters
from ..models.processing_result import ProcessingResult
from .exporter import efficiency_index, summarize_results

"""Text rendering for the CLI: SUMMARY line and per-workbook period table."""

__all__ = [
    "render_period_table",
    "render_summary_line",
]


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line of a batch run.

    Format:
    SUMMARY files={total}/{total} success={success} failed={failed}
    periods={periods} elapsed_sec={elapsed}

    >>> from datetime import datetime, timezone
    >>> t = datetime(2026, 1, 1, tzinfo=timezone.utc)
    >>> render_summary_line(ProcessingResult(1, 0, 3, t, t, 2.0))
    'SUMMARY files=1/1 success=1 failed=0 periods=3 elapsed_sec=2'
    """
    total = result.total_files
    return (
        f"SUMMARY files={total}/{total} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"periods={result.analyzed_periods} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )


def render_period_table(results: Sequence[AnalysisResult], params: ExportParameters) -> list[str]:
    """One line per period, plus the weighted aggregate line for ranges."""

    def cents(value: float) -> str:
        return efficiency_index(value, params.exchange_rate, params.watts_per_piece)

    lines = [
        f"{r.period} inbound={cell_text(r.inbound_quantity)} "
        f"unit_cost={format_fixed(r.unit_cost, 2)} cents_per_watt={cents(r.unit_cost)} "
        f"total_cost={format_fixed(r.period_total_cost, 0)} items={len(r.top_items)}"
        for r in results
    ]
    if len(results) > 1:
        summary = summarize_results(results)
        lines.append(
            f"weighted {results[0].period}-{results[-1].period} "
            f"inbound={cell_text(summary.total_inbound)} "
            f"unit_cost={format_fixed(summary.weighted_unit_cost, 2)} "
            f"cents_per_watt={cents(summary.weighted_unit_cost)} "
            f"total_cost={format_fixed(summary.total_cost, 0)}"
        )
    return lines
