from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the unit-cost analyzer.

AnalyzerConfig mirrors config/analyzer.yml after validation; ExportParameters
and PeriodSelection carry the per-run choices (CLI flags override config).
"""

DEFAULT_SHEET_KEYWORD = "單位成本"


@dataclass(frozen=True)
class ExportParameters:
    """Conversion inputs for the cents-per-watt efficiency index.

    A value of 0 means "not provided"; the exporter renders the index as
    unavailable instead of computing with it.
    """
    exchange_rate: float = 0.0  # TWD per USD
    watts_per_piece: float = 0.0


@dataclass(frozen=True)
class AnalyzerConfig:
    """Root configuration object loaded from YAML."""
    source_directory: str  # Directory scanned for workbooks (non-recursive)
    output_directory: str  # Export reports are written here
    exchange_rate: float = 0.0
    watts_per_piece: float = 0.0
    sheet_keyword: str = DEFAULT_SHEET_KEYWORD  # 対象シート名に含まれる語

    @property
    def export_parameters(self) -> ExportParameters:
        return ExportParameters(
            exchange_rate=self.exchange_rate,
            watts_per_piece=self.watts_per_piece,
        )


@dataclass(frozen=True)
class PeriodSelection:
    """Which periods to analyze in each workbook.

    - start=None: newest period detected in the workbook
    - start only: that single period
    - start + end: inclusive range (bounds in either order)
    """
    start: str | None = None
    end: str | None = None

    @property
    def is_range(self) -> bool:
        return self.start is not None and self.end is not None

    def label(self, fallback: str = "") -> str:
        """Period label used in report titles and file names."""
        if self.is_range:
            return f"{self.start}-{self.end}"
        return self.start if self.start is not None else fallback
