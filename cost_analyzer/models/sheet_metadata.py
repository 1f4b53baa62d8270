from __future__ import annotations

from dataclasses import dataclass

from .cell import Cell

"""SheetMetadata model.

Result of header detection over a raw grid. The grid is frozen into nested
tuples so the metadata can be shared between single-period and range
analyses without anyone mutating the rows underneath.
"""

__all__ = [
    "SheetMetadata",
]


@dataclass(frozen=True)
class SheetMetadata:
    """Ingested worksheet: raw grid plus the detected header row and periods."""
    grid: tuple[tuple[Cell, ...], ...]
    header_row_index: int  # 0-based
    periods: tuple[str, ...]  # "20YYMM", newest first

    @property
    def header_row(self) -> tuple[Cell, ...]:
        return self.grid[self.header_row_index]

    @property
    def sub_header_row(self) -> tuple[Cell, ...] | None:
        """Row right below the header (budget / actual labels), if any."""
        index = self.header_row_index + 1
        if index >= len(self.grid):
            return None
        return self.grid[index]

    @property
    def period_span(self) -> str:
        """Human readable ``oldest ~ newest`` range of the detected periods."""
        if not self.periods:
            return ""
        return f"{self.periods[-1]} ~ {self.periods[0]}"
