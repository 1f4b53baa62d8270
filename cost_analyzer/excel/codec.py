from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from ..models.cell import Cell, RawGrid
from ..models.config_models import DEFAULT_SHEET_KEYWORD
from .reader import read_workbook_grid
from .writer import write_report_bytes

"""Workbook codec capability.

The analysis core only sees grids and export rows. Whatever decodes uploads
and encodes reports is passed in explicitly as a WorkbookCodec, so tests and
other front ends can swap it without touching the core.
"""

__all__ = [
    "WorkbookCodec",
    "PandasWorkbookCodec",
]


class WorkbookCodec(Protocol):
    def read(self, data: bytes, name: str = "") -> RawGrid:
        ...

    def write(
        self,
        rows: Sequence[Sequence[Cell]],
        *,
        sheet_name: str,
        column_widths: Sequence[int] = (),
    ) -> bytes:
        ...


class PandasWorkbookCodec:
    """Default codec backed by pandas (read) and openpyxl (write)."""

    def __init__(self, sheet_keyword: str = DEFAULT_SHEET_KEYWORD) -> None:
        self.sheet_keyword = sheet_keyword

    def read(self, data: bytes, name: str = "") -> RawGrid:
        return read_workbook_grid(data, name, sheet_keyword=self.sheet_keyword)

    def write(
        self,
        rows: Sequence[Sequence[Cell]],
        *,
        sheet_name: str,
        column_widths: Sequence[int] = (),
    ) -> bytes:
        return write_report_bytes(rows, sheet_name, column_widths)
