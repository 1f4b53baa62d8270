from __future__ import annotations

from collections.abc import Sequence
from io import BytesIO

import pandas as pd
from openpyxl.utils import get_column_letter

from ..models.cell import Cell

"""Workbook writer: export rows -> single-sheet .xlsx bytes."""

__all__ = [
    "WorkbookWriteError",
    "write_report_bytes",
]


class WorkbookWriteError(Exception):
    """Raised when export rows cannot be serialized into a workbook."""


def write_report_bytes(
    rows: Sequence[Sequence[Cell]],
    sheet_name: str,
    column_widths: Sequence[int] = (),
) -> bytes:
    """Serialize ``rows`` into one worksheet, applying column width hints.

    Empty rows stay empty (spacer lines in the report); short rows are padded
    with blank cells.
    """
    frame = pd.DataFrame([list(r) for r in rows])
    buffer = BytesIO()
    try:
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            frame.to_excel(writer, sheet_name=sheet_name, header=False, index=False)
            ws = writer.sheets[sheet_name]
            for col, width in enumerate(column_widths, start=1):
                ws.column_dimensions[get_column_letter(col)].width = width
    except Exception as e:
        raise WorkbookWriteError(f"failed to write sheet '{sheet_name}': {e}") from e
    return buffer.getvalue()
