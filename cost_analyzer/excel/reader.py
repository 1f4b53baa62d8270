from __future__ import annotations

import csv
import math
from collections.abc import Iterable
from io import BytesIO, StringIO
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.cell import Cell
from ..models.config_models import DEFAULT_SHEET_KEYWORD

"""Workbook reader: uploaded file bytes -> raw grid.

- .xlsx / .xls: pandas.read_excel, header=None (行をそのまま取得)
- .csv: pandas.read_csv with every cell kept as text
- sheet choice: first sheet whose name contains the keyword (單位成本), else
  the first sheet
- blanks become "" and numpy scalars become plain Python numbers
"""

__all__ = [
    "WorkbookReadError",
    "CSV_SUFFIXES",
    "EXCEL_SUFFIXES",
    "frame_to_grid",
    "read_workbook_grid",
    "select_sheet_name",
]

EXCEL_SUFFIXES = {".xlsx", ".xls", ".xlsm"}
CSV_SUFFIXES = {".csv"}
CSV_ENCODINGS = ("utf-8-sig", "cp950")  # Excel 由来の CSV は Big5 系が多い


class WorkbookReadError(Exception):
    """Raised when an uploaded file cannot be decoded into a grid."""


def select_sheet_name(sheet_names: Iterable[Any], keyword: str = DEFAULT_SHEET_KEYWORD) -> str:
    """Pick the cost sheet: first name containing ``keyword``, else the first sheet."""
    names = [str(n) for n in sheet_names]
    if not names:
        raise WorkbookReadError("workbook has no sheets")
    for name in names:
        if keyword and keyword in name:
            return name
    return names[0]


def _clean_cell(value: Any) -> Cell:
    if value is None:
        return ""
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        # numpy scalar -> Python scalar
        value = value.item()
    if isinstance(value, bool):
        return value  # type: ignore[return-value]
    if isinstance(value, (int, float)):
        return "" if isinstance(value, float) and math.isnan(value) else value
    if isinstance(value, str):
        return value
    if pd.isna(value):
        return ""
    return str(value)


def frame_to_grid(df: pd.DataFrame) -> list[list[Cell]]:
    """Convert a header-less DataFrame into rows of cells."""
    return [[_clean_cell(v) for v in row] for row in df.itertuples(index=False, name=None)]


def _decode_text(data: bytes) -> str:
    for encoding in CSV_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise WorkbookReadError(f"unsupported text encoding (tried {', '.join(CSV_ENCODINGS)})")


def _read_csv(data: bytes) -> pd.DataFrame:
    text = _decode_text(data)
    # 行ごとに列数が異なるため最大列数を先に確定
    width = max((len(r) for r in csv.reader(StringIO(text))), default=0)
    if width == 0:
        return pd.DataFrame()
    return pd.read_csv(
        StringIO(text),
        header=None,
        names=range(width),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=False,
    )


def read_workbook_grid(data: bytes, name: str = "", sheet_keyword: str = DEFAULT_SHEET_KEYWORD) -> list[list[Cell]]:
    """Decode workbook bytes into a raw grid.

    Parameters
    ----------
    data: file content
    name: original file name, only its suffix is used (.csv vs Excel)
    sheet_keyword: preferred sheet name fragment

    Raises
    ------
    WorkbookReadError: content cannot be parsed
    """
    suffix = Path(name).suffix.lower()
    try:
        if suffix in CSV_SUFFIXES:
            df = _read_csv(data)
        else:
            xls = pd.ExcelFile(BytesIO(data))
            sheet = select_sheet_name(xls.sheet_names, sheet_keyword)
            df = xls.parse(sheet, header=None)
    except WorkbookReadError:
        raise
    except Exception as e:
        raise WorkbookReadError(f"failed to read workbook '{name or '<bytes>'}': {e}") from e
    return frame_to_grid(df)
