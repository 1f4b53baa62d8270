from __future__ import annotations

import math
import re
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Union

"""Cell model and defensive coercion helpers.

A raw grid is what the workbook codec hands over: rows of cells where each cell
is a number, a piece of text, or empty (``None`` or ``""``). Nothing in the grid
is typed by column, so every consumer goes through the helpers below instead of
trusting the Python type of a cell.

- ``cell_text``: text form of a cell as a spreadsheet would display it
- ``parse_number``: leading-numeric parse, ``None`` when there is no number
- ``to_number``: same, but 0.0 instead of ``None``
- ``format_fixed``: fixed-point rendering with round-half-up
"""

__all__ = [
    "Cell",
    "RawGrid",
    "cell_at",
    "cell_text",
    "parse_number",
    "to_number",
    "format_fixed",
]

Cell = Union[int, float, str, None]
RawGrid = Sequence[Sequence[Cell]]

# 先頭の数値部分のみ採用 ("12abc" -> 12)
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


def cell_at(row: Sequence[Cell] | None, col: int) -> Cell:
    """Return the cell at ``col`` or ``None`` when the row is too short."""
    if row is None or col < 0 or col >= len(row):
        return None
    return row[col]


def cell_text(cell: Cell) -> str:
    """Render a cell as text, untrimmed.

    Integral floats drop the trailing ``.0`` so that a numeric ``202601.0``
    read back from a workbook still looks like the period code ``202601``.
    """
    if cell is None:
        return ""
    if isinstance(cell, bool):
        return "true" if cell else "false"
    if isinstance(cell, float):
        if math.isnan(cell):
            return ""
        if math.isinf(cell):
            return "Infinity" if cell > 0 else "-Infinity"
        if cell.is_integer():
            return str(int(cell))
        return repr(cell)
    return str(cell)


def parse_number(cell: Cell, *, thousands: bool = True) -> float | None:
    """Parse the leading number of a cell.

    Parameters
    ----------
    cell: raw grid cell
    thousands: strip ``,`` separators from text before parsing

    Returns ``None`` for empty, non-numeric, NaN or infinite cells
    (``"1e400"`` overflows to inf). Never raises.
    """
    if cell is None or isinstance(cell, bool):
        return None
    if isinstance(cell, (int, float)):
        try:
            value = float(cell)
        except OverflowError:
            return None
        return value if math.isfinite(value) else None
    text = str(cell)
    if thousands:
        text = text.replace(",", "")
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return None
    value = float(match.group(1))
    return value if math.isfinite(value) else None


def to_number(cell: Cell) -> float:
    """Parse a cell as a number, 0.0 when absent or unparseable."""
    value = parse_number(cell)
    return 0.0 if value is None else value


def format_fixed(value: float, digits: int) -> str:
    """Render ``value`` with exactly ``digits`` fractional digits (half up).

    The decimal precision follows the magnitude of the value, so large
    totals such as 1e30 render in full. Non-finite values render as
    ``inf`` / ``-inf`` / ``nan``.

    >>> format_fixed(0.125, 2)
    '0.13'
    """
    if not math.isfinite(value):
        return f"{value:.{digits}f}"
    exact = Decimal(value)
    quantum = Decimal(1).scaleb(-digits)
    with localcontext() as ctx:
        # 既定の28桁では 1e30 の quantize が InvalidOperation になる
        ctx.prec = max(exact.adjusted(), 0) + digits + 2
        return str(exact.quantize(quantum, rounding=ROUND_HALF_UP))
