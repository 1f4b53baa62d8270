from __future__ import annotations

import logging
import re

from ..models.cell import RawGrid, cell_text
from ..models.sheet_metadata import SheetMetadata

"""Sheet ingestion: locate the period header row of a raw grid.

The header row is the first row, within a fixed 30-row window, that contains
at least one period code ("20" + 4 digits, e.g. 202601). Rows further down are
free-form data and are never considered.
"""

__all__ = [
    "HeaderNotFoundError",
    "HEADER_SCAN_ROWS",
    "PERIOD_PATTERN",
    "ingest",
    "is_period_code",
]

logger = logging.getLogger(__name__)

HEADER_SCAN_ROWS = 30
PERIOD_PATTERN = re.compile(r"20\d{4}")


class HeaderNotFoundError(Exception):
    """Raised when no row in the scan window contains a period code."""


def is_period_code(text: str) -> bool:
    return PERIOD_PATTERN.fullmatch(text) is not None


def ingest(grid: RawGrid) -> SheetMetadata:
    """Scan ``grid`` for the header row and the periods it declares.

    Returns:
        SheetMetadata with periods deduplicated and sorted newest first

    Raises:
        HeaderNotFoundError: no period code within the first 30 rows
    """
    frozen = tuple(tuple(row) if row else () for row in grid)

    for index in range(min(HEADER_SCAN_ROWS, len(frozen))):
        matches = [
            text
            for text in (cell_text(cell).strip() for cell in frozen[index])
            if is_period_code(text)
        ]
        if not matches:
            continue
        periods = tuple(sorted(set(matches), key=int, reverse=True))
        logger.debug(f"header row found at index={index} periods={list(periods)}")
        return SheetMetadata(grid=frozen, header_row_index=index, periods=periods)

    raise HeaderNotFoundError(
        f"no period header (e.g. 202601) in the first {HEADER_SCAN_ROWS} rows"
    )
