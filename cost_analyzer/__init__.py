"""Monthly unit-cost analyzer for 單位成本 worksheets.

Core entry points: ingest -> analyze_month / analyze_range -> build_export_rows.
"""

from .services.exporter import build_export_rows, efficiency_index
from .services.ingestor import HeaderNotFoundError, ingest
from .services.month_analyzer import analyze_month
from .services.range_analyzer import analyze_range

__version__ = "0.1.0"

__all__ = [
    "HeaderNotFoundError",
    "analyze_month",
    "analyze_range",
    "build_export_rows",
    "efficiency_index",
    "ingest",
]
