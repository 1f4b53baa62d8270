"""Domain models for the unit-cost analyzer.

This package contains the value objects shared by the analysis core, the
workbook codec and the batch orchestrator.
"""

from .analysis_result import AnalysisResult, CostItem, PeriodSummary
from .cell import Cell, RawGrid
from .config_models import AnalyzerConfig, ExportParameters, PeriodSelection
from .processing_result import FileStat, FileStatus, ProcessingResult
from .sheet_metadata import SheetMetadata

__all__ = [
    # Grid
    "Cell",
    "RawGrid",
    "SheetMetadata",
    # Analysis
    "AnalysisResult",
    "CostItem",
    "PeriodSummary",
    # Configuration
    "AnalyzerConfig",
    "ExportParameters",
    "PeriodSelection",
    # Batch processing
    "FileStat",
    "FileStatus",
    "ProcessingResult",
]
