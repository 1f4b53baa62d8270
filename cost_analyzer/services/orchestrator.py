from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..excel.codec import PandasWorkbookCodec, WorkbookCodec
from ..excel.reader import CSV_SUFFIXES, EXCEL_SUFFIXES, WorkbookReadError
from ..excel.writer import WorkbookWriteError
from ..models.analysis_result import AnalysisResult
from ..models.config_models import AnalyzerConfig, ExportParameters, PeriodSelection
from ..models.processing_result import FileStat, FileStatus, ProcessingResult
from ..models.sheet_metadata import SheetMetadata
from .exporter import COLUMN_WIDTHS, REPORT_SHEET_NAME, build_export_rows, report_filename
from .ingestor import HeaderNotFoundError, ingest
from .month_analyzer import analyze_month
from .range_analyzer import analyze_range
from .progress import ProgressTracker
from .summary import render_period_table

logger = logging.getLogger(__name__)

"""Batch orchestration: analyze every workbook of the source directory.

Per workbook: read bytes -> codec grid -> ingest -> analyze selection ->
export rows -> codec bytes -> output_directory. A workbook that cannot be
read, has no period header, or yields no result for the selection is counted
as failed with a single user-facing reason; the run continues with the next
one. Only a missing source directory aborts the run.
"""

HEADER_MISSING_MESSAGE = "period header row (e.g. 202601) not found"
NO_DATA_MESSAGE = "no data for this selection"
READ_FAILED_MESSAGE = "failed to read workbook (Excel or CSV expected)"
WRITE_FAILED_MESSAGE = "failed to write report"
ANALYSIS_FAILED_MESSAGE = "failed to analyze workbook"


class ProcessingError(Exception):
    """Fatal error that prevents the batch run."""


def scan_workbooks(directory: Path) -> list[Path]:
    """Scan directory for workbooks (non-recursive), sorted by name.

    Raises:
        ProcessingError: directory missing or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    suffixes = EXCEL_SUFFIXES | CSV_SUFFIXES
    try:
        return sorted(
            (p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in suffixes),
            key=lambda p: p.name,
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def analyze_selection(metadata: SheetMetadata, selection: PeriodSelection) -> list[AnalysisResult]:
    """Run the single-period or range analysis a selection asks for.

    Without an explicit start period the newest detected period is used.
    """
    if selection.is_range:
        return analyze_range(metadata, selection.start, selection.end)  # type: ignore[arg-type]
    period = selection.start if selection.start is not None else metadata.periods[0]
    result = analyze_month(metadata, period)
    return [result] if result is not None else []


def process_all(
    config: AnalyzerConfig,
    selection: PeriodSelection | None = None,
    params: ExportParameters | None = None,
    codec: WorkbookCodec | None = None,
) -> ProcessingResult:
    """Analyze every workbook in ``config.source_directory``.

    Args:
        config: loaded configuration
        selection: periods to analyze (default: newest period per workbook)
        params: efficiency index inputs (default: from config)
        codec: workbook codec (default: PandasWorkbookCodec)

    Raises:
        ProcessingError: source directory missing
    """
    start_time = datetime.now(UTC)
    selection = selection or PeriodSelection()
    params = params or config.export_parameters
    codec = codec or PandasWorkbookCodec(config.sheet_keyword)

    file_paths = scan_workbooks(Path(config.source_directory))
    output_dir = Path(config.output_directory)
    if file_paths:
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ProcessingError(f"cannot create output directory {output_dir}: {e}") from e

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    period_count = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            stat = _process_single_file(file_path, selection, params, codec, output_dir)
            file_stats.append(stat)
            if stat.status == FileStatus.SUCCESS:
                success_count += 1
                period_count += len(stat.periods)
            else:
                failed_count += 1
            progress.finish_file(success=(stat.status == FileStatus.SUCCESS))

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        analyzed_periods=period_count,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )


def _failed(file_path: Path, started: datetime, reason: str) -> FileStat:
    logger.warning(f"{file_path.name}: {reason}")
    return FileStat(
        file_name=file_path.name,
        status=FileStatus.FAILED,
        elapsed_seconds=(datetime.now(UTC) - started).total_seconds(),
        error=reason,
    )


def _process_single_file(
    file_path: Path,
    selection: PeriodSelection,
    params: ExportParameters,
    codec: WorkbookCodec,
    output_dir: Path,
) -> FileStat:
    """Analyze one workbook; any failure is confined to its FileStat."""
    started = datetime.now(UTC)
    try:
        return _analyze_file(file_path, selection, params, codec, output_dir, started)
    except Exception as e:
        # 想定外のエラーもこのファイルのみ失敗扱いとし、次のファイルへ進む
        logger.debug(f"{file_path.name}: unexpected error: {e!r}")
        return _failed(file_path, started, ANALYSIS_FAILED_MESSAGE)


def _analyze_file(
    file_path: Path,
    selection: PeriodSelection,
    params: ExportParameters,
    codec: WorkbookCodec,
    output_dir: Path,
    started: datetime,
) -> FileStat:
    try:
        grid = codec.read(file_path.read_bytes(), file_path.name)
    except (OSError, WorkbookReadError) as e:
        logger.debug(f"{file_path.name}: {e}")
        return _failed(file_path, started, READ_FAILED_MESSAGE)

    try:
        metadata = ingest(grid)
    except HeaderNotFoundError as e:
        logger.debug(f"{file_path.name}: {e}")
        return _failed(file_path, started, HEADER_MISSING_MESSAGE)

    results = analyze_selection(metadata, selection)
    if not results:
        return _failed(file_path, started, NO_DATA_MESSAGE)

    logger.info(f"{file_path.name}: periods {metadata.period_span}, header row {metadata.header_row_index + 1}")
    for line in render_period_table(results, params):
        logger.info(f"  {line}")

    label = selection.label(fallback=results[0].period)
    rows = build_export_rows(results, label, params.exchange_rate, params.watts_per_piece)
    report_path = output_dir / f"{file_path.stem}_{report_filename(label)}"
    try:
        data = codec.write(rows, sheet_name=REPORT_SHEET_NAME, column_widths=COLUMN_WIDTHS)
        report_path.write_bytes(data)
    except (OSError, WorkbookWriteError) as e:
        logger.debug(f"{file_path.name}: {e}")
        return _failed(file_path, started, WRITE_FAILED_MESSAGE)

    logger.info(f"{file_path.name}: report written to {report_path}")
    return FileStat(
        file_name=file_path.name,
        status=FileStatus.SUCCESS,
        periods=tuple(r.period for r in results),
        report_path=str(report_path),
        elapsed_seconds=(datetime.now(UTC) - started).total_seconds(),
    )
