from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Processing result models for batch analysis runs.

One FileStat per workbook, aggregated into ProcessingResult for the SUMMARY
line and the CLI exit code.
"""


class FileStatus(Enum):
    """Outcome of one workbook.

    - SUCCESS: at least one period analyzed and the report written
    - FAILED: header missing, no data for the selection, or read/write error
    """
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    """Per-workbook processing statistics."""
    file_name: str
    status: FileStatus
    periods: tuple[str, ...] = ()  # 分析できた期間 (昇順)
    report_path: str | None = None
    elapsed_seconds: float = 0.0
    error: str | None = None  # 失敗理由 (利用者向け1行)


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of one run."""
    success_files: int
    failed_files: int
    analyzed_periods: int  # 全ファイル合計の分析済み期間数
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
