from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

One bar over the workbooks of a batch run. In non-TTY environments (CI, pipes)
the bar is disabled so log lines are not interleaved with control sequences.

The bar shows:
- position and name of the workbook being analyzed
- success / failed counts as postfix
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and the bar should be displayed, False otherwise
    """
    return sys.stdout.isatty()


class ProgressTracker:
    """Workbook progress bar, usable as a context manager.

    Counts are kept even when the bar is disabled so callers can read them
    after the run.
    """

    def __init__(self, total_files: int, *, description: str = "Analyzing workbooks") -> None:
        """Initialize progress tracker.

        Args:
            total_files: Number of workbooks in the run
            description: Base description of the progress bar
        """
        self.total_files = total_files
        self.description = description
        self.current_file = 0
        self.succeeded = 0
        self.failed = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="workbook",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_file(self, file_path: Path) -> None:
        """Start analyzing a workbook.

        Args:
            file_path: Workbook being analyzed
        """
        self.current_file += 1
        if self.enabled and self.pbar is not None:
            self.pbar.set_description(
                f"{self.description} [{self.current_file}/{self.total_files}] ({file_path.name})"
            )

    def finish_file(self, success: bool = True) -> None:
        """Finish the current workbook and record its outcome.

        Args:
            success: Whether a report was written for the workbook
        """
        if success:
            self.succeeded += 1
        else:
            self.failed += 1
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)
            self.set_postfix(success=self.succeeded, failed=self.failed)

    def set_postfix(self, **kwargs: Any) -> None:
        """Set postfix information on the bar.

        Args:
            **kwargs: Key-value pairs to show as postfix
        """
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        """Close the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
