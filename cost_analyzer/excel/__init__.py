from .codec import PandasWorkbookCodec, WorkbookCodec
from .reader import WorkbookReadError, read_workbook_grid
from .writer import WorkbookWriteError, write_report_bytes

__all__ = [
    "PandasWorkbookCodec",
    "WorkbookCodec",
    "WorkbookReadError",
    "WorkbookWriteError",
    "read_workbook_grid",
    "write_report_bytes",
]
