from .legacy import LegacyConversionError
from .reader import InputFileNotFoundError, SheetNotFoundError, WorkbookReadError, read_sheet_rows
from .writer import WorkbookWriteError, write_sheet_rows

__all__ = [
    "LegacyConversionError",
    "InputFileNotFoundError",
    "SheetNotFoundError",
    "WorkbookReadError",
    "WorkbookWriteError",
    "read_sheet_rows",
    "write_sheet_rows",
]
