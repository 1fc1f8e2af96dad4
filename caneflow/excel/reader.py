from __future__ import annotations

import logging
import math
import tempfile
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from .legacy import convert_xls_to_xlsx, is_legacy_workbook

"""Excel reader: workbook file -> raw sheet rows.

Rows are read without header interpretation (the parser decides whether row 0
is a header) and without pandas' NA-string conversion, so a cell containing
"NA" stays text. Cells are cleaned to plain Python values:

- empty / NaN / NaT -> ""
- Timestamp -> datetime
- numpy scalar -> Python scalar
"""

__all__ = [
    "InputFileNotFoundError",
    "SheetNotFoundError",
    "WorkbookReadError",
    "clean_cell",
    "frame_to_rows",
    "read_sheet_rows",
]

logger = logging.getLogger(__name__)


class InputFileNotFoundError(Exception):
    """Raised when the input workbook does not exist."""


class SheetNotFoundError(Exception):
    """Raised when the requested worksheet is not in the workbook."""


class WorkbookReadError(Exception):
    """Raised when the workbook exists but cannot be opened or parsed."""


def clean_cell(value: Any) -> Any:
    if value is None or value is pd.NaT:
        return ""
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return ""
    return value


def frame_to_rows(df: pd.DataFrame) -> list[list[Any]]:
    return [[clean_cell(v) for v in row] for row in df.itertuples(index=False, name=None)]


def _read_xlsx_rows(path: Path, sheet_name: str | None) -> list[list[Any]]:
    try:
        xls = pd.ExcelFile(path, engine="openpyxl")
    except Exception as e:
        logger.error(f"failed to load workbook path={path} error={e}")
        raise WorkbookReadError(f"Impossible d'ouvrir le classeur {path.name}: {e}") from e

    with xls:
        names = [str(n) for n in xls.sheet_names]
        if not names:
            raise SheetNotFoundError(f"Workbook has no sheet: {path.name}")
        target = sheet_name if sheet_name else names[0]
        if target not in names:
            logger.error(f"sheet not found sheet={target} available={names}")
            raise SheetNotFoundError(f"Sheet not found: {target}")
        logger.debug(f"processing sheet name={target}")
        df = xls.parse(target, header=None, keep_default_na=False, na_values=[])
    return frame_to_rows(df)


def read_sheet_rows(
    path: Path,
    sheet_name: str | None = None,
    *,
    soffice_binary: str = "soffice",
    timeout_seconds: float = 120.0,
) -> list[list[Any]]:
    """Read one worksheet as a list of rows of cleaned cell values.

    Parameters
    ----------
    path: workbook path (.xlsx, or .xls converted through LibreOffice first)
    sheet_name: worksheet name (None -> first worksheet)
    soffice_binary / timeout_seconds: legacy converter settings

    Raises
    ------
    InputFileNotFoundError, SheetNotFoundError, WorkbookReadError,
    LegacyConversionError
    """
    path = Path(path)
    logger.debug(f"read_sheet_rows start path={path} sheet={sheet_name or ''}")
    if not path.exists():
        raise InputFileNotFoundError(f"Input file not found: {path}")

    if is_legacy_workbook(path):
        with tempfile.TemporaryDirectory(prefix="caneflow-") as tmp:
            logger.info(f"converting xls to xlsx: {path.name}")
            converted = convert_xls_to_xlsx(
                path,
                Path(tmp),
                soffice_binary=soffice_binary,
                timeout_seconds=timeout_seconds,
            )
            rows = _read_xlsx_rows(converted, sheet_name)
    else:
        rows = _read_xlsx_rows(path, sheet_name)

    logger.debug(f"read_sheet_rows done rows={len(rows)}")
    return rows
