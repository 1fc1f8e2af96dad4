from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

"""Excel writer: rows -> new .xlsx workbook with a single worksheet.

Rows are written verbatim from cell A1: no pandas header row, no index column.
"""

__all__ = [
    "WorkbookWriteError",
    "write_sheet_rows",
]

logger = logging.getLogger(__name__)


class WorkbookWriteError(Exception):
    """Raised when the output workbook cannot be written."""


def write_sheet_rows(path: Path, sheet_name: str, rows: Sequence[Sequence[Any]]) -> Path:
    path = Path(path)
    logger.debug(f"write_sheet_rows start path={path} sheet={sheet_name} rows={len(rows)}")
    df = pd.DataFrame([list(r) for r in rows])
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    except OSError as e:
        raise WorkbookWriteError(f"Impossible d'écrire {path}: {e}") from e
    logger.debug(f"write_sheet_rows done path={path}")
    return path
