from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import LegacyConfig
from ..core.mapper import build_export, build_preview
from ..core.parser import parse_rows
from ..excel.reader import read_sheet_rows
from ..excel.writer import write_sheet_rows
from ..models.conversion import ConversionRequest, ConversionResult
from ..models.export_options import ExportOptions, PriceMode, ProgressCallback
from ..models.preview_item import PreviewItem

"""Conversion service: file in, preview or Multidoc file out.

Wires the spreadsheet reader/writer around the pure transform. Reader and
writer errors propagate unchanged; only a missing input path is reported as
ConversionError here.
"""

__all__ = [
    "OUTPUT_SUFFIX",
    "ConversionError",
    "build_default_output_path",
    "normalize_output_path",
    "export_options_for",
    "preview_file",
    "convert_file",
]

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = " - MULTIDOC.xlsx"


class ConversionError(Exception):
    """Raised for invalid conversion requests."""


def build_default_output_path(input_path: Path) -> Path:
    """``/dir/carnet.xls`` -> ``/dir/carnet - MULTIDOC.xlsx``."""
    input_path = Path(input_path)
    return input_path.with_name(f"{input_path.stem}{OUTPUT_SUFFIX}")


def normalize_output_path(path: Path) -> Path:
    """Force the .xlsx extension (replacing any other one)."""
    path = Path(path)
    if path.suffix.lower() == ".xlsx":
        return path
    return path.with_name(f"{path.stem}.xlsx")


def _require_input(input_path: Path | str | None) -> Path:
    if input_path is None or not str(input_path).strip():
        raise ConversionError("inputPath is required")
    return Path(input_path)


def export_options_for(
    request: ConversionRequest, on_progress: ProgressCallback | None = None
) -> ExportOptions:
    """Mapper options for a request; only the active price mode's overrides."""
    per_line = request.price_mode is PriceMode.PER_LINE
    return ExportOptions(
        default_unit_price=request.default_unit_price,
        default_tva=request.default_tva,
        default_unit=request.default_unit,
        include_headers=request.include_headers,
        unit_prices=list(request.unit_prices) if per_line else None,
        unit_prices_by_type=None if per_line else dict(request.unit_prices_by_type),
        on_progress=on_progress,
    )


def preview_file(
    input_path: Path | str | None,
    sheet_name: str | None = None,
    *,
    on_progress: ProgressCallback | None = None,
    legacy: LegacyConfig | None = None,
) -> list[PreviewItem]:
    path = _require_input(input_path)
    legacy = legacy or LegacyConfig()
    logger.info(f"preview start input={path} sheet={sheet_name or ''}")
    sheet_rows = read_sheet_rows(
        path,
        sheet_name,
        soffice_binary=legacy.soffice_binary,
        timeout_seconds=legacy.timeout_seconds,
    )
    preview = build_preview(parse_rows(sheet_rows), on_progress=on_progress)
    logger.info(f"preview done count={len(preview)}")
    return preview


def convert_file(
    request: ConversionRequest,
    *,
    on_progress: ProgressCallback | None = None,
    legacy: LegacyConfig | None = None,
) -> ConversionResult:
    """Read the Caneco sheet, map it and write the Multidoc workbook.

    Returns:
        ConversionResult with the written path and the data row count
        (header excluded)
    """
    input_path = _require_input(request.input_path)
    legacy = legacy or LegacyConfig()
    start_time = datetime.now(UTC)

    logger.info(
        f"convert start input={input_path} output={request.output_path or ''} "
        f"mode={request.price_mode.value} "
        f"unit_prices_by_type={len(request.unit_prices_by_type)} "
        f"unit_prices={len(request.unit_prices)} "
        f"unit_price_default={request.default_unit_price} tva={request.default_tva} "
        f"include_headers={request.include_headers}"
    )

    sheet_rows = read_sheet_rows(
        input_path,
        request.sheet_name,
        soffice_binary=legacy.soffice_binary,
        timeout_seconds=legacy.timeout_seconds,
    )
    output_rows = build_export(parse_rows(sheet_rows), export_options_for(request, on_progress))

    requested = request.output_path
    if requested is None or not str(requested).strip():
        requested = build_default_output_path(input_path)
    output_path = normalize_output_path(requested)
    write_sheet_rows(output_path, request.output_sheet_name, output_rows)

    row_count = len(output_rows) - 1 if request.include_headers else len(output_rows)
    row_count = max(row_count, 0)
    elapsed = (datetime.now(UTC) - start_time).total_seconds()
    logger.info(f"convert done output={output_path} rows={row_count}")
    return ConversionResult(output_path=output_path, row_count=row_count, elapsed_seconds=elapsed)
