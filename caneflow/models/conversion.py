from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .export_options import DEFAULT_UNIT, PriceMode

"""Conversion request/result models used by the conversion service and CLI."""

__all__ = [
    "OUTPUT_SHEET_NAME",
    "ConversionRequest",
    "ConversionResult",
]

OUTPUT_SHEET_NAME = "Multidoc"


@dataclass(frozen=True)
class ConversionRequest:
    """Everything needed to turn one Caneco file into a Multidoc file.

    Only the overrides matching ``price_mode`` are forwarded to the mapper:
    ``unit_prices`` for per-line pricing, ``unit_prices_by_type`` for
    per-group pricing.
    """
    input_path: Path
    output_path: Path | None = None  # None -> "<stem> - MULTIDOC.xlsx" next to the input
    sheet_name: str | None = None  # None -> first worksheet
    output_sheet_name: str = OUTPUT_SHEET_NAME
    price_mode: PriceMode = PriceMode.PER_GROUP
    default_unit_price: Any = ""
    default_tva: Any = ""
    default_unit: str = DEFAULT_UNIT
    include_headers: bool = True
    unit_prices: list[Any] = field(default_factory=list)
    unit_prices_by_type: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ConversionResult:
    output_path: Path
    row_count: int  # data rows written, header excluded
    elapsed_seconds: float = 0.0
