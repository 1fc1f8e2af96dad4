from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from ..models.cable_record import CableRecord
from ..models.export_options import ExportOptions, ProgressCallback
from ..models.preview_item import PreviewItem
from .normalize import normalize_number, normalize_text
from .progress import PercentTracker

"""Row mapper: CableRecord list -> preview items / Multidoc export rows.

Output column order and header labels are the Multidoc import contract:

    N° | Titre | Unité | Quantité | Prix unitaire | (empty) | TVA | Descriptif
"""

__all__ = [
    "EXPORT_HEADER",
    "GROUP_KEY_SEPARATOR",
    "derive_title",
    "derive_group_key",
    "build_preview",
    "resolve_unit_price",
    "resolve_tva",
    "build_export",
]

logger = logging.getLogger(__name__)

EXPORT_HEADER: tuple[str, ...] = (
    "N°",
    "Titre",
    "Unité",
    "Quantité",
    "Prix unitaire",
    "",
    "TVA",
    "Descriptif",
)

GROUP_KEY_SEPARATOR = " | "

TITLE_TEMPLATE = 'Fourniture, pose et raccordement "{repere}" - en câble : {cable}'

# Tier has no value. A stored None also maps here; "" and 0 are real values.
_MISSING = object()

PriceLookup = Callable[[int, CableRecord, str], Any]


def derive_title(record: CableRecord) -> str:
    title = TITLE_TEMPLATE.format(repere=record.repere, cable=record.cable)
    extra_parts: list[str] = []
    if record.neutre:
        extra_parts.append(record.neutre)
    if record.pe:
        extra_parts.append(f"PE {record.pe}")
    if extra_parts:
        title += " + " + " + ".join(extra_parts)
    if record.type_cable:
        title += f" - {record.type_cable}"
    return title


def derive_group_key(record: CableRecord) -> str:
    cable = normalize_text(record.cable)
    type_cable = normalize_text(record.type_cable)
    if cable and type_cable:
        return f"{cable}{GROUP_KEY_SEPARATOR}{type_cable}"
    return cable or type_cable or ""


def build_preview(
    records: Sequence[CableRecord], on_progress: ProgressCallback | None = None
) -> list[PreviewItem]:
    tracker = PercentTracker(len(records), on_progress)
    preview: list[PreviewItem] = []
    for index, record in enumerate(records):
        preview.append(
            PreviewItem(
                line_number=index + 1,
                title=derive_title(record),
                quantity=record.longueur,
                repere=record.repere,
                type_cable=derive_group_key(record),
            )
        )
        tracker.advance(index + 1)
    return preview


def _by_group(prices: Mapping[str, Any] | None) -> PriceLookup:
    def lookup(_index: int, _record: CableRecord, group_key: str) -> Any:
        if prices is None or group_key not in prices:
            return _MISSING
        value = prices[group_key]
        return _MISSING if value is None else value
    return lookup


def _by_position(prices: Sequence[Any] | None) -> PriceLookup:
    def lookup(index: int, _record: CableRecord, _group_key: str) -> Any:
        if prices is None or index >= len(prices):
            return _MISSING
        value = prices[index]
        return _MISSING if value is None else value
    return lookup


def _from_record(_index: int, record: CableRecord, _group_key: str) -> Any:
    return _MISSING if record.unit_price is None else record.unit_price


def _price_tiers(options: ExportOptions) -> list[PriceLookup]:
    """Price lookups in priority order; the first non-missing value wins."""
    return [
        _by_group(options.unit_prices_by_type),
        _by_position(options.unit_prices),
        _from_record,
    ]


def resolve_unit_price(
    index: int, record: CableRecord, options: ExportOptions, tiers: list[PriceLookup] | None = None
) -> Any:
    group_key = derive_group_key(record)
    for lookup in tiers if tiers is not None else _price_tiers(options):
        value = lookup(index, record, group_key)
        if value is not _MISSING:
            return normalize_number(value)
    return normalize_number(options.default_unit_price)


def resolve_tva(record: CableRecord, options: ExportOptions) -> Any:
    value = record.tva if record.tva is not None else options.default_tva
    return normalize_number(value)


def build_export(
    records: Sequence[CableRecord], options: ExportOptions | None = None
) -> list[list[Any]]:
    """Build Multidoc rows: optional header, then one 8-cell row per record."""
    options = options or ExportOptions()
    output_rows: list[list[Any]] = []
    if options.include_headers:
        output_rows.append(list(EXPORT_HEADER))
    if not records:
        return output_rows

    tiers = _price_tiers(options)
    tracker = PercentTracker(len(records), options.on_progress)
    line_number = 1
    for index, record in enumerate(records):
        output_rows.append(
            [
                line_number,
                derive_title(record),
                options.default_unit,
                record.longueur,
                resolve_unit_price(index, record, options, tiers),
                "",
                resolve_tva(record, options),
                "",
            ]
        )
        line_number += 1
        tracker.advance(index + 1)

    logger.debug(f"export rows={line_number - 1} headers={options.include_headers}")
    return output_rows
