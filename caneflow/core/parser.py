from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..models.cable_record import FIELD_NAMES, CableRecord, ColumnIndex
from .normalize import is_blank_cell, normalize_label, normalize_number, normalize_text

"""Row parser: raw Caneco sheet rows -> CableRecord list.

Steps:
1. Trim all-blank rows at both ends of the sheet
2. Detect an optional header row (row 0 containing "amont" and "repere")
3. Remap column positions from the header through HEADER_SYNONYMS
4. Normalize each data row and drop empty or zero-length records

Malformed input is filtered, never raised.
"""

__all__ = [
    "HEADER_SYNONYMS",
    "HEADER_TRIGGER_LABELS",
    "parse_rows",
    "trim_blank_rows",
    "has_header_row",
    "build_column_index",
    "record_from_row",
]

logger = logging.getLogger(__name__)

# Normalized header label -> CableRecord field. New synonyms go here.
HEADER_SYNONYMS: dict[str, str] = {
    "amont": "amont",
    "repere": "repere",
    "longueur": "longueur",
    "cable": "cable",
    "neutre": "neutre",
    "pe ou pen": "pe",
    "type de cable": "type_cable",
}

HEADER_TRIGGER_LABELS = frozenset({"amont", "repere"})

_NUMERIC_FIELDS = frozenset({"longueur"})


def _is_blank_row(row: Any) -> bool:
    # non-sequence rows are malformed; trimmed like blank ones, skipped later
    if not row or not isinstance(row, (list, tuple)):
        return True
    return all(is_blank_cell(value) for value in row)


def trim_blank_rows(rows: Sequence[Any]) -> list[Any]:
    """Drop leading and trailing rows whose cells are all blank.

    Blank rows in the middle are kept; the record filter handles them.
    """
    start = 0
    end = len(rows)
    while start < end and _is_blank_row(rows[start]):
        start += 1
    while end > start and _is_blank_row(rows[end - 1]):
        end -= 1
    return list(rows[start:end])


def has_header_row(row: Any) -> bool:
    if not row:
        return False
    labels = {normalize_label(value) for value in row}
    return HEADER_TRIGGER_LABELS <= labels


def build_column_index(header_row: Sequence[Any] | None) -> ColumnIndex:
    """Column positions from a header row; unmatched fields keep defaults."""
    if not header_row:
        return ColumnIndex()
    overrides: dict[str, int] = {}
    for position, value in enumerate(header_row):
        field_name = HEADER_SYNONYMS.get(normalize_label(value))
        if field_name is not None:
            overrides[field_name] = position
    return ColumnIndex().with_overrides(overrides)


def _cell(row: Sequence[Any], position: int) -> Any:
    if 0 <= position < len(row):
        return row[position]
    return None


def record_from_row(row: Sequence[Any], columns: ColumnIndex) -> CableRecord:
    values: dict[str, Any] = {}
    for field_name in FIELD_NAMES:
        raw = _cell(row, columns.position(field_name))
        if field_name in _NUMERIC_FIELDS:
            values[field_name] = normalize_number(raw)
        else:
            values[field_name] = normalize_text(raw)
    return CableRecord(**values)


def parse_rows(raw_sheet: Any) -> list[CableRecord]:
    """Parse a raw sheet (list of rows of cell values) into cable records.

    Returns an empty list for anything that is not a non-empty list/tuple.
    """
    if not isinstance(raw_sheet, (list, tuple)) or not raw_sheet:
        return []

    rows = trim_blank_rows(raw_sheet)
    if not rows:
        return []

    if has_header_row(rows[0]):
        columns = build_column_index(rows[0])
        data_rows = rows[1:]
        logger.debug(f"header row detected: {columns}")
    else:
        columns = ColumnIndex()
        data_rows = rows

    records: list[CableRecord] = []
    skipped = 0
    for row in data_rows:
        if not row or not isinstance(row, (list, tuple)):
            skipped += 1
            continue
        record = record_from_row(row, columns)
        if record.is_empty() or record.has_zero_length():
            skipped += 1
            continue
        records.append(record)

    logger.debug(f"parsed records={len(records)} skipped_rows={skipped}")
    return records
