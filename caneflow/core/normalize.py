from __future__ import annotations

import math
import numbers
import re
import unicodedata
from datetime import date, datetime, time
from enum import Enum
from typing import Any

"""Cell classification and value normalization shared by parser and mapper.

Raw cells arrive as plain Python values (str, int/float, date/datetime, None).
:func:`classify_cell` folds them into a closed set of kinds so the
normalizers below can dispatch on every case explicitly.
"""

__all__ = [
    "CellKind",
    "classify_cell",
    "is_blank_cell",
    "normalize_text",
    "normalize_number",
    "normalize_label",
]

_WHITESPACE_RUN = re.compile(r"\s+")
# Integer literals with a radix prefix: 0x1F, 0b101, 0o17
_RADIX_LITERAL = re.compile(r"0[xX][0-9a-fA-F]+|0[bB][01]+|0[oO][0-7]+")


class CellKind(Enum):
    EMPTY = "empty"
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


def classify_cell(value: Any) -> CellKind:
    if value is None or value == "":
        return CellKind.EMPTY
    if isinstance(value, bool):
        # bool is an int subclass; a TRUE/FALSE cell is not a quantity
        return CellKind.TEXT
    if isinstance(value, numbers.Number):
        if isinstance(value, float) and math.isnan(value):
            return CellKind.EMPTY
        return CellKind.NUMBER
    if isinstance(value, (datetime, date, time)):
        return CellKind.DATE
    return CellKind.TEXT


def is_blank_cell(value: Any) -> bool:
    """Blank for row trimming purposes: ``None`` or the empty string only."""
    return classify_cell(value) is CellKind.EMPTY


def _format_number(value: Any) -> str:
    # 6.0 -> "6", the way a spreadsheet displays an integral cell
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_text(value: Any) -> str:
    kind = classify_cell(value)
    if kind is CellKind.EMPTY:
        return ""
    if kind is CellKind.NUMBER:
        return _format_number(value)
    if kind is CellKind.DATE:
        return str(value)
    return str(value).strip()


def _parse_decimal_text(text: str) -> int | float | None:
    candidate = text.replace(",", ".", 1).strip()
    if not candidate:
        # whitespace-only text reads as 0
        return 0
    if _RADIX_LITERAL.fullmatch(candidate):
        return int(candidate, 0)
    if "_" in candidate:
        return None
    try:
        number = float(candidate)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def normalize_number(value: Any) -> Any:
    """Normalize a quantity or price cell.

    Returns ``""`` for an absent value, numbers unchanged, and parsed numbers
    for text using ``,`` or ``.`` as decimal separator (whitespace-only text
    gives 0, radix literals like ``0x10`` their integer value). Text that
    does not parse is returned unchanged (never an error).
    """
    kind = classify_cell(value)
    if kind is CellKind.EMPTY:
        return ""
    if kind is CellKind.NUMBER:
        return value
    if kind is CellKind.DATE:
        return value
    parsed = _parse_decimal_text(str(value))
    return value if parsed is None else parsed


def normalize_label(value: Any) -> str:
    """Header label form used for matching: trimmed, lowercase, no accents,
    single spaces."""
    if value is None:
        return ""
    text = normalize_text(value).lower()
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE_RUN.sub(" ", stripped)
