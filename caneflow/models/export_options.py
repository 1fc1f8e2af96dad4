from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

"""Export options, price mode and progress event models."""

__all__ = [
    "DEFAULT_UNIT",
    "ExportOptions",
    "PriceMode",
    "ProgressEvent",
    "ProgressCallback",
]

DEFAULT_UNIT = "ml"


class PriceMode(Enum):
    """Which kind of price override the user filled in.

    - PER_LINE: one price per preview row (by position)
    - PER_GROUP: one price per cable-and-type group key
    """
    PER_LINE = "per_line"
    PER_GROUP = "per_group"


@dataclass(frozen=True)
class ProgressEvent:
    current: int  # records processed so far
    total: int
    percent: int  # 0-100, rounded half up


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass(frozen=True)
class ExportOptions:
    """Options for :func:`caneflow.core.mapper.build_export`.

    Price values are kept as the user typed them (text or number); the mapper
    runs them through numeric normalization.
    """
    default_unit_price: Any = ""
    default_tva: Any = ""
    default_unit: str = DEFAULT_UNIT
    include_headers: bool = True
    unit_prices: Sequence[Any] | None = None  # per-record override, by position
    unit_prices_by_type: Mapping[str, Any] | None = None  # group key -> price
    on_progress: ProgressCallback | None = None
