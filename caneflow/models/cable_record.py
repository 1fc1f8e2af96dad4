from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any

"""CableRecord and ColumnIndex models.

A CableRecord is one Caneco row after normalization: six text fields plus the
length, which is either a number, the empty marker ``""`` or (when the source
text could not be parsed) the original cell value.
"""

__all__ = [
    "FIELD_NAMES",
    "CableRecord",
    "ColumnIndex",
]

# Source column order of a Caneco export without header row.
FIELD_NAMES: tuple[str, ...] = (
    "amont",
    "repere",
    "longueur",
    "cable",
    "neutre",
    "pe",
    "type_cable",
)


@dataclass(frozen=True)
class ColumnIndex:
    """Zero-based column position of each semantic field within a row.

    Defaults follow the column order of a headerless export. A detected header
    row overrides individual positions through :meth:`with_overrides`.
    """
    amont: int = 0
    repere: int = 1
    longueur: int = 2
    cable: int = 3
    neutre: int = 4
    pe: int = 5
    type_cable: int = 6

    def with_overrides(self, overrides: dict[str, int]) -> ColumnIndex:
        """Return a copy with the given field positions replaced."""
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in overrides.items() if k in known})

    def position(self, field_name: str) -> int:
        return getattr(self, field_name)


@dataclass(frozen=True)
class CableRecord:
    """Canonical cable run parsed from one data row.

    ``unit_price`` and ``tva`` are per-record override slots. The parser never
    fills them; price resolution still consults them before the global default.
    """
    amont: str = ""
    repere: str = ""
    longueur: Any = ""  # number, "" when absent, or the unparsable source value
    cable: str = ""
    neutre: str = ""
    pe: str = ""
    type_cable: str = ""
    unit_price: Any = None
    tva: Any = None

    @property
    def has_quantity(self) -> bool:
        return self.longueur != "" and self.longueur is not None

    def is_empty(self) -> bool:
        """True when no descriptive field and no quantity is present.

        ``amont`` alone does not make a row meaningful.
        """
        return not (
            self.repere
            or self.cable
            or self.neutre
            or self.pe
            or self.type_cable
            or self.has_quantity
        )

    def has_zero_length(self) -> bool:
        value = self.longueur
        if isinstance(value, bool):
            return False
        return isinstance(value, (int, float)) and value == 0
