from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Preview projection models shown to the user before export."""

__all__ = [
    "PreviewItem",
    "CableGroup",
    "EMPTY_GROUP_LABEL",
]

EMPTY_GROUP_LABEL = "Cable/type vide"


@dataclass(frozen=True)
class PreviewItem:
    """Read-only summary of one parsed record.

    ``type_cable`` holds the group key (cable and type joined), not the raw
    cable type column.
    """
    line_number: int  # 1-based among surviving records
    title: str
    quantity: Any
    repere: str
    type_cable: str


@dataclass(frozen=True)
class CableGroup:
    """Distinct group key with the number of preview rows carrying it."""
    key: str
    count: int

    @property
    def label(self) -> str:
        return self.key if self.key else EMPTY_GROUP_LABEL
