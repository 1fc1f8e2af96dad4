from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from ..models.preview_item import CableGroup, PreviewItem
from .normalize import normalize_label

"""Group summary for per-group pricing.

Groups are listed in a stable order so the same file always presents its
price table the same way: named groups alphabetically (ignoring case and
accents), the empty group last.
"""

__all__ = [
    "summarize_groups",
    "group_sort_key",
]


def group_sort_key(key: str) -> tuple[bool, str, str]:
    return (key == "", normalize_label(key), key)


def summarize_groups(items: Iterable[PreviewItem]) -> list[CableGroup]:
    counts: Counter[str] = Counter(item.type_cable or "" for item in items)
    return [CableGroup(key=key, count=counts[key]) for key in sorted(counts, key=group_sort_key)]
