"""Pure row transforms: no I/O, no shared state."""

from .groups import summarize_groups
from .mapper import EXPORT_HEADER, build_export, build_preview, derive_group_key, derive_title
from .parser import HEADER_SYNONYMS, parse_rows

__all__ = [
    "EXPORT_HEADER",
    "HEADER_SYNONYMS",
    "parse_rows",
    "build_preview",
    "build_export",
    "derive_title",
    "derive_group_key",
    "summarize_groups",
]
