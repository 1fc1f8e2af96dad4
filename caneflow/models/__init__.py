"""Domain models for the Caneco -> Multidoc converter.

Plain frozen dataclasses shared by the core transform, the conversion service
and the command line.
"""

from .cable_record import FIELD_NAMES, CableRecord, ColumnIndex
from .conversion import ConversionRequest, ConversionResult
from .export_options import ExportOptions, PriceMode, ProgressEvent
from .preview_item import CableGroup, PreviewItem

__all__ = [
    # Parsed rows
    "FIELD_NAMES",
    "CableRecord",
    "ColumnIndex",
    # Projections
    "PreviewItem",
    "CableGroup",
    # Options
    "ExportOptions",
    "PriceMode",
    "ProgressEvent",
    # Service
    "ConversionRequest",
    "ConversionResult",
]
