"""CaneFlow: convert Caneco cable schedules into Multidoc import spreadsheets.

The pure transform lives in :mod:`caneflow.core`; spreadsheet I/O, configuration,
logging and the command line wrap around it.
"""

from .core.mapper import build_export, build_preview, derive_group_key, derive_title
from .core.parser import parse_rows

__all__ = [
    "parse_rows",
    "build_preview",
    "build_export",
    "derive_title",
    "derive_group_key",
]

__version__ = "0.3.0"
