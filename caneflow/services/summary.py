from __future__ import annotations

from ..models.conversion import ConversionResult

"""SUMMARY line rendering.

Formats (prefix ``SUMMARY`` is added by the logger):

    SUMMARY rows={n} headers={yes|no} output={path} elapsed_sec={s}
    SUMMARY preview rows={n} groups={g}
"""

__all__ = [
    "format_seconds",
    "render_summary_line",
    "render_preview_summary_line",
]


def format_seconds(seconds: float) -> str:
    """Integral values without decimals, tiny values without scientific notation."""
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: ConversionResult, include_headers: bool) -> str:
    """
    Examples:
        >>> from pathlib import Path
        >>> render_summary_line(ConversionResult(Path("out.xlsx"), 3, 2.0), True)
        'SUMMARY rows=3 headers=yes output=out.xlsx elapsed_sec=2'
    """
    return (
        f"SUMMARY rows={result.row_count} "
        f"headers={'yes' if include_headers else 'no'} "
        f"output={result.output_path} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )


def render_preview_summary_line(row_count: int, group_count: int) -> str:
    return f"SUMMARY preview rows={row_count} groups={group_count}"
