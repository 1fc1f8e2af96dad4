from __future__ import annotations

import math

from ..models.export_options import ProgressCallback, ProgressEvent

"""Percent-boundary progress reporting for the row transforms.

The callback runs inline on the caller's thread and fires only when the
rounded percentage changes, so large sheets produce at most ~101 calls.
"""

__all__ = [
    "PercentTracker",
]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class PercentTracker:
    """Report ``(current, total, percent)`` to a callback on percent changes."""

    def __init__(self, total: int, callback: ProgressCallback | None) -> None:
        self.total = total
        self.callback = callback
        self._last_percent = -1

    def advance(self, current: int) -> None:
        """Record that ``current`` items (1-based count) are done."""
        if self.callback is None or self.total <= 0:
            return
        percent = _round_half_up(current / self.total * 100)
        if percent == self._last_percent:
            return
        self._last_percent = percent
        self.callback(ProgressEvent(current=current, total=self.total, percent=percent))
