from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.export_options import ProgressEvent

"""Progress display with tqdm (TTY only).

A single bar per transform. In non-TTY environments (CI, redirected output)
no bar is created, so logs are not interleaved with ANSI control sequences.
The bar instance is itself a progress callback for the row transforms.
"""

__all__ = [
    "is_tty_enabled",
    "RowProgressBar",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class RowProgressBar:
    """tqdm bar fed by :class:`ProgressEvent` callbacks.

    Usage::

        with RowProgressBar("Conversion") as bar:
            build_export(records, ExportOptions(on_progress=bar))
    """

    def __init__(self, description: str = "Processing rows") -> None:
        self.description = description
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = None
        self.last_event: ProgressEvent | None = None

    def __call__(self, event: ProgressEvent) -> None:
        self.last_event = event
        if not self.enabled:
            return
        if self.pbar is None:
            self.pbar = tqdm(
                total=event.total,
                desc=self.description,
                unit="row",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        self.pbar.update(event.current - self.pbar.n)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> RowProgressBar:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
