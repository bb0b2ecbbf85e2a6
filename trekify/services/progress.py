from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

Row-level progress while a sheet is normalized. In non-TTY environments (CI,
pipes) the bar is disabled to avoid ANSI control sequence spam.
"""

__all__ = [
    "RowProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class RowProgress:
    """Progress bar over the data rows of one sheet.

    Args:
        total_rows: Number of data rows to normalize
        description: Bar label
        enabled: Force on/off; None means "only on a TTY"
    """

    def __init__(
        self, total_rows: int, *, description: str = "Normalizing rows", enabled: bool | None = None
    ) -> None:
        self.total_rows = total_rows
        self.description = description
        self.processed = 0
        self.enabled = is_tty_enabled() if enabled is None else enabled
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, rows: int = 1) -> None:
        self.processed += rows
        if self.pbar is not None:
            self.pbar.update(rows)

    def set_postfix(self, **kwargs: Any) -> None:
        if self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> RowProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
