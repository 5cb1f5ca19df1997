from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Download progress display with tqdm (TTY only).

In non-TTY environments (CI, redirected output) no bar is created so logs stay
free of ANSI control sequences.
"""

__all__ = [
    "DownloadProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and progress should be displayed, False otherwise
    """
    return sys.stdout.isatty()


class DownloadProgress:
    """Byte-level progress for a single workbook download.

    total_bytes may be None when the server does not declare a length; tqdm
    then shows a running count instead of a percentage.
    """

    def __init__(self, total_bytes: int | None, *, description: str = "Downloading") -> None:
        self.total_bytes = total_bytes
        self.description = description
        self.received = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_bytes,
                desc=description,
                unit="B",
                unit_scale=True,
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def update(self, n_bytes: int) -> None:
        self.received += n_bytes
        if self.enabled and self.pbar is not None:
            self.pbar.update(n_bytes)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> DownloadProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
