from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm

"""Download progress display with tqdm (TTY only).

One bar per task, advanced once per source. In non-TTY environments (CI,
piped output) the bar is disabled so log lines are not interleaved with
ANSI control sequences.
"""

__all__ = [
    "SourceProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class SourceProgress:
    """Progress over the sources of one task."""

    def __init__(self, total_sources: int, *, description: str = "Downloading") -> None:
        self.total_sources = total_sources
        self.description = description
        self.current_source = 0
        self.enabled = is_tty_enabled()
        self.pbar: Any | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_sources,
                desc=description,
                unit="source",
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_source(self, title: str) -> None:
        self.current_source += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({title})")

    def finish_source(self, strands: int = 0) -> None:
        if self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_postfix(strands=strands)
            self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> SourceProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
