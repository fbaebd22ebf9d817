from __future__ import annotations

"""Base error type for fatal pipeline failures.

Anything deriving from WeaveError aborts the whole run. The CLI is the only
place that turns it into a process exit code; library code just raises.
Concrete subclasses live next to the code that raises them.
"""

__all__ = [
    "WeaveError",
]


class WeaveError(Exception):
    """Fatal error that stops the run (bad columns, bad keys, bad task config)."""
