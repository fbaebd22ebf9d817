from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

"""Result models for a weave run.

TaskResult describes one task (strings, one constants listing, analytics);
RunResult aggregates them for the SUMMARY line and the exit code.
"""

__all__ = [
    "TaskResult",
    "RunResult",
]


@dataclass(frozen=True)
class TaskResult:
    """Outcome of a single task."""
    title: str
    kind: str  # strings / constants / analytics
    strands_written: int = 0  # content strands that reached the writer
    files_written: list[str] = field(default_factory=list)
    failed_sources: int = 0  # sources that could not be downloaded
    warnings: int = 0


@dataclass(frozen=True)
class RunResult:
    """Aggregated results for the whole run."""
    tasks: list[TaskResult]
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float

    @property
    def files_written(self) -> int:
        return sum(len(t.files_written) for t in self.tasks)

    @property
    def strands_written(self) -> int:
        return sum(t.strands_written for t in self.tasks)

    @property
    def failed_sources(self) -> int:
        return sum(t.failed_sources for t in self.tasks)

    @property
    def warnings(self) -> int:
        return sum(t.warnings for t in self.tasks)
