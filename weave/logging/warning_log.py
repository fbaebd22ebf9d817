from __future__ import annotations

import logging
from pathlib import Path

from weave.models.warning_record import WarningRecord

"""Warning collection & JSON Lines export.

Every recoverable problem goes through WarningLog.warn(): it is logged at
WARNING level right away and kept in memory so the orchestrator can count
warnings per task and the CLI can dump them with --warnings-log.
"""

__all__ = [
    "WarningRecord",
    "WarningLog",
]

logger = logging.getLogger(__name__)


class WarningLog:
    """In-memory list of warnings. Single-threaded, one per run."""

    def __init__(self) -> None:
        self._records: list[WarningRecord] = []

    def warn(self, message: str, *, source: str = "", line: int = -1, category: str = "GENERAL") -> WarningRecord:
        logger.warning(message)
        record = WarningRecord.create(source=source, line=line, category=category, message=message)
        self._records.append(record)
        return record

    @property
    def records(self) -> list[WarningRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self, path: Path) -> Path:
        """Append all buffered records to ``path`` as JSON Lines and clear the buffer."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return path
