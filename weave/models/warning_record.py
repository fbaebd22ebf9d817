from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""WarningRecord model for the warnings log.

Non-fatal problems found while weaving (blank keys, duplicates, missing
translations, failed downloads, ...) are recorded as WarningRecords so they
can be counted per task and optionally written out as JSON Lines.
"""

__all__ = [
    "WarningRecord",
]


@dataclass(frozen=True)
class WarningRecord:
    """Structured warning.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: Source title the warning relates to ("" when not source specific)
        line: CSV line number (1-based). -1 when the warning is not about a row
        category: Classification in UPPER_SNAKE_CASE (e.g. DUPLICATE_KEY)
        message: Human readable message, same text as logged
    """
    timestamp: str  # ISO8601 UTC
    source: str
    line: int
    category: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(source: str, line: int, category: str, message: str) -> WarningRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return WarningRecord(
            timestamp=ts,
            source=source,
            line=line,
            category=category,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
