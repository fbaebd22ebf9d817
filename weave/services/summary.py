from __future__ import annotations

from ..models.run_result import RunResult

"""SUMMARY line rendering.

Format:
SUMMARY tasks={n} files={files} strands={strands} warnings={warnings}
failed_sources={failed} elapsed_sec={elapsed}
"""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # Avoid scientific notation for very small numbers
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: RunResult) -> str:
    """Render the SUMMARY line for a finished run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> render_summary_line(RunResult(tasks=[], start_time=t, end_time=t, elapsed_seconds=0))
        'SUMMARY tasks=0 files=0 strands=0 warnings=0 failed_sources=0 elapsed_sec=0'
    """
    return (
        f"SUMMARY tasks={len(result.tasks)} "
        f"files={result.files_written} "
        f"strands={result.strands_written} "
        f"warnings={result.warnings} "
        f"failed_sources={result.failed_sources} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
