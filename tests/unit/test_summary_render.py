from __future__ import annotations

import re
from datetime import datetime, timezone

from weave.models.run_result import RunResult, TaskResult
from weave.services.summary import render_summary_line

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY tasks=([0-9]+) files=([0-9]+) strands=([0-9]+) warnings=([0-9]+) "
    r"failed_sources=([0-9]+) elapsed_sec=([0-9]+\.?[0-9]*)$"
)

T0 = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def _result(tasks: list[TaskResult], elapsed: float) -> RunResult:
    return RunResult(tasks=tasks, start_time=T0, end_time=T0, elapsed_seconds=elapsed)


def test_render_summary_line_aggregates_tasks():
    tasks = [
        TaskResult(title="Strings", kind="strings", strands_written=12, files_written=["en.xml", "fr.xml"], warnings=3),
        TaskResult(title="Constants", kind="constants", strands_written=4, files_written=["C.kt"], failed_sources=1),
        TaskResult(title="Analytics", kind="analytics", warnings=1),
    ]
    line = render_summary_line(_result(tasks, 1.5))
    assert line == "SUMMARY tasks=3 files=3 strands=16 warnings=4 failed_sources=1 elapsed_sec=1.5"
    assert SUMMARY_PATTERN.match(line)


def test_elapsed_formatting():
    assert render_summary_line(_result([], 5.0)).endswith("elapsed_sec=5")
    assert render_summary_line(_result([], 0.84)).endswith("elapsed_sec=0.84")
    assert render_summary_line(_result([], 1.234)).endswith("elapsed_sec=1.23")


def test_very_small_elapsed_has_no_scientific_notation():
    line = render_summary_line(_result([], 0.00005))
    assert "e-" not in line
    assert line.endswith("elapsed_sec=0.00005")
    assert SUMMARY_PATTERN.match(line)
