from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from ..errors import WeaveError
from ..logging.warning_log import WarningLog
from ..models.config_models import AnalyticsConfig, ConstantsConfig, Platform, Source, StringsConfig, WeaveConfig
from ..models.run_result import RunResult, TaskResult
from ..models.strand import LanguageStrand, Strand, is_content
from ..sheet.fetch import download_csv
from ..sheet.reader import CsvSheet
from .builders import ANALYTICS_GROUPS, build_analytics_strands, build_constant_strands, build_language_strands
from .progress import SourceProgress
from .verifier import verify_constant_strands, verify_keys, verify_string_strands
from .writer import ANALYTICS_HEADER, CONSTANTS_HEADER, open_output, write_constants, write_strings

"""Pipeline orchestration.

One run is: strings task, then every constants task, then the analytics
task. Each task downloads all of its sources, builds strands, verifies them
and writes its file(s) before the next task starts.

Fatal problems raise WeaveError subclasses and stop the run; the CLI decides
the exit code. Failed downloads only remove that source's rows.
"""

__all__ = [
    "ProcessingError",
    "Fetcher",
    "run_strings_task",
    "run_constants_task",
    "run_analytics_task",
    "process_all",
]

logger = logging.getLogger(__name__)

Fetcher = Callable[[Source], CsvSheet | None]
Builder = Callable[[CsvSheet, Source], list[Strand]]


class ProcessingError(WeaveError):
    """Fatal task configuration error (no languages, bad alignment column)."""


def _download_all(
    sources: Sequence[Source],
    description: str,
    fetch: Fetcher,
    build: Builder,
) -> tuple[list[Strand], int]:
    """Download and build every source in order.

    Returns:
        (all strands concatenated in source order, number of failed sources)
    """
    strands: list[Strand] = []
    failed = 0
    with SourceProgress(len(sources), description=description) as progress:
        for source in sources:
            progress.start_source(source.title)
            sheet = fetch(source)
            if sheet is None:
                failed += 1
                progress.finish_source()
                continue
            built = build(sheet, source)
            strands.extend(built)
            progress.finish_source(len(built))
    return strands, failed


def run_strings_task(
    config: StringsConfig,
    weave_config: WeaveConfig,
    warnings: WarningLog,
    fetch: Fetcher | None = None,
) -> TaskResult:
    """Download, verify and write the localized strings (one file per language)."""
    fetch = fetch or download_csv
    if not config.languages:
        raise ProcessingError("Please provide at least one language")

    warnings_before = len(warnings)
    strands, failed = _download_all(
        config.sources,
        "Strings",
        fetch,
        lambda sheet, source: build_language_strands(config, sheet, source, weave_config, warnings),
    )

    verified = verify_keys(strands)
    verified = verify_string_strands(verified, len(config.languages), warnings)
    content = sum(1 for s in verified if isinstance(s, LanguageStrand))

    files: list[str] = []
    if content == 0:
        logger.info("No Strings to write")
    else:
        for language in config.languages:
            with open_output(language.path) as out:
                write_strings(out, weave_config.platform, language.id, verified, weave_config.android_escapes)
            logger.info(f"Wrote {language.id} to file: {language.path}")
            files.append(language.path)
        logger.info("Strings parsing complete")

    return TaskResult(
        title="Strings",
        kind="strings",
        strands_written=content,
        files_written=files,
        failed_sources=failed,
        warnings=len(warnings) - warnings_before,
    )


def _check_constants_task(task: ConstantsConfig, weave_config: WeaveConfig, warnings: WarningLog) -> None:
    if task.values_align_column < 0 or task.values_align_column % 4 != 0:
        raise ProcessingError(f"{task.title}: valuesAlignColumn must be a multiple of 4")
    if weave_config.platform is Platform.ANDROID and not task.package_name:
        warnings.warn(f"{task.title}: no package name provided for Android", category="MISSING_PACKAGE")


def _run_constants(
    task: ConstantsConfig,
    weave_config: WeaveConfig,
    warnings: WarningLog,
    fetch: Fetcher,
    *,
    kind: str,
    build: Builder,
    group_order: Sequence[str] | None,
    header_text: str,
) -> TaskResult:
    _check_constants_task(task, weave_config, warnings)

    warnings_before = len(warnings)
    strands, failed = _download_all(task.sources, task.title, fetch, build)
    verified = verify_keys(strands)
    verified = verify_constant_strands(verified, warnings)
    content = sum(1 for s in verified if is_content(s))

    files: list[str] = []
    if content == 0:
        warnings.warn(f"No {task.title} Strings to write", category="NOTHING_TO_WRITE")
    else:
        with open_output(task.path) as out:
            write_constants(
                out,
                weave_config.platform,
                task,
                verified,
                group_order=group_order,
                header_text=header_text,
            )
        logger.info(f"Wrote {task.title} to file: {task.path}")
        logger.info(f"{task.title} parsing complete")
        files.append(task.path)

    return TaskResult(
        title=task.title,
        kind=kind,
        strands_written=content,
        files_written=files,
        failed_sources=failed,
        warnings=len(warnings) - warnings_before,
    )


def run_constants_task(
    task: ConstantsConfig,
    weave_config: WeaveConfig,
    warnings: WarningLog,
    fetch: Fetcher | None = None,
) -> TaskResult:
    return _run_constants(
        task,
        weave_config,
        warnings,
        fetch or download_csv,
        kind="constants",
        build=lambda sheet, source: build_constant_strands(task, sheet, source, weave_config, warnings),
        group_order=None,
        header_text=CONSTANTS_HEADER,
    )


def run_analytics_task(
    task: AnalyticsConfig,
    weave_config: WeaveConfig,
    warnings: WarningLog,
    fetch: Fetcher | None = None,
) -> TaskResult:
    """Constants split into Events then Screens."""
    return _run_constants(
        task,
        weave_config,
        warnings,
        fetch or download_csv,
        kind="analytics",
        build=lambda sheet, source: build_analytics_strands(task, sheet, source, weave_config, warnings),
        group_order=list(ANALYTICS_GROUPS.values()),
        header_text=ANALYTICS_HEADER,
    )


def process_all(
    weave_config: WeaveConfig,
    fetch: Fetcher | None = None,
    warnings: WarningLog | None = None,
) -> RunResult:
    """Run every configured task in order.

    Raises:
        WeaveError: on the first fatal error; tasks already finished keep
            their output files
    """
    start_time = datetime.now(UTC)
    warnings = warnings if warnings is not None else WarningLog()
    tasks: list[TaskResult] = []

    if weave_config.strings is None:
        warnings.warn("No Strings config found", category="NO_STRINGS_CONFIG")
    else:
        tasks.append(run_strings_task(weave_config.strings, weave_config, warnings, fetch))

    if not weave_config.constants:
        warnings.warn("No Constants configs found", category="NO_CONSTANTS_CONFIG")
    for task in weave_config.constants:
        tasks.append(run_constants_task(task, weave_config, warnings, fetch))

    if weave_config.analytics is not None:
        tasks.append(run_analytics_task(weave_config.analytics, weave_config, warnings, fetch))

    end_time = datetime.now(UTC)
    return RunResult(
        tasks=tasks,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )
