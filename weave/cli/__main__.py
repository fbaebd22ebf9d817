from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from weave.config.loader import ConfigError, find_config, load_config
from weave.errors import WeaveError
from weave.logging.init import log_summary, set_level, setup_logging
from weave.logging.warning_log import WarningLog
from weave.models.config_models import Platform, Source, WeaveConfig
from weave.services.orchestrator import process_all
from weave.services.summary import render_summary_line
from weave.sheet.fetch import download_csv

"""CLI entrypoint.

Flow:
- Load .env (WEAVE_CONFIG may point at the config file)
- Load and validate the config
- Run all tasks, print the SUMMARY line
- Map the outcome to an exit code; this is the only place the run ends
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2  # finished, but at least one source could not be downloaded


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv; a broken file only produces a warning."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="weave", description="CSV translations/constants -> Android, iOS and Web resources")
    p.add_argument("--config", type=Path, default=None, help="Path to weave-config.json (default: $WEAVE_CONFIG, ./ or ../)")
    p.add_argument("--platform", default=None, help="Override the configured platform (Android, iOS, Web)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print each source's headers & first rows then exit")
    p.add_argument("--warnings-log", type=Path, default=None, help="Write warnings as JSON Lines to this file")
    return p.parse_args(argv)


def _all_sources(cfg: WeaveConfig) -> list[Source]:
    sources: list[Source] = []
    if cfg.strings is not None:
        sources.extend(cfg.strings.sources)
    for task in cfg.constants:
        sources.extend(task.sources)
    if cfg.analytics is not None:
        sources.extend(cfg.analytics.sources)
    return sources


def _inspect_data(cfg: WeaveConfig) -> int:
    sources = _all_sources(cfg)
    if not sources:
        print("inspect: no sources configured")
        return EXIT_SUCCESS
    for source in sources:
        print(f"SOURCE: {source.title} ({source.url})")
        sheet = download_csv(source)
        if sheet is None:
            print("  download failed")
            continue
        print(f"  headers={sheet.headers}")
        for line_number, row in enumerate(sheet.rows[:3], start=2):
            print(f"    line {line_number}: {row}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only read sys.argv when no argument list is given ([] means "no options")
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_level(logging.DEBUG)
        logger.debug("debug mode enabled")

    try:
        env_path = os.getenv("WEAVE_CONFIG")
        config_path = find_config(args.config or (Path(env_path) if env_path else None))
        cfg = load_config(config_path)
        if args.platform:
            platform = Platform.parse(args.platform)
            if platform is None:
                raise ConfigError("The platform must be Android, iOS, or Web")
            cfg = dataclasses.replace(cfg, platform=platform)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    logger.info(f"Weaving for {cfg.platform.name} using {config_path}")

    if args.inspect_data:
        return _inspect_data(cfg)

    warnings = WarningLog()
    try:
        result = process_all(cfg, warnings=warnings)
    except WeaveError as e:
        logger.error(str(e))
        return EXIT_FATAL
    except OSError as e:
        logger.error(f"Weaving failed: {e}")
        return EXIT_FATAL
    finally:
        if args.warnings_log is not None and len(warnings):
            path = warnings.flush(args.warnings_log)
            logger.info(f"Warnings written to {path}")

    log_summary(render_summary_line(result).removeprefix("SUMMARY "))

    if result.failed_sources > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
