from __future__ import annotations

from collections.abc import Sequence

from ..errors import WeaveError
from ..logging.warning_log import WarningLog
from ..models.config_models import AnalyticsConfig, ConstantsConfig, Language, Source, StringsConfig, WeaveConfig
from ..models.strand import ConstantStrand, LanguageStrand, Strand
from ..sheet.reader import NOT_FOUND, Cell, CsvSheet, parse_headers, parse_rows

"""Strand builders.

Each builder scans the header row of one downloaded source to resolve the
columns it needs, then walks the data rows through parse_rows(). Column
resolution happens once per source and is returned as plain values; the
config records are never mutated.
"""

__all__ = [
    "MissingColumnError",
    "UnresolvedLanguageError",
    "ANALYTICS_GROUPS",
    "resolve_language_columns",
    "build_language_strands",
    "build_constant_strands",
    "build_analytics_strands",
]

# Analytics type cell -> group name, in output order
ANALYTICS_GROUPS = {
    "event": "Events",
    "screen": "Screens",
}


class MissingColumnError(WeaveError):
    """Raised when a required value/type column is not in the header row."""


class UnresolvedLanguageError(WeaveError):
    """Raised when a configured language has no column in a source."""


def _at(row: Sequence[Cell], index: int) -> Cell:
    return row[index] if 0 <= index < len(row) else None


def resolve_language_columns(
    sheet: CsvSheet,
    source: Source,
    languages: Sequence[Language],
    weave_config: WeaveConfig,
) -> tuple[int, int, dict[str, int]]:
    """Resolve key/platform columns and one column per language.

    Returns:
        (key_column, platform_column, {language id: column index})

    Raises:
        UnresolvedLanguageError: a language id matches no header
    """
    columns: dict[str, int] = {}

    def on_column(index: int, header: str) -> None:
        name = header.strip().lower()
        for language in languages:
            if language.id.lower() == name:
                columns[language.id] = index

    key_column, platform_column = parse_headers(
        sheet.headers,
        weave_config.key_column_name,
        weave_config.platforms_column_name,
        on_column,
    )

    for language in languages:
        if language.id not in columns:
            raise UnresolvedLanguageError(f"{language.id} in {source.title} does not have any translations.")

    return key_column, platform_column, columns


def build_language_strands(
    config: StringsConfig,
    sheet: CsvSheet,
    source: Source,
    weave_config: WeaveConfig,
    warnings: WarningLog,
) -> list[Strand]:
    key_column, platform_column, columns = resolve_language_columns(
        sheet, source, config.languages, weave_config
    )

    def on_line(line_number: int, key: str, row: Sequence[Cell]) -> Strand | None:
        translations = {}
        for language_id, index in columns.items():
            value = _at(row, index)
            if value is not None:
                translations[language_id] = value
        return LanguageStrand(
            key=key,
            source_label=source.title,
            line_number=line_number,
            translations=translations,
        )

    return parse_rows(
        sheet,
        source,
        key_column,
        platform_column,
        header_marker=weave_config.header_column_name,
        platform=weave_config.platform,
        on_line=on_line,
        warnings=warnings,
    )


def _resolve_constant_columns(
    task: ConstantsConfig,
    sheet: CsvSheet,
    weave_config: WeaveConfig,
) -> tuple[int, int, int, int]:
    type_column = NOT_FOUND
    value_column = NOT_FOUND
    type_name = task.type_column_name.strip().lower()
    value_name = task.value_column_name.strip().lower()

    def on_column(index: int, header: str) -> None:
        nonlocal type_column, value_column
        name = header.strip().lower()
        if type_name and name == type_name and type_column == NOT_FOUND:
            type_column = index
        elif name == value_name and value_column == NOT_FOUND:
            value_column = index

    key_column, platform_column = parse_headers(
        sheet.headers,
        weave_config.key_column_for(task),
        weave_config.platforms_column_name,
        on_column,
    )

    if value_column == NOT_FOUND:
        raise MissingColumnError(f"Tag column with name {task.value_column_name} not found")

    return key_column, platform_column, type_column, value_column


def build_constant_strands(
    task: ConstantsConfig,
    sheet: CsvSheet,
    source: Source,
    weave_config: WeaveConfig,
    warnings: WarningLog,
) -> list[Strand]:
    """Build ConstantStrands. The type column is optional, the value column is not."""
    key_column, platform_column, type_column, value_column = _resolve_constant_columns(
        task, sheet, weave_config
    )

    def on_line(line_number: int, key: str, row: Sequence[Cell]) -> Strand | None:
        tag = _at(row, value_column)
        if tag is None:
            warnings.warn(
                f"Line {line_number} from {source.title} has no tag and will not be parsed",
                source=source.title,
                line=line_number,
                category="MISSING_TAG",
            )
            return None
        type_ = _at(row, type_column) if type_column != NOT_FOUND else None
        return ConstantStrand(
            key=key,
            source_label=source.title,
            line_number=line_number,
            type=(type_ or "").strip(),
            tag=tag.strip(),
        )

    return parse_rows(
        sheet,
        source,
        key_column,
        platform_column,
        header_marker=weave_config.header_column_name,
        platform=weave_config.platform,
        on_line=on_line,
        warnings=warnings,
    )


def build_analytics_strands(
    task: AnalyticsConfig,
    sheet: CsvSheet,
    source: Source,
    weave_config: WeaveConfig,
    warnings: WarningLog,
) -> list[Strand]:
    """Build Events/Screens strands; both the type and tag columns are required."""
    key_column, platform_column, type_column, value_column = _resolve_constant_columns(
        task, sheet, weave_config
    )
    if type_column == NOT_FOUND:
        raise MissingColumnError(f"Type column with name {task.type_column_name} not found")

    def on_line(line_number: int, key: str, row: Sequence[Cell]) -> Strand | None:
        group = ANALYTICS_GROUPS.get((_at(row, type_column) or "").strip().lower())
        if group is None:
            warnings.warn(
                f"Line {line_number} from {source.title} has no type and will not be parsed",
                source=source.title,
                line=line_number,
                category="MISSING_TYPE",
            )
            return None
        tag = _at(row, value_column)
        if tag is None:
            warnings.warn(
                f"Line {line_number} from {source.title} has no tag and will not be parsed",
                source=source.title,
                line=line_number,
                category="MISSING_TAG",
            )
            return None
        return ConstantStrand(
            key=key,
            source_label=source.title,
            line_number=line_number,
            type=group,
            tag=tag.strip(),
        )

    return parse_rows(
        sheet,
        source,
        key_column,
        platform_column,
        header_marker=weave_config.header_column_name,
        platform=weave_config.platform,
        on_line=on_line,
        warnings=warnings,
    )
