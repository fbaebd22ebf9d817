from __future__ import annotations

import io
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import pandas as pd

from weave.errors import WeaveError
from weave.logging.warning_log import WarningLog
from weave.models.config_models import Platform, Source
from weave.models.strand import HeaderStrand, Strand

"""CSV row model.

Line 1 of a source is the header row, data rows start at line 2. Cells are
kept as text; empty cells become None so "absent" and "present" can be told
apart by the builders.

parse_headers() locates the key and platforms columns and hands every other
named column to the caller; parse_rows() walks the data rows, turns header
marker rows into HeaderStrands, drops rows meant for other platforms and
delegates the rest to the caller's row handler.
"""

__all__ = [
    "CsvFormatError",
    "MissingKeyColumnError",
    "CsvSheet",
    "read_csv_text",
    "parse_headers",
    "parse_platforms",
    "parse_rows",
    "NOT_FOUND",
]

# Column index sentinel for optional columns that are not in the header
NOT_FOUND = -1

Cell = str | None
RowHandler = Callable[[int, str, Sequence[Cell]], Strand | None]


class CsvFormatError(Exception):
    """Raised when the downloaded text cannot be parsed as CSV."""


class MissingKeyColumnError(WeaveError):
    """Raised when no header matches the configured key column name."""


@dataclass
class CsvSheet:
    source_title: str
    headers: list[Cell]
    rows: list[list[Cell]]


def _cell(value: object) -> Cell:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    text = str(value)
    return text if text != "" else None


def _header_width(text: str) -> int:
    header = pd.read_csv(
        io.StringIO(text),
        header=None,
        nrows=1,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        engine="python",
    )
    return header.shape[1]


def read_csv_text(text: str, source_title: str = "") -> CsvSheet:
    """Parse CSV text (Excel dialect: comma separated, double quoted fields).

    Every cell is read as a string; blank cells are None. Blank lines are
    skipped. Short rows are padded with None up to the header width, cells
    past the header width are dropped.
    """
    try:
        width = _header_width(text)
        df = pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=lambda row: row[:width],
        )
    except pd.errors.EmptyDataError as e:
        raise CsvFormatError(f"{source_title or 'source'} is empty") from e
    except pd.errors.ParserError as e:
        raise CsvFormatError(f"{source_title or 'source'} is not valid CSV: {e}") from e

    records = [[_cell(v) for v in raw] for raw in df.itertuples(index=False, name=None)]
    if not records:
        raise CsvFormatError(f"{source_title or 'source'} has no header row")
    headers = records[0]
    return CsvSheet(source_title=source_title, headers=headers, rows=records[1:])


def parse_headers(
    headers: Sequence[Cell],
    key_column_name: str,
    platforms_column_name: str,
    on_column: Callable[[int, str], None] | None = None,
) -> tuple[int, int]:
    """Find the key and platforms columns.

    Matching is case-insensitive on the trimmed header text. ``on_column`` is
    called once for every other non-null header; the key and platforms
    columns are not passed to it.

    Returns:
        (key_column, platform_column); platform_column is NOT_FOUND if absent

    Raises:
        MissingKeyColumnError: no column named ``key_column_name``
    """
    key_column = NOT_FOUND
    platform_column = NOT_FOUND
    key_name = key_column_name.strip().lower()
    platforms_name = platforms_column_name.strip().lower()

    for index, header in enumerate(headers):
        if header is None:
            continue
        name = header.strip().lower()
        if key_column == NOT_FOUND and name == key_name:
            key_column = index
            continue
        if platform_column == NOT_FOUND and name == platforms_name:
            platform_column = index
            continue
        if on_column is not None:
            on_column(index, header)

    if key_column == NOT_FOUND:
        raise MissingKeyColumnError(f"There must be a column marked '{key_column_name}' with the String keys")

    return key_column, platform_column


def parse_platforms(cell: Cell) -> set[Platform]:
    """Comma separated platform names -> set of Platforms (unknown names ignored)."""
    if not cell:
        return set()
    platforms = set()
    for part in cell.split(","):
        platform = Platform.parse(part)
        if platform is not None:
            platforms.add(platform)
    return platforms


def _at(row: Sequence[Cell], index: int) -> Cell:
    return row[index] if 0 <= index < len(row) else None


def parse_rows(
    sheet: CsvSheet,
    source: Source,
    key_column: int,
    platform_column: int,
    *,
    header_marker: str,
    platform: Platform,
    on_line: RowHandler,
    warnings: WarningLog,
) -> list[Strand]:
    """Turn the data rows of ``sheet`` into strands.

    For each row (line numbers start at 2):
    1. blank key -> warning, row skipped
    2. key starting with ``header_marker`` -> HeaderStrand
    3. platforms cell naming other platforms only -> row skipped silently
    4. otherwise ``on_line(line_number, key, row)``; a returned strand is kept
    """
    strands: list[Strand] = []

    for line_number, row in enumerate(sheet.rows, start=2):
        key = (_at(row, key_column) or "").strip()
        if not key:
            warnings.warn(
                f"Line {line_number} from {source.title} does not have a key and will not be parsed",
                source=source.title,
                line=line_number,
                category="MISSING_KEY",
            )
            continue

        if key.startswith(header_marker):
            comment = key[len(header_marker):].strip()
            strands.append(HeaderStrand(key=comment, source_label=source.title, line_number=line_number))
            continue

        if platform_column != NOT_FOUND:
            platforms = parse_platforms(_at(row, platform_column))
            if platforms and platform not in platforms:
                continue

        strand = on_line(line_number, key, row)
        if strand is not None:
            strands.append(strand)

    return strands
