from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from ..models.config_models import AndroidEscapes, ConstantsConfig, Platform
from ..models.strand import ConstantStrand, HeaderStrand, LanguageStrand, Strand
from .casing import apply_casing

"""Platform writers.

Every output file is Header -> body items -> Footer, written through
open_output() so the file is flushed and closed whatever happens. A strand
that fails to render is logged with its location and skipped; the rest of the
file is still written.

Strings files
-------------
Android  <?xml ...?> <resources> ... </resources>, <string name="KEY">VALUE</string>
iOS      "KEY" = "VALUE";  (no header/footer)
Web      { "KEY": "VALUE", ... }  (no comma after the last entry)

Constants files
---------------
Untyped constants first, then one nested group per type.
Android  package / doc comment / object Name { const val KEY = "TAG" }
iOS      comment / class Name { enum Type { static let KEY = "TAG" } }
Web      { "KEY": "TAG", "type": { ... } }
"""

__all__ = [
    "CONSTANTS_HEADER",
    "ANALYTICS_HEADER",
    "open_output",
    "prepare_text",
    "escape_android",
    "escape_ios",
    "escape_web",
    "render_string",
    "write_strings",
    "write_constants",
    "alignment",
]

logger = logging.getLogger(__name__)

CONSTANTS_HEADER = "List of Constants, auto-generated by Weave"
ANALYTICS_HEADER = "List of Analytics, auto-generated by Weave"

INDENT = "    "

_HTML_START = re.compile(re.escape("<html>"), re.IGNORECASE)
_HTML_END = re.compile(re.escape("</html>"), re.IGNORECASE)


@contextmanager
def open_output(path: str | Path) -> Iterator[TextIO]:
    """Open ``path`` for writing (UTF-8, LF), creating parent directories."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8", newline="\n") as f:
        yield f
        f.flush()


def _println(out: TextIO, line: str = "") -> None:
    out.write(line + "\n")


# --- text escaping -----------------------------------------------------------

def prepare_text(text: str) -> str:
    """Common clean-up: trim, escape quotes, (c) -> copyright sign, drop newlines."""
    return (
        text.strip()
        .replace('"', '\\"')
        .replace("(c)", "©")
        .replace("\r", "")
        .replace("\n", "")
    )


def escape_android(text: str, escapes: AndroidEscapes | None = None) -> str:
    escapes = escapes or AndroidEscapes()
    text = (
        text.replace("&", "&amp;")
        .replace("'", "\\'")
        .replace("@", "\\@")
        .replace("...", "&#8230;")
    )
    if escapes.dashes:
        text = text.replace("-", "–")
    if escapes.spaced_percent:
        text = text.replace(" % ", " %% ")

    if _HTML_START.search(text):
        # HTML strings go in a CDATA section, < and > stay as they are
        text = _HTML_START.sub("<![CDATA[", text)
        return _HTML_END.sub("]]>", text)
    return text.replace(">", "&gt;").replace("<", "&lt;")


def _strip_html(text: str) -> str:
    return _HTML_END.sub("", _HTML_START.sub("", text))


def escape_ios(text: str) -> str:
    text = text.replace("%s", "%@").replace("$s", "$@")
    return _strip_html(text).replace("%", "%%")


def escape_web(text: str) -> str:
    text = _strip_html(text).replace("%s", "$1")
    for i in range(1, 11):
        text = text.replace(f"%{i}$s", f"${i}")
    return text


def render_string(
    platform: Platform,
    key: str,
    value: str,
    *,
    is_last: bool = False,
    escapes: AndroidEscapes | None = None,
) -> str:
    """Render one string entry (without newline)."""
    value = prepare_text(value)
    if platform is Platform.ANDROID:
        return f'{INDENT}<string name="{key}">{escape_android(value, escapes)}</string>'
    if platform is Platform.IOS:
        return f'"{key}" = "{escape_ios(value)}";'
    if platform is Platform.WEB:
        comma = "" if is_last else ","
        return f'{INDENT}"{key}": "{escape_web(value)}"{comma}'
    raise ValueError(f"Unknown platform: {platform}")


# --- strings -----------------------------------------------------------------

def _write_strings_header(out: TextIO, platform: Platform) -> None:
    if platform is Platform.ANDROID:
        _println(out, '<?xml version="1.0" encoding="utf-8"?>')
        _println(out, "<resources>")
    elif platform is Platform.WEB:
        _println(out, "{")


def _write_comment(out: TextIO, platform: Platform, comment: str) -> None:
    if platform is Platform.ANDROID:
        _println(out, f"\n{INDENT}<!-- {comment} -->")
    elif platform is Platform.IOS:
        _println(out, f"\n/* {comment} */")


def _write_strings_footer(out: TextIO, platform: Platform) -> None:
    if platform is Platform.ANDROID:
        _println(out, "</resources>")
    elif platform is Platform.WEB:
        _println(out, "}")


def write_strings(
    out: TextIO,
    platform: Platform,
    language_id: str,
    strands: Sequence[Strand],
    escapes: AndroidEscapes | None = None,
) -> int:
    """Write one language file. Returns the number of string entries written.

    Blank values are skipped on Android/iOS; Web writes every key (an empty
    string when there is no translation).
    """
    _write_strings_header(out, platform)

    # Web: an entry gets its comma only once a later entry has rendered
    pending: str | None = None
    written = 0
    for strand in strands:
        try:
            if isinstance(strand, HeaderStrand):
                _write_comment(out, platform, strand.key)
            elif isinstance(strand, LanguageStrand):
                value = strand.translation(language_id) or ""
                if not value.strip() and platform is not Platform.WEB:
                    continue
                line = render_string(platform, strand.key, value, is_last=True, escapes=escapes)
                if platform is Platform.WEB:
                    if pending is not None:
                        _println(out, pending + ",")
                    pending = line
                else:
                    _println(out, line)
                written += 1
        except Exception as e:
            logger.error(f"{strand.location}: could not write {strand.key}: {e}")

    if pending is not None:
        _println(out, pending)
    _write_strings_footer(out, platform)
    return written


# --- constants ---------------------------------------------------------------

def alignment(prefix_length: int, align_column: int) -> str:
    """Spaces placed before '=' so it starts at ``align_column``; one space if already past it."""
    space = align_column - prefix_length
    return " " * (1 if space < 0 else space)


def _group_by_type(
    constants: Sequence[ConstantStrand],
    group_order: Sequence[str] | None,
) -> list[tuple[str, list[ConstantStrand]]]:
    # Types compare case-insensitively; the first spelling seen names the group
    groups: dict[str, tuple[str, list[ConstantStrand]]] = {}
    for strand in constants:
        groups.setdefault(strand.type.lower(), (strand.type, []))[1].append(strand)

    ordered = list(groups.values())
    if group_order:
        rank = {name.lower(): i for i, name in enumerate(group_order)}
        ordered.sort(key=lambda g: rank.get(g[0].lower(), len(rank)))
    return ordered


def _write_constants_header(
    out: TextIO,
    platform: Platform,
    task: ConstantsConfig,
    header_text: str,
) -> None:
    if platform is Platform.ANDROID:
        if task.package_name:
            _println(out, f"package {task.package_name}")
            _println(out)
        _println(out, "/**")
        _println(out, f" * {header_text}")
        _println(out, " */")
        if task.is_top_level_class_created:
            _println(out, f"object {task.object_name} {{")
        _println(out)
    elif platform is Platform.IOS:
        _println(out, f"//  {header_text}")
        _println(out)
        if task.is_top_level_class_created:
            _println(out, f"class {task.object_name} {{")
    elif platform is Platform.WEB:
        _println(out, "{")


def _outer_indent(platform: Platform, task: ConstantsConfig) -> str:
    return INDENT if platform is Platform.WEB or task.is_top_level_class_created else ""


def _write_type_header(out: TextIO, platform: Platform, task: ConstantsConfig, type_name: str) -> None:
    indent = _outer_indent(platform, task)
    if platform is Platform.ANDROID:
        _println(out, f"{indent}object {apply_casing(type_name, task.type_casing)} {{")
    elif platform is Platform.IOS:
        _println(out, f"{indent}enum {apply_casing(type_name, task.type_casing)} {{")
    elif platform is Platform.WEB:
        _println(out, f'{indent}"{type_name.lower()}": {{')


def _write_type_footer(out: TextIO, platform: Platform, task: ConstantsConfig, is_last_type: bool) -> None:
    line = f"{_outer_indent(platform, task)}}}"
    if not is_last_type:
        if platform is Platform.WEB:
            line += ","
        else:
            # Blank line between mobile groups
            line += "\n"
    _println(out, line)


def _write_constant(
    out: TextIO,
    platform: Platform,
    task: ConstantsConfig,
    strand: ConstantStrand,
    has_type: bool,
    is_last: bool,
) -> None:
    indent = _outer_indent(platform, task) + (INDENT if has_type else "")
    if platform is Platform.WEB:
        comma = "" if is_last else ","
        _println(out, f'{indent}"{strand.key}": "{strand.tag}"{comma}')
        return

    key = apply_casing(strand.key, task.key_casing)
    if platform is Platform.ANDROID:
        declaration = f"const val {key}"
    elif platform is Platform.IOS:
        declaration = f"static let {key}"
    else:
        raise ValueError(f"Unknown platform: {platform}")
    padding = alignment(len(indent) + len(declaration), task.values_align_column)
    _println(out, f'{indent}{declaration}{padding}= "{strand.tag}"')


def write_constants(
    out: TextIO,
    platform: Platform,
    task: ConstantsConfig,
    strands: Sequence[Strand],
    *,
    group_order: Sequence[str] | None = None,
    header_text: str = CONSTANTS_HEADER,
) -> int:
    """Write one constants file. Returns the number of constants written.

    Header strands are ignored here: constants are regrouped by type so the
    comments would no longer sit next to the rows they describe.
    """
    constants = [s for s in strands if isinstance(s, ConstantStrand)]
    untyped = [s for s in constants if not s.type.strip()]
    groups = _group_by_type([s for s in constants if s.type.strip()], group_order)

    _write_constants_header(out, platform, task, header_text)

    written = 0
    for index, strand in enumerate(untyped):
        # Keep the comma when typed groups follow so Web stays one JSON object
        is_last = index == len(untyped) - 1 and not groups
        try:
            _write_constant(out, platform, task, strand, has_type=False, is_last=is_last)
            written += 1
        except Exception as e:
            logger.error(f"{strand.location}: could not write {strand.key}: {e}")

    for group_index, (type_name, members) in enumerate(groups):
        _write_type_header(out, platform, task, type_name)
        for index, strand in enumerate(members):
            try:
                _write_constant(
                    out, platform, task, strand, has_type=True, is_last=index == len(members) - 1
                )
                written += 1
            except Exception as e:
                logger.error(f"{strand.location}: could not write {strand.key}: {e}")
        _write_type_footer(out, platform, task, is_last_type=group_index == len(groups) - 1)

    if platform is Platform.WEB or task.is_top_level_class_created:
        _println(out, "}")
    return written
