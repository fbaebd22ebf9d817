from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Callable, Hashable, Sequence

from ..errors import WeaveError
from ..logging.warning_log import WarningLog
from ..models.strand import ConstantStrand, HeaderStrand, LanguageStrand, Strand

"""Strand verification.

- verify_keys(): key syntax, fatal on the first bad key
- verify_string_strands(): duplicates by key, empty / incomplete translations
- verify_constant_strands(): duplicates by (key, type)

Duplicate rule: when the same group key appears more than once, every earlier
occurrence is dropped and the last one is kept. One warning is emitted per
(earlier, later) pair, in row order.
"""

__all__ = [
    "InvalidKeyError",
    "KEY_PATTERN",
    "verify_keys",
    "verify_string_strands",
    "verify_constant_strands",
]

# Anything outside [A-Za-z0-9_] makes a key illegal
KEY_PATTERN = re.compile(r"[^A-Za-z0-9_]")


class InvalidKeyError(WeaveError):
    """Raised when a content strand key contains a space or illegal characters."""


def verify_keys(strands: Sequence[Strand]) -> list[Strand]:
    """Check every content strand key; headers are not keys and are skipped.

    Raises:
        InvalidKeyError: on the first key with a space or an illegal character
    """
    for strand in strands:
        if isinstance(strand, HeaderStrand):
            continue
        if " " in strand.key:
            raise InvalidKeyError(f"{strand.location} contains a space in its key.")
        if KEY_PATTERN.search(strand.key):
            raise InvalidKeyError(f"{strand.location} contains some illegal characters.")
    return list(strands)


def _drop_duplicates(
    strands: Sequence[Strand],
    kind: type,
    group_key: Callable[[Strand], Hashable],
    warnings: WarningLog,
    what: str,
) -> list[Strand]:
    positions: dict[Hashable, list[int]] = defaultdict(list)
    for index, strand in enumerate(strands):
        if isinstance(strand, kind):
            positions[group_key(strand)].append(index)

    dropped: set[int] = set()
    for index, strand in enumerate(strands):
        if not isinstance(strand, kind):
            continue
        later = [j for j in positions[group_key(strand)] if j > index]
        for j in later:
            warnings.warn(
                f"{strand.location} and {strands[j].location} have the same {what}. The second one will be used",
                source=strand.source_label,
                line=strand.line_number,
                category="DUPLICATE_KEY",
            )
        if later:
            dropped.add(index)

    return [s for i, s in enumerate(strands) if i not in dropped]


def verify_string_strands(
    strands: Sequence[Strand],
    language_count: int,
    warnings: WarningLog,
) -> list[Strand]:
    """Resolve duplicate keys and check translations.

    A LanguageStrand without any translation is removed; one with fewer
    translations than ``language_count`` is kept with a warning.
    """
    verified = _drop_duplicates(strands, LanguageStrand, lambda s: s.key, warnings, "key")

    result: list[Strand] = []
    for strand in verified:
        if isinstance(strand, LanguageStrand):
            if not strand.translations:
                warnings.warn(
                    f"{strand.location} has no translations so it will not be parsed.",
                    source=strand.source_label,
                    line=strand.line_number,
                    category="NO_TRANSLATIONS",
                )
                continue
            if len(strand.translations) != language_count:
                warnings.warn(
                    f"{strand.location} is missing at least one translation",
                    source=strand.source_label,
                    line=strand.line_number,
                    category="MISSING_TRANSLATION",
                )
        result.append(strand)
    return result


def verify_constant_strands(strands: Sequence[Strand], warnings: WarningLog) -> list[Strand]:
    """Resolve duplicates: same key and same type, later one wins."""
    return _drop_duplicates(
        strands,
        ConstantStrand,
        lambda s: (s.key, s.type),
        warnings,
        "key and type",
    )
