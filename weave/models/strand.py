from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Union

"""Strand records parsed from CSV rows.

A strand is one parsed unit of content with its provenance (source title and
1-based CSV line). The set of kinds is closed:

- HeaderStrand: a display comment row (key column starts with the header marker)
- LanguageStrand: a translated string, language id -> text
- ConstantStrand: a named constant with an optional grouping type

Consumers dispatch with ``isinstance`` over exactly these three classes.
"""

__all__ = [
    "HeaderStrand",
    "LanguageStrand",
    "ConstantStrand",
    "Strand",
    "ContentStrand",
    "is_content",
]


@dataclass(frozen=True)
class HeaderStrand:
    """Comment row. ``key`` holds the comment text, marker already removed."""
    key: str
    source_label: str
    line_number: int

    @property
    def location(self) -> str:
        return f"Line {self.line_number} from {self.source_label}"


@dataclass(frozen=True)
class LanguageStrand:
    """Translated string. Only languages with a non-null cell are present."""
    key: str
    source_label: str
    line_number: int
    translations: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # read-only private copy
        object.__setattr__(self, "translations", MappingProxyType(dict(self.translations)))

    @property
    def location(self) -> str:
        return f"Line {self.line_number} from {self.source_label}"

    def translation(self, language_id: str) -> str | None:
        return self.translations.get(language_id)


@dataclass(frozen=True)
class ConstantStrand:
    """Constant (or analytics tag). ``type`` is "" for untyped constants."""
    key: str
    source_label: str
    line_number: int
    type: str
    tag: str

    @property
    def location(self) -> str:
        return f"Line {self.line_number} from {self.source_label}"


Strand = Union[HeaderStrand, LanguageStrand, ConstantStrand]
ContentStrand = Union[LanguageStrand, ConstantStrand]


def is_content(strand: Strand) -> bool:
    """True for LanguageStrand / ConstantStrand, False for headers."""
    return isinstance(strand, (LanguageStrand, ConstantStrand))
