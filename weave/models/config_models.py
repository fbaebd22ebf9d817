from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Config dataclasses for the Weave CSV -> platform resources tool.

These are the immutable records produced by weave.config.loader. Nothing in
the pipeline mutates them; per-source resolution (column indices etc.) is
kept in separate values returned by the builders.
"""

__all__ = [
    "Platform",
    "Casing",
    "Source",
    "Language",
    "StringsConfig",
    "ConstantsConfig",
    "AnalyticsConfig",
    "AndroidEscapes",
    "WeaveConfig",
]


class Platform(Enum):
    """Output platform. Determines file grammar and escaping."""
    ANDROID = "android"
    IOS = "ios"
    WEB = "web"

    @classmethod
    def parse(cls, text: str | None) -> Platform | None:
        """Case-insensitive lookup, None if the text names no platform."""
        if text is None:
            return None
        return _PLATFORM_NAMES.get(text.strip().lower())


_PLATFORM_NAMES = {p.value: p for p in Platform}


class Casing(Enum):
    """Naming transformation applied to constant keys / group names."""
    NONE = "none"
    CAMEL = "camel"
    PASCAL = "pascal"
    SNAKE = "snake"
    CAPS = "caps"

    @classmethod
    def parse(cls, text: str | None) -> Casing:
        # Unknown values fall back to NONE rather than failing
        if not text:
            return cls.NONE
        return _CASING_NAMES.get(text.strip().lower(), cls.NONE)


_CASING_NAMES = {
    "camel": Casing.CAMEL,
    "camelcase": Casing.CAMEL,
    "pascal": Casing.PASCAL,
    "pascalcase": Casing.PASCAL,
    "snake": Casing.SNAKE,
    "snakecase": Casing.SNAKE,
    "caps": Casing.CAPS,
    "none": Casing.NONE,
}


@dataclass(frozen=True)
class Source:
    """One CSV endpoint contributing rows to a task."""
    title: str
    url: str


@dataclass(frozen=True)
class Language:
    """A language column to export and the file it is written to."""
    id: str
    path: str


@dataclass(frozen=True)
class StringsConfig:
    sources: list[Source]
    languages: list[Language]


@dataclass(frozen=True)
class ConstantsConfig:
    """One constants listing (one output file).

    key_column_name=None means the global key column name is used.
    An empty type_column_name means every constant is untyped.
    """
    title: str
    sources: list[Source]
    path: str
    package_name: str | None = None
    key_column_name: str | None = None
    type_column_name: str = ""
    value_column_name: str = "value"
    values_align_column: int = 0
    key_casing: Casing = Casing.CAMEL
    type_casing: Casing = Casing.PASCAL
    is_top_level_class_created: bool = True

    @property
    def object_name(self) -> str:
        """Top-level class/object name: the output file name without its extension."""
        name = self.path.replace("\\", "/").rsplit("/", 1)[-1]
        return name.rsplit(".", 1)[0] if "." in name else name


@dataclass(frozen=True)
class AnalyticsConfig(ConstantsConfig):
    """Events/Screens constants. Type and tag columns are mandatory here."""
    type_column_name: str = "type"
    value_column_name: str = "tag"


@dataclass(frozen=True)
class AndroidEscapes:
    """Optional Android substitutions that only suit some string tables."""
    dashes: bool = True  # "-" -> en-dash
    spaced_percent: bool = True  # " % " -> " %% "


@dataclass(frozen=True)
class WeaveConfig:
    """Root configuration for one run."""
    platform: Platform
    header_column_name: str = "###"
    key_column_name: str = "key"
    platforms_column_name: str = "platforms"
    strings: StringsConfig | None = None
    constants: list[ConstantsConfig] = field(default_factory=list)
    analytics: AnalyticsConfig | None = None
    android_escapes: AndroidEscapes = field(default_factory=AndroidEscapes)

    def key_column_for(self, task: ConstantsConfig) -> str:
        return task.key_column_name or self.key_column_name
