from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from weave.models.config_models import (
    AnalyticsConfig,
    AndroidEscapes,
    Casing,
    ConstantsConfig,
    Language,
    Platform,
    Source,
    StringsConfig,
    WeaveConfig,
)

"""Config loader.

Responsibilities:
- Read weave-config.json (or a YAML equivalent)
- Validate the raw data against config_schema.json (shipped with the package)
- Apply defaults and convert to the frozen WeaveConfig records
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_NAME",
    "SCHEMA_PATH",
    "find_config",
    "load_config",
    "parse_config",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"

DEFAULT_CONFIG_NAME = "weave-config.json"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or the data
            does not satisfy it (missing required keys, wrong types).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path)
        suffix = f" (at {where})" if where else ""
        raise ConfigError(f"config validation failed: {e.message}{suffix}") from e


def _sources(raw: list[dict[str, Any]] | None) -> list[Source]:
    return [Source(title=s["title"], url=s["url"]) for s in raw or []]


def _constants(raw: dict[str, Any], cls: type[ConstantsConfig], default_title: str) -> ConstantsConfig:
    kwargs: dict[str, Any] = {
        "title": raw.get("title") or default_title,
        "sources": _sources(raw.get("sources")),
        "path": raw["path"],
        "package_name": raw.get("packageName"),
        "key_column_name": raw.get("keyColumnName"),
        "values_align_column": raw.get("valuesAlignColumn", 0),
        "key_casing": Casing.parse(raw["keyCasing"]) if "keyCasing" in raw else Casing.CAMEL,
        "type_casing": Casing.parse(raw["typeCasing"]) if "typeCasing" in raw else Casing.PASCAL,
        "is_top_level_class_created": raw.get("isTopLevelClassCreated", True),
    }
    # Only override the dataclass defaults when the key is present
    if "typeColumnName" in raw:
        kwargs["type_column_name"] = raw["typeColumnName"]
    value_column = raw.get("valueColumnName", raw.get("tagColumnName"))
    if value_column is not None:
        kwargs["value_column_name"] = value_column
    return cls(**kwargs)


def parse_config(data: Any) -> WeaveConfig:
    """Validate already-decoded config data and build a WeaveConfig."""
    if data is None:
        data = {}
    _validate_config_schema(data)

    platform = Platform.parse(data["platform"])
    if platform is None:
        raise ConfigError("The platform must be Android, iOS, or Web")

    strings = None
    strings_raw = data.get("strings")
    if strings_raw is not None:
        strings = StringsConfig(
            sources=_sources(strings_raw.get("sources")),
            languages=[Language(id=lang["id"], path=lang["path"]) for lang in strings_raw.get("languages", [])],
        )

    constants = [
        _constants(c, ConstantsConfig, default_title="Constants")
        for c in data.get("constants") or []
    ]

    analytics = None
    analytics_raw = data.get("analytics")
    if analytics_raw is not None:
        analytics = _constants(analytics_raw, AnalyticsConfig, default_title="Analytics")

    escapes_raw = data.get("androidEscapes") or {}
    escapes = AndroidEscapes(
        dashes=escapes_raw.get("dashes", True),
        spaced_percent=escapes_raw.get("spacedPercent", True),
    )

    return WeaveConfig(
        platform=platform,
        header_column_name=data.get("headerColumnName", "###"),
        key_column_name=data.get("keyColumnName", "key"),
        platforms_column_name=data.get("platformsColumnName", "platforms"),
        strings=strings,
        constants=constants,
        analytics=analytics,
        android_escapes=escapes,
    )


def load_config(path: Path) -> WeaveConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yml", ".yaml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid json: {e}") from e
    return parse_config(data)


def find_config(path: Path | None = None) -> Path:
    """Resolve the config path.

    An explicit path is returned as is. Otherwise weave-config.json is looked
    up in the current directory, then in its parent.
    """
    if path is not None:
        return path
    candidate = Path(DEFAULT_CONFIG_NAME)
    if candidate.exists():
        return candidate
    parent = Path("..") / DEFAULT_CONFIG_NAME
    if parent.exists():
        return parent
    raise ConfigError(f"Config File {DEFAULT_CONFIG_NAME} not found in current or parent directory")
