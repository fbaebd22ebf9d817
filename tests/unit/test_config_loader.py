from __future__ import annotations
import json
import pytest
from pathlib import Path
from weave.config.loader import SCHEMA_PATH, ConfigError, find_config, load_config, parse_config
from weave.models.config_models import AnalyticsConfig, Casing, Platform


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.platform is Platform.ANDROID
    assert cfg.header_column_name == "###"
    assert cfg.key_column_name == "key"
    assert cfg.platforms_column_name == "platforms"
    assert [lang.id for lang in cfg.strings.languages] == ["en", "fr"]
    assert cfg.strings.sources[0].title == "Strings"
    task = cfg.constants[0]
    assert task.package_name == "com.example.app"
    assert task.type_column_name == "type"
    assert task.value_column_name == "value"
    assert task.key_casing is Casing.CAMEL
    assert task.type_casing is Casing.PASCAL
    assert task.is_top_level_class_created is True
    assert task.object_name == "Constants"
    assert cfg.analytics is None


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError) as e:
        load_config(temp_workdir / "nope.json")
    assert "config file not found" in str(e.value)


def test_load_config_invalid_json(temp_workdir: Path):
    p = temp_workdir / "weave-config.json"
    p.write_text("{ not json", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(p)
    assert "invalid json" in str(e.value)


def test_load_config_yaml(temp_workdir: Path):
    p = temp_workdir / "weave-config.yml"
    p.write_text(
        "platform: web\n"
        "strings:\n"
        "  sources:\n"
        "    - {title: S, url: 'https://example.com/s.csv'}\n"
        "  languages:\n"
        "    - {id: en, path: out/en.json}\n",
        encoding="utf-8",
    )
    cfg = load_config(p)
    assert cfg.platform is Platform.WEB
    assert cfg.strings.languages[0].path == "out/en.json"
    assert cfg.constants == []


def test_platform_is_case_insensitive():
    assert parse_config({"platform": "IOS"}).platform is Platform.IOS
    assert parse_config({"platform": "android"}).platform is Platform.ANDROID


def test_unknown_platform_rejected():
    with pytest.raises(ConfigError) as e:
        parse_config({"platform": "Windows"})
    assert "Android, iOS, or Web" in str(e.value)


def test_missing_platform_fails_schema():
    with pytest.raises(ConfigError) as e:
        parse_config({"strings": None})
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_language_without_path_fails_schema():
    data = {
        "platform": "Android",
        "strings": {"sources": [], "languages": [{"id": "en"}]},
    }
    with pytest.raises(ConfigError) as e:
        parse_config(data)
    assert "config validation failed" in str(e.value)


def test_wrong_type_for_align_column():
    data = {
        "platform": "iOS",
        "constants": [{"title": "C", "sources": [], "path": "C.swift", "valuesAlignColumn": "eight"}],
    }
    with pytest.raises(ConfigError):
        parse_config(data)


def test_custom_column_names_and_casing():
    data = {
        "platform": "iOS",
        "headerColumnName": "//",
        "keyColumnName": "id",
        "platformsColumnName": "targets",
        "constants": [
            {
                "title": "Keys",
                "sources": [{"title": "K", "url": "https://example.com/k.csv"}],
                "path": "Sources/Keys.swift",
                "keyColumnName": "name",
                "valueColumnName": "tag",
                "valuesAlignColumn": 32,
                "keyCasing": "caps",
                "typeCasing": "snakecase",
                "isTopLevelClassCreated": False,
            }
        ],
    }
    cfg = parse_config(data)
    assert cfg.header_column_name == "//"
    assert cfg.key_column_name == "id"
    assert cfg.platforms_column_name == "targets"
    task = cfg.constants[0]
    assert cfg.key_column_for(task) == "name"
    assert task.value_column_name == "tag"
    assert task.type_column_name == ""
    assert task.values_align_column == 32
    assert task.key_casing is Casing.CAPS
    assert task.type_casing is Casing.SNAKE
    assert task.is_top_level_class_created is False
    assert task.object_name == "Keys"


def test_unknown_casing_means_none():
    data = {
        "platform": "iOS",
        "constants": [{"title": "C", "sources": [], "path": "C.swift", "keyCasing": "kebab"}],
    }
    assert parse_config(data).constants[0].key_casing is Casing.NONE


def test_analytics_defaults():
    data = {
        "platform": "Web",
        "analytics": {"sources": [], "path": "out/analytics.json"},
    }
    cfg = parse_config(data)
    assert isinstance(cfg.analytics, AnalyticsConfig)
    assert cfg.analytics.title == "Analytics"
    assert cfg.analytics.type_column_name == "type"
    assert cfg.analytics.value_column_name == "tag"


def test_analytics_tag_column_name():
    data = {
        "platform": "Web",
        "analytics": {"sources": [], "path": "a.json", "typeColumnName": "kind", "tagColumnName": "event_tag"},
    }
    cfg = parse_config(data)
    assert cfg.analytics.type_column_name == "kind"
    assert cfg.analytics.value_column_name == "event_tag"


def test_android_escapes_configurable():
    cfg = parse_config({"platform": "Android", "androidEscapes": {"dashes": False}})
    assert cfg.android_escapes.dashes is False
    assert cfg.android_escapes.spaced_percent is True


def test_find_config_prefers_explicit_path(temp_workdir: Path):
    explicit = temp_workdir / "custom.json"
    assert find_config(explicit) == explicit


def test_find_config_current_then_parent(temp_workdir: Path, monkeypatch):
    sub = temp_workdir / "sub"
    sub.mkdir()
    (temp_workdir / "weave-config.json").write_text(json.dumps({"platform": "Web"}), encoding="utf-8")
    monkeypatch.chdir(sub)
    found = find_config()
    assert found == Path("..") / "weave-config.json"
    assert load_config(found).platform is Platform.WEB


def test_find_config_not_found(temp_workdir: Path, monkeypatch):
    sub = temp_workdir / "a" / "b"
    sub.mkdir(parents=True)
    monkeypatch.chdir(sub)
    with pytest.raises(ConfigError) as e:
        find_config()
    assert "not found in current or parent directory" in str(e.value)


def test_schema_ships_beside_loader():
    assert SCHEMA_PATH.is_file()
    assert SCHEMA_PATH.parent.name == "config"
    schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    assert "platform" in schema["required"]
