# Shared pytest fixtures
from __future__ import annotations
import json
import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from weave.logging.warning_log import WarningLog
from weave.models.config_models import Source
from weave.sheet.reader import CsvSheet, read_csv_text

STRINGS_CSV = """key,platforms,en,fr
### Greetings,,,
greeting,,Hello,Bonjour
farewell,ios,Bye,Au revoir
"""

CONSTANTS_CSV = """key,type,value,platforms
api_url,,https://example.com,
sign_in,Event,signin,
home,Screen,home_screen,
"""


class FakeFetch:
    """Stands in for download_csv: source title -> CSV text (None = failed download)."""

    def __init__(self, by_title: dict[str, str | None]) -> None:
        self.by_title = by_title
        self.calls: list[str] = []

    def __call__(self, source: Source) -> CsvSheet | None:
        self.calls.append(source.title)
        text = self.by_title.get(source.title)
        if text is None:
            return None
        return read_csv_text(text, source_title=source.title)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "out").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("WEAVE_CONFIG", raising=False)
        yield p


@pytest.fixture()
def warning_log() -> WarningLog:
    return WarningLog()


@pytest.fixture()
def sheet() -> Callable[[str, str], CsvSheet]:
    def make(text: str, title: str = "Sheet") -> CsvSheet:
        return read_csv_text(text, source_title=title)
    return make


@pytest.fixture()
def sample_config() -> dict:
    return {
        "platform": "Android",
        "strings": {
            "sources": [{"title": "Strings", "url": "https://example.com/strings.csv"}],
            "languages": [
                {"id": "en", "path": "out/en/strings.xml"},
                {"id": "fr", "path": "out/fr/strings.xml"},
            ],
        },
        "constants": [
            {
                "title": "Constants",
                "sources": [{"title": "Constants", "url": "https://example.com/constants.csv"}],
                "path": "out/Constants.kt",
                "packageName": "com.example.app",
                "typeColumnName": "type",
                "valuesAlignColumn": 0,
            }
        ],
    }


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config: dict) -> Path:
    cfg = temp_workdir / "weave-config.json"
    cfg.write_text(json.dumps(sample_config, indent=2), encoding="utf-8")
    return cfg


@pytest.fixture()
def fake_fetch() -> FakeFetch:
    return FakeFetch({"Strings": STRINGS_CSV, "Constants": CONSTANTS_CSV})


@pytest.fixture()
def make_fetch() -> Callable[[dict[str, str | None]], FakeFetch]:
    return FakeFetch
