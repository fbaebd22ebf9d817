from __future__ import annotations
import pytest
from weave.models.strand import ConstantStrand, HeaderStrand, LanguageStrand
from weave.services.verifier import (
    InvalidKeyError,
    verify_constant_strands,
    verify_keys,
    verify_string_strands,
)


def _lang(key: str, line: int, source: str = "S", **translations: str) -> LanguageStrand:
    return LanguageStrand(key=key, source_label=source, line_number=line, translations=translations or {"en": key})


def _const(key: str, line: int, type_: str = "", source: str = "S") -> ConstantStrand:
    return ConstantStrand(key=key, source_label=source, line_number=line, type=type_, tag=f"{key}-{line}")


@pytest.mark.parametrize("key", ["has space", "dash-key", "dot.key", "émoji", "semi;colon", "tab\tkey"])
def test_invalid_keys_are_fatal(key):
    strands = [_lang("ok_key", 2), _lang(key, 3)]
    with pytest.raises(InvalidKeyError) as e:
        verify_keys(strands)
    assert "Line 3 from S" in str(e.value)


def test_space_message_takes_precedence():
    with pytest.raises(InvalidKeyError) as e:
        verify_keys([_const("bad key", 7)])
    assert "contains a space in its key" in str(e.value)


def test_illegal_character_message():
    with pytest.raises(InvalidKeyError) as e:
        verify_keys([_const("bad-key", 7)])
    assert "contains some illegal characters" in str(e.value)


def test_header_text_is_not_a_key():
    strands = [HeaderStrand(key="Any text - goes here!", source_label="S", line_number=2), _lang("Valid_Key9", 3)]
    assert verify_keys(strands) == strands


def test_duplicates_keep_last_occurrence(warning_log):
    strands = [
        _lang("a", 2),
        _lang("b", 3),
        HeaderStrand(key="Section", source_label="S", line_number=4),
        _lang("a", 5),
        _lang("a", 6, source="Other"),
    ]
    result = verify_string_strands(strands, language_count=1, warnings=warning_log)
    assert [(s.key, s.line_number) for s in result] == [("b", 3), ("Section", 4), ("a", 6)]
    messages = [r.message for r in warning_log.records]
    assert messages == [
        "Line 2 from S and Line 5 from S have the same key. The second one will be used",
        "Line 2 from S and Line 6 from Other have the same key. The second one will be used",
        "Line 5 from S and Line 6 from Other have the same key. The second one will be used",
    ]
    assert all(r.category == "DUPLICATE_KEY" for r in warning_log.records)


def test_duplicate_resolution_is_idempotent(warning_log):
    strands = [_lang("k", line) for line in range(2, 9)]
    once = verify_string_strands(strands, 1, warning_log)
    twice = verify_string_strands(once, 1, warning_log)
    assert [s.line_number for s in once] == [8]
    assert once == twice


def test_empty_translations_removed_incomplete_kept(warning_log):
    empty = LanguageStrand(key="empty", source_label="S", line_number=2, translations={})
    partial = LanguageStrand(key="partial", source_label="S", line_number=3, translations={"en": "Hi"})
    full = LanguageStrand(key="full", source_label="S", line_number=4, translations={"en": "Hi", "fr": "Salut"})
    result = verify_string_strands([empty, partial, full], language_count=2, warnings=warning_log)
    assert [s.key for s in result] == ["partial", "full"]
    assert [r.category for r in warning_log.records] == ["NO_TRANSLATIONS", "MISSING_TRANSLATION"]
    assert warning_log.records[0].message == "Line 2 from S has no translations so it will not be parsed."


def test_constants_duplicate_needs_same_type(warning_log):
    strands = [
        _const("home", 2, "Screen"),
        _const("home", 3, "Event"),
        _const("home", 4, "Screen"),
        _const("home", 5),
    ]
    result = verify_constant_strands(strands, warning_log)
    assert [(s.line_number, s.type) for s in result] == [(3, "Event"), (4, "Screen"), (5, "")]
    assert len(warning_log) == 1
    assert "have the same key and type" in warning_log.records[0].message
