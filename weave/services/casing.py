from __future__ import annotations

import re

from ..models.config_models import Casing

"""Key casing for generated constants.

Words are split on underscores, dashes and whitespace, and on lower->upper
transitions inside a chunk ("userName", "HTTPServer"), then re-joined in the
requested style.
"""

__all__ = [
    "split_words",
    "apply_casing",
]

_SEPARATORS = re.compile(r"[\s_\-]+")
_WORD = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def split_words(text: str) -> list[str]:
    words: list[str] = []
    for chunk in _SEPARATORS.split(text):
        words.extend(_WORD.findall(chunk))
    return words


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def apply_casing(text: str, casing: Casing) -> str:
    """Return ``text`` in the given casing. NONE (or no words) returns it unchanged.

    >>> apply_casing("user_name", Casing.CAMEL)
    'userName'
    >>> apply_casing("userName", Casing.CAPS)
    'USER_NAME'
    """
    if casing is Casing.NONE:
        return text
    words = split_words(text)
    if not words:
        return text
    if casing is Casing.CAMEL:
        return words[0].lower() + "".join(_capitalize(w) for w in words[1:])
    if casing is Casing.PASCAL:
        return "".join(_capitalize(w) for w in words)
    if casing is Casing.SNAKE:
        return "_".join(w.lower() for w in words)
    if casing is Casing.CAPS:
        return "_".join(w.upper() for w in words)
    raise ValueError(f"Unknown casing: {casing}")
