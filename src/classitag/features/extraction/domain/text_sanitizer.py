"""
Summary: Pure text clean-up helpers for scraped and tagged metadata.
Why: Every source hands over text with markup, entities, mojibake and odd spacing.
"""

from __future__ import annotations

import html
import re
from typing import Final

__all__ = [
    "decode_entities",
    "normalize_whitespace",
    "sanitize_text",
    "strip_markup",
    "title_case",
]

_MARKUP_RE: Final[re.Pattern[str]] = re.compile(r"<[^>]*>")
_SPACE_RUN_RE: Final[re.Pattern[str]] = re.compile(r" {2,}")

# UTF-8 bytes that were decoded once as Latin-1/CP1252 before reaching us.
_DOUBLE_ENCODED: Final[tuple[tuple[str, str], ...]] = (
    ("NoÃ«l", "Noël"),
    ("Ã«", "ë"),
    ("Ã¶", "ö"),
    ("Ã¼", "ü"),
    ("Ã¤", "ä"),
    ("Ã©", "é"),
    ("Ã¨", "è"),
    ("Ãª", "ê"),
    ("Ã®", "î"),
    ("Ã´", "ô"),
    ("Ã»", "û"),
    ("Ã§", "ç"),
    ("Ã±", "ñ"),
    ("\u00c3\u00a0", "à"),
    ("Ãœ", "Ü"),
    ("Ã‰", "É"),
    ("Ã€", "À"),
)

_SPACE_LIKE: Final[dict[int, str]] = {
    ord("\t"): " ",
    ord("\n"): " ",
    ord("\r"): " ",
    0x00A0: " ",
    0x2009: " ",
    0x200B: " ",
}

_LOWERCASE_WORDS: Final[frozenset[str]] = frozenset(
    {
        "a", "an", "the", "and", "or", "but", "of", "in", "on",
        "at", "to", "for", "with", "de", "la", "le", "von", "van",
    }
)


def strip_markup(text: str) -> str:
    """Remove every ``<...>`` run without interpreting it."""
    return _MARKUP_RE.sub("", text)


def decode_entities(text: str) -> str:
    """Decode HTML entities, then repair known double-encoded UTF-8 sequences."""
    decoded = html.unescape(text)
    for broken, fixed in _DOUBLE_ENCODED:
        decoded = decoded.replace(broken, fixed)
    return decoded


def normalize_whitespace(text: str) -> str:
    """Map tabs, newlines and exotic spaces to ASCII space, collapse runs and trim."""
    return _SPACE_RUN_RE.sub(" ", text.translate(_SPACE_LIKE)).strip()


def title_case(text: str) -> str:
    """Title-case an ALL-CAPS string, keeping short particles lowercase after the first word."""
    words = text.split()
    result: list[str] = []
    for index, word in enumerate(words):
        lowered = word.lower()
        if index > 0 and lowered in _LOWERCASE_WORDS:
            result.append(lowered)
        else:
            result.append(word[:1].upper() + word[1:].lower())
    return " ".join(result)


def sanitize_text(text: str) -> str:
    """Strip markup, decode entities and normalise whitespace in one pass."""
    return normalize_whitespace(decode_entities(strip_markup(text)))
