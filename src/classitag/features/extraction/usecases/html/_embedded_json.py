"""
Summary: Pull a JSON array out of page-state text by bracket balancing.
Why: Embedded client state is not valid JSON at any enclosing level, so a parser cannot start higher up.
"""

from __future__ import annotations

import json
from typing import Any, Final

__all__ = ["SCAN_LIMIT", "extract_json_array", "find_balanced_array"]

SCAN_LIMIT: Final[int] = 50_000


def find_balanced_array(text: str, key: str, limit: int = SCAN_LIMIT) -> str | None:
    """Return the raw ``[...]`` that follows ``"key":`` in ``text``.

    Quotes toggle an in-string flag and a backslash skips the next character.
    Unicode escapes get no special treatment. Scanning stops after ``limit``
    characters.
    """

    marker = f'"{key}":'
    start = text.find(marker + "[")
    if start == -1:
        return None
    array_start = start + len(marker)

    depth = 0
    in_string = False
    escaped = False
    end = min(len(text), array_start + limit)
    for index in range(array_start, end):
        char = text[index]
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char in "[{":
            depth += 1
        elif char in "]}":
            depth -= 1
            if depth == 0 and char == "]":
                return text[array_start : index + 1]
    return None


def extract_json_array(text: str, key: str) -> list[Any]:
    """Decode the array found by ``find_balanced_array``; empty when absent.

    Raises:
        json.JSONDecodeError: The balanced text is not valid JSON.
    """

    raw = find_balanced_array(text, key)
    if raw is None:
        return []
    decoded = json.loads(raw)
    return decoded if isinstance(decoded, list) else []
