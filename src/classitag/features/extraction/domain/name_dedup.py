"""Artist name canonicalisation and variant merging."""

from __future__ import annotations

from collections.abc import Iterable

from classitag.shared import Artist

__all__ = [
    "canonicalize",
    "dedupe_artists",
    "dedupe_names",
    "merge_warning",
]


def canonicalize(name: str) -> str:
    """Lowercase and keep ASCII letters and digits only.

    Digits survive so ``Orchestra 1`` and ``Orchestra 2`` never merge.
    """
    return "".join(ch for ch in name.lower() if ch.isascii() and ch.isalnum())


def merge_warning(discarded: str, kept: str, key: str) -> str:
    return f"duplication: {discarded} merged with {kept} (normalized: {key})"


def dedupe_names(names: Iterable[str]) -> tuple[list[str], list[str]]:
    """Merge name variants whose canonical forms match; the first spelling wins.

    Returns:
        The surviving names in first-seen order and one warning per merged variant.
    """

    kept_names: list[str] = []
    warnings: list[str] = []
    seen: dict[str, str] = {}
    for name in names:
        key = canonicalize(name)
        kept = seen.get(key)
        if kept is None:
            seen[key] = name
            kept_names.append(name)
        elif kept != name:
            warnings.append(merge_warning(name, kept, key))
    return kept_names, warnings


def dedupe_artists(artists: Iterable[Artist]) -> tuple[list[Artist], list[str]]:
    """Merge artists sharing canonical name *and* role; other roles are left alone."""

    kept_artists: list[Artist] = []
    warnings: list[str] = []
    seen: dict[tuple[str, str], Artist] = {}
    for artist in artists:
        key = (canonicalize(artist.name), artist.role.value)
        kept = seen.get(key)
        if kept is None:
            seen[key] = artist
            kept_artists.append(artist)
        elif kept.name != artist.name:
            warnings.append(merge_warning(artist.name, kept.name, key[0]))
    return kept_artists, warnings
