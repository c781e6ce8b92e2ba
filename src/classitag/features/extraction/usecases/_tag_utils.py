"""Tag utility helpers.

Where: src/classitag/features/extraction/usecases/_tag_utils.py
What: Pure routines for parsing tag values, filenames and folder names.
Why: Keep the tag-source extractor focused on assembling the album.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Final

from classitag.features.extraction.domain import is_disc_directory
from classitag.shared import Artist, Role

__all__ = [
    "disc_from_folders",
    "get_tag",
    "parse_artist_field",
    "parse_comment_edition",
    "parse_directory_name",
    "parse_slash_separated",
    "parse_year",
    "title_from_filename",
    "track_from_filename",
]

_FILENAME_TRACK_RE: Final[re.Pattern[str]] = re.compile(r"^(\d{1,3})[\s\-._]")
_FILENAME_PREFIX_RE: Final[re.Pattern[str]] = re.compile(r"^\d{1,3}[\s\-._]+")
_FOLDER_DISC_NUMBER_RE: Final[re.Pattern[str]] = re.compile(r"(\d+)\s*$")
_FOLDER_YEAR_RE: Final[re.Pattern[str]] = re.compile(r"[\[\(](\d{4})[\]\)]")
_FORMAT_MARKER_RE: Final[re.Pattern[str]] = re.compile(
    r"\s*\[(?:FLAC|MP3|AAC|ALAC|WAV|APE|WV|24-\d+|16-\d+)\]", re.IGNORECASE
)
_COMMENT_LABEL_RE: Final[re.Pattern[str]] = re.compile(r"label:[ \t]*([^\n]+)", re.IGNORECASE)
_COMMENT_CATALOG_RE: Final[re.Pattern[str]] = re.compile(
    r"catalog(?:[ \t]*number)?:[ \t]*([^\n]+)", re.IGNORECASE
)


def get_tag(tags: Mapping[str, str], key: str) -> str:
    """Return the trimmed tag value, or an empty string when absent."""
    value = tags.get(key)
    return value.strip() if value else ""


def parse_slash_separated(value: str) -> tuple[int | None, int | None]:
    """Parse a string in 'number/total' format.

    Returns a tuple (number, total) or (None, None) if conversion fails.
    """
    parts: list[str] = value.strip().split(sep="/") if value else []
    num: int | None = int(parts[0]) if parts and parts[0].strip().isdigit() else None
    total: int | None = int(parts[1]) if len(parts) > 1 and parts[1].strip().isdigit() else None
    return num, total


def parse_year(date_str: str) -> int | None:
    """Parse a year from a string (expects the first 4 characters to be digits)."""
    date_str = date_str.strip() if date_str else ""
    return int(date_str[:4]) if len(date_str) >= 4 and date_str[:4].isdigit() else None


def parse_artist_field(value: str) -> list[Artist]:
    """Split an ARTIST-style value on ``;`` (preferred) or ``,``; every role is UNKNOWN."""

    if not value.strip():
        return []
    separator = ";" if ";" in value else ","
    names = [part.strip() for part in value.split(separator)]
    return [Artist(name=name, role=Role.UNKNOWN) for name in names if name]


def parse_comment_edition(comment: str) -> tuple[str, str]:
    """Pull ``label:`` and ``catalog number:`` lines out of a free-form comment."""

    label = ""
    catalog = ""
    label_match = _COMMENT_LABEL_RE.search(comment)
    if label_match:
        label = label_match.group(1).strip()
    catalog_match = _COMMENT_CATALOG_RE.search(comment)
    if catalog_match:
        catalog = catalog_match.group(1).strip()
    return label, catalog


def track_from_filename(filename: str) -> int | None:
    """Leading 1-3 digit number followed by a space, dash, dot or underscore."""
    match = _FILENAME_TRACK_RE.match(filename)
    if match:
        number = int(match.group(1))
        return number if number > 0 else None
    return None


def title_from_filename(stem: str) -> str:
    """Filename stem without its leading track number."""
    return _FILENAME_PREFIX_RE.sub("", stem).strip()


def disc_from_folders(folder_names: list[str]) -> int | None:
    """Disc number from the nearest ``CD N``/``Disc N``/``Disk N``/``DVD N`` folder, innermost first."""

    for name in reversed(folder_names):
        if not is_disc_directory(name):
            continue
        match = _FOLDER_DISC_NUMBER_RE.search(name)
        if match:
            number = int(match.group(1))
            if 0 < number < 100:
                return number
    return None


def parse_directory_name(name: str, max_year: int) -> tuple[str, int] | None:
    """Read ``<title> (<YYYY>) [<format>]`` or ``<title> [<YYYY>] [<format>]``.

    Returns the title up to the year bracket and the year, or None when the name
    carries no plausible year.
    """

    for match in _FOLDER_YEAR_RE.finditer(name):
        year = int(match.group(1))
        if 1900 <= year <= max_year:
            title = _FORMAT_MARKER_RE.sub("", name[: match.start()]).strip()
            return title, year
    return None
