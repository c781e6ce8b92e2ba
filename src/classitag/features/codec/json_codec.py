"""
Summary: Canonical JSON codec for the album record.
Why: Extractor, tag writer and validator exchange albums through one stable document shape.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from classitag.shared import (
    MISSING_TITLE,
    Album,
    Artist,
    Edition,
    Role,
    Track,
    TrackFile,
)

__all__ = [
    "CodecError",
    "album_from_dict",
    "album_to_dict",
    "dumps_album",
    "load_album",
    "loads_album",
]


class CodecError(ValueError):
    """Raised when a document does not have the canonical album shape."""


def _artist_to_dict(artist: Artist) -> dict[str, str]:
    return {"name": artist.name, "role": artist.role.value}


def album_to_dict(album: Album) -> dict[str, Any]:
    """Build the canonical mapping; key order is part of the format.

    The composer is written inside ``artists``; there is no top-level ``composer`` key.
    """

    document: dict[str, Any] = {
        "title": album.title,
        "original_year": album.original_year,
    }
    if album.edition is not None:
        document["edition"] = {
            "label": album.edition.label,
            "catalog_number": album.edition.catalog_number,
            "edition_year": album.edition.year,
        }

    tracks: list[dict[str, Any]] = []
    for track in album.tracks:
        entry: dict[str, Any] = {
            "disc": track.disc,
            "track": track.track,
            "title": track.title,
            "artists": [_artist_to_dict(artist) for artist in track.artists],
        }
        if track.file is not None:
            entry["name"] = track.file.path
        tracks.append(entry)
    document["tracks"] = tracks
    return document


def dumps_album(album: Album) -> str:
    """Serialise with two-space indentation and literal non-ASCII characters."""
    return json.dumps(album_to_dict(album), indent=2, ensure_ascii=False)


def _parse_artist(raw: object, where: str) -> Artist:
    if not isinstance(raw, Mapping):
        raise CodecError(f"{where}: artist must be an object")
    name = raw.get("name")
    role = raw.get("role")
    if not isinstance(name, str) or not name:
        raise CodecError(f"{where}: artist name must be a non-empty string")
    try:
        return Artist(name=name, role=Role(role))
    except ValueError as exc:
        raise CodecError(f"{where}: unknown role {role!r}") from exc


def _parse_int(raw: Mapping[str, Any], key: str, default: int, where: str) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise CodecError(f"{where}: {key} must be an integer")
    return value


def _parse_track(raw: object, index: int) -> Track:
    where = f"tracks[{index}]"
    if not isinstance(raw, Mapping):
        raise CodecError(f"{where}: track must be an object")

    title = raw.get("title", "")
    if not isinstance(title, str):
        raise CodecError(f"{where}: title must be a string")

    artists_raw = raw.get("artists", [])
    if not isinstance(artists_raw, list):
        raise CodecError(f"{where}: artists must be a list")
    artists = [_parse_artist(item, f"{where}.artists[{i}]") for i, item in enumerate(artists_raw)]

    # Older writers put the composer in its own key.
    composer_raw = raw.get("composer")
    if composer_raw is not None:
        composer = _parse_artist(composer_raw, f"{where}.composer")
        composer = Artist(name=composer.name, role=Role.COMPOSER)
        if not any(artist.role is Role.COMPOSER for artist in artists):
            artists.insert(0, composer)

    name = raw.get("name")
    return Track(
        disc=_parse_int(raw, "disc", 1, where),
        track=_parse_int(raw, "track", 0, where),
        title=title,
        artists=artists,
        file=TrackFile(path=name) if isinstance(name, str) and name else None,
    )


def album_from_dict(document: Mapping[str, Any]) -> Album:
    """Rebuild an album from a canonical mapping; both composer encodings are accepted."""

    title = document.get("title", MISSING_TITLE)
    if not isinstance(title, str):
        raise CodecError("title must be a string")

    edition: Edition | None = None
    edition_raw = document.get("edition")
    if edition_raw is not None:
        if not isinstance(edition_raw, Mapping):
            raise CodecError("edition must be an object")
        edition = Edition(
            label=str(edition_raw.get("label", "")),
            catalog_number=str(edition_raw.get("catalog_number", "")),
            year=_parse_int(edition_raw, "edition_year", 0, "edition"),
        )

    tracks_raw = document.get("tracks", [])
    if not isinstance(tracks_raw, list):
        raise CodecError("tracks must be a list")

    return Album(
        title=title,
        original_year=_parse_int(document, "original_year", 0, "album"),
        edition=edition,
        tracks=[_parse_track(item, index) for index, item in enumerate(tracks_raw)],
    )


def loads_album(text: str) -> Album:
    """Parse canonical JSON text."""

    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CodecError(f"invalid JSON: {exc}") from exc
    if not isinstance(document, Mapping):
        raise CodecError("top-level value must be an object")
    return album_from_dict(document)


def load_album(path: Path) -> Album:
    """Read a canonical JSON file."""
    return loads_album(path.read_text(encoding="utf-8"))
