# Where: classitag.shared.album
# What: Canonical album record shared by extractors, the normalizer and the codec.
# Why: Keep one in-memory shape for every producer and consumer of album metadata.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

MISSING_TITLE: Final[str] = "[MISSING]"
UNKNOWN_LABEL: Final[str] = "[Unknown Label]"
VARIOUS_ARTISTS: Final[str] = "Various Artists"


class Role(StrEnum):
    """Closed set of artist roles; the value is the wire string."""

    COMPOSER = "composer"
    SOLOIST = "soloist"
    ENSEMBLE = "ensemble"
    CONDUCTOR = "conductor"
    ARRANGER = "arranger"
    GUEST = "guest"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Artist:
    """A named contributor; identity is the (name, role) pair."""

    name: str
    role: Role


@dataclass(slots=True)
class Edition:
    """Release edition: label, catalog number and edition year (0 when unknown)."""

    label: str = ""
    catalog_number: str = ""
    year: int = 0

    def is_empty(self) -> bool:
        return not self.label and not self.catalog_number and self.year == 0


@dataclass(frozen=True, slots=True)
class TrackFile:
    """Forward-slash path of the source file relative to the album root."""

    path: str


@dataclass(slots=True)
class Track:
    """One physical track on a disc."""

    disc: int
    track: int
    title: str
    artists: list[Artist] = field(default_factory=list)
    file: TrackFile | None = None

    def composer(self) -> Artist | None:
        """Return the first composer credit, if any."""
        for artist in self.artists:
            if artist.role is Role.COMPOSER:
                return artist
        return None

    def performers(self) -> list[Artist]:
        return [artist for artist in self.artists if artist.role is not Role.COMPOSER]

    def has_artist(self, artist: Artist) -> bool:
        return artist in self.artists


@dataclass(slots=True)
class Album:
    """Canonical album record built by one source driver and finished by the normalizer."""

    folder_name: str = ""
    title: str = MISSING_TITLE
    original_year: int = 0
    edition: Edition | None = None
    album_artist: list[Artist] = field(default_factory=list)
    tracks: list[Track] = field(default_factory=list)

    def has_title(self) -> bool:
        return bool(self.title.strip()) and self.title != MISSING_TITLE


def format_artists(artists: list[Artist]) -> str:
    """Render performers as ``"Soloists, Ensembles, Conductors, Unknowns"``.

    Composers, arrangers and guests are left out; names keep their original order
    within each group.
    """

    order = (Role.SOLOIST, Role.ENSEMBLE, Role.CONDUCTOR, Role.UNKNOWN)
    names: list[str] = []
    for role in order:
        names.extend(artist.name for artist in artists if artist.role is role)
    return ", ".join(names)


__all__ = [
    "Album",
    "Artist",
    "Edition",
    "MISSING_TITLE",
    "Role",
    "Track",
    "TrackFile",
    "UNKNOWN_LABEL",
    "VARIOUS_ARTISTS",
    "format_artists",
]
