"""Shared album record used across features."""

from .album import (
    MISSING_TITLE,
    UNKNOWN_LABEL,
    VARIOUS_ARTISTS,
    Album,
    Artist,
    Edition,
    Role,
    Track,
    TrackFile,
    format_artists,
)

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
