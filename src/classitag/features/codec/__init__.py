"""Canonical album JSON codec."""

from .json_codec import (
    CodecError,
    album_from_dict,
    album_to_dict,
    dumps_album,
    load_album,
    loads_album,
)

__all__ = [
    "CodecError",
    "album_from_dict",
    "album_to_dict",
    "dumps_album",
    "load_album",
    "loads_album",
]
