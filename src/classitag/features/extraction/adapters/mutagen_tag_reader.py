"""src/classitag/features/extraction/adapters/mutagen_tag_reader.py
What: TagReaderPort implementation reading Vorbis comments from FLAC files with mutagen.
Why: Keep the tag library out of the use cases so they can run on plain mappings."""

from __future__ import annotations

from pathlib import Path
from typing import override

from mutagen import MutagenError
from mutagen.flac import FLAC

from classitag.features.extraction.domain import SourceParseError, SourceReadError
from classitag.features.extraction.usecases.ports import TagReaderPort
from classitag.platform.logging import logger


class MutagenTagReader(TagReaderPort):
    """Read FLAC tags as an uppercase-key mapping of first values."""

    @override
    def read_tags(self, path: Path) -> dict[str, str]:
        if not path.is_file():
            raise SourceReadError(f"audio file not found: {path}")
        try:
            audio = FLAC(path)
        except MutagenError as exc:
            logger.error("Failed to read FLAC tags from %s: %s", path, exc)
            raise SourceParseError(f"unreadable FLAC file {path.name}: {exc}") from exc

        if audio.tags is None:
            logger.debug("No Vorbis comment block in %s", path)
            return {}

        tags: dict[str, str] = {}
        for key, values in audio.tags.as_dict().items():
            if values:
                tags[key.upper()] = values[0]
        return tags


__all__ = ["MutagenTagReader"]
