"""
Summary: Build an album draft from the embedded tags of a directory of FLAC files.
Why: Local rips are the primary source; their tags seed every album-level and track field.
"""

from __future__ import annotations

import datetime as _dt
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final, final

from classitag.features.extraction.domain import (
    ExtractionIssue,
    ExtractionResult,
    SourceReadError,
    UnsupportedSourceError,
    detect_disc_structure,
)
from classitag.platform.logging import logger
from classitag.shared import (
    MISSING_TITLE,
    Album,
    Artist,
    Edition,
    Role,
    Track,
    TrackFile,
    format_artists,
)

from ._tag_utils import (
    disc_from_folders,
    get_tag,
    parse_artist_field,
    parse_comment_edition,
    parse_directory_name,
    parse_slash_separated,
    parse_year,
    title_from_filename,
    track_from_filename,
)
from .ports import TagReaderPort

__all__ = ["TAG_SOURCE", "TagSourceExtractor", "TaggedFile", "discover_audio_files"]

TAG_SOURCE: Final[str] = "tags"
AUDIO_SUFFIX: Final[str] = ".flac"
DJ_TAG: Final[str] = "DJ"


@dataclass(frozen=True, slots=True)
class TaggedFile:
    """One audio file with its tags, in canonical order."""

    path: Path
    relative_path: str
    tags: Mapping[str, str]

    @property
    def folders(self) -> list[str]:
        """Folder names between the album root and the file."""
        return list(Path(self.relative_path).parts[:-1])


def discover_audio_files(directory: Path) -> list[Path]:
    """Return every ``.flac`` file below ``directory`` sorted by full path."""

    files = [
        path
        for path in directory.rglob("*")
        if path.is_file() and path.suffix.lower() == AUDIO_SUFFIX
    ]
    return sorted(files, key=lambda path: str(path))


@final
class TagSourceExtractor:
    """Tag-source extractor working over a tag-reader port."""

    def __init__(self, tag_reader: TagReaderPort, *, current_year: int | None = None) -> None:
        self._tag_reader = tag_reader
        self._current_year = current_year or _dt.date.today().year

    def read_directory(self, directory: Path) -> list[TaggedFile]:
        """Discover audio files and read their tags.

        Raises:
            SourceReadError: The directory is missing or holds no audio files.
            UnsupportedSourceError: Any file carries a DJ tag.
        """

        if not directory.exists():
            raise SourceReadError(f"directory not found: {directory}")
        if not directory.is_dir():
            raise SourceReadError(f"not a directory: {directory}")

        paths = discover_audio_files(directory)
        if not paths:
            raise SourceReadError("no audio files found")

        tagged: list[TaggedFile] = []
        for path in paths:
            tags = self._tag_reader.read_tags(path)
            relative = path.relative_to(directory).as_posix()
            if get_tag(tags, DJ_TAG):
                raise UnsupportedSourceError(f"DJ tag present in {relative}; DJ mixes are not supported")
            tagged.append(TaggedFile(path=path, relative_path=relative, tags=tags))
        logger.debug("Read tags from %d file(s) in %s", len(tagged), directory)
        return tagged

    def build_album(self, directory: Path, files: list[TaggedFile]) -> ExtractionResult:
        """Assemble the album draft from already-read tags."""

        album = Album(folder_name=directory.name)
        result = ExtractionResult(album=album, source=TAG_SOURCE)
        if not files:
            return result.with_error(ExtractionIssue.missing("tracks", "no tracks found"))

        result = self._seed_album(album, files[0].tags, result)

        album_artist_values: list[str] = []
        defaulted_discs = 0
        for tagged in files:
            track, result, disc_source = self._build_track(tagged, result)
            value = get_tag(tagged.tags, "ALBUMARTIST")
            if value and value not in album_artist_values:
                album_artist_values.append(value)
            if track is None:
                continue
            if disc_source == "default":
                defaulted_discs += 1
            album.tracks.append(track)

        result = self._check_album_artist(album, album_artist_values, result)
        if defaulted_discs == len(album.tracks) and album.tracks:
            result = self._infer_discs_from_numbering(album, result)
        elif defaulted_discs:
            result = result.with_error(
                ExtractionIssue.optional(
                    "disc",
                    f"not found in tags or folder names for {defaulted_discs} file(s); defaulted to 1",
                )
            )

        for track in album.tracks:
            if track.composer() is None:
                result = result.with_error(
                    ExtractionIssue.missing("composer", f"missing for disc {track.disc} track {track.track}")
                )

        result = self._fallback_to_directory_name(album, directory.name, result)
        if not album.has_title():
            result = result.with_error(ExtractionIssue.missing("title", "not found in tags or directory name"))
        if album.original_year <= 0:
            result = result.with_error(ExtractionIssue.missing("year", "not found in tags or directory name"))
        return result.with_album(album)

    def extract(self, directory: Path) -> ExtractionResult:
        """Read and assemble in one call."""
        return self.build_album(directory, self.read_directory(directory))

    def _seed_album(
        self,
        album: Album,
        tags: Mapping[str, str],
        result: ExtractionResult,
    ) -> ExtractionResult:
        title = get_tag(tags, "ALBUM")
        if title:
            album.title = title

        for key in ("ORIGINALDATE", "YEAR", "DATE"):
            year = parse_year(get_tag(tags, key))
            if year:
                album.original_year = year
                logger.debug("Original year %d taken from %s", year, key)
                break

        album.album_artist = parse_artist_field(get_tag(tags, "ALBUMARTIST"))

        label = get_tag(tags, "LABEL")
        catalog = get_tag(tags, "CATALOGNUMBER")
        edition_year = parse_year(get_tag(tags, "DATE")) or 0
        if not label and not catalog:
            label, catalog = parse_comment_edition(get_tag(tags, "COMMENT"))
            if label or catalog:
                logger.debug("Edition read from COMMENT: label=%r catalog=%r", label, catalog)

        if label or catalog or edition_year:
            album.edition = Edition(label=label, catalog_number=catalog, year=edition_year)
            return result
        return result.with_error(ExtractionIssue.optional("edition", "no label or catalog number in tags"))

    def _build_track(
        self,
        tagged: TaggedFile,
        result: ExtractionResult,
    ) -> tuple[Track | None, ExtractionResult, str]:
        tags = tagged.tags
        filename = Path(tagged.relative_path).name
        stem = Path(tagged.relative_path).stem

        number, _ = parse_slash_separated(get_tag(tags, "TRACKNUMBER"))
        if not number:
            number = track_from_filename(filename)
        if not number:
            issue = ExtractionIssue.missing("track", f"missing for {tagged.relative_path}")
            return None, result.with_error(issue), "default"

        disc_source = "tag"
        disc, _ = parse_slash_separated(get_tag(tags, "DISCNUMBER"))
        if not disc:
            disc = disc_from_folders(tagged.folders)
            disc_source = "folder" if disc else "default"
        disc = disc or 1

        title = get_tag(tags, "TITLE") or title_from_filename(stem)
        track = Track(disc=disc, track=number, title=title, file=TrackFile(path=tagged.relative_path))

        composer = get_tag(tags, "COMPOSER")
        if composer:
            track.artists.append(Artist(name=composer, role=Role.COMPOSER))
        else:
            logger.warning("No COMPOSER tag in %s", tagged.relative_path)

        performers = get_tag(tags, "ARTIST") or get_tag(tags, "ALBUMARTIST")
        track.artists.extend(parse_artist_field(performers))
        return track, result, disc_source

    def _check_album_artist(
        self,
        album: Album,
        values: list[str],
        result: ExtractionResult,
    ) -> ExtractionResult:
        if len(values) > 1:
            logger.warning("Inconsistent ALBUMARTIST values: %s", values)
            return result.with_error(ExtractionIssue.optional("album_artist", "inconsistent album artist"))
        if len(values) == 1:
            if not album.album_artist:
                album.album_artist = parse_artist_field(values[0])
            else:
                formatted = format_artists(album.album_artist)
                if formatted != values[0]:
                    return result.with_warning(
                        f"album artist '{formatted}' differs from track-level '{values[0]}'"
                    )
        return result

    def _infer_discs_from_numbering(self, album: Album, result: ExtractionResult) -> ExtractionResult:
        lines = [f"{track.track}. {track.title}" for track in album.tracks]
        structure = detect_disc_structure(lines)
        if structure.is_multi_disc:
            for index, track in enumerate(album.tracks):
                track.disc = structure.disc_for(index)
            result = result.with_warning(
                f"disc numbers inferred from track-number resets ({structure.disc_count} discs)"
            )
        return result.with_note(structure.to_note("track number reset"))

    def _fallback_to_directory_name(
        self,
        album: Album,
        name: str,
        result: ExtractionResult,
    ) -> ExtractionResult:
        if album.title != MISSING_TITLE and album.title:
            return result
        parsed = parse_directory_name(name, self._current_year + 1)
        if parsed is None or not parsed[0]:
            return result
        album.title, year = parsed
        if album.original_year <= 0:
            album.original_year = year
        logger.debug("Album title %r taken from directory name", album.title)
        return result.with_warning(f"album title taken from directory name '{name}'")
