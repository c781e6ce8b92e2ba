"""
Summary: Album normalizer applied after every source extractor.
Why: Sources disagree on roles, album-level performers and editions; one pass makes every draft canonical.
"""

from __future__ import annotations

import copy
from collections import Counter
from typing import Final, final

from classitag.features.extraction.domain import (
    Confidence,
    ExtractionIssue,
    ExtractionResult,
    RoleInference,
    dedupe_artists,
    infer_role,
)
from classitag.platform.logging import logger
from classitag.shared import (
    UNKNOWN_LABEL,
    VARIOUS_ARTISTS,
    Album,
    Artist,
    Role,
    Track,
    format_artists,
)

__all__ = ["AlbumNormalizer", "SENTINEL_EDITION_YEAR", "normalize"]

SENTINEL_EDITION_YEAR: Final[int] = 1900


def _is_various(artists: list[Artist]) -> bool:
    return format_artists(artists).strip().lower() == VARIOUS_ARTISTS.lower()


def _unique(artists: list[Artist]) -> list[Artist]:
    unique: list[Artist] = []
    for artist in artists:
        if artist not in unique:
            unique.append(artist)
    return unique


@final
class AlbumNormalizer:
    """Brings an extracted draft to the canonical post-normalization shape.

    Steps, in order: unknown-role resolution, universal-performer promotion,
    album-artist deduplication, universal-performer propagation, edition
    synthesis, track-order notes and invariant enforcement. Nothing here raises;
    every problem becomes an error, warning or note on the returned result.
    """

    def normalize(self, result: ExtractionResult) -> ExtractionResult:
        album = copy.deepcopy(result.album)

        result = self._resolve_unknown_roles(album, result)
        result = self._promote_universal_performers(album, result)
        album.album_artist, dedup_warnings = dedupe_artists(album.album_artist)
        result = result.with_warnings(dedup_warnings)
        result = self._propagate_album_artist(album, result)
        result = self._synthesize_edition(album, result)
        result = self._note_track_order(album, result)
        result = self._enforce_invariants(album, result)

        logger.debug(
            "Normalized %s album %r: %d track(s), %d album artist(s)",
            result.source,
            album.title,
            len(album.tracks),
            len(album.album_artist),
        )
        return result.with_album(album)

    def _resolve_unknown_roles(self, album: Album, result: ExtractionResult) -> ExtractionResult:
        """Give every UNKNOWN performer the single specific role seen for that name, else infer one."""

        everyone = [artist for track in album.tracks for artist in track.artists] + album.album_artist
        known: dict[str, set[Role]] = {}
        for artist in everyone:
            if artist.role not in (Role.UNKNOWN, Role.COMPOSER):
                known.setdefault(artist.name, set()).add(artist.role)

        resolved: dict[str, RoleInference] = {}
        for artist in everyone:
            if artist.role is not Role.UNKNOWN or artist.name in resolved:
                continue
            roles = known.get(artist.name, set())
            if len(roles) == 1:
                role = next(iter(roles))
                resolved[artist.name] = RoleInference(
                    name=artist.name,
                    role=role,
                    confidence=Confidence.HIGH,
                    reason=f"credited as {role} elsewhere on the album",
                )
            else:
                resolved[artist.name] = infer_role(artist.name)

        if not resolved:
            return result

        def upgrade(artists: list[Artist]) -> list[Artist]:
            return _unique(
                [
                    Artist(name=artist.name, role=resolved[artist.name].role)
                    if artist.role is Role.UNKNOWN
                    else artist
                    for artist in artists
                ]
            )

        for track in album.tracks:
            track.artists = upgrade(track.artists)
        album.album_artist = upgrade(album.album_artist)

        for inference in resolved.values():
            logger.debug("Resolved role: %s", inference.to_note())
        return result.with_notes(inference.to_note() for inference in resolved.values())

    def _promote_universal_performers(self, album: Album, result: ExtractionResult) -> ExtractionResult:
        universal = self.universal_performers(album.tracks)
        if not universal:
            return result

        if not album.album_artist:
            album.album_artist = universal
            return result.with_note(f"album artist set from universal performers: {format_artists(universal)}")

        album_names = {artist.name for artist in album.album_artist}
        universal_names = {artist.name for artist in universal}
        if album_names == universal_names:
            if album.album_artist != universal:
                album.album_artist = universal
                return result.with_note("album artist roles taken from track credits")
            return result

        album.album_artist = album.album_artist + [a for a in universal if a not in album.album_artist]
        return result.with_note("album artist merged with universal performers")

    @staticmethod
    def universal_performers(tracks: list[Track]) -> list[Artist]:
        """Non-composer artists present, with identical name and role, on every track."""

        if not tracks:
            return []
        candidates = _unique(tracks[0].performers())
        return [artist for artist in candidates if all(track.has_artist(artist) for track in tracks[1:])]

    def _propagate_album_artist(self, album: Album, result: ExtractionResult) -> ExtractionResult:
        if not album.album_artist or _is_various(album.album_artist):
            return result

        for artist in album.album_artist:
            if artist.name == VARIOUS_ARTISTS:
                continue
            missing = [track for track in album.tracks if not track.has_artist(artist)]
            if not missing:
                continue
            disagreeing = sum(1 for track in missing if track.performers())
            for track in missing:
                track.artists.append(artist)
            message = f"album artist {artist.name} ({artist.role}) added to {len(missing)} track(s)"
            if disagreeing:
                logger.warning("Track performers disagree with album artist: %s", message)
                result = result.with_warning(message)
            else:
                result = result.with_note(message)
        return result

    def _synthesize_edition(self, album: Album, result: ExtractionResult) -> ExtractionResult:
        edition = album.edition
        if edition is None:
            return result

        if edition.year <= 0:
            if album.original_year > 0:
                edition.year = album.original_year
                result = result.with_warning(f"edition year set to original year {album.original_year}")
            else:
                edition.year = SENTINEL_EDITION_YEAR
                result = result.with_warning(f"edition year unknown; set to placeholder {SENTINEL_EDITION_YEAR}")

        if edition.catalog_number and not edition.label:
            edition.label = UNKNOWN_LABEL
            result = result.with_warning(f"edition label missing; set to {UNKNOWN_LABEL}")
        return result

    def _note_track_order(self, album: Album, result: ExtractionResult) -> ExtractionResult:
        by_disc: dict[int, list[int]] = {}
        for track in album.tracks:
            by_disc.setdefault(track.disc, []).append(track.track)

        for disc, numbers in sorted(by_disc.items()):
            if any(later <= earlier for earlier, later in zip(numbers, numbers[1:])):
                result = result.with_warning(f"track numbers on disc {disc} are not increasing")
                continue
            expected = set(range(1, numbers[-1] + 1))
            gaps = sorted(expected - set(numbers))
            if gaps:
                listed = ", ".join(str(number) for number in gaps)
                result = result.with_note(f"disc {disc} numbering gaps: {listed}")
        return result

    def _enforce_invariants(self, album: Album, result: ExtractionResult) -> ExtractionResult:
        def add_once(issue: ExtractionIssue) -> ExtractionResult:
            if any(e.field == issue.field and e.message == issue.message for e in result.errors):
                return result
            return result.with_error(issue)

        if not album.tracks and not result.has_error_for("tracks"):
            result = result.with_error(ExtractionIssue.missing("tracks", "no tracks found"))

        for track in album.tracks:
            if track.composer() is None:
                result = add_once(ExtractionIssue.missing("composer", f"missing for disc {track.disc} track {track.track}"))

        positions = Counter((track.disc, track.track) for track in album.tracks)
        for (disc, number), count in positions.items():
            if count > 1:
                result = add_once(ExtractionIssue.missing("track", f"duplicate disc {disc} track {number}"))

        if not album.has_title() and not result.has_error_for("title"):
            result = result.with_error(ExtractionIssue.missing("title", "not found"))
        if album.original_year <= 0 and not result.has_error_for("year"):
            result = result.with_error(ExtractionIssue.missing("year", "not found"))
        return result


def normalize(result: ExtractionResult) -> ExtractionResult:
    """Module-level shortcut for ``AlbumNormalizer().normalize``."""
    return AlbumNormalizer().normalize(result)
