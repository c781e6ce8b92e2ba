"""
Summary: harmonia mundi album page extractor (title tag, JSON-LD snippets, <br> tracklist).
Why: The label's pages carry the programme as plain text lines rather than structured rows.
"""

from __future__ import annotations

import re
from typing import ClassVar, Final, final, override

from bs4 import BeautifulSoup

from classitag.features.extraction.domain import (
    ExtractionIssue,
    ExtractionResult,
    dedupe_artists,
    detect_disc_structure,
    disc_header_number,
    infer_artist_list,
    sanitize_text,
    title_case,
)
from classitag.platform.logging import logger
from classitag.shared import Album, Artist, Edition, Role, Track

from ._base import BaseHTMLExtractor
from ._markup import clean_text, node_text

__all__ = ["HARMONIA_MUNDI_LABEL", "HarmoniaMundiExtractor"]

HARMONIA_MUNDI_LABEL: Final[str] = "harmonia mundi"

_TITLE_SUFFIX: Final[str] = " | harmonia mundi"
_DATE_PUBLISHED_RE: Final[re.Pattern[str]] = re.compile(r'"datePublished":\s*"([^"]+)"')
_YEAR_RE: Final[re.Pattern[str]] = re.compile(r"\b(19\d{2}|20\d{2})\b")
_BY_ARTIST_RE: Final[re.Pattern[str]] = re.compile(r'"byArtist":\s*\{[^}]*"name":\s*"([^"]+)"')
_LINE_BREAK_RE: Final[re.Pattern[str]] = re.compile(r"<br\s*/?>", re.IGNORECASE)
_BOLD_RE: Final[re.Pattern[str]] = re.compile(r"<b>([^<]+)</b>", re.IGNORECASE)
_DATES_RE: Final[re.Pattern[str]] = re.compile(r"\[[^\]]*\]")
_TIMING_RE: Final[re.Pattern[str]] = re.compile(r"\(\s*\d+'\s*\d*\"?\s*\)\s*$")
_LEADING_NUMBER_RE: Final[re.Pattern[str]] = re.compile(r"^\s*\d+\s+")
_BULLETS: Final[tuple[str, ...]] = ("·", "Â·")
_MAX_COMPOSER_LINE: Final[int] = 120


def _is_track_line(text: str) -> bool:
    return text.startswith(_BULLETS)


def _is_composer_line(text: str) -> bool:
    """ALL-CAPS line, or one carrying bracketed dates, that is not a track line."""

    if not text or len(text) > _MAX_COMPOSER_LINE or _is_track_line(text):
        return False
    if _DATES_RE.search(text):
        return True
    letters = [char for char in text if char.isalpha()]
    if not letters:
        return False
    upper = sum(1 for char in letters if char.isupper())
    return upper / len(letters) > 0.8


def _composer_name(text: str) -> str:
    bracket = text.find("[")
    if bracket > 0:
        text = text[:bracket]
    return title_case(text.strip())


@final
class HarmoniaMundiExtractor(BaseHTMLExtractor):
    """Extractor for harmonia mundi album pages."""

    SITE: ClassVar[str] = "harmoniamundi"
    HOSTS: ClassVar[tuple[str, ...]] = ("harmoniamundi.com",)

    @override
    def _parse_into(
        self,
        soup: BeautifulSoup,
        html: str,
        album: Album,
        result: ExtractionResult,
    ) -> ExtractionResult:
        title = self._parse_title(soup)
        if title:
            album.title = title
        else:
            result = result.with_error(ExtractionIssue.missing("title", "not found in HTML"))

        year = self._parse_year(html)
        if year:
            album.original_year = year
        else:
            result = result.with_error(ExtractionIssue.missing("year", "not found in HTML"))

        catalog = node_text(soup.select_one(".feature.ref"))
        if catalog:
            album.edition = Edition(label=HARMONIA_MUNDI_LABEL, catalog_number=catalog)
        else:
            result = result.with_error(ExtractionIssue.optional("catalog_number", "not found in HTML"))

        result = self._parse_performers(html, album, result)

        tracks, structure_note = self.parse_tracks(html)
        album.tracks = tracks
        if structure_note:
            result = result.with_note(structure_note)
        return result

    @staticmethod
    def _parse_title(soup: BeautifulSoup) -> str:
        if soup.title is None:
            return ""
        raw = soup.title.get_text().strip()
        cut = raw.rfind(_TITLE_SUFFIX)
        if cut > 0:
            raw = raw[:cut]
        return clean_text(raw)

    @staticmethod
    def _parse_year(html: str) -> int:
        published = _DATE_PUBLISHED_RE.search(html)
        if published is None:
            return 0
        match = _YEAR_RE.search(published.group(1))
        return int(match.group(1)) if match else 0

    def _parse_performers(self, html: str, album: Album, result: ExtractionResult) -> ExtractionResult:
        match = _BY_ARTIST_RE.search(html)
        if match is None:
            return result.with_error(ExtractionIssue.optional("album_artist", "byArtist not found in HTML"))

        inferences = infer_artist_list(sanitize_text(match.group(1)))
        for inference in inferences:
            result = result.with_note(inference.to_note())
            if inference.is_uncertain():
                result = result.with_warning(
                    f"low confidence artist inference: {inference.name} as {inference.role} ({inference.confidence})"
                )
        performers, warnings = dedupe_artists(
            Artist(name=inference.name, role=inference.role) for inference in inferences
        )
        album.album_artist = performers
        return result.with_warnings(warnings)

    def parse_tracks(self, html: str) -> tuple[list[Track], str]:
        """Read composer and track lines from the ``<br>``-separated programme.

        Disc headers in the same stream restart track numbering on the new disc.

        Returns:
            The tracks and a disc-detection note (empty when no lines were found).
        """

        raw_lines = [line.strip() for line in _LINE_BREAK_RE.split(html)]
        raw_lines = [line for line in raw_lines if line]
        texts = [sanitize_text(line) for line in raw_lines]
        if not texts:
            return [], ""
        structure = detect_disc_structure(texts)

        tracks: list[Track] = []
        composer = ""
        current_disc = 0
        number = 0
        for index, (raw, text) in enumerate(zip(raw_lines, texts, strict=True)):
            if disc_header_number(text) is not None:
                continue
            if _is_composer_line(text):
                name = _composer_name(text)
                if name:
                    composer = name
                continue
            if not _is_track_line(text):
                continue

            disc = structure.disc_for(index)
            if disc != current_disc:
                current_disc = disc
                number = 0
            number += 1

            bold = _BOLD_RE.search(raw)
            title = clean_text(bold.group(1)) if bold else self._fallback_title(text)
            track = Track(disc=disc, track=number, title=title)
            if composer:
                track.artists.append(Artist(name=composer, role=Role.COMPOSER))
            else:
                logger.debug("Track %d on disc %d precedes any composer line", number, disc)
            tracks.append(track)

        if not tracks:
            return [], ""
        return tracks, structure.to_note("track parsing")

    @staticmethod
    def _fallback_title(text: str) -> str:
        for bullet in _BULLETS:
            if text.startswith(bullet):
                text = text[len(bullet):]
                break
        return _TIMING_RE.sub("", _LEADING_NUMBER_RE.sub("", text)).strip()
