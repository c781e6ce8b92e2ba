"""
Summary: Presto catalogue page extractor (semantic product and tracklist markup).
Why: Presto pages mark composers and works with links and nest movements under works.
"""

from __future__ import annotations

import re
from typing import ClassVar, Final, final, override

from bs4 import BeautifulSoup, Tag

from classitag.features.extraction.domain import ExtractionIssue, ExtractionResult
from classitag.platform.logging import logger
from classitag.shared import Album, Artist, Edition, Role, Track

from ._base import BaseHTMLExtractor
from ._markup import clean_text, node_text

__all__ = ["ANONYMOUS_COMPOSER", "PrestoExtractor"]

ANONYMOUS_COMPOSER: Final[str] = "Anonymous"

_YEAR_RE: Final[re.Pattern[str]] = re.compile(r"\b(19\d{2}|20\d{2})\b")
_RELEASE_DATE: Final[str] = "Release date:"
_CATALOGUE_NUMBER: Final[str] = "Catalogue number:"
_LABEL: Final[str] = "Label:"
_TITLE_SUFFIX: Final[str] = " | Presto Music"


def _split_on_colon(text: str) -> tuple[str, str] | None:
    if ":" not in text:
        return None
    before, after = text.split(":", 1)
    return before.strip(), after.strip()


@final
class PrestoExtractor(BaseHTMLExtractor):
    """Extractor for Presto Music / Presto Classical product pages."""

    SITE: ClassVar[str] = "presto"
    HOSTS: ClassVar[tuple[str, ...]] = ("prestomusic.com", "prestoclassical.co.uk")

    @override
    def _parse_into(
        self,
        soup: BeautifulSoup,
        html: str,
        album: Album,
        result: ExtractionResult,
    ) -> ExtractionResult:
        title = self.parse_title(soup)
        if title:
            album.title = title
        else:
            result = result.with_error(ExtractionIssue.missing("title", "not found in HTML"))

        metadata = soup.select(".c-product-block__metadata li")
        year = self._parse_year(metadata)
        if year:
            album.original_year = year
        else:
            result = result.with_error(ExtractionIssue.missing("year", "not found in HTML"))

        catalog, label = self._parse_catalog_and_label(metadata)
        if catalog or label:
            album.edition = Edition(label=label, catalog_number=catalog)
            if not catalog:
                result = result.with_error(ExtractionIssue.optional("catalog_number", "not found in HTML"))
        else:
            result = result.with_error(ExtractionIssue.optional("edition", "no catalogue number or label in HTML"))

        album.tracks = self.parse_tracks(soup)
        if album.tracks:
            result = result.with_note("tracks source: semantic structure")
        return result

    def parse_title(self, soup: BeautifulSoup) -> str:
        """og:title wins verbatim, then the product heading, then a trimmed ``<title>``."""

        og_title = soup.select_one("meta[property='og:title']")
        if og_title is not None:
            content = og_title.get("content")
            if isinstance(content, str) and content.strip():
                return clean_text(content)

        heading = node_text(soup.select_one("h1.c-product-block__title"))
        if heading:
            return heading

        raw = soup.title.get_text() if soup.title is not None else ""
        if not raw:
            return ""
        cut = raw.find(_TITLE_SUFFIX)
        if cut > 0:
            raw = raw[:cut]
        cut = raw.find(" - ")
        if cut > 0:
            raw = raw[:cut]
        return clean_text(raw)

    def _parse_year(self, metadata: list[Tag]) -> int:
        for item in metadata:
            text = node_text(item)
            if not text.startswith(_RELEASE_DATE):
                continue
            match = _YEAR_RE.search(text)
            if match:
                return int(match.group(1))
        return 0

    def _parse_catalog_and_label(self, metadata: list[Tag]) -> tuple[str, str]:
        catalog = ""
        label = ""
        for item in metadata:
            text = node_text(item)
            if text.startswith(_CATALOGUE_NUMBER):
                catalog = text[len(_CATALOGUE_NUMBER):].strip()
            elif text.startswith(_LABEL):
                link = item.find("a")
                label = node_text(link) if isinstance(link, Tag) else text[len(_LABEL):].strip()
        return catalog, label

    def parse_tracks(self, soup: BeautifulSoup) -> list[Track]:
        """Flatten ``.c-tracklist__work`` elements into sequentially numbered tracks on disc 1."""

        tracks: list[Track] = []
        for work in soup.select(".c-tracklist__work"):
            movements = work.select(".c-track--track")
            if movements:
                tracks.extend(self._hierarchical_tracks(work, movements, len(tracks) + 1))
                continue
            track = self._flat_track(work, len(tracks) + 1)
            if track is not None:
                tracks.append(track)
        return tracks

    def _hierarchical_tracks(self, work: Tag, movements: list[Tag], first_number: int) -> list[Track]:
        header = work.select_one(".c-track__title")
        composer, parent_title = self._composer_and_title(header)
        if not composer:
            logger.debug("No composer for Presto work %r", parent_title)

        tracks: list[Track] = []
        for movement in movements:
            movement_title = node_text(movement.select_one(".c-track__title"))
            if not movement_title:
                continue
            title = f"{parent_title}: {movement_title}" if parent_title else movement_title
            track = Track(disc=1, track=first_number + len(tracks), title=title)
            if composer:
                track.artists.append(Artist(name=composer, role=Role.COMPOSER))
            tracks.append(track)
        return tracks

    def _flat_track(self, work: Tag, number: int) -> Track | None:
        header = work.select_one(".c-track__title")
        composer, title = self._composer_and_title(header)
        if not title:
            return None
        return Track(
            disc=1,
            track=number,
            title=title,
            artists=[Artist(name=composer or ANONYMOUS_COMPOSER, role=Role.COMPOSER)],
        )

    @staticmethod
    def _composer_and_title(header: Tag | None) -> tuple[str, str]:
        """Composer and work title from links, else from text around the first colon."""

        if header is None:
            return "", ""
        text = node_text(header)
        split = _split_on_colon(text)

        composer = node_text(header.select_one("a[href*='composer']"))
        if not composer and split is not None:
            composer = split[0]

        title = node_text(header.select_one("a[href*='works']"))
        if not title:
            title = split[1] if split is not None else text
        return composer, title
