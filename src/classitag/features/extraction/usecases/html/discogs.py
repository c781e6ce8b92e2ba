"""
Summary: Discogs release page extractor (JSON-LD, tracklist table, embedded credits).
Why: Discogs spreads album identity, performers and movement structure over three encodings.
"""

from __future__ import annotations

import json
import re
from collections.abc import Collection, Mapping
from typing import Any, ClassVar, Final, final, override

from bs4 import BeautifulSoup, Tag

from classitag.features.extraction.domain import (
    ExtractionIssue,
    ExtractionResult,
    SourceParseError,
    canonicalize,
    dedupe_names,
    role_from_name,
    role_from_string,
)
from classitag.platform.logging import logger
from classitag.shared import Album, Artist, Edition, Role, Track

from ._base import BaseHTMLExtractor
from ._embedded_json import extract_json_array
from ._markup import clean_text, node_text, text_without

__all__ = ["DiscogsExtractor", "NON_PERFORMING_CREDITS", "credit_role"]

_SCHEMA_SELECTOR: Final[str] = "script#release_schema[type='application/ld+json']"
_TRACKLIST_TABLE: Final[str] = "table.tracklist_ZdQ0I"
_TRACK_ROW_SELECTOR: Final[str] = "table.tracklist_ZdQ0I tbody tr"
_HEADING_CLASS: Final[str] = "heading_mkZNt"
_SUBTRACK_CLASS: Final[str] = "subtrack_o3GgI"
_SUBTRACK_POSITION: Final[str] = ".subtrackPos_HC1me"
_TITLE_CELL: Final[str] = ".trackTitle_loyWF"
_CREDITS_BLOCK: Final[str] = ".credits_vzBtg"
_ARTIST_LINK: Final[str] = "a[href*='/artist/']"

_LEADING_NUMBER_RE: Final[re.Pattern[str]] = re.compile(r"^\s*(\d+)")
_DISC_TRACK_POSITION_RE: Final[re.Pattern[str]] = re.compile(r"^\s*(\d+)-(\d+)\s*$")
_CREDIT_SEPARATORS: Final[tuple[str, ...]] = ("–", " - ", ":", "-")

NON_PERFORMING_CREDITS: Final[tuple[str, ...]] = (
    "composed by",
    "written-by",
    "lyrics by",
    "words by",
    "arranged by",
    "producer",
    "recorded by",
    "engineer",
    "mastered by",
    "liner notes",
    "artwork",
    "design",
    "photography by",
)


def credit_role(role_text: str, name: str) -> Role:
    """Map a Discogs credit role, trying each comma-separated part, else infer from the name."""

    role = role_from_string(role_text)
    if role is Role.UNKNOWN:
        for part in role_text.split(","):
            role = role_from_string(part)
            if role is not Role.UNKNOWN:
                break
    return role if role is not Role.UNKNOWN else role_from_name(name)


def _is_non_performing(role_text: str) -> bool:
    lowered = role_text.lower()
    return any(marker in lowered for marker in NON_PERFORMING_CREDITS)


def _has_class(node: Tag, name: str) -> bool:
    classes = node.get("class") or []
    return name in classes


@final
class DiscogsExtractor(BaseHTMLExtractor):
    """Extractor for Discogs release pages."""

    SITE: ClassVar[str] = "discogs"
    HOSTS: ClassVar[tuple[str, ...]] = ("discogs.com",)

    @override
    def _parse_into(
        self,
        soup: BeautifulSoup,
        html: str,
        album: Album,
        result: ExtractionResult,
    ) -> ExtractionResult:
        schema = self._load_schema(soup)
        if schema is None:
            result = result.with_warning("release JSON-LD not found")
            schema = {}

        title = schema.get("name")
        if isinstance(title, str) and clean_text(title):
            album.title = clean_text(title)
        else:
            result = result.with_error(ExtractionIssue.missing("title", "not found in JSON-LD"))

        year = self._parse_year(schema.get("datePublished"))
        if year:
            album.original_year = year
        else:
            result = result.with_error(ExtractionIssue.missing("year", "not found in JSON-LD"))

        result = self._parse_edition(schema, album, result)

        album.tracks = self.parse_tracks(soup)
        if album.tracks:
            result = result.with_note("tracks source: tracklist table")

        credits, aliases, result = self._credits_map(soup, html, result)
        performers, warnings = self.build_performers(self._schema_artist_names(schema), credits, aliases)
        album.album_artist = performers
        result = result.with_warnings(warnings)
        if performers:
            result = result.with_note(f"album performers found: {len(performers)}")
        return result

    def _load_schema(self, soup: BeautifulSoup) -> dict[str, Any] | None:
        script = soup.select_one(_SCHEMA_SELECTOR)
        if script is None:
            return None
        raw = script.string if script.string is not None else script.get_text()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("Malformed release JSON-LD: %s", exc)
            raise SourceParseError(f"malformed release JSON-LD: {exc}") from exc
        if not isinstance(data, dict):
            raise SourceParseError("release JSON-LD is not an object")
        return data

    @staticmethod
    def _parse_year(value: object) -> int:
        if isinstance(value, bool):
            return 0
        if isinstance(value, (int, float)):
            return int(value) if value > 0 else 0
        if isinstance(value, str):
            match = _LEADING_NUMBER_RE.match(value)
            if match:
                return int(match.group(1))
        return 0

    def _parse_edition(
        self,
        schema: Mapping[str, Any],
        album: Album,
        result: ExtractionResult,
    ) -> ExtractionResult:
        catalog = schema.get("catalogNumber")
        catalog = catalog.strip() if isinstance(catalog, str) else ""

        label = ""
        record_label = schema.get("recordLabel")
        if isinstance(record_label, list) and record_label:
            record_label = record_label[0]
        if isinstance(record_label, dict):
            name = record_label.get("name")
            label = clean_text(name) if isinstance(name, str) else ""

        if not catalog and not label:
            return result.with_error(ExtractionIssue.optional("edition", "no catalog number or label in JSON-LD"))
        album.edition = Edition(label=label, catalog_number=catalog)
        if not catalog:
            result = result.with_error(ExtractionIssue.optional("catalog_number", "not found in JSON-LD"))
        return result

    @staticmethod
    def _schema_artist_names(schema: Mapping[str, Any]) -> list[str]:
        release_of = schema.get("releaseOf")
        if not isinstance(release_of, dict):
            return []
        by_artist = release_of.get("byArtist")
        if isinstance(by_artist, dict):
            by_artist = [by_artist]
        if not isinstance(by_artist, list):
            return []
        names: list[str] = []
        for entry in by_artist:
            if isinstance(entry, dict) and isinstance(entry.get("name"), str):
                name = clean_text(entry["name"])
                if name:
                    names.append(name)
        return names

    def _credits_map(
        self,
        soup: BeautifulSoup,
        html: str,
        result: ExtractionResult,
    ) -> tuple[dict[str, str], set[str], ExtractionResult]:
        """Name to credit-role map from embedded state, else from the Credits markup.

        Name variations are returned separately so they are matched but never listed twice.
        """

        credits: dict[str, str] = {}
        aliases: set[str] = set()
        try:
            entries = extract_json_array(html, "releaseCredits")
        except json.JSONDecodeError as exc:
            logger.warning("releaseCredits could not be decoded: %s", exc)
            entries = []
            result = result.with_warning("release credits could not be decoded")

        for entry in entries:
            if not isinstance(entry, dict):
                continue
            role = entry.get("creditRole")
            role = role.strip() if isinstance(role, str) else ""
            display_name = entry.get("displayName")
            if isinstance(display_name, str) and display_name.strip():
                credits[clean_text(display_name)] = role
            variation = entry.get("nameVariation")
            if isinstance(variation, str) and variation.strip():
                alias = clean_text(variation)
                if alias not in credits:
                    credits[alias] = role
                    aliases.add(alias)

        if credits:
            return credits, aliases, result.with_note("credits source: release state")

        credits = self._credits_from_markup(soup)
        if credits:
            result = result.with_note("credits source: credits section")
        return credits, aliases, result

    @staticmethod
    def _credits_from_markup(soup: BeautifulSoup) -> dict[str, str]:
        sections: list[Tag] = []
        for heading in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"]):
            if "Credits" in heading.get_text():
                section = heading.find_parent("section") or heading.parent
                if isinstance(section, Tag) and section not in sections:
                    sections.append(section)

        credits: dict[str, str] = {}
        for section in sections:
            for item in section.find_all("li"):
                text = node_text(item)
                for separator in _CREDIT_SEPARATORS:
                    if separator in text:
                        role, name = text.split(separator, 1)
                        if role.strip() and name.strip():
                            _ = credits.setdefault(name.strip(), role.strip())
                        break
        if credits:
            return credits

        for section in sections:
            for row in section.find_all("tr"):
                cells = row.find_all(["td", "th"])
                if len(cells) == 2:
                    role, name = node_text(cells[0]), node_text(cells[1])
                    if role and name:
                        _ = credits.setdefault(name, role)
        return credits

    def build_performers(
        self,
        names: list[str],
        credits: Mapping[str, str],
        aliases: Collection[str] = (),
    ) -> tuple[list[Artist], list[str]]:
        """Album performers from the JSON-LD names plus any unseen performing credits.

        Returns:
            The performers and the merge warnings produced by name deduplication.
        """

        unique_names, warnings = dedupe_names(names)
        canonical_credits = {canonicalize(name): role for name, role in credits.items()}

        performers: list[Artist] = []
        seen: set[str] = set()
        for name in unique_names:
            if name in credits:
                role = credit_role(credits[name], name)
            elif canonicalize(name) in canonical_credits:
                role = credit_role(canonical_credits[canonicalize(name)], name)
            else:
                role = role_from_name(name)
            performers.append(Artist(name=name, role=role))
            seen.add(canonicalize(name))

        for name, role_text in credits.items():
            key = canonicalize(name)
            if key in seen or not key or name in aliases:
                continue
            seen.add(key)
            if _is_non_performing(role_text):
                logger.debug("Skipping non-performing credit %s (%s)", name, role_text)
                continue
            performers.append(Artist(name=name, role=credit_role(role_text, name)))
        return performers, warnings

    def parse_tracks(self, soup: BeautifulSoup) -> list[Track]:
        """Flatten tracklist rows; heading rows give movement context to the subtracks after them."""

        table = soup.select_one(_TRACKLIST_TABLE)
        if table is None:
            raise SourceParseError("no tracklist table found")
        rows = soup.select(_TRACK_ROW_SELECTOR) or table.find_all("tr")

        tracks: list[Track] = []
        heading_title = ""
        heading_composer = ""
        for row in rows:
            if _has_class(row, _HEADING_CLASS):
                title_cell = row.select_one(_TITLE_CELL)
                heading_title = text_without(title_cell, _CREDITS_BLOCK)
                heading_composer = self._row_composer(row)
                continue

            is_subtrack = _has_class(row, _SUBTRACK_CLASS)
            position = row.get("data-track-position")
            if position is None and not is_subtrack:
                continue

            disc = 1
            number = 0
            if is_subtrack:
                digits = re.sub(r"\D", "", node_text(row.select_one(_SUBTRACK_POSITION)))
                number = int(digits) if digits else 0
            elif isinstance(position, str):
                disc_track = _DISC_TRACK_POSITION_RE.match(position)
                if disc_track:
                    disc, number = int(disc_track.group(1)), int(disc_track.group(2))
                else:
                    match = _LEADING_NUMBER_RE.match(position)
                    number = int(match.group(1)) if match else 0
            if number <= 0:
                number = len(tracks) + 1

            title = self._row_title(row)
            if title and is_subtrack and heading_title:
                title = f"{heading_title}: {title}"

            composer = self._row_composer(row)
            if not composer and is_subtrack:
                composer = heading_composer

            if not is_subtrack:
                heading_title = ""
                heading_composer = ""

            if not title:
                continue
            track = Track(disc=max(disc, 1), track=number, title=title)
            if composer:
                track.artists.append(Artist(name=composer, role=Role.COMPOSER))
            tracks.append(track)
        return tracks

    @staticmethod
    def _row_title(row: Tag) -> str:
        cell = row.select_one(_TITLE_CELL)
        if cell is None:
            return ""
        for span in cell.find_all("span"):
            if span.find_parent(class_=_CREDITS_BLOCK.lstrip(".")) is None:
                title = node_text(span)
                if title:
                    return title
                break
        return text_without(cell, _CREDITS_BLOCK)

    @staticmethod
    def _row_composer(row: Tag) -> str:
        credits = row.select_one(_CREDITS_BLOCK)
        if credits is None:
            return ""
        return node_text(credits.select_one(_ARTIST_LINK))
