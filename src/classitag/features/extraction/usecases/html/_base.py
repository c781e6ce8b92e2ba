"""Shared base class for HTML catalogue extractors.

Where: src/classitag/features/extraction/usecases/html/_base.py
What: Template for parsing one catalogue page into an album draft.
Why: Sites differ only in where fields live; the result bookkeeping is the same.
"""

from __future__ import annotations

import abc
from typing import ClassVar

from bs4 import BeautifulSoup

from classitag.features.extraction.domain import (
    ExtractionIssue,
    ExtractionResult,
    detect_disc_structure,
)
from classitag.platform.logging import logger
from classitag.shared import Album

from ._markup import parse_html

__all__ = ["BaseHTMLExtractor"]


class BaseHTMLExtractor(abc.ABC):
    """Base class for catalogue page extractors."""

    SITE: ClassVar[str] = ""
    HOSTS: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def handles_host(cls, host: str) -> bool:
        """Return True when ``host`` is one of this site's domains or a subdomain of one."""
        host = host.lower().rstrip(".")
        return any(host == known or host.endswith("." + known) for known in cls.HOSTS)

    def parse(self, html: str) -> ExtractionResult:
        """Parse ``html`` into an album draft with diagnostics.

        Raises:
            SourceParseError: The page structure cannot be read at all.
        """

        soup = parse_html(html)
        album = Album()
        result = ExtractionResult(album=album, source=self.SITE)
        result = self._parse_into(soup, html, album, result)

        if album.tracks and not any(note.startswith("disc detection") for note in result.notes):
            lines = [f"{track.track}. {track.title}" for track in album.tracks]
            result = result.with_note(detect_disc_structure(lines).to_note("track parsing"))
        elif not album.tracks and not result.has_error_for("tracks"):
            result = result.with_error(ExtractionIssue.missing("tracks", "no tracks found in HTML"))

        logger.debug(
            "Parsed %s page: %d track(s), %d error(s), %d warning(s)",
            self.SITE,
            len(album.tracks),
            len(result.errors),
            len(result.warnings),
        )
        return result.with_album(album)

    @abc.abstractmethod
    def _parse_into(
        self,
        soup: BeautifulSoup,
        html: str,
        album: Album,
        result: ExtractionResult,
    ) -> ExtractionResult:
        """Fill ``album`` from the page and return the result with diagnostics added."""
        raise NotImplementedError
