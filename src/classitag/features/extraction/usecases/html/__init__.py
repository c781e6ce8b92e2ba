"""HTML catalogue extractors and site routing."""

from __future__ import annotations

from typing import Final
from urllib.parse import urlparse

from classitag.features.extraction.domain import UnsupportedSourceError

from ._base import BaseHTMLExtractor
from .discogs import DiscogsExtractor
from .harmoniamundi import HarmoniaMundiExtractor
from .presto import PrestoExtractor

EXTRACTORS: Final[tuple[type[BaseHTMLExtractor], ...]] = (
    PrestoExtractor,
    DiscogsExtractor,
    HarmoniaMundiExtractor,
)

SITES: Final[tuple[str, ...]] = tuple(extractor.SITE for extractor in EXTRACTORS)


def extractor_for_site(site: str) -> BaseHTMLExtractor:
    """Return a fresh extractor for a site name such as ``"discogs"``."""

    for extractor in EXTRACTORS:
        if extractor.SITE == site.strip().lower():
            return extractor()
    raise UnsupportedSourceError(f"unsupported site: {site}")


def extractor_for_url(url: str) -> BaseHTMLExtractor:
    """Route a page URL to its extractor by host name."""

    host = urlparse(url).hostname or ""
    for extractor in EXTRACTORS:
        if extractor.handles_host(host):
            return extractor()
    raise UnsupportedSourceError(f"no extractor for host: {host or url}")


__all__ = [
    "BaseHTMLExtractor",
    "DiscogsExtractor",
    "EXTRACTORS",
    "HarmoniaMundiExtractor",
    "PrestoExtractor",
    "SITES",
    "extractor_for_site",
    "extractor_for_url",
]
