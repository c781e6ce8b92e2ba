"""Where: classitag.features.extraction.usecases.html._markup
What: BeautifulSoup parsing and text helpers shared by the HTML extractors.
Why: Every catalogue page needs the same parse and text clean-up rules."""

from __future__ import annotations

import copy

from bs4 import BeautifulSoup, Tag

from classitag.features.extraction.domain import decode_entities, normalize_whitespace

__all__ = ["clean_text", "node_text", "parse_html", "text_without"]


def parse_html(html: str) -> BeautifulSoup:
    """Parse a page with the standard-library backed parser."""
    return BeautifulSoup(html, "html.parser")


def clean_text(text: str) -> str:
    """Repair entities and mojibake, then normalise whitespace."""
    return normalize_whitespace(decode_entities(text))


def node_text(node: Tag | None) -> str:
    """Cleaned text content of ``node``; empty for a missing node."""
    if node is None:
        return ""
    return clean_text(node.get_text())


def text_without(node: Tag | None, selector: str) -> str:
    """Cleaned text of ``node`` with every ``selector`` match removed first."""
    if node is None:
        return ""
    clone = copy.copy(node)
    for unwanted in clone.select(selector):
        unwanted.decompose()
    return clean_text(clone.get_text())
