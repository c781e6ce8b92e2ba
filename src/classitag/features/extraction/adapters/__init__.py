"""Adapters binding the extraction ports to mutagen and requests."""

from .mutagen_tag_reader import MutagenTagReader
from .requests_fetcher import RequestsHTMLFetcher

__all__ = ["MutagenTagReader", "RequestsHTMLFetcher"]
