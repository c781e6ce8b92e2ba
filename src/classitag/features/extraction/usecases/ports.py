"""Summary: Ports for the collaborators the extraction use cases depend on.
Why: Keep tag bytes and network access behind swappable adapters so tests can fake them."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Raw HTTP response handed back by an HTML fetcher."""

    status: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@runtime_checkable
class TagReaderPort(Protocol):
    """Port for reading embedded audio tags."""

    def read_tags(self, path: Path) -> Mapping[str, str]:
        """Return uppercased tag keys mapped to their first value; absent keys are simply missing."""
        ...


@runtime_checkable
class HTMLFetcherPort(Protocol):
    """Port for fetching catalogue pages."""

    def fetch(self, url: str) -> FetchResult:
        """Fetch ``url`` and return the status code, body bytes and headers."""
        ...


__all__ = ["FetchResult", "HTMLFetcherPort", "TagReaderPort"]
