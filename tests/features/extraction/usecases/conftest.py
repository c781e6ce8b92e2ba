"""Shared fixtures for extraction use case tests."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from classitag.features.extraction.usecases import TagReaderPort


class FakeTagReader(TagReaderPort):
    """Tag reader serving canned tags keyed by path relative to the album root."""

    def __init__(self, root: Path, tags: Mapping[str, Mapping[str, str]]) -> None:
        self.root = root
        self.tags = tags
        self.calls: list[Path] = []

    def read_tags(self, path: Path) -> Mapping[str, str]:
        self.calls.append(path)
        return dict(self.tags.get(path.relative_to(self.root).as_posix(), {}))


@pytest.fixture
def make_album(tmp_path: Path) -> Callable[..., tuple[Path, FakeTagReader]]:
    """Create empty audio files under an album folder and a reader for their tags."""

    def _make(files: dict[str, dict[str, str]], folder: str = "album") -> tuple[Path, FakeTagReader]:
        root = tmp_path / folder
        root.mkdir(parents=True, exist_ok=True)
        for relative in files:
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        return root, FakeTagReader(root, files)

    return _make
