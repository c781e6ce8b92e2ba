"""Shared pytest fixtures for configuration-focused tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from classitag.config.config import Config


@pytest.fixture
def portable_repo_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point repository-root detection at a temporary directory and reset the config cache."""

    _ = (tmp_path / "pyproject.toml").write_text("[project]\nname='tmp'\n")

    import classitag.config.paths as paths

    def _fake_detect_repo_root(_start: Path | None = None) -> Path:
        return tmp_path

    monkeypatch.setattr(paths, "_detect_repo_root", _fake_detect_repo_root, raising=True)
    monkeypatch.delenv("CLASSITAG_CONFIG_PATH", raising=False)
    Config.reset()
    yield tmp_path.resolve()
    Config.reset()
