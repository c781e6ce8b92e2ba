"""Test configuration management."""

from pathlib import Path

import pytest

from classitag import __version__
from classitag.config.config import Config, ConfigError
from classitag.config.paths import default_config_path


def test_defaults_when_file_is_absent(portable_repo_root: Path) -> None:
    config = Config.load()

    assert not default_config_path().exists()
    assert config.log_file is None
    assert config.http_timeout == 15.0
    assert config.http_max_attempts == 2
    assert config.user_agent == f"classitag/{__version__}"


def test_save_load_toml(portable_repo_root: Path) -> None:
    """Saved configuration should load back with the same values."""

    original = Config(
        log_file=Path("/var/log/classitag/run.log"),
        http_timeout=30.0,
        http_max_attempts=4,
        user_agent='classitag-test "ci"',
    )
    target = original.save()

    assert target == portable_repo_root / "config" / "config.toml"
    assert target.read_text(encoding="utf-8").startswith("# classitag configuration file")

    Config.reset()
    loaded = Config.load()
    assert loaded == original


def test_load_is_cached_per_path(portable_repo_root: Path) -> None:
    first = Config.load()

    assert Config.load() is first
    assert Config.load(portable_repo_root / "other.toml") is not first


def test_string_paths_are_converted() -> None:
    assert Config(log_file="logs/run.log").log_file == Path("logs/run.log")  # pyright: ignore[reportArgumentType]
    assert Config(log_file=" ").log_file is None  # pyright: ignore[reportArgumentType]


@pytest.mark.parametrize(
    "content",
    [
        "http_timeout = ",
        'base_path = "/music"',
        'http_timeout = "fast"\nhttp_max_attempts = 0',
        "http_timeout = 0",
    ],
)
def test_invalid_files_raise_config_error(portable_repo_root: Path, content: str) -> None:
    path = portable_repo_root / "config" / "config.toml"
    path.parent.mkdir(parents=True)
    _ = path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        _ = Config.load()


def test_environment_variable_selects_file(
    portable_repo_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = portable_repo_root / "custom.toml"
    _ = path.write_text("http_max_attempts = 5\n", encoding="utf-8")
    monkeypatch.setenv("CLASSITAG_CONFIG_PATH", str(path))

    assert Config.load().http_max_attempts == 5
