"""Tests for the ``ExtractionRichHandler`` event rendering."""

from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.text import Text

from classitag.platform.logging import LOGGER_NAME, ExtractionRichHandler, setup_logger


def _make_handler() -> ExtractionRichHandler:
    """Create a handler instance with an in-memory console."""

    console = Console(file=StringIO(), force_terminal=True, soft_wrap=True)
    return ExtractionRichHandler(console=console)


def _build_record(**extras: Any) -> logging.LogRecord:
    """Create a ``LogRecord`` populated with extraction extras for testing."""

    record = logging.LogRecord(
        name="classitag",
        level=logging.INFO,
        pathname="test",
        lineno=0,
        msg="",
        args=(),
        exc_info=None,
    )
    for key, value in extras.items():
        setattr(record, key, value)
    return record


def test_render_message_truncates_long_absolute_paths() -> None:
    """Absolute source paths should keep only their trailing segments."""

    handler = _make_handler()
    record = _build_record(
        extraction_event="extraction.source.read",
        source="tags",
        source_path="/home/listener/music/classical/Bach/1981_Goldberg-Variations/CD1",
        total_files=32,
    )

    rendered = handler.render_message(record, "")
    assert isinstance(rendered, Text)

    plain = rendered.plain
    assert plain.startswith("📥 Read [tags] @ /…/classical/Bach/1981_Goldberg-Variations/CD1")
    assert plain.endswith("(files=32)")


def test_render_message_keeps_short_windows_paths() -> None:
    handler = _make_handler()
    record = _build_record(
        extraction_event="extraction.emitted",
        source="discogs",
        target_path="C:\\music\\out\\album.json",
    )

    rendered = handler.render_message(record, "")
    assert isinstance(rendered, Text)

    assert rendered.plain == "📦 Emitted [discogs] @ C:\\music\\out\\album.json"


def test_normalized_event_shows_title_and_counters() -> None:
    handler = _make_handler()
    record = _build_record(
        extraction_event="extraction.normalized",
        source="presto",
        title="Motets",
        url="https://www.prestomusic.com/classical/products/1",
        track_count=12,
        error_count=0,
        warning_count=2,
    )

    rendered = handler.render_message(record, "")
    assert isinstance(rendered, Text)

    assert rendered.plain == (
        "✅ Normalized [presto] Motets @ https://www.prestomusic.com/classical/products/1 "
        "(tracks=12, errors=0, warnings=2)"
    )


def test_failed_event_includes_stage_and_message() -> None:
    handler = _make_handler()
    record = _build_record(
        extraction_event="extraction.failed",
        source="url",
        stage="read",
        error_message="HTTP 404 fetching https://example.org",
    )

    rendered = handler.render_message(record, "")
    assert isinstance(rendered, Text)

    assert rendered.plain == "❌ Failed [url] (stage=read, HTTP 404 fetching https://example.org)"


def test_plain_records_use_default_rendering() -> None:
    handler = _make_handler()
    record = _build_record()

    rendered = handler.render_message(record, "plain message")

    assert isinstance(rendered, Text)
    assert rendered.plain == "plain message"


def test_setup_logger_attaches_rotating_file_handler(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "classitag.log"
    console = Console(file=StringIO(), force_terminal=True, soft_wrap=True)

    try:
        logger = setup_logger(log_file=log_file, console=console)
        logger.debug("written to file only")
        for handler in logger.handlers:
            handler.flush()

        assert logger.name == LOGGER_NAME
        assert any(isinstance(handler, ExtractionRichHandler) for handler in logger.handlers)
        assert "written to file only" in log_file.read_text(encoding="utf-8")
    finally:
        _ = setup_logger()
