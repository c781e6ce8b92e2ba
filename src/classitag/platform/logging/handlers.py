"""Rich console handler for extraction logs.

Where: platform/logging/handlers.py
What: Render structured extraction events with icons, compact paths and counters.
Why: Keep progress lines short and scannable while the file log keeps full detail.
"""

from __future__ import annotations

import logging
from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import Any, ClassVar, override

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.style import Style
from rich.text import Text


class ExtractionRichHandler(RichHandler):
    """Rich handler that styles ``extraction_event`` records and compacts paths."""

    _EXTRACTION_STYLES: ClassVar[dict[str, tuple[str, str]]] = {
        "extraction.source.read": ("📥", "cyan"),
        "extraction.source.parsed": ("🔎", "blue"),
        "extraction.draft.built": ("📝", "blue"),
        "extraction.normalized": ("✅", "green"),
        "extraction.emitted": ("📦", "magenta"),
        "extraction.failed": ("❌", "red"),
    }
    _EVENT_LABELS: ClassVar[dict[str, str]] = {
        "extraction.source.read": "Read",
        "extraction.source.parsed": "Parsed",
        "extraction.draft.built": "Draft built",
        "extraction.normalized": "Normalized",
        "extraction.emitted": "Emitted",
        "extraction.failed": "Failed",
    }
    _PATH_SEGMENT_LIMIT: ClassVar[int] = 4

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs["show_time"] = False
        kwargs["show_path"] = False
        kwargs["show_level"] = False
        kwargs["rich_tracebacks"] = True
        kwargs["markup"] = True
        super().__init__(*args, **kwargs)

    def _format_path(self, path: str) -> Text:
        """Render ``path`` keeping only its trailing segments."""

        pure_path = self._to_pure_path(path)
        is_windows = isinstance(pure_path, PureWindowsPath)
        separator = "\\" if is_windows else "/"
        anchor = pure_path.anchor
        body_parts = [part for part in pure_path.parts if part and part != anchor]

        truncated = len(body_parts) > self._PATH_SEGMENT_LIMIT
        if truncated:
            body_parts = body_parts[-self._PATH_SEGMENT_LIMIT:]

        display = ""
        if anchor:
            display = anchor.rstrip("\\/") + separator if is_windows else separator
        if truncated:
            display += "…" + (separator if body_parts else "")
        display += separator.join(body_parts)
        return self._style_path_string(display or ".", separator)

    @staticmethod
    def _to_pure_path(raw_path: str) -> PurePath:
        if "\\" in raw_path:
            return PureWindowsPath(raw_path)
        return PurePosixPath(raw_path)

    @staticmethod
    def _style_path_string(path_string: str, separator: str) -> Text:
        text = Text()
        for char in path_string:
            if char in {separator, "…"}:
                _ = text.append(char, style=Style(color="magenta"))
            else:
                _ = text.append(char, style=Style(color="white"))
        return text

    def _render_extraction_message(self, record: logging.LogRecord) -> Text | None:
        """Render a structured extraction event, or ``None`` for plain records."""

        event = getattr(record, "extraction_event", None)
        if not isinstance(event, str):
            return None

        icon, color = self._EXTRACTION_STYLES.get(event, ("ℹ️", "blue"))
        text = Text()
        _ = text.append(f"{icon} ", style=Style(color=color, bold=True))

        body = Text(style=Style(color=color))
        _ = body.append(self._EVENT_LABELS.get(event, event))
        source = getattr(record, "source", None)
        if source:
            _ = body.append(f" [{source}]")

        title = getattr(record, "title", None)
        if event == "extraction.normalized" and title:
            _ = body.append(f" {title}")

        location = getattr(record, "source_path", None) or getattr(record, "target_path", None)
        url = getattr(record, "url", None)
        if location:
            _ = body.append(" @ ")
            _ = body.append_text(self._format_path(str(location)))
        elif url:
            _ = body.append(f" @ {url}")

        metrics: list[str] = []
        for key, label in (
            ("total_files", "files"),
            ("track_count", "tracks"),
            ("error_count", "errors"),
            ("warning_count", "warnings"),
        ):
            value = getattr(record, key, None)
            if isinstance(value, int):
                metrics.append(f"{label}={value}")
        if event == "extraction.failed":
            stage = getattr(record, "stage", None)
            if stage:
                metrics.append(f"stage={stage}")
            error_message = getattr(record, "error_message", None)
            if error_message:
                metrics.append(str(error_message))
        if metrics:
            _ = body.append(" (" + ", ".join(metrics) + ")")

        _ = text.append_text(body)
        return text

    @override
    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        extraction_text = self._render_extraction_message(record)
        if extraction_text is not None:
            return extraction_text
        return super().render_message(record, message)


__all__ = ["ExtractionRichHandler"]
