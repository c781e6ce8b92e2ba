"""
Summary: Extraction pipeline driving one source through read, parse, normalize and emit.
Why: Give every source the same state machine, logging and terminal-error contract.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, final

from classitag.config.file_ops import write_text_file
from classitag.features.codec import dumps_album
from classitag.features.extraction.domain import (
    ExtractionFailure,
    ExtractionResult,
    SourceReadError,
)
from classitag.platform.logging import logger

from .extraction_types import ExtractionEvent, ExtractionStage
from .html import BaseHTMLExtractor, extractor_for_site, extractor_for_url
from .normalizer import AlbumNormalizer
from .ports import HTMLFetcherPort, TagReaderPort
from .tag_source import TagSourceExtractor

__all__ = ["ExtractionPipeline", "decode_html"]


def decode_html(body: bytes) -> str:
    """Decode a page body as UTF-8, replacing undecodable bytes."""
    return body.decode("utf-8", errors="replace")


@final
class ExtractionPipeline:
    """Runs READ → PARSE → DRAFT_BUILT → NORMALIZED, and EMITTED on ``emit``.

    READ and PARSE failures raise ``ExtractionFailure`` subclasses. Later problems
    only accrete onto the result.
    """

    def __init__(
        self,
        tag_reader: TagReaderPort | None = None,
        fetcher: HTMLFetcherPort | None = None,
        normalizer: AlbumNormalizer | None = None,
    ) -> None:
        self._tag_reader = tag_reader
        self._fetcher = fetcher
        self._normalizer = normalizer or AlbumNormalizer()
        self.stage: ExtractionStage | None = None

    def _log_event(
        self,
        level: int,
        event: ExtractionEvent,
        message: str,
        *message_args: object,
        **context: Any,
    ) -> None:
        extra: dict[str, Any] = {"extraction_event": event.value}
        for key, value in context.items():
            extra[key] = str(value) if isinstance(value, Path) else value
        logger.log(level, message, *message_args, extra=extra, stacklevel=2)

    def _fail(self, exc: ExtractionFailure, source: str, **context: Any) -> None:
        self._log_event(
            logging.ERROR,
            ExtractionEvent.FAILED,
            "Extraction failed at %s: %s",
            self.stage,
            exc,
            source=source,
            stage=str(self.stage),
            error_message=str(exc),
            **context,
        )

    def extract_directory(self, directory: Path) -> ExtractionResult:
        """Extract an album from a directory of tagged audio files."""

        if self._tag_reader is None:
            raise ValueError("a tag reader is required for directory extraction")
        extractor = TagSourceExtractor(self._tag_reader)

        self.stage = ExtractionStage.READ
        try:
            files = extractor.read_directory(directory)
            self._log_event(
                logging.INFO,
                ExtractionEvent.SOURCE_READ,
                "Read %d file(s)",
                len(files),
                source="tags",
                source_path=directory,
                total_files=len(files),
            )
            self.stage = ExtractionStage.PARSE
            draft = extractor.build_album(directory, files)
        except ExtractionFailure as exc:
            self._fail(exc, "tags", source_path=directory)
            raise
        self._log_event(
            logging.DEBUG,
            ExtractionEvent.SOURCE_PARSED,
            "Parsed tags",
            source="tags",
            source_path=directory,
        )
        return self._finish(draft, source_path=directory)

    def extract_html(self, html: str, site: str) -> ExtractionResult:
        """Extract an album from an already-loaded catalogue page."""

        self.stage = ExtractionStage.READ
        try:
            extractor = extractor_for_site(site)
        except ExtractionFailure as exc:
            self._fail(exc, site)
            raise
        return self._parse_html(extractor, html)

    def extract_url(self, url: str) -> ExtractionResult:
        """Fetch a catalogue page, route it by host and extract the album."""

        self.stage = ExtractionStage.READ
        try:
            extractor = extractor_for_url(url)
            if self._fetcher is None:
                raise SourceReadError("no HTML fetcher configured")
            response = self._fetcher.fetch(url)
            if not response.ok:
                raise SourceReadError(f"HTTP {response.status} fetching {url}")
        except ExtractionFailure as exc:
            self._fail(exc, "url", url=url)
            raise
        self._log_event(
            logging.INFO,
            ExtractionEvent.SOURCE_READ,
            "Fetched %s (%d bytes)",
            url,
            len(response.body),
            source=extractor.SITE,
            url=url,
        )
        return self._parse_html(extractor, decode_html(response.body), url=url)

    def _parse_html(self, extractor: BaseHTMLExtractor, html: str, **context: Any) -> ExtractionResult:
        self.stage = ExtractionStage.PARSE
        try:
            draft = extractor.parse(html)
        except ExtractionFailure as exc:
            self._fail(exc, extractor.SITE, **context)
            raise
        self._log_event(
            logging.DEBUG,
            ExtractionEvent.SOURCE_PARSED,
            "Parsed %s page",
            extractor.SITE,
            source=extractor.SITE,
            **context,
        )
        return self._finish(draft, **context)

    def _finish(self, draft: ExtractionResult, **context: Any) -> ExtractionResult:
        self.stage = ExtractionStage.DRAFT_BUILT
        self._log_event(
            logging.DEBUG,
            ExtractionEvent.DRAFT_BUILT,
            "Draft built",
            source=draft.source,
            track_count=len(draft.album.tracks),
            **context,
        )

        result = self._normalizer.normalize(draft)
        self.stage = ExtractionStage.NORMALIZED
        self._log_event(
            logging.INFO,
            ExtractionEvent.NORMALIZED,
            "Normalized",
            source=result.source,
            title=result.album.title,
            track_count=len(result.album.tracks),
            error_count=len(result.errors),
            warning_count=len(result.warnings),
            **context,
        )
        return result

    def emit(self, result: ExtractionResult, output: Path | None = None) -> str:
        """Serialise the album to canonical JSON, writing it to ``output`` when given."""

        document = dumps_album(result.album)
        if output is not None:
            write_text_file(output, document + "\n")
        self.stage = ExtractionStage.EMITTED
        self._log_event(
            logging.INFO,
            ExtractionEvent.EMITTED,
            "Emitted canonical JSON",
            source=result.source,
            target_path=output,
        )
        return document
