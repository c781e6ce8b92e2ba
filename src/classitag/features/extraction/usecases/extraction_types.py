"""src/classitag/features/extraction/usecases/extraction_types.py
Where: Extraction feature usecases layer.
What: Stage and structured log event enums for the extraction pipeline.
Why: Keep the pipeline lean by centralising its vocabulary.
"""

from __future__ import annotations

from enum import StrEnum


class ExtractionStage(StrEnum):
    """States a source passes through, in order."""

    READ = "read"
    PARSE = "parse"
    DRAFT_BUILT = "draft_built"
    NORMALIZED = "normalized"
    EMITTED = "emitted"


class ExtractionEvent(StrEnum):
    """Structured event identifiers for extraction logs."""

    SOURCE_READ = "extraction.source.read"
    SOURCE_PARSED = "extraction.source.parsed"
    DRAFT_BUILT = "extraction.draft.built"
    NORMALIZED = "extraction.normalized"
    EMITTED = "extraction.emitted"
    FAILED = "extraction.failed"


__all__ = ["ExtractionEvent", "ExtractionStage"]
