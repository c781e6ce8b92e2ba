"""Extraction use cases: source extractors, normalizer and pipeline."""

from .extraction_types import ExtractionEvent, ExtractionStage
from .normalizer import AlbumNormalizer, normalize
from .pipeline import ExtractionPipeline, decode_html
from .ports import FetchResult, HTMLFetcherPort, TagReaderPort
from .tag_source import TagSourceExtractor, TaggedFile, discover_audio_files

__all__ = [
    "AlbumNormalizer",
    "ExtractionEvent",
    "ExtractionPipeline",
    "ExtractionStage",
    "FetchResult",
    "HTMLFetcherPort",
    "TagReaderPort",
    "TagSourceExtractor",
    "TaggedFile",
    "decode_html",
    "discover_audio_files",
    "normalize",
]
