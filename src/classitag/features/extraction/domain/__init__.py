"""Pure extraction building blocks: sanitizer, roles, dedup, disc structure, result."""

from .disc_structure import (
    DiscStructure,
    detect_disc_structure,
    disc_header_number,
    is_disc_directory,
    track_line_number,
)
from .errors import (
    ExtractionFailure,
    ExtractionIssue,
    IssueKind,
    SourceParseError,
    SourceReadError,
    UnsupportedSourceError,
)
from .extraction_result import ExtractionResult
from .name_dedup import canonicalize, dedupe_artists, dedupe_names, merge_warning
from .role_inference import (
    Confidence,
    RoleInference,
    infer_artist_list,
    infer_role,
    role_from_name,
    role_from_string,
)
from .text_sanitizer import (
    decode_entities,
    normalize_whitespace,
    sanitize_text,
    strip_markup,
    title_case,
)

__all__ = [
    "Confidence",
    "DiscStructure",
    "ExtractionFailure",
    "ExtractionIssue",
    "ExtractionResult",
    "IssueKind",
    "RoleInference",
    "SourceParseError",
    "SourceReadError",
    "UnsupportedSourceError",
    "canonicalize",
    "decode_entities",
    "dedupe_artists",
    "dedupe_names",
    "detect_disc_structure",
    "disc_header_number",
    "infer_artist_list",
    "infer_role",
    "is_disc_directory",
    "merge_warning",
    "normalize_whitespace",
    "role_from_name",
    "role_from_string",
    "sanitize_text",
    "strip_markup",
    "title_case",
    "track_line_number",
]
