"""
Summary: Error taxonomy for album extraction.
Why: Terminal faults stop a run as exceptions; non-terminal ones travel as values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

__all__ = [
    "ExtractionFailure",
    "ExtractionIssue",
    "IssueKind",
    "SourceParseError",
    "SourceReadError",
    "UnsupportedSourceError",
]


class ExtractionFailure(Exception):
    """Base class for faults that end an extraction run."""


class SourceReadError(ExtractionFailure):
    """A file or page could not be read or fetched."""


class SourceParseError(ExtractionFailure):
    """The source was read but its structure could not be parsed."""


class UnsupportedSourceError(ExtractionFailure):
    """The source is deliberately not handled (DJ mixes, unknown sites)."""


class IssueKind(StrEnum):
    """Kinds of non-terminal field problems."""

    REQUIRED_FIELD_MISSING = "required_field_missing"
    OPTIONAL_FIELD_MISSING = "optional_field_missing"


@dataclass(frozen=True, slots=True)
class ExtractionIssue:
    """A field the extractor could not determine."""

    field: str
    message: str
    required: bool

    @property
    def kind(self) -> IssueKind:
        if self.required:
            return IssueKind.REQUIRED_FIELD_MISSING
        return IssueKind.OPTIONAL_FIELD_MISSING

    @classmethod
    def missing(cls, field: str, message: str) -> ExtractionIssue:
        return cls(field=field, message=message, required=True)

    @classmethod
    def optional(cls, field: str, message: str) -> ExtractionIssue:
        return cls(field=field, message=message, required=False)

    def __str__(self) -> str:
        tag = "required" if self.required else "optional"
        return f"{self.field}: {self.message} ({tag})"
