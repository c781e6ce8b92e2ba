"""
Summary: Immutable container for an album draft and its diagnostics.
Why: Extractors and the normalizer compose by returning new results, never mutating.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from classitag.shared import Album

from .errors import ExtractionIssue

__all__ = ["ExtractionResult"]


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Album record plus errors, warnings and parse notes.

    Every ``with_*`` method returns a new instance; the receiver is left untouched.
    """

    album: Album
    source: str
    errors: tuple[ExtractionIssue, ...] = ()
    warnings: tuple[str, ...] = ()
    notes: tuple[str, ...] = ()

    def with_album(self, album: Album) -> ExtractionResult:
        return replace(self, album=album)

    def with_error(self, issue: ExtractionIssue) -> ExtractionResult:
        return replace(self, errors=(*self.errors, issue))

    def with_errors(self, issues: Iterable[ExtractionIssue]) -> ExtractionResult:
        return replace(self, errors=(*self.errors, *issues))

    def with_warning(self, warning: str) -> ExtractionResult:
        return replace(self, warnings=(*self.warnings, warning))

    def with_warnings(self, warnings: Iterable[str]) -> ExtractionResult:
        return replace(self, warnings=(*self.warnings, *warnings))

    def with_note(self, note: str) -> ExtractionResult:
        return replace(self, notes=(*self.notes, note))

    def with_notes(self, notes: Iterable[str]) -> ExtractionResult:
        return replace(self, notes=(*self.notes, *notes))

    def has_errors(self) -> bool:
        return bool(self.errors)

    def has_required_errors(self) -> bool:
        return any(issue.required for issue in self.errors)

    def has_error_for(self, field: str) -> bool:
        return any(issue.field == field for issue in self.errors)

    def required_errors(self) -> list[ExtractionIssue]:
        return [issue for issue in self.errors if issue.required]
