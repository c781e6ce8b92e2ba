"""
Summary: Map free-form credit strings and artist names onto the closed Role set.
Why: Sources give roles explicitly, as prose, or not at all; inference must be uniform.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from classitag.shared import Role

__all__ = [
    "Confidence",
    "RoleInference",
    "infer_artist_list",
    "infer_role",
    "role_from_name",
    "role_from_string",
]

_ENSEMBLE_ROLES: Final[frozenset[str]] = frozenset(
    {"choir", "chorus", "orchestra", "ensemble", "vocal ensemble", "chamber choir", "kammerchor"}
)
_CONDUCTOR_ROLES: Final[frozenset[str]] = frozenset(
    {"conductor", "chorus master", "chorusmaster", "director", "maestro"}
)
_SOLOIST_ROLES: Final[frozenset[str]] = frozenset(
    {"soloist", "vocalist", "singer", "performer", "instrumentalist"}
)

_CONDUCTOR_NAME_HINTS: Final[tuple[str, ...]] = ("conductor", "director")
_ENSEMBLE_NAME_HINTS: Final[tuple[str, ...]] = (
    "orchestra",
    "philharmonic",
    "symphony",
    "ensemble",
    "choir",
    "chorus",
    "kammerchor",
    "kammer",
    "quartet",
    "trio",
    "quintet",
    "sextet",
    "chamber",
    "band",
    "consort",
    "players",
)


class Confidence(StrEnum):
    """How much an inferred role can be trusted."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True, slots=True)
class RoleInference:
    """Outcome of one inference, kept for diagnostic notes."""

    name: str
    role: Role
    confidence: Confidence
    reason: str

    def is_uncertain(self) -> bool:
        return self.confidence is not Confidence.HIGH

    def to_note(self) -> str:
        return f"role inference: {self.name} -> {self.role} ({self.confidence}; {self.reason})"


def role_from_string(role_text: str) -> Role:
    """Layer 1: exact keyword lookup on a lowercased, trimmed role string."""

    key = role_text.strip().lower()
    if key in _ENSEMBLE_ROLES:
        return Role.ENSEMBLE
    if key in _CONDUCTOR_ROLES:
        return Role.CONDUCTOR
    if key in _SOLOIST_ROLES:
        return Role.SOLOIST
    return Role.UNKNOWN


def _name_hint(name: str) -> str | None:
    lowered = name.lower()
    for hint in _CONDUCTOR_NAME_HINTS + _ENSEMBLE_NAME_HINTS:
        if hint in lowered:
            return hint
    return None


def role_from_name(name: str) -> Role:
    """Layer 2: substring heuristic on the artist name; never returns UNKNOWN."""

    hint = _name_hint(name)
    if hint in _CONDUCTOR_NAME_HINTS:
        return Role.CONDUCTOR
    if hint is not None:
        return Role.ENSEMBLE
    return Role.SOLOIST


def infer_role(name: str, role_text: str = "") -> RoleInference:
    """Run both layers; the first one that yields a specific role wins."""

    explicit = role_from_string(role_text) if role_text else Role.UNKNOWN
    if explicit is not Role.UNKNOWN:
        return RoleInference(
            name=name,
            role=explicit,
            confidence=Confidence.HIGH,
            reason=f"credit '{role_text.strip()}'",
        )

    hint = _name_hint(name)
    if hint is not None:
        return RoleInference(
            name=name,
            role=role_from_name(name),
            confidence=Confidence.MEDIUM,
            reason=f"name contains '{hint}'",
        )
    return RoleInference(
        name=name,
        role=Role.SOLOIST,
        confidence=Confidence.LOW,
        reason="default for an individual name",
    )


def infer_artist_list(text: str) -> list[RoleInference]:
    """Infer roles for a comma-separated performer line.

    A plain name that directly follows an ensemble is read as its conductor, which is
    how catalogue performer lines are usually ordered.
    """

    inferences: list[RoleInference] = []
    previous_was_ensemble = False
    for part in text.split(","):
        name = part.strip()
        if not name:
            continue
        inference = infer_role(name)
        if previous_was_ensemble and inference.confidence is Confidence.LOW:
            inference = RoleInference(
                name=name,
                role=Role.CONDUCTOR,
                confidence=Confidence.MEDIUM,
                reason="follows an ensemble",
            )
        inferences.append(inference)
        previous_was_ensemble = inference.role is Role.ENSEMBLE
    return inferences
