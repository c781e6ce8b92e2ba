"""
Summary: Infer disc boundaries from ordered track listing lines and folder names.
Why: Catalogue pages and rips mark discs with headers, number resets or subfolders.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

__all__ = [
    "DiscStructure",
    "detect_disc_structure",
    "disc_header_number",
    "is_disc_directory",
    "track_line_number",
]

_DISC_HEADER_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"cd\s*(\d+)"),
    re.compile(r"disc\s*(\d+)"),
    re.compile(r"disk\s*(\d+)"),
    re.compile(r"(\d+):"),
)

_TRACK_LINE_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"^(\d+)\.\s"),
    re.compile(r"^Track\s+(\d+)[\s:]", re.IGNORECASE),
    re.compile(r"^(\d+)\s+[A-Z]"),
    re.compile(r"^·\s*(\d+)\s"),
)

_DISC_DIRECTORY_PREFIXES: Final[tuple[str, ...]] = ("cd", "disc", "disk", "dvd")


def disc_header_number(line: str) -> int | None:
    """Return N when the whole line is a disc header such as ``CD 2`` or ``3:``."""

    lowered = line.strip().lower()
    for pattern in _DISC_HEADER_PATTERNS:
        match = pattern.fullmatch(lowered)
        if match:
            number = int(match.group(1))
            return number if number > 0 else None
    return None


def track_line_number(line: str) -> int | None:
    """Return the leading track number of a track line, if the line is one."""

    stripped = line.strip()
    for pattern in _TRACK_LINE_PATTERNS:
        match = pattern.match(stripped)
        if match:
            number = int(match.group(1))
            return number if number > 0 else None
    return None


@dataclass(frozen=True, slots=True)
class DiscStructure:
    """Per-line disc assignment for one listing."""

    disc_count: int
    line_discs: tuple[int, ...]
    track_lines: tuple[bool, ...]

    @property
    def is_multi_disc(self) -> bool:
        return self.disc_count > 1

    def disc_for(self, index: int) -> int:
        if 0 <= index < len(self.line_discs):
            return self.line_discs[index]
        return 1

    def is_track_line(self, index: int) -> bool:
        return 0 <= index < len(self.track_lines) and self.track_lines[index]

    def to_note(self, method: str) -> str:
        return (
            f"disc detection: disc_count={self.disc_count}, "
            f"is_multi_disc={str(self.is_multi_disc).lower()}, method={method}"
        )


def detect_disc_structure(lines: Sequence[str]) -> DiscStructure:
    """Assign every line to a disc.

    An explicit header jumps to its disc and restarts counting; a track numbered 1
    after a track numbered above 1 starts the next disc. Lines are never dropped
    or reordered.
    """

    current_disc = 1
    max_disc = 1
    last_track = 0
    line_discs: list[int] = []
    track_lines: list[bool] = []

    for line in lines:
        header = disc_header_number(line)
        if header is not None:
            current_disc = header
            max_disc = max(max_disc, header)
            last_track = 0
            line_discs.append(current_disc)
            track_lines.append(False)
            continue

        number = track_line_number(line)
        if number is not None:
            if number == 1 and last_track > 1:
                current_disc += 1
                max_disc = max(max_disc, current_disc)
            last_track = number
            line_discs.append(current_disc)
            track_lines.append(True)
            continue

        line_discs.append(current_disc)
        track_lines.append(False)

    return DiscStructure(
        disc_count=max_disc,
        line_discs=tuple(line_discs),
        track_lines=tuple(track_lines),
    )


def is_disc_directory(name: str) -> bool:
    """Return True for ``CD``, ``Disc 2``, ``disk3``, ``DVD 1`` style folder names.

    Anything other than digits after the prefix (``CDextra``, ``Discotheque``) is
    rejected.
    """

    lowered = name.strip().lower()
    if not lowered:
        return False
    for prefix in _DISC_DIRECTORY_PREFIXES:
        if lowered.startswith(prefix):
            rest = lowered[len(prefix):].strip()
            return rest == "" or (rest.isascii() and rest.isdigit())
    return False
