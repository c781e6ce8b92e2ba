"""Tests for disc boundary detection."""

from __future__ import annotations

import pytest

from classitag.features.extraction.domain import (
    detect_disc_structure,
    disc_header_number,
    is_disc_directory,
    track_line_number,
)


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("CD 2", 2),
        ("cd2", 2),
        ("Disc 3", 3),
        ("  DISK 1 ", 1),
        ("4:", 4),
        ("CD 0", None),
        ("CD 2 - Bonus", None),
        ("1. Allegro", None),
    ],
)
def test_disc_header_number(line: str, expected: int | None) -> None:
    assert disc_header_number(line) == expected


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("1. Allegro", 1),
        ("Track 12: Finale", 12),
        ("track 3 Largo", 3),
        ("7 Andante", 7),
        ("· 4 Presto", 4),
        ("7 andante", None),
        ("Allegro", None),
    ],
)
def test_track_line_number(line: str, expected: int | None) -> None:
    assert track_line_number(line) == expected


def test_track_number_reset_starts_a_new_disc() -> None:
    structure = detect_disc_structure(["1. A", "2. B", "3. C", "1. D", "2. E"])

    assert structure.disc_count == 2
    assert structure.is_multi_disc
    assert structure.line_discs == (1, 1, 1, 2, 2)


def test_explicit_headers_restart_numbering() -> None:
    lines = ["CD 1", "1. A", "2. B", "CD 2", "1. C", "2. D"]

    structure = detect_disc_structure(lines)

    assert structure.disc_count == 2
    assert [structure.disc_for(i) for i in range(len(lines))] == [1, 1, 1, 2, 2, 2]
    assert [structure.is_track_line(i) for i in range(len(lines))] == [
        False, True, True, False, True, True,
    ]


def test_other_lines_are_kept_on_the_current_disc() -> None:
    structure = detect_disc_structure(["1. A", "Johann Sebastian Bach", "2. B"])

    assert structure.line_discs == (1, 1, 1)
    assert structure.track_lines == (True, False, True)


def test_empty_input_is_a_single_disc() -> None:
    structure = detect_disc_structure([])

    assert structure.disc_count == 1
    assert not structure.is_multi_disc
    assert structure.disc_for(0) == 1


def test_note_reports_count_flag_and_method() -> None:
    note = detect_disc_structure(["1. A", "1. B"]).to_note("track parsing")

    assert note == "disc detection: disc_count=1, is_multi_disc=false, method=track parsing"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("CD", True),
        ("CD 1", True),
        (" disc2 ", True),
        ("Disk 10", True),
        ("DVD 1", True),
        ("CDextra", False),
        ("Discotheque", False),
        ("Scans", False),
        ("", False),
    ],
)
def test_is_disc_directory(name: str, expected: bool) -> None:
    assert is_disc_directory(name) is expected
