"""
Summary: Tests for the album normalizer run after every extractor.
Why: Promotion, propagation, edition synthesis and invariant checks decide the final record.
"""

from __future__ import annotations

from classitag.features.extraction.domain import ExtractionIssue, ExtractionResult
from classitag.features.extraction.usecases import AlbumNormalizer, normalize
from classitag.shared import UNKNOWN_LABEL, Album, Artist, Edition, Role, Track

BACH = Artist("Johann Sebastian Bach", Role.COMPOSER)
GOULD = Artist("Glenn Gould", Role.SOLOIST)


def _album(*tracks: Track, **fields: object) -> ExtractionResult:
    album = Album(title="Goldberg Variations", original_year=1981, tracks=list(tracks))
    for name, value in fields.items():
        setattr(album, name, value)
    return ExtractionResult(album=album, source="tags")


def _track(number: int, *artists: Artist, disc: int = 1) -> Track:
    return Track(disc=disc, track=number, title=f"Variatio {number}", artists=list(artists))


def test_unknown_roles_use_the_role_seen_elsewhere() -> None:
    result = normalize(
        _album(
            _track(1, BACH, GOULD),
            _track(2, BACH, Artist("Glenn Gould", Role.UNKNOWN)),
        )
    )

    assert result.album.tracks[1].artists == [BACH, GOULD]
    assert (
        "role inference: Glenn Gould -> soloist (high; credited as soloist elsewhere on the album)"
        in result.notes
    )


def test_universal_performer_fills_empty_album_artist() -> None:
    result = normalize(_album(_track(1, BACH, GOULD), _track(2, BACH, GOULD)))

    assert result.album.album_artist == [GOULD]
    assert not result.has_errors()


def test_album_artist_roles_are_upgraded_from_track_credits() -> None:
    result = normalize(
        _album(
            _track(1, BACH, GOULD),
            _track(2, BACH, GOULD),
            album_artist=[Artist("Glenn Gould", Role.CONDUCTOR)],
        )
    )

    assert result.album.album_artist == [GOULD]
    assert "album artist roles taken from track credits" in result.notes


def test_album_artist_is_merged_and_propagated() -> None:
    orchestra = Artist("Berliner Philharmoniker", Role.ENSEMBLE)

    result = normalize(
        _album(
            _track(1, BACH, GOULD),
            _track(2, BACH, GOULD),
            album_artist=[orchestra],
        )
    )

    assert result.album.album_artist == [orchestra, GOULD]
    assert all(track.has_artist(orchestra) for track in result.album.tracks)
    assert "album artist Berliner Philharmoniker (ensemble) added to 2 track(s)" in result.warnings


def test_propagation_adds_a_note_when_tracks_had_no_performers() -> None:
    result = normalize(_album(_track(1, BACH), _track(2, BACH), album_artist=[GOULD]))

    assert all(track.artists == [BACH, GOULD] for track in result.album.tracks)
    assert "album artist Glenn Gould (soloist) added to 2 track(s)" in result.notes
    assert result.warnings == ()


def test_various_artists_is_not_propagated() -> None:
    result = normalize(
        _album(
            _track(1, BACH),
            _track(2, BACH),
            album_artist=[Artist("Various Artists", Role.SOLOIST)],
        )
    )

    assert all(track.artists == [BACH] for track in result.album.tracks)


def test_same_person_as_composer_and_conductor_is_kept() -> None:
    bernstein_composer = Artist("Leonard Bernstein", Role.COMPOSER)
    bernstein_conductor = Artist("Leonard Bernstein", Role.CONDUCTOR)

    result = normalize(_album(_track(1, bernstein_composer, bernstein_conductor)))

    assert result.album.tracks[0].artists == [bernstein_composer, bernstein_conductor]
    assert result.album.album_artist == [bernstein_conductor]


def test_edition_year_and_label_are_synthesized() -> None:
    result = normalize(_album(_track(1, BACH), edition=Edition(catalog_number="SMK 52594")))

    assert result.album.edition == Edition(label=UNKNOWN_LABEL, catalog_number="SMK 52594", year=1981)
    assert "edition year set to original year 1981" in result.warnings
    assert f"edition label missing; set to {UNKNOWN_LABEL}" in result.warnings


def test_edition_year_falls_back_to_sentinel() -> None:
    result = normalize(
        _album(_track(1, BACH), original_year=0, edition=Edition(label="Sony Classical"))
    )

    assert result.album.edition is not None
    assert result.album.edition.year == 1900
    assert result.album.edition.label == "Sony Classical"


def test_missing_composer_and_duplicate_positions_are_required_errors() -> None:
    result = normalize(_album(_track(1, BACH), _track(2), _track(2, BACH)))

    messages = [(issue.field, issue.message) for issue in result.required_errors()]
    assert ("composer", "missing for disc 1 track 2") in messages
    assert ("track", "duplicate disc 1 track 2") in messages


def test_existing_errors_are_not_repeated() -> None:
    draft = _album(_track(1)).with_error(ExtractionIssue.missing("composer", "missing for disc 1 track 1"))

    result = normalize(draft)

    assert [issue.field for issue in result.errors] == ["composer"]


def test_empty_album_gets_track_title_and_year_errors() -> None:
    draft = ExtractionResult(album=Album(), source="presto")

    result = normalize(draft)

    assert {issue.field for issue in result.required_errors()} == {"tracks", "title", "year"}


def test_track_order_warnings_and_gap_notes() -> None:
    result = normalize(
        _album(
            _track(1, BACH),
            _track(3, BACH),
            _track(2, BACH, disc=2),
            _track(1, BACH, disc=2),
        )
    )

    assert "disc 1 numbering gaps: 2" in result.notes
    assert "track numbers on disc 2 are not increasing" in result.warnings


def test_input_result_is_left_untouched() -> None:
    draft = _album(_track(1, BACH, GOULD), _track(2, BACH, GOULD))

    _ = AlbumNormalizer().normalize(draft)

    assert draft.album.album_artist == []
    assert draft.notes == ()


def test_universal_performers_requires_identical_role_on_every_track() -> None:
    tracks = [
        _track(1, BACH, GOULD),
        _track(2, BACH, Artist("Glenn Gould", Role.CONDUCTOR)),
    ]

    assert AlbumNormalizer.universal_performers(tracks) == []
