"""
Summary: Tests for building album drafts from embedded FLAC tags.
Why: The tag source seeds every album-level and track field for local rips.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from classitag.features.extraction.domain import SourceReadError, UnsupportedSourceError
from classitag.features.extraction.usecases import (
    ExtractionPipeline,
    TagReaderPort,
    TagSourceExtractor,
    discover_audio_files,
)
from classitag.features.extraction.usecases._tag_utils import (
    disc_from_folders,
    parse_comment_edition,
    title_from_filename,
)
from classitag.shared import Artist, Edition, Role

AlbumFactory = Callable[..., tuple[Path, TagReaderPort]]


def _tags(track: str, title: str, **extra: str) -> dict[str, str]:
    base = {
        "ALBUM": "Goldberg Variations",
        "DATE": "1982",
        "TRACKNUMBER": track,
        "TITLE": title,
        "COMPOSER": "Johann Sebastian Bach",
        "ARTIST": "Glenn Gould",
    }
    base.update(extra)
    return base


def test_discover_audio_files_sorts_by_path_and_ignores_other_files(tmp_path: Path) -> None:
    for name in ("CD 2/01.flac", "CD 1/02.FLAC", "CD 1/01.flac", "cover.jpg", "notes.txt"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()

    found = [path.relative_to(tmp_path).as_posix() for path in discover_audio_files(tmp_path)]

    assert found == ["CD 1/01.flac", "CD 1/02.FLAC", "CD 2/01.flac"]


def test_universal_performer_is_promoted_to_album_artist(make_album: AlbumFactory) -> None:
    root, reader = make_album(
        {
            "01.flac": _tags("1", "Aria", ALBUMARTIST=""),
            "02.flac": _tags("2", "Variatio 1", ALBUMARTIST=""),
            "03.flac": _tags("3", "Variatio 2", ALBUMARTIST=""),
        }
    )

    result = ExtractionPipeline(tag_reader=reader).extract_directory(root)

    gould = Artist("Glenn Gould", Role.SOLOIST)
    assert result.album.album_artist == [gould]
    assert all(track.has_artist(gould) for track in result.album.tracks)
    assert all(track.composer() == Artist("Johann Sebastian Bach", Role.COMPOSER) for track in result.album.tracks)
    assert not result.has_required_errors()


def test_album_fields_are_seeded_from_first_file(make_album: AlbumFactory) -> None:
    root, reader = make_album(
        {
            "01.flac": _tags(
                "1",
                "Aria",
                ORIGINALDATE="1981-04-22",
                LABEL="Sony Classical",
                CATALOGNUMBER="SMK 52594",
            ),
            "02.flac": _tags("2", "Variatio 1"),
        }
    )

    result = TagSourceExtractor(reader).extract(root)

    album = result.album
    assert album.title == "Goldberg Variations"
    assert album.original_year == 1981
    assert album.edition == Edition(label="Sony Classical", catalog_number="SMK 52594", year=1982)
    assert [(t.disc, t.track, t.title) for t in album.tracks] == [(1, 1, "Aria"), (1, 2, "Variatio 1")]
    assert [t.file.path for t in album.tracks if t.file] == ["01.flac", "02.flac"]
    assert album.tracks[0].artists == [
        Artist("Johann Sebastian Bach", Role.COMPOSER),
        Artist("Glenn Gould", Role.UNKNOWN),
    ]


def test_edition_falls_back_to_comment_lines(make_album: AlbumFactory) -> None:
    tags = _tags("1", "Aria", COMMENT="Label: harmonia mundi\nCatalog Number: HMM 902618")
    del tags["DATE"]
    tags["YEAR"] = "2019"
    root, reader = make_album({"01.flac": tags})

    result = TagSourceExtractor(reader).extract(root)

    assert result.album.original_year == 2019
    assert result.album.edition == Edition(label="harmonia mundi", catalog_number="HMM 902618")
    assert not result.has_error_for("edition")


def test_missing_edition_is_an_optional_error(make_album: AlbumFactory) -> None:
    tags = _tags("1", "Aria")
    del tags["DATE"]
    tags["ORIGINALDATE"] = "1955"
    root, reader = make_album({"01.flac": tags})

    result = TagSourceExtractor(reader).extract(root)

    assert result.album.edition is None
    edition_errors = [issue for issue in result.errors if issue.field == "edition"]
    assert len(edition_errors) == 1
    assert not edition_errors[0].required


def test_missing_composer_yields_exactly_one_required_error(make_album: AlbumFactory) -> None:
    second = _tags("2", "Variatio 1")
    del second["COMPOSER"]
    root, reader = make_album(
        {
            "01.flac": _tags("1", "Aria"),
            "02.flac": second,
            "03.flac": _tags("3", "Variatio 2"),
        }
    )

    result = ExtractionPipeline(tag_reader=reader).extract_directory(root)

    composer_errors = [issue for issue in result.errors if issue.field == "composer"]
    assert len(composer_errors) == 1
    assert composer_errors[0].required
    assert composer_errors[0].message == "missing for disc 1 track 2"
    assert len(result.album.tracks) == 3


def test_track_number_and_title_fall_back_to_filename(make_album: AlbumFactory) -> None:
    tags = _tags("", "")
    root, reader = make_album({"07 - Variatio 6.flac": tags})

    track = TagSourceExtractor(reader).extract(root).album.tracks[0]

    assert track.track == 7
    assert track.title == "Variatio 6"


def test_file_without_any_track_number_is_skipped(make_album: AlbumFactory) -> None:
    root, reader = make_album(
        {
            "01.flac": _tags("1", "Aria"),
            "bonus.flac": _tags("", "Interview"),
        }
    )

    result = TagSourceExtractor(reader).extract(root)

    assert [t.title for t in result.album.tracks] == ["Aria"]
    track_errors = [issue for issue in result.errors if issue.field == "track"]
    assert [issue.message for issue in track_errors] == ["missing for bonus.flac"]
    assert track_errors[0].required


def test_disc_number_comes_from_tag_then_folder(make_album: AlbumFactory) -> None:
    root, reader = make_album(
        {
            "CD 1/01.flac": _tags("1", "Aria"),
            "CD 2/01.flac": _tags("1", "Variatio 16"),
            "Extras/01.flac": _tags("1", "Aria da capo", DISCNUMBER="3/3"),
        }
    )

    tracks = TagSourceExtractor(reader).extract(root).album.tracks

    assert [(t.disc, t.track) for t in tracks] == [(1, 1), (2, 1), (3, 1)]


def test_disc_numbers_inferred_from_track_number_resets(make_album: AlbumFactory) -> None:
    root, reader = make_album(
        {
            "a01.flac": _tags("1", "Aria"),
            "a02.flac": _tags("2", "Variatio 1"),
            "b01.flac": _tags("1", "Variatio 2"),
        }
    )

    result = TagSourceExtractor(reader).extract(root)

    assert [t.disc for t in result.album.tracks] == [1, 1, 2]
    assert any("track-number resets" in warning for warning in result.warnings)
    assert "disc detection: disc_count=2, is_multi_disc=true, method=track number reset" in result.notes


def test_inconsistent_album_artist_is_an_optional_error(make_album: AlbumFactory) -> None:
    root, reader = make_album(
        {
            "01.flac": _tags("1", "Aria", ALBUMARTIST="Glenn Gould"),
            "02.flac": _tags("2", "Variatio 1", ALBUMARTIST="Glenn Gould; Someone Else"),
        }
    )

    result = TagSourceExtractor(reader).extract(root)

    issues = [issue for issue in result.errors if issue.field == "album_artist"]
    assert [issue.message for issue in issues] == ["inconsistent album artist"]
    assert not issues[0].required


def test_title_and_year_fall_back_to_directory_name(make_album: AlbumFactory) -> None:
    tags = _tags("1", "Aria")
    del tags["ALBUM"]
    del tags["DATE"]
    root, reader = make_album({"01.flac": tags}, folder="Goldberg Variations (1981) [FLAC] [24-96]")

    result = TagSourceExtractor(reader, current_year=2024).extract(root)

    assert result.album.title == "Goldberg Variations"
    assert result.album.original_year == 1981
    assert any("directory name" in warning for warning in result.warnings)
    assert not result.has_error_for("title")
    assert not result.has_error_for("year")


def test_missing_title_and_year_are_required_errors(make_album: AlbumFactory) -> None:
    tags = _tags("1", "Aria")
    del tags["ALBUM"]
    del tags["DATE"]
    root, reader = make_album({"01.flac": tags}, folder="Misc rips")

    result = TagSourceExtractor(reader).extract(root)

    assert {issue.field for issue in result.required_errors()} == {"title", "year"}


def test_directory_without_audio_files_fails(tmp_path: Path) -> None:
    (tmp_path / "cover.jpg").touch()
    reader = _NeverCalledReader()
    extractor = TagSourceExtractor(reader)

    with pytest.raises(SourceReadError, match="no audio files found"):
        _ = extractor.read_directory(tmp_path)
    assert reader.called is False


def test_missing_directory_fails(tmp_path: Path) -> None:
    with pytest.raises(SourceReadError, match="directory not found"):
        _ = TagSourceExtractor(_NeverCalledReader()).read_directory(tmp_path / "absent")


def test_dj_tag_is_unsupported(make_album: AlbumFactory) -> None:
    root, reader = make_album(
        {
            "01.flac": _tags("1", "Intro"),
            "02.flac": _tags("2", "Mix", DJ="Some DJ"),
        }
    )

    with pytest.raises(UnsupportedSourceError, match="DJ"):
        _ = TagSourceExtractor(reader).extract(root)


def test_comment_catalog_line_stops_at_end_of_line(make_album: AlbumFactory) -> None:
    tags = _tags("1", "Aria", COMMENT="Catalog: HMC 902\nLabel: harmonia mundi")
    del tags["DATE"]
    root, reader = make_album({"01.flac": tags})

    result = TagSourceExtractor(reader).extract(root)

    assert result.album.edition == Edition(label="harmonia mundi", catalog_number="HMC 902")
    assert parse_comment_edition("Label: Hyperion\nCatalog Number: CDA 66460\n") == ("Hyperion", "CDA 66460")


def test_comment_is_read_when_only_date_is_tagged(make_album: AlbumFactory) -> None:
    root, reader = make_album(
        {"01.flac": _tags("1", "Aria", COMMENT="Label: Sony Classical\nCatalog Number: SMK 52594")}
    )

    result = TagSourceExtractor(reader).extract(root)

    assert result.album.edition == Edition(label="Sony Classical", catalog_number="SMK 52594", year=1982)


def test_date_alone_still_gives_an_edition_year(make_album: AlbumFactory) -> None:
    root, reader = make_album({"01.flac": _tags("1", "Aria")})

    result = TagSourceExtractor(reader).extract(root)

    assert result.album.edition == Edition(year=1982)
    assert not result.has_error_for("edition")


def test_dvd_folders_carry_disc_numbers(make_album: AlbumFactory) -> None:
    root, reader = make_album(
        {
            "DVD 1/01.flac": _tags("1", "Act I"),
            "DVD 2/01.flac": _tags("1", "Act II"),
            "CDextra/01.flac": _tags("2", "Interview"),
        }
    )

    result = TagSourceExtractor(reader).extract(root)

    assert [(t.disc, t.track, t.title) for t in result.album.tracks] == [
        (1, 2, "Interview"),
        (1, 1, "Act I"),
        (2, 1, "Act II"),
    ]
    assert disc_from_folders(["Opera", "DVD 2"]) == 2
    assert disc_from_folders(["Discotheque"]) is None


def test_title_fallback_keeps_numbers_that_belong_to_the_title(make_album: AlbumFactory) -> None:
    first = _tags("1", "")
    second = _tags("2", "")
    root, reader = make_album({"1812 Overture.flac": first, "02 - Marche slave.flac": second})

    result = TagSourceExtractor(reader).extract(root)

    assert [t.title for t in result.album.tracks] == ["Marche slave", "1812 Overture"]
    assert title_from_filename("1812 Overture") == "1812 Overture"
    assert title_from_filename("07_Capriccio italien") == "Capriccio italien"


class _NeverCalledReader:
    def __init__(self) -> None:
        self.called = False

    def read_tags(self, path: Path) -> dict[str, str]:
        self.called = True
        return {}
