"""
Tests unitaires pour RegexFilenameParser.

Ces tests verifient:
- La priorite des motifs episode sur les motifs film
- L'extraction titre / annee / saison / episode
- Le nettoyage des titres (separateurs, qualite, groupe, casse)
- Les annees hors bornes et les noms non reconnus
"""

import pytest

from src.adapters.parsing import RegexFilenameParser
from src.adapters.parsing.filename_parser import accept_year, clean_title
from src.core.value_objects import MediaKind, ParsedName


@pytest.fixture
def parser() -> RegexFilenameParser:
    return RegexFilenameParser()


class TestEpisodes:
    """Noms de fichiers d'episodes."""

    def test_year_before_episode_code_is_not_a_movie(self, parser) -> None:
        """Show.2020.S01E02 est un episode, pas un film de 2020."""
        assert parser.parse("Show.2020.S01E02.mkv") == ParsedName(
            kind=MediaKind.EPISODE, title="Show", year=2020, season=1, episode=2
        )

    def test_standard_code_without_year(self, parser) -> None:
        assert parser.parse("Show.Title.S02E05.WEBRip.mkv") == ParsedName(
            kind=MediaKind.EPISODE, title="Show Title", season=2, episode=5
        )

    def test_lowercase_code(self, parser) -> None:
        parsed = parser.parse("dark.s01e03.1080p.mkv")
        assert parsed.kind == MediaKind.EPISODE
        assert (parsed.title, parsed.season, parsed.episode) == ("Dark", 1, 3)

    def test_separated_season_and_episode(self, parser) -> None:
        parsed = parser.parse("Show.S01.E02.mkv")
        assert parsed.kind == MediaKind.EPISODE
        assert (parsed.season, parsed.episode) == (1, 2)

    def test_three_digit_code(self, parser) -> None:
        parsed = parser.parse("Show.Name.103.HDTV.mkv")
        assert parsed == ParsedName(
            kind=MediaKind.EPISODE, title="Show Name", season=1, episode=3
        )

    def test_three_digit_code_episode_zero_rejected(self, parser) -> None:
        assert parser.parse("Show.Name.100.mkv").kind != MediaKind.EPISODE

    def test_episode_zero_rejected(self, parser) -> None:
        assert parser.parse("Show.S01E00.mkv").kind != MediaKind.EPISODE

    def test_three_digit_episode_number(self, parser) -> None:
        parsed = parser.parse("One.Piece.S01E105.mkv")
        assert (parsed.season, parsed.episode) == (1, 105)


class TestMovies:
    """Noms de fichiers de films."""

    def test_release_name(self, parser) -> None:
        assert parser.parse("Movie.Title.2023.1080p.BluRay.x264-GROUP.mkv") == ParsedName(
            kind=MediaKind.MOVIE, title="Movie Title", year=2023
        )

    def test_year_with_release_group(self, parser) -> None:
        assert parser.parse("Heat.1995-FGT.mkv") == ParsedName(
            kind=MediaKind.MOVIE, title="Heat", year=1995
        )

    def test_year_only(self, parser) -> None:
        assert parser.parse("The.Matrix.1999.mkv") == ParsedName(
            kind=MediaKind.MOVIE, title="The Matrix", year=1999
        )

    def test_parenthesized_year(self, parser) -> None:
        assert parser.parse("Inception (2010).mkv") == ParsedName(
            kind=MediaKind.MOVIE, title="Inception", year=2010
        )

    def test_title_case(self, parser) -> None:
        assert parser.parse("the.dark.knight.2008.720p.mkv").title == "The Dark Knight"

    def test_year_out_of_range_is_absent(self, parser) -> None:
        """Une annee hors [1900, 2100] est absente, sans erreur."""
        parsed = parser.parse("Old.Film.1850.1080p.mkv")
        assert parsed.kind == MediaKind.MOVIE
        assert parsed.title == "Old Film"
        assert parsed.year is None

    def test_full_path_uses_file_name(self, parser) -> None:
        assert parser.parse("/downloads/sub/The.Matrix.1999.mkv").title == "The Matrix"


class TestCodecTokens:
    """Les codes codec a 3 chiffres (H.264, H 265) ne sont pas des episodes."""

    @pytest.mark.parametrize(
        "name,year",
        [
            ("Movie.Title.2021.1080p.WEB-DL.DDP5.1.H.264-GROUP.mkv", 2021),
            ("Movie.Title.2021.1080p.BluRay.H.265-GROUP.mkv", 2021),
            ("Movie Title 2021 720p H 264.mkv", 2021),
            ("Movie.Title.2019.H.264.mkv", 2019),
        ],
    )
    def test_release_with_codec_is_movie(self, parser, name, year) -> None:
        assert parser.parse(name) == ParsedName(
            kind=MediaKind.MOVIE, title="Movie Title", year=year
        )

    def test_code_followed_by_dash_is_not_episode(self, parser) -> None:
        assert parser.parse("Show.Name.103-GROUP.mkv").kind != MediaKind.EPISODE

    def test_three_digit_code_still_detected_after_codec(self, parser) -> None:
        parsed = parser.parse("Show.Name.205.x264.mkv")
        assert parsed.kind == MediaKind.EPISODE
        assert (parsed.title, parsed.season, parsed.episode) == ("Show Name", 2, 5)


class TestUnknown:
    """Noms non reconnus."""

    def test_unknown_keeps_stem(self, parser) -> None:
        assert parser.parse("random_file.mkv") == ParsedName(
            kind=MediaKind.UNKNOWN, title="random_file"
        )

    def test_is_deterministic(self, parser) -> None:
        assert parser.parse("holiday video.mp4") == parser.parse("holiday video.mp4")


class TestHelpers:
    """Tests pour accept_year et clean_title."""

    @pytest.mark.parametrize(
        "value,expected",
        [("1900", 1900), ("2100", 2100), ("1899", None), ("2101", None), (None, None)],
    )
    def test_accept_year(self, value, expected) -> None:
        assert accept_year(value) == expected

    def test_clean_title_removes_noise(self) -> None:
        assert clean_title("some_movie.BluRay.x264-GRP") == "Some Movie"

    def test_clean_title_removes_dotted_codec_and_audio(self) -> None:
        assert clean_title("Movie.Title.DDP5.1.H.264-GROUP") == "Movie Title"
        assert clean_title("Movie.Title.DD5.1.H.265") == "Movie Title"

    def test_clean_title_strips_extension(self) -> None:
        assert clean_title("my.movie.mkv") == "My Movie"
