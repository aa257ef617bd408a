"""Tests for canonical name formatting."""
import pytest

from showsorter.formatter import (
    format_basic_filename,
    format_episode_code,
    format_episode_filename,
    format_season_folder_name,
    format_series_folder_name,
    is_generic_season_name,
    sanitize_filename,
)
from showsorter.models import Episode, Season, Series


class TestSanitizeFilename:

    @pytest.mark.parametrize("name,expected", [
        ("Pilot", "Pilot"),
        ("The Woman in White", "The_Woman_in_White"),
        ("What Is and What Should Never Be?", "What_Is_and_What_Should_Never_Be"),
        ("AC/DC: Live", "AC_DC_Live"),
        ("  spaced   out  ", "spaced_out"),
        ("", ""),
    ])
    def test_sanitize(self, name, expected):
        assert sanitize_filename(name) == expected

    def test_none(self):
        assert sanitize_filename(None) is None


class TestEpisodeNames:

    def test_episode_code_pads(self):
        assert format_episode_code(1, 4) == "S01E04"
        assert format_episode_code(12, 105) == "S12E105"

    def test_basic_filename(self):
        assert format_basic_filename(1, 1, "mkv") == "S01E01.mkv"
        assert format_basic_filename(1, 1, ".mp4") == "S01E01.mp4"

    def test_episode_filename_with_title(self):
        episode = Episode(id=1, name="Pilot", season_number=1, episode_number=1)
        assert format_episode_filename(episode, ".mkv") == "S01E01_Pilot.mkv"

    def test_episode_filename_without_title(self):
        episode = Episode(id=1, name="", season_number=2, episode_number=3)
        assert format_episode_filename(episode, "avi") == "S02E03.avi"


class TestFolderNames:

    @pytest.mark.parametrize("name", [None, "", "Season 3", "season  10"])
    def test_generic_season_names(self, name):
        assert is_generic_season_name(name)

    def test_named_season_is_not_generic(self):
        assert not is_generic_season_name("The Final Season")

    def test_generic_season_folder(self):
        assert format_season_folder_name(Season(season_number=1, name="Season 1")) == "S01"

    def test_named_season_folder(self):
        season = Season(season_number=15, name="The Final Season")
        assert format_season_folder_name(season) == "S15_The_Final_Season"

    def test_series_folder_with_year(self):
        series = Series(id=1, name="Supernatural", first_air_date="2005-09-13")
        assert format_series_folder_name(series) == "Supernatural (2005)"

    def test_series_folder_without_year(self):
        assert format_series_folder_name(Series(id=1, name="Dark")) == "Dark"

    def test_series_folder_strips_invalid_characters(self):
        series = Series(id=1, name="Marvel's Agents of S.H.I.E.L.D.: Slingshot", first_air_date="2016")
        assert format_series_folder_name(series) == "Marvel's Agents of S.H.I.E.L.D. Slingshot (2016)"

    @pytest.mark.parametrize("name", ["", '<>:"/\\|?*', "   "])
    def test_series_folder_falls_back_when_name_is_unusable(self, name):
        series = Series(id=5, name=name, first_air_date="2005-01-01")
        assert format_series_folder_name(series, fallback="Mystery_Show") == "Mystery_Show"
        assert format_series_folder_name(series) == ""
