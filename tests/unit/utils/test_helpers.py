"""
Tests pour les fonctions de nettoyage des noms (utils.helpers).
"""

import pytest

from anilib.utils.helpers import build_episode_title, folder_search_text, numbers_sum


class TestFolderSearchText:
    """Tests pour folder_search_text."""

    @pytest.mark.parametrize(
        "folder_name,expected",
        [
            ("Cowboy Bebop", "Cowboy Bebop"),
            ("[Judas] Cowboy Bebop [BD 1080p]", "Cowboy Bebop"),
            ("  Naruto  ", "Naruto"),
            ("[Tags] [Only]", ""),
        ],
    )
    def test_removes_bracketed_content(self, folder_name, expected):
        assert folder_search_text(folder_name) == expected

    def test_keeps_parentheses(self):
        """Seuls les crochets sont retires du nom de dossier."""
        assert folder_search_text("Hunter x Hunter (2011)") == "Hunter x Hunter (2011)"


class TestBuildEpisodeTitle:
    """Tests pour build_episode_title."""

    def test_release_name(self):
        title = build_episode_title("[SubsPlease] Show Name - 01 (1080p) [ABCD1234]")
        assert title == "Show Name 01"

    def test_braces_removed(self):
        assert build_episode_title("Show {v2} - 05") == "Show 05"

    def test_underscores_and_dots_become_spaces(self):
        assert build_episode_title("Cowboy_Bebop.Session.01") == "Cowboy Bebop Session 01"

    def test_no_brackets_in_result(self):
        title = build_episode_title("[Group] Title [1080p] (x265) {tag}")
        assert not any(char in title for char in "[](){}")
        assert title == "Title"

    def test_non_latin_letters_are_kept(self):
        assert build_episode_title("進撃の巨人 - 01") == "進撃の巨人 01"


class TestNumbersSum:
    """Tests pour numbers_sum."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Episode 2", 2),
            ("Episode 10", 10),
            ("S2 Ep 10", 12),
            ("No numbers", 0),
            ("Show 01", 1),
        ],
    )
    def test_sum(self, text, expected):
        assert numbers_sum(text) == expected
