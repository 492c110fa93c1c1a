"""Tests for path helpers."""

import pytest

from flatfs import dirname, is_in_directory, normalize_path


class TestPaths:
    """Test path helpers."""

    def test_normalize_path(self):
        """Slashes are stripped and collapsed; backslashes are kept."""
        assert normalize_path("") == ""
        assert normalize_path("/") == ""
        assert normalize_path("/a//b/") == "a/b"
        assert normalize_path("a\\b") == "a\\b"

    def test_normalize_rejects_relative_segments(self):
        """Dot segments are refused."""
        with pytest.raises(ValueError):
            normalize_path("a/../b")
        with pytest.raises(ValueError):
            normalize_path("./a")

    def test_normalize_rejects_non_strings(self):
        """Non-string paths raise TypeError."""
        with pytest.raises(TypeError):
            normalize_path(None)

    def test_dirname(self):
        """dirname() drops the final segment."""
        assert dirname("a/b/c") == "a/b"
        assert dirname("a") == ""
        assert dirname("") == ""

    def test_is_in_directory(self):
        """Subtree membership follows the prefix rule."""
        assert is_in_directory("a/b", "a")
        assert is_in_directory("a/b/c", "a")
        assert is_in_directory("a", "")
        assert not is_in_directory("ab", "a")
        assert not is_in_directory("a", "a")
        assert not is_in_directory("", "")
