"""Unit tests for URL helpers."""

import pytest

from keelcast.utils.urls import is_absolute_url, path_and_query


class TestIsAbsoluteUrl:
    """Test is_absolute_url function."""

    @pytest.mark.parametrize(
        "value",
        ["https://cdn.example.com/ep.mp3", "http://example.com", "https://example.com/a?b=c"],
    )
    def test_absolute(self, value: str) -> None:
        """Test absolute URLs are accepted."""
        assert is_absolute_url(value)

    @pytest.mark.parametrize("value", ["/ep.mp3", "ep.mp3", "", "   ", None, 42, "https://"])
    def test_not_absolute(self, value) -> None:
        """Test relative and non-string values are rejected."""
        assert not is_absolute_url(value)


class TestPathAndQuery:
    """Test path_and_query function."""

    def test_path_only(self) -> None:
        """Test host is excluded and text lower-cased."""
        assert path_and_query("https://CDN.example.com/Show/EP.MP3") == "/show/ep.mp3"

    def test_path_and_query(self) -> None:
        """Test query string is kept."""
        assert path_and_query("https://cdn.example.com/get?f=Audio/MPEG") == "/get?f=audio/mpeg"

    def test_relative_url(self) -> None:
        """Test relative URLs are inspected whole."""
        assert path_and_query("files/Episode.mp3") == "files/episode.mp3"
