"""Unit tests for feed and item validation."""

import pytest

from keelcast.errors import ErrorKind, FeedStructureInvalid, ItemValidationFailed
from keelcast.ingestion.validator import validate_document, validate_item


def _raw_item(**overrides) -> dict:
    item = {
        "title": "Episode",
        "link": "https://podcast.example.com/episodes/1",
        "contentSnippet": "About the episode",
        "enclosure": {"url": "https://cdn.example.com/ep.mp3", "type": "audio/mpeg"},
    }
    item.update(overrides)
    return {key: value for key, value in item.items() if value is not None}


class TestValidateDocument:
    """Test validate_document function."""

    def test_returns_items(self) -> None:
        """Test items are returned unchanged."""
        items = [_raw_item()]
        assert validate_document({"items": items}) is items

    def test_empty_items(self) -> None:
        """Test a feed without episodes is rejected."""
        with pytest.raises(FeedStructureInvalid, match="at least one episode"):
            validate_document({"title": "Empty", "items": []})

    def test_missing_items(self) -> None:
        """Test a document without an items list is rejected."""
        with pytest.raises(FeedStructureInvalid) as exc_info:
            validate_document({"title": "Broken"})

        assert exc_info.value.kind == ErrorKind.FEED_STRUCTURE_INVALID


class TestValidateItem:
    """Test validate_item function."""

    def test_valid_item(self) -> None:
        """Test a complete item validates."""
        item = validate_item(_raw_item(pubDate="Mon, 15 Jan 2024 10:30:00 GMT"))

        assert item.title == "Episode"
        assert item.content_snippet == "About the episode"
        assert item.pub_date == "Mon, 15 Jan 2024 10:30:00 GMT"

    def test_content_without_snippet(self) -> None:
        """Test content alone satisfies the description rule."""
        item = validate_item(_raw_item(contentSnippet=None, content="<p>About</p>"))
        assert item.content == "<p>About</p>"

    def test_media_content_satisfies_payload_rule(self) -> None:
        """Test media:content counts as an enclosure-like payload."""
        item = validate_item(
            _raw_item(enclosure=None, **{"media:content": {"url": "https://cdn.example.com/a.m4a"}})
        )
        assert item.media_content == {"url": "https://cdn.example.com/a.m4a"}

    def test_missing_title(self) -> None:
        """Test item without title is rejected."""
        with pytest.raises(ItemValidationFailed, match="title"):
            validate_item(_raw_item(title=None))

    def test_empty_title(self) -> None:
        """Test empty title is rejected."""
        with pytest.raises(ItemValidationFailed):
            validate_item(_raw_item(title=""))

    def test_relative_link(self) -> None:
        """Test link must be an absolute URL."""
        with pytest.raises(ItemValidationFailed, match="must be a valid absolute URL") as exc_info:
            validate_item(_raw_item(link="/episodes/1"))

        assert exc_info.value.title == "Episode"
        assert exc_info.value.recoverable is True

    def test_missing_description(self) -> None:
        """Test item without snippet or content is rejected."""
        with pytest.raises(ItemValidationFailed, match="either contentSnippet or content"):
            validate_item(_raw_item(contentSnippet=None))

    def test_missing_enclosure(self) -> None:
        """Test item without any enclosure-like payload is rejected."""
        with pytest.raises(ItemValidationFailed, match="must have an enclosure"):
            validate_item(_raw_item(enclosure=None))

    def test_non_mapping_item(self) -> None:
        """Test non-object items are rejected."""
        with pytest.raises(ItemValidationFailed, match="not an object"):
            validate_item(["not", "an", "item"])
