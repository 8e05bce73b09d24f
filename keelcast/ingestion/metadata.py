"""Podcast-level metadata extraction."""

from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import ValidationError

from keelcast.models.feed import FeedMetadata, RawFeedDocument


def _itunes_image_href(value: Any) -> str | None:
    match value:
        case str() if value:
            return value
        case {"href": str(href)} if href:
            return href
        case {"$": {"href": str(href)}} if href:
            return href
        case _:
            return None


def extract_image_url(document: RawFeedDocument) -> str | None:
    """
    Pick the podcast artwork URL.

    ``itunes:image`` (string, ``{href}`` or ``{"$": {href}}``) wins over the
    standard ``image.url``.

    Args:
        document: Parsed feed document

    Returns:
        Image URL if found, None otherwise
    """
    if href := _itunes_image_href(document.get("itunes:image")):
        return href

    image = document.get("image")
    if isinstance(image, Mapping):
        url = image.get("url")
        if isinstance(url, str) and url:
            return url

    return None


def extract_feed_metadata(document: RawFeedDocument) -> FeedMetadata:
    """
    Extract feed-level display metadata.

    A validation failure degrades to the raw, unvalidated values instead of
    failing the ingestion.

    Args:
        document: Parsed feed document

    Returns:
        FeedMetadata (validated when possible)
    """
    raw = {
        "title": document.get("title"),
        "description": document.get("description"),
        "link": document.get("link"),
        "author": document.get("author"),
        "categories": document.get("categories") or [],
        "image_url": extract_image_url(document),
    }

    try:
        return FeedMetadata.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"RSS feed metadata validation failed, using partial data: {e}")
        return FeedMetadata.model_construct(**raw)
