"""Structural validation of parsed feeds and their items."""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from keelcast.errors import FeedStructureInvalid, ItemValidationFailed
from keelcast.models.feed import RawFeedDocument, ValidatedItem


def _describe(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        message = detail["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def validate_document(document: RawFeedDocument) -> list[Any]:
    """
    Apply feed-level rules and return the raw items.

    Raises:
        FeedStructureInvalid: If the document has no items
    """
    items = document.get("items")

    if not isinstance(items, list):
        raise FeedStructureInvalid("RSS feed is missing its list of episodes")

    if not items:
        raise FeedStructureInvalid("RSS feed must contain at least one episode")

    return items


def validate_item(raw: Any) -> ValidatedItem:
    """
    Validate one raw feed item.

    Args:
        raw: Item mapping from a RawFeedDocument

    Returns:
        ValidatedItem

    Raises:
        ItemValidationFailed: If the item breaks a structural rule
    """
    title = raw.get("title") if isinstance(raw, Mapping) else None
    title = title if isinstance(title, str) else None

    if not isinstance(raw, Mapping):
        raise ItemValidationFailed("Feed item is not an object", title=title)

    try:
        return ValidatedItem.model_validate(dict(raw))
    except ValidationError as e:
        raise ItemValidationFailed(_describe(e), title=title) from e
