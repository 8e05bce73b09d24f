"""Keyset pagination over episodes ordered by ``(published_at DESC, id DESC)``.

Cursors are opaque to clients: base64 of the compact JSON object
``{"pAt": <epoch ms>, "id": <row id>}`` describing the last row of a page.
"""

import base64
import json
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Protocol, TypeVar

from pydantic import ValidationError

from keelcast.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MIN_PAGE_SIZE
from keelcast.models.config import PaginationConfig
from keelcast.models.pagination import Cursor, EpisodePage
from keelcast.utils.logging import get_logger

logger = get_logger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class KeysetRow(Protocol):
    @property
    def published_at(self) -> datetime: ...

    @property
    def id(self) -> str: ...


R = TypeVar("R", bound=KeysetRow)


def epoch_ms(value: datetime) -> int:
    """Whole milliseconds since the epoch; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (value - _EPOCH) // timedelta(milliseconds=1)


def encode_cursor(published_at: datetime, row_id: str) -> str:
    """
    Encode the position of a row as an opaque cursor.

    Examples:
        >>> encode_cursor(datetime(2024, 1, 1, tzinfo=UTC), "ep_1")
        'eyJwQXQiOjE3MDQwNjcyMDAwMDAsImlkIjoiZXBfMSJ9'
    """
    payload = {"pAt": epoch_ms(published_at), "id": row_id}
    return base64.b64encode(json.dumps(payload, separators=(",", ":")).encode("utf-8")).decode(
        "ascii"
    )


def decode_cursor(cursor: str | None) -> Cursor | None:
    """
    Decode an opaque cursor.

    Returns:
        Cursor, or None if the value is missing or cannot be decoded
    """
    if not cursor:
        return None

    try:
        data = json.loads(base64.b64decode(cursor, validate=True))
        return Cursor.model_validate(data)
    except (ValueError, ValidationError) as e:
        logger.debug("Ignoring undecodable cursor", cursor=cursor, error=str(e))
        return None


def clamp_page_size(
    first: int | None,
    default: int = DEFAULT_PAGE_SIZE,
    maximum: int = MAX_PAGE_SIZE,
) -> int:
    """Clamp a requested page size to ``[1, maximum]``; missing or 0 means ``default``."""
    return min(max(first or default, MIN_PAGE_SIZE), maximum)


def _sort_key(row: KeysetRow) -> tuple[int, str]:
    return epoch_ms(row.published_at), row.id


def paginate(
    rows: Iterable[R],
    first: int | None = None,
    after: str | None = None,
    config: PaginationConfig | None = None,
) -> EpisodePage:
    """
    Return one page of rows after a cursor.

    Only rows strictly before the cursor position in
    ``(published_at DESC, id DESC)`` order are returned. An undecodable
    cursor is ignored and the first page is returned.

    Args:
        rows: Candidate rows (any order)
        first: Requested page size
        after: Cursor of the last row of the previous page
        config: Default and maximum page size; built-in limits when omitted

    Returns:
        EpisodePage with the rows, a next-page flag and the next cursor
    """
    config = config or PaginationConfig()
    page_size = clamp_page_size(first, config.default_page_size, config.max_page_size)
    ordered = sorted(rows, key=_sort_key, reverse=True)

    cursor = decode_cursor(after)
    if cursor is not None:
        position = (cursor.published_at_ms, cursor.id)
        ordered = [row for row in ordered if _sort_key(row) < position]

    window = ordered[: page_size + 1]
    has_next_page = len(window) > page_size
    page = window[:page_size]

    next_cursor = None
    if has_next_page and page:
        last = page[-1]
        next_cursor = encode_cursor(last.published_at, last.id)

    return EpisodePage(episodes=page, has_next_page=has_next_page, next_cursor=next_cursor)
