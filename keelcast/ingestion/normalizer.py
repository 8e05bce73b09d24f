"""Normalization of validated feed items into EpisodeInsert records."""

import math
import re
from datetime import UTC, datetime

from dateutil import parser as date_parser
from loguru import logger

from keelcast.constants import RFC822_TIMEZONES
from keelcast.models.episodes import EpisodeInsert
from keelcast.models.feed import ValidatedItem

_NUMBER = re.compile(r"[0-9]+(?:\.[0-9]+)?")
_DIGITS = re.compile(r"[0-9]+")


def parse_duration(value: str | int | float | None) -> int | None:
    """
    Parse a feed duration to whole seconds.

    Supports:
    - numbers, used directly as seconds (e.g. 2730)
    - numeric strings (e.g. "2730")
    - H:MM:SS (e.g. "01:02:03" = 3723 seconds)
    - M:SS (e.g. "02:03" = 123 seconds)

    Any other shape yields None rather than an error.

    Examples:
        >>> parse_duration("01:02:03")
        3723
        >>> parse_duration("garbage") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int | float):
        if not math.isfinite(value) or value < 0:
            return None
        return int(value)

    text = value.strip()
    if not text:
        return None

    if ":" not in text:
        return int(float(text)) if _NUMBER.fullmatch(text) else None

    parts = text.split(":")
    if not all(_DIGITS.fullmatch(part) for part in parts):
        logger.debug(f"Unexpected duration format: {value!r}")
        return None

    match [int(part) for part in parts]:
        case [hours, minutes, seconds]:
            return hours * 3600 + minutes * 60 + seconds
        case [minutes, seconds]:
            return minutes * 60 + seconds
        case _:
            logger.debug(f"Unexpected duration format: {value!r}")
            return None


def parse_published_at(value: str | None, now: datetime) -> datetime:
    """
    Parse a publication date, falling back to ``now``.

    Naive timestamps are taken as UTC; aware ones are converted to UTC.
    RFC-822 zone names such as ``EST`` or ``PDT`` resolve to their fixed
    offsets.
    """
    if not value:
        return now

    try:
        parsed = date_parser.parse(value, tzinfos=RFC822_TIMEZONES)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Failed to parse date {value!r}: {e}")
        return now

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def build_episode(
    item: ValidatedItem,
    audio_url: str,
    podcast_id: str = "",
    now: datetime | None = None,
) -> EpisodeInsert:
    """
    Convert a validated item and its audio URL into an EpisodeInsert.

    Args:
        item: Validated feed item
        audio_url: Resolved audio URL
        podcast_id: Owning podcast (usually set later by the caller)
        now: Ingestion time used when the publish date is unusable

    Returns:
        EpisodeInsert ready for persistence
    """
    now = now or datetime.now(UTC)

    return EpisodeInsert(
        podcast_id=podcast_id,
        title=item.title,
        description=item.content_snippet or item.content or None,
        url=item.link,
        audio_url=audio_url,
        published_at=parse_published_at(item.pub_date, now),
        duration_seconds=parse_duration(item.duration or item.itunes_duration),
    )
