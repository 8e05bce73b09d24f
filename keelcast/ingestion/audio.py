"""Audio URL extraction from heterogeneous enclosure-like item fields."""

import asyncio
from collections.abc import Iterator, Mapping
from typing import Any

import aiohttp
from loguru import logger

from keelcast.constants import (
    AUDIO_CHECK_ACCEPT,
    AUDIO_CHECK_TIMEOUT_SECONDS,
    AUDIO_CHECK_USER_AGENT,
    AUDIO_MARKERS,
    MP3_MARKERS,
)
from keelcast.errors import InvalidAudioUrl, NoAudioUrlFound
from keelcast.models.enclosures import EnclosureCandidate, EnclosureSource, classify_payload
from keelcast.models.feed import ValidatedItem
from keelcast.utils.urls import is_absolute_url, path_and_query


def is_mp3_url(url: str) -> bool:
    """Check a URL for explicit MP3 evidence."""
    text = path_and_query(url)
    return any(marker in text for marker in MP3_MARKERS)


def is_audio_url(url: str) -> bool:
    """Check a URL for any common audio extension or MIME string."""
    text = path_and_query(url)
    return any(marker in text for marker in AUDIO_MARKERS)


def has_audio_type(candidate: EnclosureCandidate) -> bool:
    return bool(candidate.mime_type) and "audio" in candidate.mime_type.lower()


def select_audio_url(payload: Any, trust_single_enclosure_type: bool = False) -> str | None:
    """
    Pick the best audio URL from one enclosure-like payload.

    For a list, the first URL with MP3 evidence wins; failing that, the first
    URL with any audio evidence or an audio MIME type. A lone value is only
    accepted on URL evidence unless ``trust_single_enclosure_type`` is set.

    Args:
        payload: A single enclosure value or a list of them
        trust_single_enclosure_type: Also accept a lone value by its MIME type

    Returns:
        Selected URL, or None if nothing looks like audio
    """
    classified = classify_payload(payload)

    if isinstance(classified, list):
        # First pass: explicit MP3 evidence
        for candidate in classified:
            if candidate.url and is_mp3_url(candidate.url):
                return candidate.url

        # Second pass: any audio extension or declared audio type
        for candidate in classified:
            if candidate.url and (is_audio_url(candidate.url) or has_audio_type(candidate)):
                return candidate.url

        return None

    candidate = classified
    if not candidate.url:
        return None

    if is_mp3_url(candidate.url) or is_audio_url(candidate.url):
        return candidate.url

    if trust_single_enclosure_type and has_audio_type(candidate):
        return candidate.url

    return None


def _source_payloads(item: ValidatedItem) -> Iterator[tuple[EnclosureSource, Any]]:
    if item.enclosure is not None:
        yield EnclosureSource.ENCLOSURE, item.enclosure

    if item.media_content is not None:
        yield EnclosureSource.MEDIA_CONTENT, item.media_content

    if isinstance(item.media_group, Mapping):
        contents = item.media_group.get("content")
        if contents is None:
            contents = item.media_group.get("contents")
        if contents is not None:
            yield EnclosureSource.MEDIA_GROUP, contents


def extract_audio_url(item: ValidatedItem, trust_single_enclosure_type: bool = False) -> str:
    """
    Locate the audio URL of an item.

    Sources are tried in order: ``enclosure``, ``media:content``,
    ``media:group`` content. The first source yielding a URL decides.

    Args:
        item: Validated feed item
        trust_single_enclosure_type: See :func:`select_audio_url`

    Returns:
        Absolute audio URL

    Raises:
        NoAudioUrlFound: If no source yields an audio URL
        InvalidAudioUrl: If the selected URL is not an absolute URL
    """
    for source, payload in _source_payloads(item):
        url = select_audio_url(payload, trust_single_enclosure_type)
        if not url:
            continue

        if not is_absolute_url(url):
            raise InvalidAudioUrl(
                f'Invalid audio URL for episode "{item.title}": {url}', title=item.title
            )

        logger.debug(f"Audio URL for '{item.title}' found in {source.value}: {url}")
        return url

    raise NoAudioUrlFound(
        f'No audio URL found for episode "{item.title}" - skipping invalid episode',
        title=item.title,
    )


async def verify_audio_url(
    url: str,
    session: aiohttp.ClientSession,
    timeout_seconds: float = AUDIO_CHECK_TIMEOUT_SECONDS,
) -> bool:
    """
    Check with a HEAD request that an audio URL is reachable.

    The response must be 2xx, its content type (when present) must mention
    audio, mpeg or mp3, and its content length (when present) must not be 0.

    Args:
        url: Audio URL to check
        session: aiohttp session to issue the request with
        timeout_seconds: Hard bound for the request

    Returns:
        True if the URL looks like an accessible audio file
    """
    headers = {"User-Agent": AUDIO_CHECK_USER_AGENT, "Accept": AUDIO_CHECK_ACCEPT}

    try:
        async with (
            asyncio.timeout(timeout_seconds),
            session.head(url, headers=headers, allow_redirects=True) as response,
        ):
            if response.status < 200 or response.status >= 300:
                logger.debug(f"Audio URL {url} responded with {response.status}")
                return False

            content_type = response.headers.get("Content-Type", "").lower()
            if content_type and not any(m in content_type for m in ("audio", "mpeg", "mp3")):
                logger.debug(f"Audio URL {url} has non-audio content type {content_type!r}")
                return False

            content_length = response.headers.get("Content-Length")
            if content_length and content_length.strip() == "0":
                logger.debug(f"Audio URL {url} reports an empty body")
                return False

            return True

    except (TimeoutError, aiohttp.ClientError) as e:
        logger.debug(f"Audio URL check failed for {url}: {e}")
        return False
