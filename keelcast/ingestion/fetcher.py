"""Feed fetching and lightweight pre-validation.

Fails fast with a user-actionable message before the heavier parser runs.
"""

import asyncio
import re

import aiohttp
from loguru import logger

from keelcast.errors import FeedMalformed, FeedTimeout, FeedUnreachable, InvalidFeedUrl
from keelcast.models.config import IngestionConfig

_CHANNEL_OR_FEED = re.compile(r"<(channel|feed)[\s>/]", re.IGNORECASE)


def validate_feed_url(url: str | None, max_length: int = 2000) -> str:
    """
    Validate a feed URL without touching the network.

    Args:
        url: Feed URL supplied by the user
        max_length: Maximum accepted length in characters

    Returns:
        The URL, unchanged

    Raises:
        InvalidFeedUrl: If the URL is empty, has no http(s) scheme or is too long
    """
    if not url:
        raise InvalidFeedUrl("RSS feed URL is required")

    if not url.startswith(("http://", "https://")):
        raise InvalidFeedUrl("Please enter a valid URL starting with http:// or https://")

    if len(url) > max_length:
        raise InvalidFeedUrl("URL is too long")

    return url


def check_feed_markers(text: str) -> None:
    """
    Check that a response body looks like an RSS or Atom document.

    Raises:
        FeedMalformed: If XML/RSS/Atom markers or the channel/feed element are missing
    """
    if not text.lstrip().startswith("<?xml") and "<rss" not in text and "<feed" not in text:
        raise FeedMalformed("The URL does not appear to contain a valid RSS or Atom feed")

    if not _CHANNEL_OR_FEED.search(text):
        raise FeedMalformed(
            "The RSS feed appears to be malformed (missing channel or feed element)"
        )


async def _download(
    session: aiohttp.ClientSession, url: str, config: IngestionConfig
) -> bytes:
    headers = {"User-Agent": config.user_agent, "Accept": config.accept}

    async with session.get(url, headers=headers) as response:
        if response.status < 200 or response.status >= 300:
            message = f"Unable to fetch RSS feed. Server responded with {response.status}"
            if response.reason:
                message = f"{message}: {response.reason}"
            raise FeedUnreachable(message, status=response.status)

        content_type = response.headers.get("Content-Type", "")
        if "xml" not in content_type and "rss" not in content_type:
            logger.debug(f"Unexpected content type for {url}: {content_type!r}")

        return await response.read()


async def fetch_feed(
    url: str,
    config: IngestionConfig | None = None,
    session: aiohttp.ClientSession | None = None,
) -> bytes:
    """
    Fetch a feed and verify it looks like RSS/Atom.

    The whole operation (connect, download, marker check) is bounded by
    ``config.fetch_timeout_seconds``. No retries are attempted.

    Args:
        url: Feed URL
        config: Ingestion configuration (defaults apply when None)
        session: Optional shared aiohttp session

    Returns:
        Raw response body

    Raises:
        InvalidFeedUrl: Before any network call, for unusable URLs
        FeedUnreachable: For connection failures and non-2xx responses
        FeedTimeout: When the time bound is exceeded
        FeedMalformed: When the body is not an RSS/Atom document
    """
    config = config or IngestionConfig()
    validate_feed_url(url, config.max_url_length)

    timeout = aiohttp.ClientTimeout(total=config.fetch_timeout_seconds)

    try:
        async with asyncio.timeout(config.fetch_timeout_seconds):
            if session is not None:
                content = await _download(session, url, config)
            else:
                async with aiohttp.ClientSession(timeout=timeout) as own_session:
                    content = await _download(own_session, url, config)

    except TimeoutError as e:
        logger.warning(f"Timed out fetching feed {url} after {config.fetch_timeout_seconds}s")
        raise FeedTimeout("The RSS feed took too long to respond. Please try again later.") from e

    except aiohttp.ClientError as e:
        logger.warning(f"Failed to connect to feed {url}: {e}")
        raise FeedUnreachable(
            "Unable to connect to the RSS feed URL. Please check the URL and try again."
        ) from e

    check_feed_markers(content.decode("utf-8", errors="replace"))

    logger.debug(f"Fetched {len(content)} bytes from {url}")
    return content
