"""Feed parsing into a semi-structured RawFeedDocument."""

import asyncio
import html
import re
from html.entities import name2codepoint
from typing import TYPE_CHECKING, Any
from xml.etree import ElementTree

import feedparser
from loguru import logger

from keelcast.constants import PARSE_TIMEOUT_SECONDS
from keelcast.errors import FeedMalformed, FeedParseTimeout
from keelcast.models.feed import RawFeedDocument

if TYPE_CHECKING:
    from feedparser import FeedParserDict

ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"

_TAG_RE = re.compile(r"<[^>]+>")


def _strip_html(value: str) -> str:
    """Reduce HTML content to a single line of plain text."""
    text = html.unescape(_TAG_RE.sub(" ", value))
    return " ".join(text.split())


def _single_or_list(values: list[dict[str, Any]]) -> dict[str, Any] | list[dict[str, Any]] | None:
    if not values:
        return None
    if len(values) == 1:
        return values[0]
    return values


def _entry_content(entry: "FeedParserDict") -> str | None:
    contents = entry.get("content")
    if contents:
        value = contents[0].get("value")
        if value:
            return value
    return entry.get("summary") or None


def _entry_to_item(entry: "FeedParserDict") -> dict[str, Any]:
    """
    Map one feedparser entry to the RawFeedDocument item keys.

    Args:
        entry: Feed entry dictionary

    Returns:
        Item mapping; absent fields are omitted
    """
    content = _entry_content(entry)

    enclosures = [
        {"url": enc.get("href"), "type": enc.get("type"), "length": enc.get("length")}
        for enc in entry.get("enclosures", [])
    ]
    media_content = [dict(media) for media in entry.get("media_content", [])]

    item: dict[str, Any] = {
        "title": entry.get("title"),
        "link": entry.get("link"),
        "content": content,
        "contentSnippet": _strip_html(content) if content else None,
        "pubDate": entry.get("published") or entry.get("updated"),
        "duration": entry.get("duration"),
        "itunes:duration": entry.get("itunes_duration"),
        "enclosure": _single_or_list(enclosures),
        "media:content": _single_or_list(media_content),
    }
    return {key: value for key, value in item.items() if value is not None}


_ENTITY_RE = re.compile(rb"&([A-Za-z][A-Za-z0-9]*);")
_XML_ENTITIES = frozenset({b"amp", b"lt", b"gt", b"quot", b"apos"})

_FIRST_ITEM_RE = re.compile(rb"<(?:item|entry)\b", re.IGNORECASE)
_ITUNES_IMAGE_RE = re.compile(rb"<itunes:image\b[^>]*?\bhref\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)
_IMAGE_URL_RE = re.compile(rb"<image\b[^>]*>.*?<url>\s*([^<]+?)\s*</url>", re.IGNORECASE | re.DOTALL)


def _numeric_entities(content: bytes) -> bytes:
    """Rewrite named HTML entities (``&nbsp;``, ``&eacute;``) as character references."""

    def replace(match: re.Match[bytes]) -> bytes:
        name = match.group(1)
        if name in _XML_ENTITIES:
            return match.group(0)
        codepoint = name2codepoint.get(name.decode("ascii"))
        if codepoint is None:
            return match.group(0)
        return b"&#%d;" % codepoint

    return _ENTITY_RE.sub(replace, content)


def _scan_channel_images(content: bytes) -> tuple[str | None, str | None]:
    """Find the channel images in the header before the first item without an XML tree."""
    first_item = _FIRST_ITEM_RE.search(content)
    header = content[: first_item.start()] if first_item else content

    def decode(match: re.Match[bytes] | None) -> str | None:
        if match is None:
            return None
        return html.unescape(match.group(1).decode("utf-8", errors="replace")).strip() or None

    return decode(_ITUNES_IMAGE_RE.search(header)), decode(_IMAGE_URL_RE.search(header))


def _channel_images(content: bytes) -> tuple[str | None, str | None]:
    """
    Read the channel-level ``itunes:image`` and ``image/url`` separately.

    feedparser folds both into a single ``image`` key, which loses the
    iTunes-first preference. Documents that are still not well-formed XML
    after entity rewriting are scanned textually instead.

    Returns:
        Tuple of (itunes image href, standard image url)
    """
    try:
        root = ElementTree.fromstring(_numeric_entities(content))
    except ElementTree.ParseError as e:
        logger.debug(f"Scanning channel images without an XML tree: {e}")
        return _scan_channel_images(content)

    channel = root.find("channel")
    if channel is None:
        return None, None

    itunes_href = None
    itunes_image = channel.find(f"{{{ITUNES_NS}}}image")
    if itunes_image is not None:
        itunes_href = (
            itunes_image.get("href")
            or itunes_image.get("url")
            or (itunes_image.text or "").strip()
            or None
        )

    standard_url = (channel.findtext("image/url") or "").strip() or None
    return itunes_href, standard_url


def parse_feed_document(content: bytes) -> RawFeedDocument:
    """
    Parse feed bytes into a RawFeedDocument.

    Standard RSS/Atom elements are decoded along with the ``duration``,
    ``itunes:duration``, ``enclosure`` and ``itunes:image`` extensions.
    Unknown elements are ignored.

    Args:
        content: Raw feed bytes

    Returns:
        Semi-structured feed document

    Raises:
        FeedMalformed: If the bytes are not recognisable as a feed at all
    """
    parsed = feedparser.parse(content)

    if not parsed.get("version") and not parsed.entries:
        error_msg = str(parsed.get("bozo_exception", "Unknown parse error"))
        logger.warning(f"Unrecognised feed document: {error_msg}")
        raise FeedMalformed(f"Malformed feed: {error_msg}")

    if parsed.bozo:
        logger.warning(
            f"Feed parsed with recoverable errors: {parsed.get('bozo_exception', 'unknown')}"
        )

    feed = parsed.feed
    itunes_href, standard_url = _channel_images(content)
    if not itunes_href and not standard_url:
        # Atom logos and feeds with a single image element
        standard_url = (feed.get("image") or {}).get("href")

    document: RawFeedDocument = {
        "title": feed.get("title"),
        "description": feed.get("subtitle"),
        "link": feed.get("link"),
        "author": feed.get("author"),
        "categories": list(
            dict.fromkeys(tag["term"] for tag in feed.get("tags", []) if tag.get("term"))
        ),
        "items": [_entry_to_item(entry) for entry in parsed.entries],
    }

    if itunes_href:
        document["itunes:image"] = {"href": itunes_href}
    if standard_url:
        document["image"] = {"url": standard_url}

    logger.debug(
        f"Parsed {parsed.get('version') or 'unknown'} feed with {len(document['items'])} items"
    )
    return document


async def parse_feed(
    content: bytes, timeout_seconds: float = PARSE_TIMEOUT_SECONDS
) -> RawFeedDocument:
    """
    Parse feed bytes in a worker thread under a hard timeout.

    The timeout ends the wait, not the worker: a parse that overruns keeps
    its thread until feedparser returns.

    Raises:
        FeedParseTimeout: If parsing exceeds ``timeout_seconds``
        FeedMalformed: If the bytes are not recognisable as a feed
    """
    try:
        async with asyncio.timeout(timeout_seconds):
            return await asyncio.to_thread(parse_feed_document, content)
    except TimeoutError as e:
        logger.warning(f"Feed parsing exceeded {timeout_seconds}s")
        raise FeedParseTimeout(f"RSS parsing timeout after {timeout_seconds:g} seconds") from e
