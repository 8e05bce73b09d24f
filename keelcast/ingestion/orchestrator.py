"""Feed ingestion: fetch, parse, validate, extract and normalize.

The pipeline is strictly sequential for one feed. Recognised per-item
failures become ``EpisodeSkipped`` outcomes; anything else propagates and
aborts the batch.
"""

from datetime import UTC, datetime
from typing import Any

import aiohttp
from loguru import logger

from keelcast.errors import AudioUrlUnreachable, ItemSkipped
from keelcast.ingestion.audio import extract_audio_url, verify_audio_url
from keelcast.ingestion.fetcher import fetch_feed, validate_feed_url
from keelcast.ingestion.metadata import extract_feed_metadata
from keelcast.ingestion.normalizer import build_episode
from keelcast.ingestion.parser import parse_feed
from keelcast.ingestion.validator import validate_document, validate_item
from keelcast.models.config import IngestionConfig
from keelcast.models.episodes import (
    EpisodeAccepted,
    EpisodeInsert,
    EpisodeSkipped,
    IngestionResult,
    ItemOutcome,
)


async def process_item(
    index: int,
    raw: Any,
    config: IngestionConfig,
    podcast_id: str = "",
    session: aiohttp.ClientSession | None = None,
    now: datetime | None = None,
) -> ItemOutcome:
    """
    Turn one raw feed item into a tagged outcome.

    Args:
        index: Position of the item in the feed
        raw: Raw item mapping
        config: Ingestion configuration
        podcast_id: Owning podcast for the produced episode
        session: Session for the optional audio URL check
        now: Ingestion time

    Returns:
        EpisodeAccepted or EpisodeSkipped

    Raises:
        Any exception other than a recognised per-item skip
    """
    try:
        item = validate_item(raw)
        audio_url = extract_audio_url(item, config.trust_single_enclosure_type)

        if config.verify_audio_urls:
            if session is None:
                raise ValueError("An HTTP session is required to verify audio URLs")
            if not await verify_audio_url(audio_url, session, config.audio_check_timeout_seconds):
                raise AudioUrlUnreachable(
                    f'Audio URL is not accessible for episode "{item.title}": {audio_url}',
                    title=item.title,
                )

        episode = build_episode(item, audio_url, podcast_id=podcast_id, now=now)

    except ItemSkipped as e:
        logger.warning(f"Skipping item {index} [{e.kind.value}]: {e.message}")
        return EpisodeSkipped(index=index, title=e.title, kind=e.kind, reason=e.message)

    return EpisodeAccepted(index=index, episode=episode)


async def _ingest(
    feed_url: str,
    config: IngestionConfig,
    podcast_id: str,
    session: aiohttp.ClientSession,
) -> IngestionResult:
    content = await fetch_feed(feed_url, config, session)
    document = await parse_feed(content, config.parse_timeout_seconds)
    raw_items = validate_document(document)

    now = datetime.now(UTC)
    episodes: list[EpisodeInsert] = []
    skipped: list[EpisodeSkipped] = []
    seen_links: set[str] = set()
    duplicates = 0

    for index, raw in enumerate(raw_items):
        outcome = await process_item(index, raw, config, podcast_id, session, now)

        match outcome:
            case EpisodeAccepted(episode=episode):
                if episode.url in seen_links:
                    duplicates += 1
                    logger.debug(f"Dropping repeated episode link {episode.url}")
                    continue
                seen_links.add(episode.url)
                episodes.append(episode)
            case EpisodeSkipped():
                skipped.append(outcome)

    metadata = extract_feed_metadata(document)

    logger.info(
        f"Ingested {feed_url}: {len(episodes)} episodes, {len(skipped)} skipped, "
        f"{duplicates} duplicates (from {len(raw_items)} items)"
    )

    return IngestionResult(
        feed_url=feed_url,
        episodes=episodes,
        metadata=metadata,
        items_total=len(raw_items),
        skipped=skipped,
        duplicates_dropped=duplicates,
    )


async def ingest_feed(
    feed_url: str,
    config: IngestionConfig | None = None,
    podcast_id: str = "",
    session: aiohttp.ClientSession | None = None,
) -> IngestionResult:
    """
    Ingest one feed into a batch of episodes plus podcast metadata.

    Args:
        feed_url: Absolute http(s) feed URL
        config: Ingestion configuration (defaults apply when None)
        podcast_id: Owning podcast for the produced episodes
        session: Optional shared aiohttp session

    Returns:
        IngestionResult with episodes in feed order

    Raises:
        FeedError: For any feed-level failure (URL, network, timeout, structure)
    """
    config = config or IngestionConfig()
    validate_feed_url(feed_url, config.max_url_length)

    logger.info(f"Starting ingestion of {feed_url}")

    if session is not None:
        return await _ingest(feed_url, config, podcast_id, session)

    timeout = aiohttp.ClientTimeout(total=config.fetch_timeout_seconds)
    async with aiohttp.ClientSession(timeout=timeout) as own_session:
        return await _ingest(feed_url, config, podcast_id, own_session)
