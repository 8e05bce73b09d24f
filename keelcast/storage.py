"""Storage collaborator contract and transactional persistence of ingestions.

The relational store itself lives outside this package. Anything providing
``transaction()`` with the operations of :class:`PodcastTransaction` can
receive an ingestion batch.
"""

from contextlib import AbstractContextManager
from typing import Protocol

from loguru import logger

from keelcast.errors import PersistenceInvariantError
from keelcast.ingestion.orchestrator import ingest_feed
from keelcast.models.config import IngestionConfig
from keelcast.models.episodes import EpisodeInsert, IngestionResult
from keelcast.models.feed import FeedMetadata


class PodcastTransaction(Protocol):
    """Operations available inside one all-or-nothing transaction."""

    def update_podcast(self, podcast_id: str, fields: dict[str, str]) -> None: ...

    def episode_exists(self, podcast_id: str, url: str) -> bool: ...

    def insert_episodes(self, episodes: list[EpisodeInsert]) -> None: ...

    def subscribe(self, podcast_id: str, subscriber_id: str) -> None: ...


class PodcastStore(Protocol):
    """Storage that commits on clean exit and rolls back on exception."""

    def transaction(self) -> AbstractContextManager[PodcastTransaction]: ...


def build_podcast_update(metadata: FeedMetadata) -> dict[str, str]:
    """
    Build the podcast column updates from feed metadata.

    Only non-empty values are included; ``category`` is the first category.

    Raises:
        PersistenceInvariantError: If the feed has no title, description or image
    """
    if not (metadata.title or metadata.description or metadata.image_url):
        raise PersistenceInvariantError("Failed to fetch feed metadata")

    candidates = {
        "title": metadata.title,
        "description": metadata.description,
        "image_url": metadata.image_url,
        "url": metadata.link,
        "author": metadata.author,
        "category": metadata.categories[0] if metadata.categories else None,
    }
    return {column: value for column, value in candidates.items() if value}


def save_ingestion(
    store: PodcastStore,
    podcast_id: str,
    result: IngestionResult,
    subscriber_id: str | None = None,
) -> int:
    """
    Persist an ingestion in a single transaction.

    Updates the podcast metadata, inserts only episodes whose source link is
    not already stored for the podcast and subscribes the creator.

    Args:
        store: Storage collaborator
        podcast_id: Podcast receiving the episodes
        result: Ingestion batch and metadata
        subscriber_id: User to auto-subscribe, if any

    Returns:
        Number of episodes inserted

    Raises:
        PersistenceInvariantError: If metadata is empty or an episode lacks an
            audio URL; nothing is committed in that case
    """
    with store.transaction() as trx:
        trx.update_podcast(podcast_id, build_podcast_update(result.metadata))

        new_episodes = [
            episode.for_podcast(podcast_id)
            for episode in result.episodes
            if not trx.episode_exists(podcast_id, episode.url)
        ]

        if any(not episode.audio_url for episode in new_episodes):
            raise PersistenceInvariantError("Cannot insert episodes with null audioUrl values")

        if new_episodes:
            trx.insert_episodes(new_episodes)

        if subscriber_id:
            trx.subscribe(podcast_id, subscriber_id)

    logger.info(
        f"Saved podcast {podcast_id}: {len(new_episodes)} new episodes "
        f"({len(result.episodes) - len(new_episodes)} already stored)"
    )
    return len(new_episodes)


async def create_podcast(
    store: PodcastStore,
    podcast_id: str,
    feed_url: str | None,
    created_by: str | None = None,
    config: IngestionConfig | None = None,
) -> int:
    """
    Handle a newly created podcast: ingest its feed and persist the result.

    Returns:
        Number of episodes inserted (0 when the podcast has no feed URL)
    """
    if not feed_url:
        logger.info(f"Podcast {podcast_id} has no feed URL, nothing to ingest")
        return 0

    result = await ingest_feed(feed_url, config, podcast_id=podcast_id)
    return save_ingestion(store, podcast_id, result, subscriber_id=created_by)
