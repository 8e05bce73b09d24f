"""Pydantic data models for the application."""

from keelcast.models.config import (
    AppConfig,
    IngestionConfig,
    LoggingConfig,
    PaginationConfig,
    PopularityCacheConfig,
)
from keelcast.models.enclosures import (
    EnclosureCandidate,
    EnclosureShape,
    EnclosureSource,
    classify_enclosure,
    classify_payload,
)
from keelcast.models.episodes import (
    EpisodeAccepted,
    EpisodeInsert,
    EpisodeSkipped,
    IngestionResult,
    ItemOutcome,
)
from keelcast.models.feed import AbsoluteUrl, FeedMetadata, RawFeedDocument, ValidatedItem
from keelcast.models.pagination import Cursor, EpisodePage

__all__ = [
    # Feed
    "RawFeedDocument",
    "ValidatedItem",
    "FeedMetadata",
    "AbsoluteUrl",
    # Enclosures
    "EnclosureSource",
    "EnclosureShape",
    "EnclosureCandidate",
    "classify_enclosure",
    "classify_payload",
    # Episodes
    "EpisodeInsert",
    "EpisodeAccepted",
    "EpisodeSkipped",
    "ItemOutcome",
    "IngestionResult",
    # Pagination
    "Cursor",
    "EpisodePage",
    # Config
    "IngestionConfig",
    "PaginationConfig",
    "PopularityCacheConfig",
    "LoggingConfig",
    "AppConfig",
]
