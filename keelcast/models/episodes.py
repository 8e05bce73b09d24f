"""Episode data models produced by the ingestion pipeline."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from keelcast.errors import ErrorKind
from keelcast.models.feed import AbsoluteUrl, FeedMetadata


class EpisodeInsert(BaseModel):
    """Canonical episode record handed to storage."""

    podcast_id: str = Field(default="", description="Owning podcast, assigned by the caller")
    title: str = Field(min_length=1, description="Episode title")
    description: str | None = Field(default=None, description="Episode description")
    url: AbsoluteUrl = Field(description="Source link of the episode")
    audio_url: AbsoluteUrl = Field(description="Resolved audio file URL")
    published_at: datetime = Field(description="Publication timestamp (UTC aware)")
    duration_seconds: int | None = Field(default=None, ge=0, description="Duration in seconds")

    def for_podcast(self, podcast_id: str) -> "EpisodeInsert":
        """Return a copy bound to the given podcast."""
        return self.model_copy(update={"podcast_id": podcast_id})


class EpisodeAccepted(BaseModel):
    """Item outcome: a normalized episode."""

    status: Literal["accepted"] = "accepted"
    index: int = Field(ge=0, description="Position of the item in the feed")
    episode: EpisodeInsert


class EpisodeSkipped(BaseModel):
    """Item outcome: a recoverable per-item failure."""

    status: Literal["skipped"] = "skipped"
    index: int = Field(ge=0, description="Position of the item in the feed")
    title: str | None = Field(default=None, description="Item title, when one was readable")
    kind: ErrorKind = Field(description="Why the item was dropped")
    reason: str = Field(description="Human-readable reason")


ItemOutcome = Annotated[EpisodeAccepted | EpisodeSkipped, Field(discriminator="status")]


class IngestionResult(BaseModel):
    """Result of ingesting one feed."""

    feed_url: str = Field(description="Feed that was ingested")
    episodes: list[EpisodeInsert] = Field(
        default_factory=list, description="Episodes in feed order"
    )
    metadata: FeedMetadata = Field(default_factory=FeedMetadata, description="Podcast metadata")
    items_total: int = Field(ge=0, description="Items found in the feed")
    skipped: list[EpisodeSkipped] = Field(default_factory=list, description="Dropped items")
    duplicates_dropped: int = Field(default=0, ge=0, description="Repeated source links removed")

    @property
    def skipped_by_kind(self) -> dict[ErrorKind, int]:
        counts: dict[ErrorKind, int] = {}
        for outcome in self.skipped:
            counts[outcome.kind] = counts.get(outcome.kind, 0) + 1
        return counts
