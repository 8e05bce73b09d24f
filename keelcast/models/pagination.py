"""Keyset pagination models."""

from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Cursor(BaseModel):
    """Decoded position ``(publishedAt, id)`` of the last row of a page."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    published_at_ms: int = Field(alias="pAt", description="Epoch milliseconds")
    id: str = Field(description="Row identifier")

    @property
    def published_at(self) -> datetime:
        return datetime(1970, 1, 1, tzinfo=UTC) + timedelta(milliseconds=self.published_at_ms)


class EpisodePage(BaseModel):
    """One page of episodes ordered by ``(published_at DESC, id DESC)``."""

    episodes: list[Any] = Field(default_factory=list)
    has_next_page: bool = Field(default=False)
    next_cursor: str | None = Field(default=None, description="Opaque cursor for the next page")
