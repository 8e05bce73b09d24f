"""Configuration models for the application."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from keelcast.constants import (
    ACCEPT_HEADER,
    AUDIO_CHECK_TIMEOUT_SECONDS,
    DEFAULT_PAGE_SIZE,
    FETCH_TIMEOUT_SECONDS,
    MAX_FEED_URL_LENGTH,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    PARSE_TIMEOUT_SECONDS,
    POPULAR_PODCASTS_TTL_HOURS,
    USER_AGENT,
)


class IngestionConfig(BaseModel):
    """Feed ingestion configuration."""

    fetch_timeout_seconds: float = Field(default=FETCH_TIMEOUT_SECONDS, gt=0)
    parse_timeout_seconds: float = Field(default=PARSE_TIMEOUT_SECONDS, gt=0)
    user_agent: str = Field(default=USER_AGENT)
    accept: str = Field(default=ACCEPT_HEADER, description="Accept header sent with feed requests")
    max_url_length: int = Field(default=MAX_FEED_URL_LENGTH, ge=1)
    verify_audio_urls: bool = Field(
        default=False, description="Send a HEAD request to every resolved audio URL"
    )
    audio_check_timeout_seconds: float = Field(default=AUDIO_CHECK_TIMEOUT_SECONDS, gt=0)
    trust_single_enclosure_type: bool = Field(
        default=False,
        description="Accept a lone enclosure whose MIME type says audio even if its URL gives no clue",
    )


class PaginationConfig(BaseModel):
    """Episode list pagination configuration."""

    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=MIN_PAGE_SIZE, le=MAX_PAGE_SIZE)
    max_page_size: int = Field(default=MAX_PAGE_SIZE, ge=MIN_PAGE_SIZE)

    @model_validator(mode="after")
    def check_default_within_max(self) -> "PaginationConfig":
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size must not exceed max_page_size")
        return self


class PopularityCacheConfig(BaseModel):
    """In-memory cache for popular podcasts per country."""

    enabled: bool = Field(default=True)
    ttl_hours: float = Field(default=POPULAR_PODCASTS_TTL_HOURS, gt=0)


class LoggingConfig(BaseModel):
    """Logging configuration for loguru."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    serialize: bool = Field(default=False, description="Serialize file logs to JSON")
    colorize: bool = Field(default=True, description="Colorize console output")
    file_path: str | None = Field(default="logs/keelcast.log", description="None disables file logs")
    rotation: str = Field(default="50 MB", description="Log rotation size/time")
    retention: str = Field(default="14 days", description="Log retention period")
    compression: str = Field(default="zip", description="Compression format for rotated logs")


class AppConfig(BaseModel):
    """Complete application configuration."""

    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    popularity_cache: PopularityCacheConfig = Field(default_factory=PopularityCacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
