"""Error taxonomy for feed ingestion and persistence.

Every error carries a stable machine-readable ``kind`` next to its
human-readable message. Feed-level errors abort an ingestion; item-level
errors only skip the offending entry.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Machine-readable error kinds surfaced to callers."""

    INVALID_FEED_URL = "invalid_feed_url"
    FEED_UNREACHABLE = "feed_unreachable"
    FEED_TIMEOUT = "feed_timeout"
    FEED_PARSE_TIMEOUT = "feed_parse_timeout"
    FEED_MALFORMED = "feed_malformed"
    FEED_STRUCTURE_INVALID = "feed_structure_invalid"
    ITEM_VALIDATION_FAILED = "item_validation_failed"
    NO_AUDIO_URL_FOUND = "no_audio_url_found"
    INVALID_AUDIO_URL = "invalid_audio_url"
    AUDIO_URL_UNREACHABLE = "audio_url_unreachable"
    PERSISTENCE_INVARIANT = "persistence_invariant"


class IngestionError(Exception):
    """Base exception for ingestion errors."""

    kind: ErrorKind

    def __init__(self, message: str, recoverable: bool = False):
        self.message = message
        self.recoverable = recoverable
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class FeedError(IngestionError):
    """Fatal error for the whole feed."""

    def __init__(self, message: str):
        super().__init__(message, recoverable=False)


class InvalidFeedUrl(FeedError):
    kind = ErrorKind.INVALID_FEED_URL


class FeedUnreachable(FeedError):
    kind = ErrorKind.FEED_UNREACHABLE

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)


class FeedTimeout(FeedError):
    kind = ErrorKind.FEED_TIMEOUT


class FeedParseTimeout(FeedError):
    kind = ErrorKind.FEED_PARSE_TIMEOUT


class FeedMalformed(FeedError):
    kind = ErrorKind.FEED_MALFORMED


class FeedStructureInvalid(FeedError):
    kind = ErrorKind.FEED_STRUCTURE_INVALID


class ItemSkipped(IngestionError):
    """Recoverable error: the item is dropped and ingestion continues."""

    def __init__(self, message: str, title: str | None = None):
        self.title = title
        super().__init__(message, recoverable=True)


class ItemValidationFailed(ItemSkipped):
    kind = ErrorKind.ITEM_VALIDATION_FAILED


class NoAudioUrlFound(ItemSkipped):
    kind = ErrorKind.NO_AUDIO_URL_FOUND


class InvalidAudioUrl(ItemSkipped):
    kind = ErrorKind.INVALID_AUDIO_URL


class AudioUrlUnreachable(ItemSkipped):
    kind = ErrorKind.AUDIO_URL_UNREACHABLE


class PersistenceInvariantError(IngestionError):
    """Raised inside a persistence transaction to abort it as a whole."""

    kind = ErrorKind.PERSISTENCE_INVARIANT

    def __init__(self, message: str):
        super().__init__(message, recoverable=False)
