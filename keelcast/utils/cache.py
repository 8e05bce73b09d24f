"""In-memory expiring cache for process-wide lookups.

Used by the podcast search feature to keep the popular-podcasts list per
country for a few hours instead of hitting the directory API on every page.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from keelcast.constants import POPULAR_PODCASTS_TTL_HOURS
from keelcast.models.config import PopularityCacheConfig
from keelcast.utils.logging import get_logger

logger = get_logger(__name__)

_MISSING = object()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ExpiringCache:
    """Maps string keys (e.g. country codes) to values with a fixed TTL."""

    def __init__(
        self,
        ttl: timedelta = timedelta(hours=POPULAR_PODCASTS_TTL_HOURS),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize cache.

        Args:
            ttl: How long an entry stays fresh
            clock: Returns the current time; injectable for tests
        """
        if ttl <= timedelta(0):
            raise ValueError("Cache TTL must be positive")

        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[datetime, Any]] = {}
        logger.debug("Expiring cache initialized", ttl_seconds=ttl.total_seconds())

    @staticmethod
    def _normalize_key(key: str) -> str:
        return key.strip().lower()

    def save(self, key: str, value: Any) -> None:
        """
        Store a value, resetting its age.

        Args:
            key: Cache key
            value: Value to cache
        """
        self._entries[self._normalize_key(key)] = (self._clock(), value)
        logger.debug("Cache saved", key=key)

    def load(self, key: str, default: Any = None) -> Any:
        """
        Return the cached value, or ``default`` when missing or expired.

        Expired entries are evicted on access.
        """
        normalized = self._normalize_key(key)
        entry = self._entries.get(normalized)

        if entry is None:
            logger.debug("Cache miss", key=key)
            return default

        if not self.is_fresh(key):
            del self._entries[normalized]
            logger.debug("Cache expired", key=key)
            return default

        return entry[1]

    def exists(self, key: str) -> bool:
        return self._normalize_key(key) in self._entries

    def get_age(self, key: str) -> timedelta | None:
        """
        Get age of a cached entry.

        Args:
            key: Cache key

        Returns:
            Age as timedelta or None if not found
        """
        entry = self._entries.get(self._normalize_key(key))
        if entry is None:
            return None
        return self._clock() - entry[0]

    def is_fresh(self, key: str) -> bool:
        age = self.get_age(key)
        if age is None:
            return False
        return age < self.ttl

    def delete(self, key: str) -> None:
        if self._entries.pop(self._normalize_key(key), None) is not None:
            logger.debug("Cache deleted", key=key)

    def cleanup(self) -> int:
        """
        Evict every expired entry.

        Returns:
            Number of entries removed
        """
        expired = [key for key in self._entries if not self.is_fresh(key)]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.info("Cache cleanup completed", cleaned_count=len(expired))
        return len(expired)

    def list_all(self) -> list[str]:
        return list(self._entries)

    def get_or_set(self, key: str, factory: Callable[[], Any]) -> Any:
        """Return the fresh cached value or compute, store and return a new one."""
        value = self.load(key, _MISSING)
        if value is _MISSING:
            value = factory()
            self.save(key, value)
        return value


def build_popularity_cache(
    config: PopularityCacheConfig,
    clock: Callable[[], datetime] = _utcnow,
) -> ExpiringCache | None:
    """
    Create the popular-podcasts cache from configuration.

    Args:
        config: Popularity cache configuration
        clock: Returns the current time; injectable for tests

    Returns:
        ExpiringCache, or None when caching is disabled
    """
    if not config.enabled:
        logger.info("Popular podcasts cache disabled")
        return None
    return ExpiringCache(ttl=timedelta(hours=config.ttl_hours), clock=clock)
