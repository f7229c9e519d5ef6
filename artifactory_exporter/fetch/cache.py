"""In-memory TTL cache for raw fetch results.

Entries are keyed by endpoint and checked for expiry lazily on read.
Failed fetches are never stored.
"""

import threading
import time
from collections.abc import Callable

import structlog

from artifactory_exporter.fetch.metrics import FetchMetrics
from artifactory_exporter.fetch.models import CacheEntry, FetchResult
from artifactory_exporter.observability import get_logger


FetchFunc = Callable[[str], FetchResult]


class ResponseCache:
    """Memoizes FetchResults per endpoint for a fixed TTL.

    Thread-safe: lookups and stores happen under a lock, and entries are
    immutable so a reader never sees a partially built one. The network
    call runs outside the lock; concurrent misses for the same endpoint
    may each fetch, and the last one to finish wins.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Maximum age of a reusable entry.
            clock: Monotonic clock, injectable for tests.
            logger: Logger to bind; defaults to the module logger.
        """
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._metrics = FetchMetrics.get_instance()
        self._log = (logger or get_logger(__name__)).bind(component="cache")

    @property
    def ttl_seconds(self) -> float:
        """Configured time-to-live in seconds."""
        return self._ttl_seconds

    def get(self, key: str) -> CacheEntry | None:
        """Return the entry for `key` if it is still fresh.

        Args:
            key: Endpoint identifier.

        Returns:
            The fresh entry, or None if missing or expired.
        """
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or not entry.is_fresh(self._clock(), self._ttl_seconds):
            return None
        return entry

    def get_or_fetch(self, endpoint: str, fetch: FetchFunc) -> FetchResult:
        """Serve a fresh cached result or fetch and store a new one.

        Args:
            endpoint: Endpoint identifier, used as the cache key.
            fetch: Called with `endpoint` on a miss.

        Returns:
            Cached or freshly fetched result.

        Raises:
            FetchError: Propagated from `fetch`; nothing is cached.
        """
        entry = self.get(endpoint)
        if entry is not None:
            self._metrics.record_cache_hit()
            self._log.debug(
                "cache_hit",
                endpoint=endpoint,
                age_seconds=round(self._clock() - entry.fetched_at, 3),
            )
            return entry.value

        self._metrics.record_cache_miss()
        self._log.debug("cache_miss", endpoint=endpoint)

        result = fetch(endpoint)

        new_entry = CacheEntry(key=endpoint, value=result, fetched_at=self._clock())
        with self._lock:
            self._entries[endpoint] = new_entry
        self._log.debug(
            "cache_update",
            endpoint=endpoint,
            status_code=result.status_code,
            ttl_seconds=self._ttl_seconds,
        )
        return result

    def invalidate(self, endpoint: str | None = None) -> None:
        """Drop one entry, or every entry when `endpoint` is None."""
        with self._lock:
            if endpoint is None:
                self._entries.clear()
            else:
                self._entries.pop(endpoint, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
