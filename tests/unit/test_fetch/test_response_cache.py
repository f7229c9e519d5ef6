"""Unit tests for the in-memory TTL response cache."""

import threading

import pytest

from artifactory_exporter.fetch.cache import ResponseCache
from artifactory_exporter.fetch.metrics import FetchMetrics
from artifactory_exporter.fetch.models import FetchError, FetchErrorClass, FetchResult
from tests.helpers.clock import FakeClock


ENDPOINT = "federation/status/mirrorsLag"


class CountingFetcher:
    """Fetch function that counts calls and returns numbered results."""

    def __init__(self, fail: bool = False) -> None:
        self.calls = 0
        self.fail = fail
        self._lock = threading.Lock()

    def __call__(self, endpoint: str) -> FetchResult:
        with self._lock:
            self.calls += 1
            call = self.calls
        if self.fail:
            raise FetchError(FetchErrorClass.TRANSPORT, "connection refused", endpoint)
        return FetchResult(
            node_id=f"node-{call}", body=f"[{call}]".encode(), status_code=200
        )


class TestCacheHits:
    """Tests for serving entries within the TTL."""

    def test_second_call_within_ttl_is_cached(self) -> None:
        """Test two calls within TTL produce one fetch and equal results."""
        clock = FakeClock()
        cache = ResponseCache(ttl_seconds=60.0, clock=clock)
        fetch = CountingFetcher()

        first = cache.get_or_fetch(ENDPOINT, fetch)
        clock.advance(59.0)
        second = cache.get_or_fetch(ENDPOINT, fetch)

        assert fetch.calls == 1
        assert first == second
        assert second.body == b"[1]"

    def test_refetch_after_ttl(self) -> None:
        """Test an expired entry triggers exactly one new fetch."""
        clock = FakeClock()
        cache = ResponseCache(ttl_seconds=60.0, clock=clock)
        fetch = CountingFetcher()

        cache.get_or_fetch(ENDPOINT, fetch)
        clock.advance(60.0)
        refreshed = cache.get_or_fetch(ENDPOINT, fetch)
        again = cache.get_or_fetch(ENDPOINT, fetch)

        assert fetch.calls == 2
        assert refreshed.body == b"[2]"
        assert again == refreshed

    def test_keys_are_independent(self) -> None:
        """Test entries are kept per endpoint."""
        cache = ResponseCache(ttl_seconds=60.0, clock=FakeClock())
        fetch = CountingFetcher()

        cache.get_or_fetch(ENDPOINT, fetch)
        cache.get_or_fetch("federation/status/unavailableMirrors", fetch)

        assert fetch.calls == 2
        assert len(cache) == 2

    def test_records_hit_and_miss_metrics(self) -> None:
        """Test cache metrics are recorded."""
        cache = ResponseCache(ttl_seconds=60.0, clock=FakeClock())
        fetch = CountingFetcher()

        cache.get_or_fetch(ENDPOINT, fetch)
        cache.get_or_fetch(ENDPOINT, fetch)

        metrics = FetchMetrics.get_instance()
        assert metrics.cache_misses_total == 1
        assert metrics.cache_hits_total == 1


class TestCacheFailures:
    """Tests for failed fetches."""

    def test_failure_not_cached(self) -> None:
        """Test failures propagate and every call retries the fetch."""
        cache = ResponseCache(ttl_seconds=60.0, clock=FakeClock())
        fetch = CountingFetcher(fail=True)

        for _ in range(2):
            with pytest.raises(FetchError):
                cache.get_or_fetch(ENDPOINT, fetch)

        assert fetch.calls == 2
        assert len(cache) == 0

    def test_failure_keeps_stale_entry_out(self) -> None:
        """Test a failed refresh does not serve the expired entry."""
        clock = FakeClock()
        cache = ResponseCache(ttl_seconds=60.0, clock=clock)

        cache.get_or_fetch(ENDPOINT, CountingFetcher())
        clock.advance(61.0)

        with pytest.raises(FetchError):
            cache.get_or_fetch(ENDPOINT, CountingFetcher(fail=True))
        assert cache.get(ENDPOINT) is None


class TestCacheMaintenance:
    """Tests for lookup and invalidation."""

    def test_get_returns_fresh_entry(self) -> None:
        """Test get() exposes the stored entry."""
        clock = FakeClock()
        cache = ResponseCache(ttl_seconds=60.0, clock=clock)
        cache.get_or_fetch(ENDPOINT, CountingFetcher())

        entry = cache.get(ENDPOINT)

        assert entry is not None
        assert entry.key == ENDPOINT
        assert entry.fetched_at == clock.now

    def test_invalidate_one(self) -> None:
        """Test invalidating one endpoint forces a new fetch."""
        cache = ResponseCache(ttl_seconds=60.0, clock=FakeClock())
        fetch = CountingFetcher()

        cache.get_or_fetch(ENDPOINT, fetch)
        cache.invalidate(ENDPOINT)
        cache.get_or_fetch(ENDPOINT, fetch)

        assert fetch.calls == 2

    def test_invalidate_all(self) -> None:
        """Test invalidating everything empties the cache."""
        cache = ResponseCache(ttl_seconds=60.0, clock=FakeClock())
        fetch = CountingFetcher()
        cache.get_or_fetch(ENDPOINT, fetch)
        cache.get_or_fetch("system/ping", fetch)

        cache.invalidate()

        assert len(cache) == 0


class TestCacheConcurrency:
    """Tests for concurrent readers."""

    def test_concurrent_reads_of_fresh_entry(self) -> None:
        """Test many threads reading a fresh entry see the same result."""
        cache = ResponseCache(ttl_seconds=60.0, clock=FakeClock())
        fetch = CountingFetcher()
        expected = cache.get_or_fetch(ENDPOINT, fetch)
        results: list[FetchResult] = []
        results_lock = threading.Lock()

        def read() -> None:
            result = cache.get_or_fetch(ENDPOINT, fetch)
            with results_lock:
                results.append(result)

        threads = [threading.Thread(target=read) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert fetch.calls == 1
        assert len(results) == 16
        assert all(result == expected for result in results)
