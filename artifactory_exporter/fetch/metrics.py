"""Metrics collection for the HTTP fetch layer."""

from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar

from artifactory_exporter.fetch.models import FetchErrorClass


_metrics_lock: Lock = Lock()


@dataclass
class FetchMetrics:
    """Counters for fetch and cache operations.

    Singleton class that tracks request counts by status, cache hits and
    misses, failures by error class, bytes received and request duration.
    """

    http_requests_total: dict[int, int] = field(default_factory=dict)
    http_failures_total: dict[str, int] = field(default_factory=dict)
    cache_hits_total: int = 0
    cache_misses_total: int = 0
    http_bytes_total: int = 0
    http_duration_ms_total: float = 0.0
    http_request_count: int = 0

    _instance: ClassVar["FetchMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "FetchMetrics":
        """Get singleton metrics instance."""
        with _metrics_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        with _metrics_lock:
            cls._instance = None

    def record_request(self, status_code: int, bytes_received: int) -> None:
        """Record a completed HTTP round trip.

        Args:
            status_code: HTTP status code.
            bytes_received: Number of body bytes received.
        """
        with _metrics_lock:
            self.http_requests_total[status_code] = (
                self.http_requests_total.get(status_code, 0) + 1
            )
            self.http_bytes_total += bytes_received
            self.http_request_count += 1

    def record_failure(self, error_class: FetchErrorClass) -> None:
        """Record a fetch failure.

        Args:
            error_class: Classification of the failure.
        """
        key = error_class.value
        with _metrics_lock:
            self.http_failures_total[key] = self.http_failures_total.get(key, 0) + 1

    def record_cache_hit(self) -> None:
        """Record a fetch served from the cache."""
        with _metrics_lock:
            self.cache_hits_total += 1

    def record_cache_miss(self) -> None:
        """Record a cache lookup that required a fetch."""
        with _metrics_lock:
            self.cache_misses_total += 1

    def record_duration(self, duration_ms: float) -> None:
        """Record request duration.

        Args:
            duration_ms: Duration in milliseconds.
        """
        with _metrics_lock:
            self.http_duration_ms_total += duration_ms

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "http_requests_total": dict(self.http_requests_total),
            "http_failures_total": dict(self.http_failures_total),
            "cache_hits_total": self.cache_hits_total,
            "cache_misses_total": self.cache_misses_total,
            "http_bytes_total": self.http_bytes_total,
            "http_duration_ms_total": self.http_duration_ms_total,
            "http_request_count": self.http_request_count,
        }
