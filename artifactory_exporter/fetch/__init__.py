"""HTTP fetch layer for the remote REST API.

This module provides:
- Single-attempt GET requests bounded by a deadline or cancellation
- Closed classification of failures (not supported, status, transport, malformed)
- Optional in-memory TTL cache of raw results per endpoint
- Header and URL redaction for logging
- Metrics collection for observability
"""

from artifactory_exporter.fetch.cache import ResponseCache
from artifactory_exporter.fetch.client import ArtifactoryClient, HttpFetcher
from artifactory_exporter.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    HTTP_STATUS_NOT_FOUND,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    NODE_ID_HEADER,
)
from artifactory_exporter.fetch.deadline import Deadline
from artifactory_exporter.fetch.metrics import FetchMetrics
from artifactory_exporter.fetch.models import (
    CacheEntry,
    FetchError,
    FetchErrorClass,
    FetchResult,
    MalformedResponseError,
)
from artifactory_exporter.fetch.redact import redact_headers, redact_url_credentials


__all__ = [
    # Client
    "ArtifactoryClient",
    "HttpFetcher",
    "Deadline",
    # Cache
    "ResponseCache",
    # Models
    "CacheEntry",
    "FetchResult",
    "FetchError",
    "FetchErrorClass",
    "MalformedResponseError",
    # Constants
    "HTTP_STATUS_OK_MIN",
    "HTTP_STATUS_OK_MAX",
    "HTTP_STATUS_NOT_FOUND",
    "NODE_ID_HEADER",
    "DEFAULT_CHUNK_SIZE",
    # Metrics
    "FetchMetrics",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
]
