"""HTTP client for the remote REST API with deadline and failure classification."""

import threading
import time
from io import BytesIO

import httpx
import structlog

from artifactory_exporter.fetch.cache import ResponseCache
from artifactory_exporter.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_NOT_FOUND,
    NODE_ID_HEADER,
)
from artifactory_exporter.fetch.deadline import Deadline
from artifactory_exporter.fetch.metrics import FetchMetrics
from artifactory_exporter.fetch.models import FetchError, FetchErrorClass, FetchResult
from artifactory_exporter.fetch.redact import redact_headers, redact_url_credentials
from artifactory_exporter.observability import get_logger
from artifactory_exporter.settings import AuthMethod, ExporterSettings


class HttpFetcher:
    """Issues single GET requests against the configured base URI.

    Every call makes exactly one network attempt, bounded by a deadline.
    Status-based failures and transport failures are raised as
    `FetchError` with distinct error classes.
    """

    def __init__(
        self,
        settings: ExporterSettings,
        logger: structlog.stdlib.BoundLogger | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP fetcher.

        Args:
            settings: Exporter settings (base URI, credentials, TLS, timeout).
            logger: Logger to bind; defaults to the module logger.
            transport: Optional httpx transport, used by tests.
        """
        self._settings = settings
        self._transport = transport
        self._metrics = FetchMetrics.get_instance()
        self._log = (logger or get_logger(__name__)).bind(component="fetch")

    def build_url(self, endpoint: str) -> str:
        """Join the base URI and a relative endpoint path."""
        return f"{self._settings.scrape_uri}/{endpoint.lstrip('/')}"

    def fetch(self, endpoint: str, deadline: Deadline | None = None) -> FetchResult:
        """Fetch an endpoint.

        Args:
            endpoint: Path relative to the configured base URI.
            deadline: Deadline for the call; the configured request timeout
                applies when omitted.

        Returns:
            FetchResult with node id, body and status code.

        Raises:
            FetchError: NOT_SUPPORTED for 404, HTTP_STATUS for other status
                codes >= 400, TRANSPORT for network failures, expiry or
                cancellation.
        """
        if deadline is None:
            deadline = Deadline.after(self._settings.timeout_seconds)

        url = self.build_url(endpoint)
        log = self._log.bind(endpoint=endpoint, url=redact_url_credentials(url))
        start_time_ns = time.perf_counter_ns()

        try:
            result = self._execute(endpoint, url, deadline, log)
        except FetchError as e:
            self._metrics.record_failure(e.error_class)
            if e.error_class == FetchErrorClass.NOT_SUPPORTED:
                log.debug("fetch_failed", **e.to_dict())
            else:
                log.warning("fetch_failed", **e.to_dict())
            raise
        finally:
            duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
            self._metrics.record_duration(duration_ms)

        log.debug(
            "fetch_complete",
            status_code=result.status_code,
            node_id=result.node_id,
            bytes=result.body_size,
            duration_ms=round(duration_ms, 2),
        )
        return result

    def _execute(
        self,
        endpoint: str,
        url: str,
        deadline: Deadline,
        log: structlog.stdlib.BoundLogger,
    ) -> FetchResult:
        """Execute one HTTP GET and classify the outcome.

        The request runs on a worker thread while this thread waits for it,
        for `deadline.cancel()` or for expiry, whichever comes first.
        Leaving the client block closes the connection pool, which tears
        down a request still in flight.
        """
        if deadline.done:
            raise self._deadline_error(endpoint, deadline)

        headers = self._build_headers()
        log.debug("fetch_request", headers=redact_headers(headers))

        finished = threading.Event()
        outcome: list[FetchResult | Exception] = []

        with httpx.Client(
            auth=self._build_auth(),
            headers=headers,
            verify=self._settings.ssl_verify,
            timeout=httpx.Timeout(deadline.remaining()),
            transport=self._transport,
        ) as client:

            def send() -> None:
                try:
                    outcome.append(self._send(client, endpoint, url, deadline))
                except Exception as e:  # noqa: BLE001
                    outcome.append(e)
                finally:
                    finished.set()

            unregister = deadline.on_cancel(finished.set)
            worker = threading.Thread(
                target=send, name=f"fetch:{endpoint}", daemon=True
            )
            worker.start()
            try:
                finished.wait(deadline.remaining())
            finally:
                unregister()

        # A response that lands after cancellation or expiry is discarded
        if deadline.done or not outcome:
            raise self._deadline_error(endpoint, deadline)

        value = outcome[0]
        if isinstance(value, Exception):
            raise value

        self._metrics.record_request(value.status_code, value.body_size)
        self._raise_for_status(endpoint, value)
        return value

    def _send(
        self,
        client: httpx.Client,
        endpoint: str,
        url: str,
        deadline: Deadline,
    ) -> FetchResult:
        """Send the request and read the full body on the worker thread.

        Raises:
            FetchError: TRANSPORT for httpx failures, expiry or cancellation.
        """
        try:
            with client.stream("GET", url) as response:
                node_id = response.headers.get(NODE_ID_HEADER, "")
                body = self._read_body(response, endpoint, deadline)
                status_code = response.status_code
        except httpx.TimeoutException as e:
            msg = f"Request timed out: {e}"
            raise FetchError(FetchErrorClass.TRANSPORT, msg, endpoint=endpoint) from e
        except httpx.HTTPError as e:
            msg = f"Request failed: {e}"
            raise FetchError(FetchErrorClass.TRANSPORT, msg, endpoint=endpoint) from e

        return FetchResult(node_id=node_id, body=body, status_code=status_code)

    def _read_body(
        self,
        response: httpx.Response,
        endpoint: str,
        deadline: Deadline,
    ) -> bytes:
        """Read the full body, abandoning it once the deadline is done.

        Raises:
            FetchError: TRANSPORT if the deadline expires or is cancelled.
        """
        buffer = BytesIO()
        for chunk in response.iter_bytes(chunk_size=DEFAULT_CHUNK_SIZE):
            if deadline.done:
                raise self._deadline_error(endpoint, deadline)
            buffer.write(chunk)
        return buffer.getvalue()

    def _raise_for_status(self, endpoint: str, result: FetchResult) -> None:
        """Raise a status-based FetchError for status codes >= 400."""
        if result.status_code < HTTP_STATUS_BAD_REQUEST:
            return

        if result.status_code == HTTP_STATUS_NOT_FOUND:
            raise FetchError(
                FetchErrorClass.NOT_SUPPORTED,
                f"Endpoint {endpoint} not found (404)",
                endpoint=endpoint,
                status_code=result.status_code,
                result=result,
            )

        raise FetchError(
            FetchErrorClass.HTTP_STATUS,
            f"Endpoint {endpoint} returned status {result.status_code}",
            endpoint=endpoint,
            status_code=result.status_code,
            result=result,
        )

    def _deadline_error(self, endpoint: str, deadline: Deadline) -> FetchError:
        return FetchError(
            FetchErrorClass.TRANSPORT,
            f"Fetch of {endpoint} abandoned: {deadline.reason()}",
            endpoint=endpoint,
        )

    def _build_auth(self) -> httpx.BasicAuth | None:
        credentials = self._settings.credentials
        if credentials.auth_method != AuthMethod.USER_PASS:
            return None
        password = credentials.password
        return httpx.BasicAuth(
            credentials.username or "",
            password.get_secret_value() if password else "",
        )

    def _build_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json, text/plain, */*"}
        credentials = self._settings.credentials
        token = credentials.access_token
        if credentials.auth_method == AuthMethod.ACCESS_TOKEN and token is not None:
            headers["Authorization"] = f"Bearer {token.get_secret_value()}"
        return headers


class ArtifactoryClient:
    """Entry point for endpoint handlers.

    Routes each request either straight to the fetcher or through the
    TTL cache, depending on configuration and on whether the caller
    supplied its own deadline.
    """

    def __init__(
        self,
        settings: ExporterSettings,
        logger: structlog.stdlib.BoundLogger | None = None,
        transport: httpx.BaseTransport | None = None,
        cache: ResponseCache | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Exporter settings.
            logger: Logger shared with the fetcher and cache.
            transport: Optional httpx transport, used by tests.
            cache: Cache to use when caching is enabled; built from the
                settings' TTL when omitted.
        """
        self._settings = settings
        self._log = logger or get_logger(__name__)
        self._fetcher = HttpFetcher(settings, logger=self._log, transport=transport)
        self._cache: ResponseCache | None = None
        if settings.use_cache:
            self._cache = cache or ResponseCache(
                settings.cache_ttl_seconds, logger=self._log
            )

    @property
    def settings(self) -> ExporterSettings:
        """Settings the client was built with."""
        return self._settings

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        """Logger injected into the client."""
        return self._log

    @property
    def cache(self) -> ResponseCache | None:
        """The response cache, or None when caching is disabled."""
        return self._cache

    def fetch_http(self, endpoint: str, deadline: Deadline | None = None) -> FetchResult:
        """Fetch an endpoint, through the cache when enabled.

        A caller-supplied deadline always means a direct, uncached fetch
        bounded by that deadline.

        Args:
            endpoint: Path relative to the configured base URI.
            deadline: Optional explicit deadline.

        Returns:
            FetchResult of the request (possibly cached).

        Raises:
            FetchError: See `HttpFetcher.fetch`.
        """
        if deadline is not None or self._cache is None:
            return self._fetcher.fetch(endpoint, deadline)
        return self._cache.get_or_fetch(endpoint, self._fetch_for_cache)

    def _fetch_for_cache(self, endpoint: str) -> FetchResult:
        return self._fetcher.fetch(
            endpoint, Deadline.after(self._settings.cache_timeout_seconds)
        )
