"""Federation status: mirror lags, unavailable mirrors and the enabled check."""

from collections.abc import Callable
from typing import TypeVar

import structlog

from artifactory_exporter.federation.classify import (
    ResponseVerdict,
    classify_response,
    is_feature_disabled,
)
from artifactory_exporter.federation.constants import (
    MIRRORS_LAG_ENDPOINT,
    UNAVAILABLE_MIRRORS_ENDPOINT,
    UNAVAILABLE_MIRRORS_TIMEOUT_SECONDS,
)
from artifactory_exporter.federation.decode import (
    decode_mirror_lags,
    decode_unavailable_mirrors,
)
from artifactory_exporter.federation.models import MirrorLags, UnavailableMirrors
from artifactory_exporter.fetch.client import ArtifactoryClient
from artifactory_exporter.fetch.deadline import Deadline
from artifactory_exporter.fetch.models import (
    FetchError,
    FetchErrorClass,
    FetchResult,
    MalformedResponseError,
)


T = TypeVar("T")


class FederationClient:
    """Fetches federation status from the remote service.

    Two 404 rules live here and are deliberately separate: for the data
    calls a 404 means "federation unsupported, no data" and yields an
    empty result, while for `is_federation_enabled` it means "not enabled".
    """

    def __init__(self, client: ArtifactoryClient) -> None:
        """Initialize the federation client.

        Args:
            client: Client used for all requests.
        """
        self._client = client
        self._log = client.logger.bind(component="federation")

    def fetch_mirror_lags(self) -> MirrorLags:
        """Fetch replication lag for every federated mirror.

        Returns:
            MirrorLags; empty when federation data is disabled or unsupported.

        Raises:
            FetchError: Transport or status failures.
            MalformedResponseError: If the body cannot be decoded.
        """
        self._log.debug("fetching_mirror_lags")
        return self._fetch_records(
            MIRRORS_LAG_ENDPOINT,
            decode=decode_mirror_lags,
            empty=lambda node_id: MirrorLags(node_id=node_id),
        )

    def fetch_unavailable_mirrors(self) -> UnavailableMirrors:
        """Fetch federated mirrors that are currently unreachable.

        Bounded by its own short deadline, so it never goes through the cache.

        Returns:
            UnavailableMirrors; empty when federation data is disabled or
            unsupported.

        Raises:
            FetchError: Transport or status failures.
            MalformedResponseError: If the body cannot be decoded.
        """
        self._log.debug("fetching_unavailable_mirrors")
        return self._fetch_records(
            UNAVAILABLE_MIRRORS_ENDPOINT,
            decode=decode_unavailable_mirrors,
            empty=lambda node_id: UnavailableMirrors(node_id=node_id),
            deadline=Deadline.after(UNAVAILABLE_MIRRORS_TIMEOUT_SECONDS),
        )

    def is_federation_enabled(self) -> bool:
        """Check whether the federation endpoints are reachable.

        True whenever the endpoint answered, even with the disabled-feature
        text. False for 404, other error statuses and transport failures.
        """
        result, error = self._fetch(UNAVAILABLE_MIRRORS_ENDPOINT)
        verdict = classify_response(result, error, absorb_not_found=False)
        enabled = verdict != ResponseVerdict.FAILED
        self._log.debug(
            "federation_enabled_check", enabled=enabled, verdict=verdict.value
        )
        return enabled

    def federation_status_active(self) -> bool:
        """Whether federation metrics are switched on and the server supports them."""
        if not self._client.settings.optional_metrics.federation_status:
            return False
        return self.is_federation_enabled()

    def _fetch(
        self,
        endpoint: str,
        deadline: Deadline | None = None,
    ) -> tuple[FetchResult | None, FetchError | None]:
        try:
            return self._client.fetch_http(endpoint, deadline), None
        except FetchError as e:
            return None, e

    def _fetch_records(
        self,
        endpoint: str,
        decode: Callable[[bytes, str, FetchResult], T],
        empty: Callable[[str], T],
        deadline: Deadline | None = None,
    ) -> T:
        log = self._log.bind(endpoint=endpoint)
        result, error = self._fetch(endpoint, deadline)
        response = result if result is not None else (error.result if error else None)

        # Header first, before any look at the body
        node_id = response.node_id if response is not None else ""

        verdict = classify_response(result, error, absorb_not_found=True)

        if verdict == ResponseVerdict.DISABLED:
            disabled = response is not None and is_feature_disabled(response.body)
            reason = "rtfs_enabled" if disabled else "not_supported"
            log.debug("federation_data_unavailable", reason=reason, node_id=node_id)
            return empty(node_id)

        if verdict == ResponseVerdict.FAILED or result is None:
            raise self._failure(log, endpoint, result, error)

        try:
            return decode(result.body, node_id, result)
        except MalformedResponseError as e:
            log.error("decode_failed", **e.to_dict())
            raise

    def _failure(
        self,
        log: structlog.stdlib.BoundLogger,
        endpoint: str,
        result: FetchResult | None,
        error: FetchError | None,
    ) -> FetchError:
        if error is None:
            status_code = result.status_code if result is not None else None
            return FetchError(
                FetchErrorClass.HTTP_STATUS,
                f"Endpoint {endpoint} returned unexpected status {status_code}",
                endpoint=endpoint,
                status_code=status_code,
                result=result,
            )
        if error.error_class == FetchErrorClass.TRANSPORT:
            log.error("transport_error", **error.to_dict())
        return error
