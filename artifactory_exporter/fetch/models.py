"""Data models for the HTTP fetch layer."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from artifactory_exporter.fetch.constants import (
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
)


class FetchErrorClass(str, Enum):
    """Classification of fetch errors.

    - NOT_SUPPORTED: Server answered 404 for the endpoint
    - HTTP_STATUS: Any other status >= 400
    - TRANSPORT: Network, DNS, TLS, deadline or cancellation failure
    - MALFORMED: Body is neither valid JSON for the schema nor the
      disabled-feature sentinel
    """

    NOT_SUPPORTED = "NOT_SUPPORTED"
    HTTP_STATUS = "HTTP_STATUS"
    TRANSPORT = "TRANSPORT"
    MALFORMED = "MALFORMED"


class FetchResult(BaseModel):
    """Raw result of one HTTP round trip."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    node_id: str = Field(default="", description="Value of the node id header")
    body: bytes = Field(default=b"", description="Response body")
    status_code: int = Field(ge=100, le=599, description="HTTP status code")

    @property
    def is_success(self) -> bool:
        """Check if the status code is in the 2xx range."""
        return HTTP_STATUS_OK_MIN <= self.status_code < HTTP_STATUS_OK_MAX

    @property
    def body_size(self) -> int:
        """Get the size of the response body in bytes."""
        return len(self.body)


class CacheEntry(BaseModel):
    """Cached fetch result for one endpoint.

    Entries are replaced as a whole, never mutated in place.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: Annotated[str, Field(min_length=1, description="Endpoint identifier")]
    value: FetchResult
    fetched_at: float = Field(description="Monotonic clock reading at fetch time")

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        """Check whether the entry may still be served.

        Args:
            now: Current monotonic clock reading.
            ttl_seconds: Maximum age of a reusable entry.

        Returns:
            True if the entry is younger than the TTL.
        """
        return now - self.fetched_at < ttl_seconds


class FetchError(Exception):
    """Error raised by the fetch layer.

    The error class is a closed enumeration so callers can branch on it
    without inspecting exception types.
    """

    def __init__(
        self,
        error_class: FetchErrorClass,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
        result: FetchResult | None = None,
    ) -> None:
        """Initialize the fetch error.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            endpoint: Endpoint that was being fetched.
            status_code: HTTP status code if a response was received.
            result: The response that produced a status-based error.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.endpoint = endpoint
        self.status_code = status_code
        self.result = result

    @property
    def node_id(self) -> str:
        """Node id of the response behind this error, if any."""
        return self.result.node_id if self.result else ""

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "endpoint": self.endpoint,
            "status_code": self.status_code,
        }


class MalformedResponseError(FetchError):
    """Raised when a response body cannot be decoded into its schema."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        result: FetchResult | None = None,
    ) -> None:
        """Initialize the malformed response error.

        Args:
            message: Human-readable error message.
            endpoint: Endpoint whose body failed to decode.
            result: The response that failed to decode.
        """
        super().__init__(
            FetchErrorClass.MALFORMED,
            message,
            endpoint=endpoint,
            status_code=result.status_code if result else None,
            result=result,
        )
