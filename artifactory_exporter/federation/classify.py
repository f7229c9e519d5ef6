"""Triage of fetch outcomes for endpoints that may be disabled.

Some endpoints answer with a plain-text message instead of JSON when the
feature is disabled at the storage layer. That message must be recognised
before any JSON decoding, otherwise it would surface as a decode error.
"""

from enum import Enum

from artifactory_exporter.fetch.models import FetchError, FetchErrorClass, FetchResult


DISABLED_FEATURE_SENTINEL = "RTFS is enabled"


class ResponseVerdict(str, Enum):
    """Outcome of classifying a fetch.

    - DISABLED: Feature disabled or unsupported; an empty result, not an error
    - DECODABLE: 2xx response that should be decoded
    - FAILED: Anything else; surfaced as an error
    """

    DISABLED = "DISABLED"
    DECODABLE = "DECODABLE"
    FAILED = "FAILED"


def is_feature_disabled(body: bytes) -> bool:
    """Check whether a body carries the disabled-feature sentinel.

    Substring match against an undocumented plain-text response from the
    server; kept in this one predicate.

    Args:
        body: Raw response body.

    Returns:
        True if the sentinel text appears anywhere in the body.
    """
    return DISABLED_FEATURE_SENTINEL in body.decode("utf-8", errors="replace")


def classify_response(
    result: FetchResult | None,
    error: FetchError | None = None,
    *,
    absorb_not_found: bool = False,
) -> ResponseVerdict:
    """Decide how a fetch outcome should be handled.

    Args:
        result: The fetch result, when the fetch succeeded.
        error: The fetch error, when it failed.
        absorb_not_found: Treat 404 as "feature unsupported, no data"
            instead of a failure.

    Returns:
        The verdict for this outcome.
    """
    response = result if result is not None else (error.result if error else None)

    if error is not None:
        if error.error_class == FetchErrorClass.TRANSPORT:
            return ResponseVerdict.FAILED
        if response is not None and is_feature_disabled(response.body):
            return ResponseVerdict.DISABLED
        if error.error_class == FetchErrorClass.NOT_SUPPORTED and absorb_not_found:
            return ResponseVerdict.DISABLED
        return ResponseVerdict.FAILED

    if response is None:
        return ResponseVerdict.FAILED
    if is_feature_disabled(response.body):
        return ResponseVerdict.DISABLED
    if response.is_success:
        return ResponseVerdict.DECODABLE
    return ResponseVerdict.FAILED
