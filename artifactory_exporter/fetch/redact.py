"""Redaction of credentials before they reach the logs."""

import re
from collections.abc import Mapping


SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "cookie",
        "set-cookie",
        "proxy-authorization",
        "x-jfrog-art-api",
    }
)

REDACTED_VALUE = "[REDACTED]"

_URL_CREDENTIALS = re.compile(r"(https?://)([^:/@]+):([^@]+)@")


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy headers with the values of credential headers replaced.

    Args:
        headers: Request or response headers.

    Returns:
        New dictionary safe to log.
    """
    return {
        key: REDACTED_VALUE if key.lower() in SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def redact_url_credentials(url: str) -> str:
    """Mask `user:password@` userinfo in a URL.

    Args:
        url: URL that may embed credentials.

    Returns:
        URL with credentials redacted.
    """
    return _URL_CREDENTIALS.sub(rf"\1{REDACTED_VALUE}:{REDACTED_VALUE}@", url)
