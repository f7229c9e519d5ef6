"""Federation status endpoints: mirror lag and unavailable mirrors."""

from artifactory_exporter.federation.classify import (
    DISABLED_FEATURE_SENTINEL,
    ResponseVerdict,
    classify_response,
    is_feature_disabled,
)
from artifactory_exporter.federation.client import FederationClient
from artifactory_exporter.federation.constants import (
    MIRRORS_LAG_ENDPOINT,
    UNAVAILABLE_MIRRORS_ENDPOINT,
    UNAVAILABLE_MIRRORS_TIMEOUT_SECONDS,
)
from artifactory_exporter.federation.decode import (
    decode_mirror_lags,
    decode_unavailable_mirrors,
)
from artifactory_exporter.federation.models import (
    MirrorLag,
    MirrorLags,
    UnavailableMirror,
    UnavailableMirrors,
)


__all__ = [
    # Client
    "FederationClient",
    # Classification
    "DISABLED_FEATURE_SENTINEL",
    "ResponseVerdict",
    "classify_response",
    "is_feature_disabled",
    # Decoders
    "decode_mirror_lags",
    "decode_unavailable_mirrors",
    # Models
    "MirrorLag",
    "MirrorLags",
    "UnavailableMirror",
    "UnavailableMirrors",
    # Constants
    "MIRRORS_LAG_ENDPOINT",
    "UNAVAILABLE_MIRRORS_ENDPOINT",
    "UNAVAILABLE_MIRRORS_TIMEOUT_SECONDS",
]
