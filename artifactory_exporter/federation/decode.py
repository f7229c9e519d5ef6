"""Decoders turning federation response bodies into typed records."""

from pydantic import TypeAdapter, ValidationError

from artifactory_exporter.federation.constants import (
    MIRRORS_LAG_ENDPOINT,
    UNAVAILABLE_MIRRORS_ENDPOINT,
)
from artifactory_exporter.federation.models import (
    MirrorLag,
    MirrorLags,
    UnavailableMirrors,
)
from artifactory_exporter.fetch.models import FetchResult, MalformedResponseError


_MIRROR_LAGS_ADAPTER: TypeAdapter[list[MirrorLag] | None] = TypeAdapter(
    list[MirrorLag] | None
)
_UNAVAILABLE_MIRRORS_ADAPTER: TypeAdapter[UnavailableMirrors | None] = TypeAdapter(
    UnavailableMirrors | None
)


def decode_mirror_lags(
    body: bytes,
    node_id: str = "",
    result: FetchResult | None = None,
) -> MirrorLags:
    """Decode a mirrors-lag body (a JSON array).

    Args:
        body: Raw response body.
        node_id: Node id taken from the response header.
        result: Response the body came from, attached to decode errors.

    Returns:
        MirrorLags carrying `node_id`; JSON null decodes to no lags.

    Raises:
        MalformedResponseError: If the body is not a valid mirror-lag array.
    """
    try:
        lags = _MIRROR_LAGS_ADAPTER.validate_json(body)
    except ValidationError as e:
        msg = f"Cannot decode mirror lags response: {e.errors()[0]['msg']}"
        raise MalformedResponseError(
            msg, endpoint=MIRRORS_LAG_ENDPOINT, result=result
        ) from e
    return MirrorLags(mirror_lags=lags or [], node_id=node_id)


def decode_unavailable_mirrors(
    body: bytes,
    node_id: str = "",
    result: FetchResult | None = None,
) -> UnavailableMirrors:
    """Decode an unavailable-mirrors body (a JSON object).

    The header node id wins; the body's `nodeId` is only used when the
    header was missing.

    Args:
        body: Raw response body.
        node_id: Node id taken from the response header.
        result: Response the body came from, attached to decode errors.

    Returns:
        UnavailableMirrors carrying the resolved node id.

    Raises:
        MalformedResponseError: If the body does not match the schema.
    """
    try:
        decoded = _UNAVAILABLE_MIRRORS_ADAPTER.validate_json(body)
    except ValidationError as e:
        msg = f"Cannot decode unavailable mirrors response: {e.errors()[0]['msg']}"
        raise MalformedResponseError(
            msg, endpoint=UNAVAILABLE_MIRRORS_ENDPOINT, result=result
        ) from e
    if decoded is None:
        return UnavailableMirrors(node_id=node_id)
    return decoded.model_copy(update={"node_id": node_id or decoded.node_id})
