"""Endpoints and limits for federation status collection."""

MIRRORS_LAG_ENDPOINT = "federation/status/mirrorsLag"
UNAVAILABLE_MIRRORS_ENDPOINT = "federation/status/unavailableMirrors"

# Explicit deadline for the unavailable-mirrors call; bypasses the cache
UNAVAILABLE_MIRRORS_TIMEOUT_SECONDS = 5.0
