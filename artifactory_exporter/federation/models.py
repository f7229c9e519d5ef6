"""Typed records for the federation status endpoints.

Decoding is strict: a JSON string where a number is expected is a schema
error, not a value to coerce.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MirrorLag(BaseModel):
    """One element of the `federation/status/mirrorsLag` response."""

    model_config = ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True, strict=True
    )

    local_repo_key: str = Field(default="", alias="localRepoKey")
    remote_url: str = Field(default="", alias="remoteUrl")
    remote_repo_key: str = Field(default="", alias="remoteRepoKey")
    lag_in_ms: int = Field(default=0, alias="lagInMS")
    event_registration_timestamp: int = Field(
        default=0,
        alias="eventRegistrationTimeStamp",
        description="Epoch milliseconds",
    )


class MirrorLags(BaseModel):
    """Mirror lags reported by one node.

    The endpoint returns a bare array, so `node_id` always comes from the
    response header.
    """

    model_config = ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True, strict=True
    )

    mirror_lags: list[MirrorLag] = Field(default_factory=list, alias="mirrorLags")
    node_id: str = Field(default="", alias="nodeId")


class UnavailableMirror(BaseModel):
    """One unreachable federated mirror."""

    model_config = ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True, strict=True
    )

    repo_key: str = Field(default="", alias="repoKey")
    node_id: str = Field(default="", alias="nodeId")
    status: str = ""
    local_repo_key: str = Field(default="", alias="localRepoKey")
    remote_url: str = Field(default="", alias="remoteUrl")
    remote_repo_key: str = Field(default="", alias="remoteRepoKey")


class UnavailableMirrors(BaseModel):
    """Response of `federation/status/unavailableMirrors`."""

    model_config = ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True, strict=True
    )

    unavailable_mirrors: list[UnavailableMirror] = Field(
        default_factory=list, alias="unavailableMirrors"
    )
    node_id: str = Field(default="", alias="nodeId")

    @field_validator("unavailable_mirrors", mode="before")
    @classmethod
    def null_as_empty(cls, v: object) -> object:
        """Treat a JSON null list as empty."""
        return [] if v is None else v
