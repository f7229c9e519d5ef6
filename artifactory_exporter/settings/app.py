"""Exporter settings powered by Pydantic BaseSettings."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class AuthMethod(str, Enum):
    """How requests authenticate against the remote service."""

    USER_PASS = "userPass"
    ACCESS_TOKEN = "accessToken"
    NONE = "none"


class Credentials(BaseModel):
    """Resolved credentials for the remote service."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    auth_method: AuthMethod = AuthMethod.NONE
    username: str | None = None
    password: SecretStr | None = None
    access_token: SecretStr | None = None


class OptionalMetrics(BaseModel):
    """Metric families that are only collected when switched on.

    Every family the exporter accepts in `OPTIONAL_METRICS` is parsed so
    that a shared configuration validates here too. Only
    `federation_status` is read by this package (through
    `FederationClient.federation_status_active`); the other flags are
    consumed by collectors that live outside it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    replication_status: bool = False
    federation_status: bool = False
    open_metrics: bool = False
    access_federation_validate: bool = False
    background_tasks: bool = False

    @classmethod
    def from_names(cls, names: str) -> "OptionalMetrics":
        """Build from a comma separated list such as `federation_status,open_metrics`.

        Args:
            names: Comma separated metric family names.

        Returns:
            OptionalMetrics with the named families enabled.

        Raises:
            ValueError: If a name is not a known metric family.
        """
        enabled: dict[str, bool] = {}
        for raw in names.split(","):
            name = raw.strip().lower()
            if not name:
                continue
            if name not in cls.model_fields:
                known = ", ".join(sorted(cls.model_fields))
                msg = f"Unknown optional metric '{name}' (known: {known})"
                raise ValueError(msg)
            enabled[name] = True
        return cls(**enabled)


class ExporterSettings(BaseSettings):
    """Centralized environment configuration for the exporter client."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    scrape_uri: str = Field(
        default="http://localhost:8081/artifactory",
        validation_alias="ARTI_SCRAPE_URI",
    )
    ssl_verify: bool = Field(default=True, validation_alias="ARTI_SSL_VERIFY")
    timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = Field(
        default=5.0, validation_alias="ARTI_TIMEOUT"
    )
    use_cache: bool = Field(default=False, validation_alias="USE_CACHE")
    cache_ttl_seconds: Annotated[float, Field(gt=0.0)] = Field(
        default=300.0, validation_alias="CACHE_TTL"
    )
    cache_timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = Field(
        default=30.0, validation_alias="CACHE_TIMEOUT"
    )
    username: str | None = Field(default=None, validation_alias="ARTI_USERNAME")
    password: SecretStr | None = Field(default=None, validation_alias="ARTI_PASSWORD")
    access_token: SecretStr | None = Field(
        default=None, validation_alias="ARTI_ACCESS_TOKEN"
    )
    optional_metrics: Annotated[OptionalMetrics, NoDecode] = Field(
        default_factory=OptionalMetrics, validation_alias="OPTIONAL_METRICS"
    )

    @field_validator("scrape_uri")
    @classmethod
    def validate_scrape_uri(cls, v: str) -> str:
        """Require an http(s) URI and drop the trailing slash."""
        if not v.startswith(("http://", "https://")):
            msg = f"Scrape URI must start with http:// or https://, got '{v}'"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("optional_metrics", mode="before")
    @classmethod
    def parse_optional_metrics(cls, v: object) -> object:
        """Accept a comma separated list of metric family names."""
        if isinstance(v, str):
            return OptionalMetrics.from_names(v)
        return v

    @property
    def credentials(self) -> Credentials:
        """Resolve credentials; an access token wins over username/password."""
        if self.access_token is not None:
            return Credentials(
                auth_method=AuthMethod.ACCESS_TOKEN,
                access_token=self.access_token,
            )
        if self.username and self.password is not None:
            return Credentials(
                auth_method=AuthMethod.USER_PASS,
                username=self.username,
                password=self.password,
            )
        return Credentials()


def get_settings() -> ExporterSettings:
    """Get a settings instance."""
    return ExporterSettings()
