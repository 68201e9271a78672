"""
Shared configuration management for the admin console access gateway.
"""

from typing import List, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


UPSTREAM_ENVIRONMENTS = ("staging", "production")


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ACCESS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # Upstream API
    upstream_environment: Optional[str] = None
    staging_api_url: str = "https://staging.unzolo.com/api"
    production_api_url: str = "https://api.unzolo.com/api"
    upstream_base_url: Optional[str] = None
    upstream_timeout_seconds: Optional[float] = None

    # Session cookies
    session_max_age_seconds: int = 60 * 60 * 24 * 7
    cookie_secure: Optional[bool] = None

    # Session gate
    public_paths: List[str] = Field(default_factory=lambda: ["/login", "/api/auth"])
    gate_excluded_pattern: str = r"^/(_next/static|_next/image|favicon\.ico|static|health|metrics)(/|$)"

    @model_validator(mode="after")
    def resolve_environment_defaults(self) -> "BaseConfig":
        if self.upstream_environment is None:
            self.upstream_environment = "production" if self.env == "production" else "staging"
        if self.upstream_environment not in UPSTREAM_ENVIRONMENTS:
            raise ValueError(
                f"upstream_environment must be one of {UPSTREAM_ENVIRONMENTS}, "
                f"got {self.upstream_environment!r}"
            )
        if self.cookie_secure is None:
            self.cookie_secure = self.env == "production"
        return self

    @property
    def resolved_upstream_url(self) -> str:
        """Upstream base URL with any trailing slash removed."""
        if self.upstream_base_url:
            url = self.upstream_base_url
        elif self.upstream_environment == "production":
            url = self.production_api_url
        else:
            url = self.staging_api_url
        return url.rstrip("/")


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
