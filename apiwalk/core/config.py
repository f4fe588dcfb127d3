"""Client configuration, defaults and environment variable names."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Environment variable names (suffixes, joined with the prefix passed to from_env)
ENV_BASE_URL = "BASE_URL"
ENV_TIMEOUT = "TIMEOUT"
ENV_VERIFY_SSL = "VERIFY_SSL"
DEFAULT_ENV_PREFIX = "APIWALK_"

DEFAULT_TIMEOUT = 30.0
DEFAULT_HEADERS = {"Accept": "application/json"}


class ClientConfig(BaseModel):
    """Connection settings for the default HTTP transport."""

    base_url: str = Field(description="API base URL, e.g. https://api.example.com")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, le=600, description="Request timeout in seconds",
    )
    headers: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_HEADERS))
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")

    model_config = ConfigDict(frozen=True)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @classmethod
    def from_env(cls, prefix: str = DEFAULT_ENV_PREFIX, **overrides: object) -> ClientConfig:
        """Build a config from ``<prefix>BASE_URL`` style variables.

        Keyword overrides take precedence over the environment.
        """
        values: dict[str, object] = {}
        if base_url := os.environ.get(prefix + ENV_BASE_URL):
            values["base_url"] = base_url
        if timeout := os.environ.get(prefix + ENV_TIMEOUT):
            values["timeout"] = timeout
        if verify := os.environ.get(prefix + ENV_VERIFY_SSL):
            values["verify_ssl"] = verify
        values.update(overrides)
        return cls.model_validate(values)
