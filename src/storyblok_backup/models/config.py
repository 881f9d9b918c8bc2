"""Configuration models for storyblok-backup.

Settings are read from keyword arguments, ``STORYBLOK_*`` environment
variables and an optional ``.env`` file, in that order of precedence.
"""

from enum import Enum
from typing import Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Region(str, Enum):
    """Storyblok data-center regions and their Management API hosts."""

    EU = "eu"
    US = "us"
    AP = "ap"
    CA = "ca"
    CN = "cn"

    @property
    def base_url(self) -> str:
        """Management API base URL for this region."""
        return _REGION_BASE_URLS[self]


_REGION_BASE_URLS: dict[Region, str] = {
    Region.EU: "https://mapi.storyblok.com/v1",
    Region.US: "https://api-us.storyblok.com/v1",
    Region.AP: "https://api-ap.storyblok.com/v1",
    Region.CA: "https://api-ca.storyblok.com/v1",
    Region.CN: "https://app.storyblokchina.cn/v1",
}


class RetryConfig(BaseSettings):
    """Transport-level retry settings of the API client.

    Only the HTTP client retries (rate limits, 5xx, connection failures).
    The backup and restore pipelines themselves never retry.
    """

    model_config = SettingsConfigDict(env_prefix="STORYBLOK_RETRY_", extra="ignore")

    max_attempts: int = Field(default=3, ge=1, le=10, description="Maximum attempts per request")
    initial_wait: float = Field(default=1.0, ge=0.1, description="Initial wait in seconds")
    max_wait: float = Field(default=60.0, ge=1.0, description="Maximum wait in seconds")
    exponential_base: float = Field(default=2.0, ge=1.0, description="Backoff multiplier")


class StoryblokConfig(BaseSettings):
    """Connection settings for the Storyblok Management API.

    Example:
        >>> config = StoryblokConfig(oauth_token="my-token", space_id="12345")
        >>> config.get_base_url()
        'https://mapi.storyblok.com/v1'
    """

    model_config = SettingsConfigDict(
        env_prefix="STORYBLOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    oauth_token: SecretStr = Field(
        ...,
        description="Personal OAuth access token (not the access token of a space)",
    )
    space_id: str = Field(..., min_length=1, description="ID of the space to work on")
    region: Region = Field(default=Region.EU, description="Region the space lives in")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @field_validator("space_id", mode="before")
    @classmethod
    def _coerce_space_id(cls, value: Any) -> Any:
        # Space ids are numeric in the API but only ever used inside paths
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("oauth_token")
    @classmethod
    def _require_token(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("OAuth token cannot be empty")
        return value

    def get_base_url(self) -> str:
        """Return the Management API base URL for the configured region."""
        return self.region.base_url

    def get_oauth_token(self) -> str:
        """Return the raw OAuth token."""
        return self.oauth_token.get_secret_value()
