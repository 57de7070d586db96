"""Configuration for the secrets console API client."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientConfig(BaseSettings):
    """Settings used by :class:`secrets_console.api.client.ApiClient`."""

    base_url: str = Field(
        ...,
        description="Base URL of the secrets API server (without the /api/secrets path)",
    )
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Optional HTTP timeout (seconds); unset means no client-side limit",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Whether to verify TLS certificates when calling the API",
    )
    access_token: str | None = Field(
        default=None,
        description="Static bearer token used by the command line entry point",
    )
    token_cache_ttl: int = Field(
        default=60,
        ge=1,
        description="Lifetime (seconds) of tokens cached by CachedTokenProvider",
    )
    retain_decrypted_on_refresh: bool = Field(
        default=False,
        description="Keep decrypted values across list refreshes when the secret is unchanged",
    )

    model_config = SettingsConfigDict(
        env_prefix="SECRETS_API_",
        env_file=".env",
        extra="ignore",
    )


__all__ = ["ClientConfig"]
