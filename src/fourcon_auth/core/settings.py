"""Application settings and configuration.

This module defines all configuration options for the 4con wallet
authentication service. Settings are loaded from environment variables with
sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="4con Auth", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Nonce issuance
    nonce_ttl_seconds: int = Field(default=300, ge=1, alias="NONCE_TTL_SECONDS")
    nonce_backend: Literal["memory", "redis"] = Field(default="memory", alias="NONCE_BACKEND")
    nonce_store_max_entries: int = Field(
        default=100_000,
        ge=1,
        alias="NONCE_STORE_MAX_ENTRIES",
    )

    # Redis configuration, only used by the redis nonce backend
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")

    # Agent-side signing client
    fourcon_url: str = Field(default="https://4con.ai", alias="FOURCON_URL")
    wallet_path: str = Field(default="~/.conway/wallet.json", alias="WALLET_PATH")
    client_http_timeout_seconds: float = Field(
        default=10.0,
        alias="CLIENT_HTTP_TIMEOUT_SECONDS",
    )

    # CORS configuration for board frontends
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def nonce_ttl_ms(self) -> int:
        """Return the nonce validity window in milliseconds."""
        return self.nonce_ttl_seconds * 1000


settings = Settings()
