"""Application configuration using pydantic-settings."""

import warnings
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Token policy settings loaded from ``TOKENGATE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TOKENGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"

    # Token policy
    token_type: str = "JWT"
    jwt_algorithm: str = "HS512"
    jwt_secret_key: str | None = Field(
        default=None,
        description="Shared signing secret. A random per-process secret is used when unset.",
    )
    jwt_access_token_expire_seconds: int = 2 * 3600
    jwt_refresh_token_expire_seconds: int = 7 * 24 * 3600
    token_source: Literal["bearer", "form", "cookie"] = "bearer"

    # Revocation store
    redis_url: str = Field(default="redis://localhost:6379/0")

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    @model_validator(mode="after")
    def enforce_jwt_secret_strength(self) -> "Settings":
        """Enforce JWT secret requirements based on environment.

        - Non-dev: a configured secret must be >= 32 characters. An unset
          secret is allowed here because a policy override may supply one;
          ``build_policy`` refuses to fall back to a random secret.
        - Dev: an unset secret falls back to a random one; a short secret
          only warns so local runs aren't blocked.
        """
        if self.environment != "development":
            if self.jwt_secret_key and len(self.jwt_secret_key) < 32:
                raise ValueError(
                    "jwt_secret_key must be at least 32 characters "
                    "in staging/production environments"
                )
        elif self.jwt_secret_key and len(self.jwt_secret_key) < 32:
            warnings.warn(
                "jwt_secret_key is shorter than 32 characters; "
                "use a strong, randomly-generated secret in production",
                UserWarning,
                stacklevel=2,
            )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
