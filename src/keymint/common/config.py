"""Keymint configuration via pydantic-settings."""

import warnings
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_SECRET_KEY = "insecure-dev-key-change-me"


class KeymintSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="KEYMINT_")

    environment: str = "development"
    secret_key: str = _INSECURE_SECRET_KEY
    log_level: str = "INFO"

    # Database
    db_url: str = "sqlite+aiosqlite:///./data/keymint.db"

    # API
    api_title: str = "Keymint"
    api_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 8080
    api_prefix: str = ""
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Operator sessions
    session_cookie_name: str = "keymint_session"
    session_max_age: int = 8 * 3600  # seconds

    # Batch issuance
    default_batch_size: int = 10
    max_batch_size: int = 100

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    def validate_for_production(self) -> None:
        """Raise if the insecure default secret is used outside development."""
        if self.secret_key != _INSECURE_SECRET_KEY:
            return

        if self.environment != "development":
            raise RuntimeError(
                f"Insecure default secret key detected in '{self.environment}' environment. "
                "Set KEYMINT_SECRET_KEY to a secure value. "
                "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
            )

        warnings.warn(
            "Using insecure default secret key — set KEYMINT_SECRET_KEY for production",
            UserWarning,
            stacklevel=2,
        )


@lru_cache
def get_settings() -> KeymintSettings:
    settings = KeymintSettings()
    settings.validate_for_production()
    return settings
