"""
Configuration and settings for the episode tracker client.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the Firebase-backed client."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Firebase project
    firebase_api_key: Optional[str] = Field(
        default=None, validation_alias="FIREBASE_API_KEY"
    )
    firebase_project_id: Optional[str] = Field(
        default=None, validation_alias="FIREBASE_PROJECT_ID"
    )
    # Falls back to application default credentials when unset.
    firebase_service_account_path: Optional[str] = Field(
        default=None, validation_alias="FIREBASE_SERVICE_ACCOUNT_PATH"
    )
    auth_request_timeout: float = Field(
        default=30.0, validation_alias="AUTH_REQUEST_TIMEOUT"
    )

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, validation_alias="EPISODE_TRACKER_USE_IN_MEMORY_BACKENDS"
    )
    log_level: str = Field(default="INFO", validation_alias="EPISODE_TRACKER_LOG_LEVEL")

    @property
    def firebase_configured(self) -> bool:
        return bool(self.firebase_api_key and self.firebase_project_id)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
