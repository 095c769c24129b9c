"""
Configuration and settings for the field reports backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database (any SQLAlchemy URL; unset means in-memory)
    database_url: Optional[str] = Field(default=None)

    # HTTP listener
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)

    # Uploaded hazard files, served under /uploads
    upload_dir: str = Field(default="uploads")

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias="FIELDREPORTS_USE_IN_MEMORY_BACKENDS",
    )
    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
