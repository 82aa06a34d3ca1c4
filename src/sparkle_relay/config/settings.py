"""
Module: settings.py
Description: Relay configuration using pydantic-settings.

Loads settings from SPARKLE_* environment variables or a .env file.
Room name and target URL are required; when they are missing or invalid
load_settings() returns None and the plugin stays disabled.
"""

from typing import Any, Optional

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sparkle_relay.utils.logger import get_logger

logger = get_logger(__name__)


class Settings(BaseSettings):
    """Relay settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SPARKLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Room binding
    room_name: str = Field(
        ...,
        min_length=1,
        description="Chat room whose messages are relayed"
    )

    # Delivery settings
    target_url: str = Field(
        ...,
        description="Remote log endpoint accepting form-encoded messages"
    )
    delivery_timeout: float = Field(
        default=10,
        gt=0,
        le=60,
        description="HTTP timeout in seconds for delivery attempts"
    )
    retry_buffer_capacity: int = Field(
        default=50,
        ge=1,
        description="Maximum failed messages kept for redelivery"
    )

    # Transcript archive
    archive_path: Optional[str] = Field(
        default=None,
        description="Directory for the working transcript file"
    )
    publish_path: Optional[str] = Field(
        default=None,
        description="Directory receiving completed transcript files"
    )
    archive_threshold: int = Field(
        default=5,
        ge=1,
        description="Messages written before a transcript is published"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator('target_url')
    @classmethod
    def validate_target_url(cls, v: str) -> str:
        """Validate the endpoint is an HTTP/HTTPS URL."""
        if not v or not v.startswith(('http://', 'https://')):
            raise ValueError("target_url must be a valid HTTP/HTTPS URL")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @model_validator(mode='after')
    def validate_archive_paths(self) -> "Settings":
        """Archive and publish paths must be set together."""
        if (self.archive_path is None) != (self.publish_path is None):
            raise ValueError("archive_path and publish_path must be set together")
        return self

    @property
    def archive_enabled(self) -> bool:
        return self.archive_path is not None


def load_settings(**overrides: Any) -> Optional[Settings]:
    """
    Load settings, returning None when configuration is absent or invalid.

    Args:
        **overrides: Values taking precedence over the environment

    Returns:
        Settings instance, or None if loading failed
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        logger.warning(
            "Relay configuration unavailable",
            errors=[
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ]
        )
        return None
    except OSError as e:
        logger.warning("Relay configuration could not be read", error=str(e))
        return None
