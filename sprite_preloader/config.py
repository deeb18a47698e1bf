"""
Configuration management for the sprite preloader.

Environment variable loading precedence:
1. Real environment variables (exported in shell) - highest priority
2. `.env.local` file (for local development only, gitignored)
3. Built-in defaults - lowest priority
"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Sprite preloader settings loaded from environment variables."""

    # Fetch mode: "file" (default) or "http"
    SPRITE_FETCH_MODE: str = Field(default="file", description="Sprite fetcher backend")

    # File fetcher settings
    SPRITE_ROOT_DIR: str = Field(default=".", description="Base directory for sprite paths")

    # HTTP fetcher settings
    SPRITE_BASE_URL: Optional[str] = Field(default=None, description="Base URL for sprite paths")
    FETCH_TIMEOUT_SECONDS: float = Field(default=30.0, description="Per-fetch timeout in seconds")

    # Payload limits
    MAX_SPRITE_MB: int = Field(default=16, description="Maximum sprite payload size in MB")
    MAX_SPRITE_BYTES: int = Field(default=16 * 1024 * 1024, description="Maximum sprite payload in bytes")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FILE: Optional[str] = Field(default=None, description="Optional log file path")
    TRACE_CALLS: bool = Field(default=False, description="Log entry/exit of traced calls")

    model_config = SettingsConfigDict(
        # Precedence: shell env vars > .env.local > .env > defaults
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def __init__(self, **kwargs):
        """Initialize settings and compute derived fields."""
        super().__init__(**kwargs)
        self.MAX_SPRITE_BYTES = self.MAX_SPRITE_MB * 1024 * 1024


settings = Settings()
