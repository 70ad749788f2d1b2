"""Configuration loading from environment variables with validation."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

from blogforge.errors import ConfigurationError

# Project root (two levels up from src/blogforge/)
_PROJECT_DIR = Path(__file__).resolve().parent.parent.parent

DEFAULT_SESSION_SECRET = "your-secret-key-here-change-in-production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BLOGFORGE_",
        case_sensitive=False,
    )

    # Provider keys (loaded separately, no prefix)
    anthropic_api_key: str = ""
    brave_api_key: str = ""

    # Session signing
    session_secret: str = DEFAULT_SESSION_SECRET
    session_max_age_days: int = 30

    # Model settings
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 4000
    temperature: float = 0.75
    llm_max_attempts: int = 1
    llm_timeout_seconds: float = 600.0

    # Research
    search_timeout_seconds: float = 30.0
    research_ttl_days: int = 30

    # Storage
    db_path: Path = _PROJECT_DIR / "data" / "blogforge.db"

    # Worker
    embedded_worker: bool = False
    worker_poll_seconds: float = 5.0
    job_stale_after_seconds: int = 1800

    # Public site
    site_url: str = "https://yourdomain.com"
    site_name: str = "Finance & Investing Blog"

    # Logging
    log_level: str = "INFO"

    def check_session_secret(self) -> None:
        """Refuse to serve sessions signed with a missing or placeholder secret."""
        if not self.session_secret or self.session_secret == DEFAULT_SESSION_SECRET:
            raise ConfigurationError(
                "BLOGFORGE_SESSION_SECRET is not set or uses the default value"
            )


def get_settings() -> Settings:
    """Load settings from environment and .env file."""
    load_dotenv(_PROJECT_DIR / ".env")
    return Settings(
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
        brave_api_key=os.getenv("BRAVE_API_KEY", ""),
    )
