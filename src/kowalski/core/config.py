"""Configuration management.

Uses pydantic-settings for type-safe configuration from environment variables.
The analysis algorithms themselves take explicit arguments; only the engine
and logging read these settings.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PATTERNS_PATH = Path(__file__).resolve().parent.parent / "config" / "patterns.yaml"


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden via environment variables.
    Prefix: KOWALSKI_
    """

    model_config = SettingsConfigDict(
        env_prefix="KOWALSKI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="DEBUG, INFO, WARNING or ERROR")
    log_format: str = Field(default="console", description="'console' or 'json'")

    # Analysis defaults
    max_hypotheses: int = Field(default=10, description="Hypotheses kept per generation")
    question_threshold: int = Field(
        default=70,
        description="Columns below this semantic confidence get a clarifying question",
    )
    time_series_min_points: int = Field(
        default=20,
        description="Minimum numeric values before change points / seasonality run",
    )

    # Cache
    cache_ttl_seconds: float = Field(default=300.0, description="Analysis cache entry lifetime")

    # Semantic pattern definitions
    patterns_path: Path = Field(
        default=DEFAULT_PATTERNS_PATH,
        description="YAML file with value patterns and keyword lexicons",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
