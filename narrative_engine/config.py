"""Engine configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables.

    Every field can be overridden with a ``NARRATIVE_`` prefixed variable,
    e.g. ``NARRATIVE_DEFAULT_SEED=7``.
    """

    model_config = SettingsConfigDict(
        env_prefix="NARRATIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Reproducibility
    default_seed: int = 42
    variant_stride: int = Field(default=1000, ge=1)

    # Grammar expansion
    max_depth: int = Field(default=20, ge=1)

    # Quality control
    max_retries: int = Field(default=3, ge=0)
    context_window: int = Field(default=5, ge=1)

    # Inline Markov references
    markov_min_words: int = Field(default=5, ge=0)
    markov_max_words: int = Field(default=20, ge=1)

    # Logging (used by the CLI)
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
