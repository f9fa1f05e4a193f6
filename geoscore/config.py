"""Scoring service configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# z-score for a 95% confidence level
DEFAULT_CONFIDENCE_Z = 1.96

# Fraction of repeated judge passes that must mention the brand
DEFAULT_MAJORITY_THRESHOLD = 0.5


class Settings(BaseSettings):
    """Scoring settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GEO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Statistics
    confidence_z: float = Field(default=DEFAULT_CONFIDENCE_Z, gt=0)
    brand_majority_threshold: float = Field(default=DEFAULT_MAJORITY_THRESHOLD, ge=0, le=1)

    # Share of voice
    top_competitors_limit: int = Field(default=5, ge=0)

    # Visibility score weights (points per judged check)
    score_mention_points: int = 10
    score_top_rank_points: int = 6
    score_top_rank_cutoff: int = 3  # Ranks 1..cutoff earn the top-rank bonus
    score_industry_points: int = 2
    score_location_points: int = 2

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test mode."""
        return self.env == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
