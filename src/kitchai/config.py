"""
KitchAI Discovery - Configuration and settings.

DiscoverySettings holds the feed policy knobs (windows, thresholds, weights)
alongside the Supabase connection used by the default data source.
Policy values are validated when the scoring/weight policies are built,
not here, so a bad value surfaces as a ConfigurationError.
"""

import logging
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class DiscoverySettings(BaseSettings):
    """
    Settings for the discovery engine.

    Every field can be overridden from the environment or .env, e.g.
    KITCHAI_ENV=production, FUZZY_THRESHOLD=0.65,
    COMPOSITE_WEIGHTS='{"engagement": 0.5, ...}'.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    kitchai_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Supabase (only needed by SupabaseDataSource)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    # Windows
    feed_window_days: int = 90  # Candidate recency window
    interaction_window_days: int = 90  # Behavior profile window

    # Paging
    default_page_limit: int = 20
    max_page_limit: int = 100

    # Batch work; None = os.cpu_count()
    max_workers: int | None = None

    # Ingredient matching
    fuzzy_threshold: float = 0.85  # rapidfuzz token_sort_ratio / 100
    unknown_floor: float = 0.3

    # Scoring policy
    composite_weights: dict[str, float] = {
        "engagement": 0.4,
        "personalization": 0.35,
        "freshness": 0.15,
        "quality": 0.10,
    }
    personalized_lane_threshold: float = 60.0
    trending_velocity_threshold: float = 50.0
    trending_max_age_hours: float = 48.0

    # Ranking
    jitter_max: float = 10.0
    score_scale: float = 100.0
    following_lane_weight: float = 0.2
    high_engagement_threshold: float = 5.0

    @property
    def is_development(self) -> bool:
        return self.kitchai_env == "development"


@lru_cache
def get_settings() -> DiscoverySettings:
    """Get cached settings instance."""
    return DiscoverySettings()


# Convenience singleton - lazy loaded
class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: DiscoverySettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the root logger (CLI and web startup)."""
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
