"""Engine configuration with environment variable loading."""

import functools
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Recommendation engine settings.

    All settings can be overridden via environment variables with the
    TASK_RECOMMENDER_ prefix, e.g. TASK_RECOMMENDER_SCORE_TTL_SECONDS=60.
    """

    # Caching
    profile_ttl_seconds: float = Field(default=30 * 60, gt=0)
    score_ttl_seconds: float = Field(default=5 * 60, gt=0)
    sweep_interval_seconds: float = Field(default=60, gt=0)
    use_cache: bool = True

    # History fetch
    history_bound: int = Field(default=100, ge=1)
    activity_bound: int = Field(default=200, ge=1)
    fetch_timeout_seconds: float = Field(default=5.0, gt=0)
    fetch_workers: int = Field(default=4, ge=2)

    # Scoring
    scoring_strategy: Literal["optimized", "baseline"] = "optimized"
    strict: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    model_config = {
        "env_prefix": "TASK_RECOMMENDER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@functools.lru_cache
def get_settings() -> Settings:
    """Get cached settings instance, loaded once per process."""
    return Settings()
