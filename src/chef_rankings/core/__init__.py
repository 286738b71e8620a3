"""Core configuration and utilities for chef rankings."""

from chef_rankings.core.config import (
    DEFAULT_DATABASE_URL,
    RankingConfig,
    RankingsConfig,
    ScoringConfig,
    WeightsConfig,
    load_config,
)
from chef_rankings.core.errors import (
    ConfigurationError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from chef_rankings.core.period import current_month, validate_month
from chef_rankings.core.progress import RecalculationProgress
from chef_rankings.core.slug import SlugGenerator

__all__ = [
    "DEFAULT_DATABASE_URL",
    "RankingConfig",
    "RankingsConfig",
    "ScoringConfig",
    "WeightsConfig",
    "SlugGenerator",
    "RecalculationProgress",
    "current_month",
    "load_config",
    "validate_month",
    "ConfigurationError",
    "NotFoundError",
    "StoreError",
    "ValidationError",
]
