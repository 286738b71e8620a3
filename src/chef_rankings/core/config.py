"""Configuration schemas and loading for chef rankings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_DATABASE_URL = "duckdb:///chef_rankings.duckdb"
DATABASE_URL_ENV = "CHEF_RANKINGS_DATABASE_URL"

DEFAULT_WINDOW_YEARS = 10


class WeightsConfig(BaseModel):
    """Fallback category weights used when the store holds no row for a category."""

    formal_accolades: float = Field(default=0.35, ge=0)
    career_track: float = Field(default=0.25, ge=0)
    public_signals: float = Field(default=0.15, ge=0)
    peer_standing: float = Field(default=0.25, ge=0)


class ScoringConfig(BaseModel):
    """Scoring engine configuration.

    Attributes:
        window_years: Length of the rolling window records must fall in to count.
        default_weights: Weights applied to categories with no stored row.
        weight_sum_tolerance: Allowed deviation of the weight sum from 1.0 before
            an advisory warning is logged. Never enforced.
    """

    window_years: int = Field(default=DEFAULT_WINDOW_YEARS, ge=1)
    default_weights: WeightsConfig = Field(default_factory=WeightsConfig)
    weight_sum_tolerance: float = Field(default=0.01, ge=0)


class RankingConfig(BaseModel):
    """Recalculation batch configuration."""

    transactional_writes: bool = True  # Write all ranks in one transaction
    progress: bool = True


class RankingsConfig(BaseModel):
    """Complete application configuration."""

    database_url: str | None = None
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    export_dir: str = "./exports"

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            msg = "database_url cannot be empty"
            raise ValueError(msg)
        return v

    def get_database_url(self) -> str:
        """Get database URL from config, environment, or the default DuckDB file."""
        return self.database_url or os.environ.get(DATABASE_URL_ENV) or DEFAULT_DATABASE_URL


def load_config(path: str | Path) -> RankingsConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to YAML configuration file.

    Returns:
        Validated RankingsConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    config_path = Path(path)
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with config_path.open() as f:
        data: Any = yaml.safe_load(f)

    return RankingsConfig.model_validate(data or {})
