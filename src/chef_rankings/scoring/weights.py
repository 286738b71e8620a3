"""Category weights and the score breakdown they apply to."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

import structlog
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from chef_rankings.core.config import WeightsConfig
from chef_rankings.core.errors import ValidationError

logger = structlog.get_logger()

# Category keys as stored in the weight table and the snapshot breakdown blob.
CATEGORIES: tuple[str, ...] = (
    "formalAccolades",
    "careerTrack",
    "publicSignals",
    "peerStanding",
)


class _CategoryModel(BaseModel):
    """Four named category values, serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    formal_accolades: float = 0.0
    career_track: float = 0.0
    public_signals: float = 0.0
    peer_standing: float = 0.0

    def as_dict(self) -> dict[str, float]:
        """Return the four values keyed by category name."""
        return self.model_dump(by_alias=True)

    def __getitem__(self, category: str) -> float:
        return self.as_dict()[category]


class ScoreBreakdown(_CategoryModel):
    """Per-category raw scores, each in [0, 100] with one decimal."""

    def to_json(self) -> str:
        """Serialize for storage in a snapshot entry."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, blob: str) -> ScoreBreakdown:
        """Parse a blob written by ``to_json``."""
        return cls.model_validate_json(blob)


class ScoringWeights(_CategoryModel):
    """Weight applied to each category when computing the total score.

    Weights are expected to sum to 1.0 but this is advisory only; use
    ``normalized`` to opt in to rescaling.
    """

    formal_accolades: float = 0.35
    career_track: float = 0.25
    public_signals: float = 0.15
    peer_standing: float = 0.25

    @property
    def total(self) -> float:
        return sum(self.as_dict().values())

    def normalized(self) -> ScoringWeights:
        """Return weights rescaled to sum to 1.0 (unchanged if they sum to zero)."""
        total = self.total
        if total == 0:
            return self
        return ScoringWeights.model_validate(
            {category: value / total for category, value in self.as_dict().items()}
        )

    @classmethod
    def from_config(cls, config: WeightsConfig) -> ScoringWeights:
        return cls(
            formal_accolades=config.formal_accolades,
            career_track=config.career_track,
            public_signals=config.public_signals,
            peer_standing=config.peer_standing,
        )


DEFAULT_WEIGHTS = ScoringWeights()


def resolve_weights(
    rows: Iterable[tuple[str, float]],
    defaults: ScoringWeights = DEFAULT_WEIGHTS,
) -> ScoringWeights:
    """Merge stored ``(category, weight)`` rows over the defaults.

    Categories without a row keep their default value, so the result always
    carries all four categories. Rows for unknown categories are ignored. No
    normalization is applied.
    """
    merged = defaults.as_dict()
    for category, weight in rows:
        if category in merged:
            merged[category] = weight
        else:
            logger.debug("unknown_weight_category_ignored", category=category)
    return ScoringWeights.model_validate(merged)


def validate_weight_update(updates: Mapping[str, float]) -> dict[str, float]:
    """Check a partial weight update before it is persisted.

    Raises:
        ValidationError: On unknown categories or negative weights.
    """
    cleaned: dict[str, float] = {}
    for category, weight in updates.items():
        if category not in CATEGORIES:
            raise ValidationError(category, f"Unknown category; expected one of {CATEGORIES}")
        if weight is None:
            continue
        value = float(weight)
        if not math.isfinite(value):
            raise ValidationError(category, "Weights must be finite numbers")
        if value < 0:
            raise ValidationError(category, "Weights must be non-negative")
        cleaned[category] = value
    return cleaned


def weights_sum_warning(weights: ScoringWeights, tolerance: float = 0.01) -> str | None:
    """Return an advisory message when the weights do not sum to 1.0."""
    total = weights.total
    if abs(total - 1.0) <= tolerance:
        return None
    return f"Scoring weights sum to {total:.2f}, expected 1.00"
