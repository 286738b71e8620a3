"""Scoring engine: rolling-window breakdowns, weighted totals and rank assignment."""

from chef_rankings.scoring.breakdown import (
    ScoringWindow,
    calculate_breakdown,
    calculate_total_score,
    parse_star_count,
    round1,
)
from chef_rankings.scoring.ranking import ScoredChef, assign_ranks
from chef_rankings.scoring.records import (
    AccoladeRecord,
    AccoladeType,
    CareerRecord,
    ChefRecords,
    PeerRecord,
    PeerStandingType,
    SignalRecord,
)
from chef_rankings.scoring.weights import (
    CATEGORIES,
    DEFAULT_WEIGHTS,
    ScoreBreakdown,
    ScoringWeights,
    resolve_weights,
    validate_weight_update,
    weights_sum_warning,
)

__all__ = [
    "CATEGORIES",
    "DEFAULT_WEIGHTS",
    "AccoladeRecord",
    "AccoladeType",
    "CareerRecord",
    "ChefRecords",
    "PeerRecord",
    "PeerStandingType",
    "ScoreBreakdown",
    "ScoredChef",
    "ScoringWeights",
    "ScoringWindow",
    "SignalRecord",
    "assign_ranks",
    "calculate_breakdown",
    "calculate_total_score",
    "parse_star_count",
    "resolve_weights",
    "round1",
    "validate_weight_update",
    "weights_sum_warning",
]
