"""Chef Rankings.

Score chefs from accolades, career history, public signals and peer standing,
rank them, and publish monthly snapshots that track rank movement.
"""

from chef_rankings.scoring import (
    ScoreBreakdown,
    ScoringWeights,
    calculate_breakdown,
    calculate_total_score,
)

__version__ = "0.1.0"
__all__ = [
    "ScoreBreakdown",
    "ScoringWeights",
    "__version__",
    "calculate_breakdown",
    "calculate_total_score",
]
