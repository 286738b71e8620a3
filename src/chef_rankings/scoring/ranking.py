"""Dense rank assignment over scored chefs."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from chef_rankings.scoring.weights import ScoreBreakdown


@dataclass(frozen=True)
class ScoredChef:
    """A chef's freshly computed score, before or after ranking.

    Attributes:
        chef_id: Chef identifier.
        total_score: Weighted composite score.
        breakdown: Per-category raw scores.
        rank: 1-based position once ranked, else None.
        name: Display name, carried for summaries.
    """

    chef_id: str
    total_score: float
    breakdown: ScoreBreakdown
    rank: int | None = None
    name: str = ""


def assign_ranks(scored: Sequence[ScoredChef]) -> list[ScoredChef]:
    """Order chefs by total score descending and number them 1..N.

    Ties are broken by chef id ascending, so the result does not depend on
    the order the chefs were fetched in.
    """
    ordered = sorted(scored, key=lambda s: (-s.total_score, s.chef_id))
    return [
        ScoredChef(
            chef_id=s.chef_id,
            total_score=s.total_score,
            breakdown=s.breakdown,
            rank=position,
            name=s.name,
        )
        for position, s in enumerate(ordered, 1)
    ]
