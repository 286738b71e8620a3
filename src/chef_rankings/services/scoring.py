"""Score recalculation service: weights, per-chef scoring and the ranking batch."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

import structlog

from chef_rankings.core.config import RankingsConfig
from chef_rankings.core.errors import NotFoundError, ValidationError
from chef_rankings.core.progress import ProgressCallback
from chef_rankings.models import Chef
from chef_rankings.scoring import (
    ChefRecords,
    ScoreBreakdown,
    ScoredChef,
    ScoringWeights,
    assign_ranks,
    calculate_breakdown,
    calculate_total_score,
    resolve_weights,
    weights_sum_warning,
)
from chef_rankings.services.storage import RankingStore

logger = structlog.get_logger()

PROGRESS_EVERY = 10
COMPARE_MIN = 2
COMPARE_MAX = 4


@dataclass(frozen=True)
class RankingRow:
    """A chef with its live breakdown and movement against the previous snapshot."""

    chef: Chef
    rank: int | None
    total_score: float
    breakdown: ScoreBreakdown
    delta: int | None


class ScoringService:
    """Computes chef scores and assigns ranks over the active roster."""

    def __init__(self, config: RankingsConfig, store: RankingStore) -> None:
        self.config = config
        self.store = store
        self.default_weights = ScoringWeights.from_config(config.scoring.default_weights)

    async def get_weights(self) -> ScoringWeights:
        """Get the effective weights: stored rows over the configured defaults."""
        rows = await self.store.list_categories()
        weights = resolve_weights(rows, self.default_weights)
        warning = weights_sum_warning(weights, self.config.scoring.weight_sum_tolerance)
        if warning:
            logger.warning("weights_sum_warning", message=warning, total=weights.total)
        return weights

    def breakdown_for(self, records: ChefRecords, now: datetime | None = None) -> ScoreBreakdown:
        return calculate_breakdown(records, now=now, window_years=self.config.scoring.window_years)

    async def score_chef(
        self,
        chef_id: str,
        weights: ScoringWeights | None = None,
        now: datetime | None = None,
    ) -> tuple[float, ScoreBreakdown]:
        """Score one chef without touching its stored score or rank.

        Raises:
            NotFoundError: If the chef does not exist.
        """
        weights = weights or await self.get_weights()
        records = await self.store.get_chef_with_records(chef_id)
        breakdown = self.breakdown_for(records, now)
        return calculate_total_score(breakdown, weights), breakdown

    async def recalculate_all(
        self,
        weights: ScoringWeights,
        now: datetime | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[ScoredChef]:
        """Rescore every non-archived chef and rewrite scores and ranks.

        All chefs are scored under the single ``weights`` value passed in.
        Every record set is fetched and scored before anything is written, so
        a read failure leaves existing ranks untouched. A write failure
        propagates as StoreError; rerunning the batch repairs any chefs left
        stale.

        Args:
            weights: Weights to score the whole batch with.
            now: End of the rolling window (defaults to the current time).
            on_progress: Optional ``(current, total, message)`` callback.

        Returns:
            Ranked results, best first.
        """
        chefs = await self.store.list_active_chefs()
        total = len(chefs)
        logger.info("recalculation_start", chefs=total, weights=weights.as_dict())
        _report(on_progress, 0, total, "Calculating scores...")

        scored: list[ScoredChef] = []
        for chef in chefs:
            records = await self.store.get_chef_with_records(chef.id)
            breakdown = self.breakdown_for(records, now)
            scored.append(
                ScoredChef(
                    chef_id=chef.id,
                    total_score=calculate_total_score(breakdown, weights),
                    breakdown=breakdown,
                    name=chef.name,
                )
            )

        ranked = assign_ranks(scored)
        _report(on_progress, total // 2, total, "Updating ranks...")

        if self.config.ranking.transactional_writes:
            await self.store.update_scores_and_ranks(ranked)
        else:
            for i, result in enumerate(ranked):
                await self.store.update_chef_score_and_rank(
                    result.chef_id, result.total_score, result.rank
                )
                if i % PROGRESS_EVERY == 0:
                    _report(
                        on_progress,
                        total // 2 + i // 2,
                        total,
                        f"Updating rank {i + 1} of {total}...",
                    )

        _report(on_progress, total, total, "Done")
        logger.info(
            "recalculation_complete",
            chefs=total,
            top=[(r.name, r.total_score) for r in ranked[:3]],
        )
        return ranked

    async def compare_chefs(
        self, slugs: Sequence[str], now: datetime | None = None
    ) -> list[tuple[Chef, float, ScoreBreakdown]]:
        """Score 2-4 chefs side by side, best first.

        Raises:
            ValidationError: If fewer than 2 or more than 4 slugs are given.
            NotFoundError: If fewer than 2 of the slugs exist.
        """
        slugs = [s for s in slugs if s]
        if not COMPARE_MIN <= len(slugs) <= COMPARE_MAX:
            raise ValidationError("slugs", "Provide 2-4 chef slugs")

        chefs = [
            c for c in await self.store.chefs.find_chefs_by_slugs(slugs) if not c.is_archived
        ]
        if len(chefs) < COMPARE_MIN:
            raise NotFoundError("Chef", ",".join(slugs))

        weights = await self.get_weights()
        comparisons = []
        for chef in chefs:
            total, breakdown = await self.score_chef(chef.id, weights, now)
            comparisons.append((chef, total, breakdown))
        return sorted(comparisons, key=lambda c: (-c[1], c[0].id))

    async def current_rankings(
        self,
        limit: int = 50,
        page: int = 1,
        cuisine: str | None = None,
        country: str | None = None,
        now: datetime | None = None,
    ) -> tuple[list[RankingRow], int]:
        """Get a page of the live ranking with deltas against the prior snapshot.

        Deltas compare the stored rank with the snapshot preceding the most
        recent one; chefs absent from it get ``None``.

        Returns:
            Tuple of (rows, total matching chefs).
        """
        if limit < 1 or page < 1:
            raise ValidationError("page", "limit and page must be positive")

        chefs = await self.store.chefs.list_active_chefs_by_rank()
        if cuisine:
            needle = cuisine.lower()
            chefs = [c for c in chefs if any(needle in s.lower() for s in c.specialties)]
        if country:
            needle = country.lower()
            chefs = [c for c in chefs if c.country and needle in c.country.lower()]

        total = len(chefs)
        page_chefs = chefs[(page - 1) * limit : page * limit]

        previous_ranks: dict[str, int] = {}
        latest = await self.store.snapshots.find_latest_snapshot()
        if latest is not None:
            previous = await self.store.find_latest_snapshot_before(latest.month)
            if previous is not None:
                previous_ranks = previous.rank_map()

        weights = await self.get_weights()
        rows = []
        for chef in page_chefs:
            total_score, breakdown = await self.score_chef(chef.id, weights, now)
            rows.append(
                RankingRow(
                    chef=chef,
                    rank=chef.rank,
                    total_score=total_score,
                    breakdown=breakdown,
                    delta=rank_delta(previous_ranks.get(chef.id), chef.rank),
                )
            )
        return rows, total


def rank_delta(previous_rank: int | None, current_rank: int | None) -> int | None:
    """Positions gained since the previous ranking (positive means moved up).

    Returns None when either rank is unknown, so a newly ranked chef is never
    reported as unchanged.
    """
    if previous_rank is None or current_rank is None:
        return None
    return previous_rank - current_rank


def _report(callback: ProgressCallback | None, current: int, total: int, message: str) -> None:
    if callback is not None:
        callback(current, total, message)
