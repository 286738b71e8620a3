"""Monthly snapshot publishing and history queries."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import structlog

from chef_rankings.core.errors import NotFoundError
from chef_rankings.core.period import validate_month
from chef_rankings.core.progress import ProgressCallback
from chef_rankings.models import MonthlySnapshot, SnapshotEntry
from chef_rankings.scoring import ScoreBreakdown, ScoringWeights
from chef_rankings.services.scoring import ScoringService, rank_delta
from chef_rankings.services.storage import RankingStore

logger = structlog.get_logger()


@dataclass(frozen=True)
class SnapshotView:
    """A stored snapshot with entries ordered by rank and parsed breakdowns."""

    snapshot: MonthlySnapshot
    entries: list[tuple[SnapshotEntry, ScoreBreakdown | None]]


def parse_breakdown(entry: SnapshotEntry) -> ScoreBreakdown | None:
    return ScoreBreakdown.from_json(entry.breakdown) if entry.breakdown else None


class SnapshotService:
    """Builds point-in-time copies of the ranking and reads them back."""

    def __init__(self, store: RankingStore, scoring: ScoringService) -> None:
        self.store = store
        self.scoring = scoring

    async def create_snapshot(
        self,
        month: str,
        notes: str | None = None,
        weights: ScoringWeights | None = None,
        now: datetime | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        """Recalculate all scores and publish them as the snapshot for ``month``.

        Republishing a month replaces its entries; it never merges with the
        earlier publish. Each entry's delta is measured against the latest
        snapshot before ``month``.

        Args:
            month: Snapshot key in ``YYYY-MM`` form.
            notes: Optional free-text notes; kept as-is on republish when None.
            weights: Weights for the recalculation. Fetched from the store if None.
            now: End of the rolling window (defaults to the current time).
            on_progress: Optional progress callback forwarded to the batch.

        Returns:
            The snapshot id.

        Raises:
            ValidationError: If ``month`` is not ``YYYY-MM``.
        """
        validate_month(month)

        weights = weights or await self.scoring.get_weights()
        ranked = await self.scoring.recalculate_all(weights, now=now, on_progress=on_progress)

        previous = await self.store.find_latest_snapshot_before(month)
        previous_ranks = previous.rank_map() if previous else {}

        snapshot_id = await self.store.upsert_snapshot(month, notes)
        removed = await self.store.delete_snapshot_entries(snapshot_id)
        if removed:
            logger.info("snapshot_entries_replaced", month=month, removed=removed)

        for result in ranked:
            await self.store.create_snapshot_entry(
                snapshot_id=snapshot_id,
                chef_id=result.chef_id,
                rank=result.rank,
                total_score=result.total_score,
                breakdown=result.breakdown.to_json(),
                delta=rank_delta(previous_ranks.get(result.chef_id), result.rank),
            )

        logger.info(
            "snapshot_published",
            month=month,
            entries=len(ranked),
            previous_month=previous.snapshot.month if previous else None,
        )
        return snapshot_id

    async def get_snapshot(self, month: str) -> SnapshotView:
        """Get a snapshot by month.

        Raises:
            NotFoundError: If no snapshot exists for the month.
        """
        found = await self.store.snapshots.get_snapshot_with_entries(month)
        if found is None:
            raise NotFoundError("Snapshot", month)
        return SnapshotView(
            snapshot=found.snapshot,
            entries=[(entry, parse_breakdown(entry)) for entry in found.entries],
        )

    async def list_snapshots(self) -> list[tuple[MonthlySnapshot, int]]:
        return await self.store.snapshots.list_snapshots()

    async def chef_history(self, chef_id: str) -> list[tuple[str, SnapshotEntry]]:
        """Get a chef's rank and score for every month it was published."""
        await self.store.chefs.get_chef(chef_id)
        return await self.store.snapshots.entries_for_chef(chef_id)
