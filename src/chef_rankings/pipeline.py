"""Pipeline orchestration for chef rankings.

Owns the caller-side policies around the scoring core: weight updates are
followed by a full recalculation, imports are followed by a recalculation,
and every batch run leaves an UpdateStepLog row.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

import structlog

from chef_rankings.core.config import RankingsConfig
from chef_rankings.core.errors import StoreError
from chef_rankings.core.period import validate_month
from chef_rankings.core.progress import ProgressCallback
from chef_rankings.models import Chef, UpdateStepLog
from chef_rankings.scoring import (
    ScoreBreakdown,
    ScoredChef,
    ScoringWeights,
    validate_weight_update,
)
from chef_rankings.services.importer import (
    ChefImportService,
    ImportResult,
    parse_import_payload,
)
from chef_rankings.services.reporting import ExportFormat, export_rankings, summarize_recalculation
from chef_rankings.services.scoring import ScoringService
from chef_rankings.services.snapshot import SnapshotService, parse_breakdown
from chef_rankings.services.storage import ExportStore, RankingStore

logger = structlog.get_logger()

STEP_RECALCULATION = "score_recalculation"
STEP_PUBLISH = "publish_snapshot"

T = TypeVar("T")


@dataclass
class PublishResult:
    snapshot_id: str
    month: str
    entries: int
    top_chefs: list[ScoredChef] = field(default_factory=list)

    @property
    def summary(self) -> str:
        return f"Published {self.month} snapshot with {self.entries} chefs."


class RankingPipeline:
    """Runs recalculation, publishing, weight updates and imports against one store."""

    def __init__(self, config: RankingsConfig, store: RankingStore) -> None:
        """Initialize the pipeline.

        Args:
            config: Application configuration.
            store: Ranking store for persistence.
        """
        self.config = config
        self.store = store
        self.scoring = ScoringService(config, store)
        self.snapshots = SnapshotService(store, self.scoring)
        self.importer = ChefImportService(store)
        self.exports = ExportStore(Path(config.export_dir))

    async def _logged_step(
        self,
        step_name: str,
        run: Callable[[], Awaitable[T]],
        summarize: Callable[[T], tuple[str, int]],
    ) -> T:
        """Run a batch step and record its outcome; errors are re-raised."""
        try:
            result = await run()
        except Exception as e:
            logger.error("step_failed", step=step_name, error=str(e))
            try:
                await self.store.step_logs.record(step_name, "error", str(e))
            except StoreError as log_error:
                logger.warning("step_log_failed", step=step_name, error=str(log_error))
            raise
        summary, items = summarize(result)
        await self.store.step_logs.record(step_name, "success", summary, items)
        return result

    async def recalculate(
        self,
        now: datetime | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[ScoredChef]:
        """Fetch the current weights once and rescore every active chef."""

        async def _run() -> list[ScoredChef]:
            weights = await self.scoring.get_weights()
            return await self.scoring.recalculate_all(weights, now=now, on_progress=on_progress)

        return await self._logged_step(
            STEP_RECALCULATION,
            _run,
            lambda ranked: (summarize_recalculation(ranked), len(ranked)),
        )

    async def publish_snapshot(
        self,
        month: str,
        notes: str | None = None,
        now: datetime | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> PublishResult:
        """Recalculate and publish the snapshot for ``month``."""
        validate_month(month)

        async def _run() -> PublishResult:
            weights = await self.scoring.get_weights()
            snapshot_id = await self.snapshots.create_snapshot(
                month, notes, weights=weights, now=now, on_progress=on_progress
            )
            found = await self.store.snapshots.get_snapshot_with_entries(month)
            entries = found.entries if found else []
            names = {c.id: c.name for c in await self.store.chefs.list_all_chefs()}
            return PublishResult(
                snapshot_id=snapshot_id,
                month=month,
                entries=len(entries),
                top_chefs=[
                    ScoredChef(
                        chef_id=e.chef_id,
                        total_score=e.total_score,
                        breakdown=parse_breakdown(e) or ScoreBreakdown(),
                        rank=e.rank,
                        name=names.get(e.chef_id, ""),
                    )
                    for e in entries[:5]
                ],
            )

        return await self._logged_step(
            STEP_PUBLISH, _run, lambda result: (result.summary, result.entries)
        )

    async def update_weights(
        self,
        updates: Mapping[str, float],
        now: datetime | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ScoringWeights:
        """Store new weights for the given categories, then recalculate.

        Returns:
            The effective weights after the update.

        Raises:
            ValidationError: On unknown categories or negative weights.
        """
        cleaned = validate_weight_update(updates)
        await self.store.weights.upsert_weights(cleaned)
        logger.info("weights_updated", updates=cleaned)
        await self.recalculate(now=now, on_progress=on_progress)
        return await self.scoring.get_weights()

    async def import_chefs(self, payload: Any, now: datetime | None = None) -> ImportResult:
        """Import manual chef data, then recalculate all scores."""
        chefs = parse_import_payload(payload)
        result = await self.importer.import_chefs(chefs)
        await self.recalculate(now=now)
        return result

    async def archive_chef(self, chef_id: str) -> Chef:
        """Archive a chef. Ranks of the others are refreshed by the next batch."""
        chef = await self.store.chefs.archive_chef(chef_id)
        logger.info("chef_archived", chef_id=chef_id, frozen_rank=chef.rank)
        return chef

    async def export(self, fmt: ExportFormat = "csv") -> Path:
        return await export_rankings(self.store, self.exports, fmt)

    async def latest_step_logs(self) -> dict[str, UpdateStepLog]:
        return await self.store.step_logs.latest_by_step()


def open_pipeline(config: RankingsConfig, database_url: str | None = None) -> RankingPipeline:
    """Create a store and pipeline for ``config``."""
    store = RankingStore(config, database_url)
    return RankingPipeline(config, store)
