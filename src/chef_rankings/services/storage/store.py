"""Unified ranking storage layer over the chef, weight, snapshot and log repositories."""

from __future__ import annotations

import gc
from collections.abc import Sequence

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel, create_engine

from chef_rankings.core.config import RankingsConfig
from chef_rankings.core.errors import StoreError
from chef_rankings.models import Chef, MonthlySnapshot
from chef_rankings.scoring import ChefRecords, ScoredChef

from .chef_repository import ChefRepository
from .snapshot_repository import SnapshotRepository, SnapshotWithEntries
from .step_log_repository import StepLogRepository
from .weight_repository import WeightRepository

logger = structlog.get_logger()


class RankingStore:
    """Persistence layer for rankings data.

    Owns the SQLModel engine (DuckDB by default) and exposes the read/write
    operations the scoring and snapshot services rely on. Each operation runs
    in its own session; nothing here spans a whole batch.
    """

    def __init__(self, config: RankingsConfig, database_url: str | None = None) -> None:
        """Initialize ranking store.

        Args:
            config: Application configuration.
            database_url: Optional URL overriding the configured database.
        """
        self.config = config
        self.database_url = database_url or config.get_database_url()
        self._engine = None
        self._init_db()
        self.chefs = ChefRepository(self._engine)
        self.weights = WeightRepository(self._engine)
        self.snapshots = SnapshotRepository(self._engine)
        self.step_logs = StepLogRepository(self._engine)

    def _init_db(self) -> None:
        """Connect and create tables."""
        # Use NullPool to avoid connection pooling issues on Windows
        self._engine = create_engine(self.database_url, poolclass=NullPool)
        try:
            SQLModel.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise StoreError("create_tables", str(e)) from e
        logger.info("store_init", database_url=self.database_url)

    # ==================== Chef operations ====================

    async def list_active_chefs(self) -> list[Chef]:
        return await self.chefs.list_active_chefs()

    async def get_chef_with_records(self, chef_id: str) -> ChefRecords:
        return await self.chefs.get_chef_with_records(chef_id)

    async def update_chef_score_and_rank(self, chef_id: str, total_score: float, rank: int) -> None:
        await self.chefs.update_chef_score_and_rank(chef_id, total_score, rank)

    async def update_scores_and_ranks(self, ranked: Sequence[ScoredChef]) -> None:
        await self.chefs.update_scores_and_ranks(ranked)

    # ==================== Weight operations ====================

    async def list_categories(self) -> list[tuple[str, float]]:
        return await self.weights.list_categories()

    # ==================== Snapshot operations ====================

    async def find_snapshot_by_month(self, month: str) -> MonthlySnapshot | None:
        return await self.snapshots.find_snapshot_by_month(month)

    async def find_latest_snapshot_before(self, month: str) -> SnapshotWithEntries | None:
        return await self.snapshots.find_latest_snapshot_before(month)

    async def upsert_snapshot(self, month: str, notes: str | None = None) -> str:
        return await self.snapshots.upsert_snapshot(month, notes)

    async def delete_snapshot_entries(self, snapshot_id: str) -> int:
        return await self.snapshots.delete_snapshot_entries(snapshot_id)

    async def create_snapshot_entry(
        self,
        snapshot_id: str,
        chef_id: str,
        rank: int,
        total_score: float,
        breakdown: str,
        delta: int | None,
    ) -> None:
        await self.snapshots.create_snapshot_entry(
            snapshot_id, chef_id, rank, total_score, breakdown, delta
        )

    # ==================== Lifecycle ====================

    async def close(self) -> None:
        """Dispose of the database engine."""
        self.close_sync()

    def close_sync(self) -> None:
        """Synchronously dispose of the database engine."""
        if self._engine:
            self._engine.dispose()
            self._engine = None

        gc.collect()
