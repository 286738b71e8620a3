"""Database persistence for monthly snapshots and their entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, func
from sqlmodel import Session, col, select

from chef_rankings.models import MonthlySnapshot, SnapshotEntry

from .repository import AsyncRepository

if TYPE_CHECKING:
    from sqlalchemy import Engine


@dataclass
class SnapshotWithEntries:
    """A snapshot row together with its entries ordered by rank."""

    snapshot: MonthlySnapshot
    entries: list[SnapshotEntry] = field(default_factory=list)

    def rank_map(self) -> dict[str, int]:
        """Map chef id to the rank it held in this snapshot."""
        return {entry.chef_id: entry.rank for entry in self.entries}


def _load_entries(session: Session, snapshot_id: str) -> list[SnapshotEntry]:
    statement = (
        select(SnapshotEntry)
        .where(SnapshotEntry.snapshot_id == snapshot_id)
        .order_by(col(SnapshotEntry.rank))
    )
    return list(session.exec(statement).all())


class SnapshotRepository(AsyncRepository):
    """Persist and query monthly snapshots."""

    def __init__(self, engine: Engine) -> None:
        super().__init__(engine)

    async def find_snapshot_by_month(self, month: str) -> MonthlySnapshot | None:
        def _get(session: Session) -> MonthlySnapshot | None:
            statement = select(MonthlySnapshot).where(MonthlySnapshot.month == month)
            return session.exec(statement).first()

        return await self._run_session(_get, "find_snapshot_by_month")

    async def get_snapshot_with_entries(self, month: str) -> SnapshotWithEntries | None:
        def _get(session: Session) -> SnapshotWithEntries | None:
            statement = select(MonthlySnapshot).where(MonthlySnapshot.month == month)
            snapshot = session.exec(statement).first()
            if snapshot is None:
                return None
            return SnapshotWithEntries(snapshot, _load_entries(session, snapshot.id))

        return await self._run_session(_get, "get_snapshot_with_entries")

    async def find_latest_snapshot_before(self, month: str) -> SnapshotWithEntries | None:
        """Get the most recent snapshot whose month sorts strictly before ``month``."""

        def _get(session: Session) -> SnapshotWithEntries | None:
            statement = (
                select(MonthlySnapshot)
                .where(col(MonthlySnapshot.month) < month)
                .order_by(col(MonthlySnapshot.month).desc())
            )
            snapshot = session.exec(statement).first()
            if snapshot is None:
                return None
            return SnapshotWithEntries(snapshot, _load_entries(session, snapshot.id))

        return await self._run_session(_get, "find_latest_snapshot_before")

    async def find_latest_snapshot(self) -> MonthlySnapshot | None:
        def _get(session: Session) -> MonthlySnapshot | None:
            statement = select(MonthlySnapshot).order_by(col(MonthlySnapshot.month).desc())
            return session.exec(statement).first()

        return await self._run_session(_get, "find_latest_snapshot")

    async def upsert_snapshot(self, month: str, notes: str | None = None) -> str:
        """Create the snapshot row for ``month`` or refresh its publish time.

        Notes are only overwritten when provided.

        Returns:
            The snapshot id.
        """

        def _save(session: Session) -> str:
            now = datetime.now(UTC)
            statement = select(MonthlySnapshot).where(MonthlySnapshot.month == month)
            snapshot = session.exec(statement).first()
            if snapshot is None:
                snapshot = MonthlySnapshot(month=month, notes=notes, published_at=now)
            else:
                snapshot.published_at = now
                if notes is not None:
                    snapshot.notes = notes
            snapshot_id = snapshot.id
            session.add(snapshot)
            session.commit()
            return snapshot_id

        return await self._run_session(_save, "upsert_snapshot")

    async def delete_snapshot_entries(self, snapshot_id: str) -> int:
        """Remove every entry of a snapshot. Returns the number of rows deleted."""

        def _delete(session: Session) -> int:
            result = session.execute(
                delete(SnapshotEntry).where(col(SnapshotEntry.snapshot_id) == snapshot_id)
            )
            session.commit()
            return result.rowcount or 0

        return await self._run_session(_delete, "delete_snapshot_entries")

    async def create_snapshot_entry(
        self,
        snapshot_id: str,
        chef_id: str,
        rank: int,
        total_score: float,
        breakdown: str,
        delta: int | None,
    ) -> None:
        def _save(session: Session) -> None:
            session.add(
                SnapshotEntry(
                    snapshot_id=snapshot_id,
                    chef_id=chef_id,
                    rank=rank,
                    total_score=total_score,
                    breakdown=breakdown,
                    delta=delta,
                )
            )
            session.commit()

        await self._run_session(_save, "create_snapshot_entry")

    async def list_snapshots(self) -> list[tuple[MonthlySnapshot, int]]:
        """Get all snapshots, newest month first, with their entry counts."""

        def _get(session: Session) -> list[tuple[MonthlySnapshot, int]]:
            snapshots = session.exec(
                select(MonthlySnapshot).order_by(col(MonthlySnapshot.month).desc())
            ).all()
            counts = dict(
                session.exec(
                    select(SnapshotEntry.snapshot_id, func.count()).group_by(
                        col(SnapshotEntry.snapshot_id)
                    )
                ).all()
            )
            return [(s, counts.get(s.id, 0)) for s in snapshots]

        return await self._run_session(_get, "list_snapshots")

    async def entries_for_chef(self, chef_id: str) -> list[tuple[str, SnapshotEntry]]:
        """Get a chef's ``(month, entry)`` history, oldest month first."""

        def _get(session: Session) -> list[tuple[str, SnapshotEntry]]:
            statement = (
                select(MonthlySnapshot.month, SnapshotEntry)
                .where(col(MonthlySnapshot.id) == col(SnapshotEntry.snapshot_id))
                .where(SnapshotEntry.chef_id == chef_id)
                .order_by(col(MonthlySnapshot.month))
            )
            return [(month, entry) for month, entry in session.exec(statement).all()]

        return await self._run_session(_get, "entries_for_chef")
