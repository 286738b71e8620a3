"""Database persistence for chefs and their scoring records."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, TypeVar

from sqlmodel import Session, col, select

from chef_rankings.core.errors import NotFoundError
from chef_rankings.models import Accolade, CareerEntry, Chef, PeerStanding, PublicSignal
from chef_rankings.scoring import (
    AccoladeRecord,
    CareerRecord,
    ChefRecords,
    PeerRecord,
    ScoredChef,
    SignalRecord,
)

from .repository import AsyncRepository

if TYPE_CHECKING:
    from sqlalchemy import Engine

T = TypeVar("T", Accolade, CareerEntry, PublicSignal, PeerStanding)


def _to_records(
    chef: Chef,
    accolades: Sequence[Accolade],
    career_entries: Sequence[CareerEntry],
    public_signals: Sequence[PublicSignal],
    peer_standings: Sequence[PeerStanding],
) -> ChefRecords:
    return ChefRecords(
        chef_id=chef.id,
        accolades=tuple(
            AccoladeRecord(type=a.type, detail=a.detail, year=a.year, created_at=a.created_at)
            for a in accolades
        ),
        career_entries=tuple(
            CareerRecord(
                role=c.role,
                is_current=c.is_current,
                start_year=c.start_year,
                end_year=c.end_year,
                created_at=c.created_at,
            )
            for c in career_entries
        ),
        public_signals=tuple(
            SignalRecord(
                platform=s.platform, value=s.value, metric=s.metric, created_at=s.created_at
            )
            for s in public_signals
        ),
        peer_standings=tuple(
            PeerRecord(
                type=p.type, detail=p.detail, related_chef=p.related_chef, created_at=p.created_at
            )
            for p in peer_standings
        ),
        years_experience=chef.years_experience,
    )


def _owned(session: Session, model: type[T], chef_id: str) -> list[T]:
    statement = (
        select(model)
        .where(model.chef_id == chef_id)
        .order_by(col(model.created_at), col(model.id))
    )
    return list(session.exec(statement).all())


class ChefRepository(AsyncRepository):
    """Persist and query chefs and the records their score is computed from."""

    def __init__(self, engine: Engine) -> None:
        super().__init__(engine)

    # ==================== Chef queries ====================

    async def list_active_chefs(self) -> list[Chef]:
        """Get all non-archived chefs ordered by id."""

        def _get(session: Session) -> list[Chef]:
            statement = (
                select(Chef).where(col(Chef.is_archived).is_(False)).order_by(col(Chef.id))
            )
            return list(session.exec(statement).all())

        return await self._run_session(_get, "list_active_chefs")

    async def list_active_chefs_by_rank(self) -> list[Chef]:
        """Get all non-archived chefs ordered by rank; unranked chefs last."""

        def _get(session: Session) -> list[Chef]:
            statement = select(Chef).where(col(Chef.is_archived).is_(False))
            chefs = list(session.exec(statement).all())
            return sorted(chefs, key=lambda c: (c.rank is None, c.rank or 0, c.id))

        return await self._run_session(_get, "list_active_chefs_by_rank")

    async def list_all_chefs(self) -> list[Chef]:
        def _get(session: Session) -> list[Chef]:
            return list(session.exec(select(Chef).order_by(col(Chef.id))).all())

        return await self._run_session(_get, "list_all_chefs")

    async def get_chef(self, chef_id: str) -> Chef:
        """Get a chef by id.

        Raises:
            NotFoundError: If no chef has this id.
        """

        def _get(session: Session) -> Chef | None:
            return session.get(Chef, chef_id)

        chef = await self._run_session(_get, "get_chef")
        if chef is None:
            raise NotFoundError("Chef", chef_id)
        return chef

    async def find_chef_by_slug(self, slug: str) -> Chef | None:
        def _get(session: Session) -> Chef | None:
            return session.exec(select(Chef).where(Chef.slug == slug)).first()

        return await self._run_session(_get, "find_chef_by_slug")

    async def find_chefs_by_slugs(self, slugs: Sequence[str]) -> list[Chef]:
        def _get(session: Session) -> list[Chef]:
            statement = select(Chef).where(col(Chef.slug).in_(list(slugs)))
            return list(session.exec(statement).all())

        return await self._run_session(_get, "find_chefs_by_slugs")

    async def get_chef_with_records(self, chef_id: str) -> ChefRecords:
        """Load a chef's full record set for scoring.

        Raises:
            NotFoundError: If no chef has this id.
        """

        def _get(session: Session) -> ChefRecords | None:
            chef = session.get(Chef, chef_id)
            if chef is None:
                return None
            return _to_records(
                chef,
                _owned(session, Accolade, chef_id),
                _owned(session, CareerEntry, chef_id),
                _owned(session, PublicSignal, chef_id),
                _owned(session, PeerStanding, chef_id),
            )

        records = await self._run_session(_get, "get_chef_with_records")
        if records is None:
            raise NotFoundError("Chef", chef_id)
        return records

    # ==================== Score writes ====================

    async def update_chef_score_and_rank(self, chef_id: str, total_score: float, rank: int) -> None:
        """Write one chef's derived score and rank."""

        def _save(session: Session) -> None:
            chef = session.get(Chef, chef_id)
            if chef is None:
                raise NotFoundError("Chef", chef_id)
            chef.total_score = total_score
            chef.rank = rank
            chef.updated_at = datetime.now(UTC)
            session.add(chef)
            session.commit()

        await self._run_session(_save, "update_chef_score_and_rank")

    async def update_scores_and_ranks(self, ranked: Sequence[ScoredChef]) -> None:
        """Write every chef's score and rank in a single transaction."""

        def _save(session: Session) -> None:
            now = datetime.now(UTC)
            for scored in ranked:
                chef = session.get(Chef, scored.chef_id)
                if chef is None:
                    raise NotFoundError("Chef", scored.chef_id)
                chef.total_score = scored.total_score
                chef.rank = scored.rank
                chef.updated_at = now
                session.add(chef)
            session.commit()

        await self._run_session(_save, "update_scores_and_ranks")

    # ==================== Record writes ====================

    async def create_chef(self, chef: Chef) -> Chef:
        def _save(session: Session) -> Chef:
            session.add(chef)
            session.commit()
            session.refresh(chef)
            return chef

        return await self._run_session(_save, "create_chef")

    async def archive_chef(self, chef_id: str) -> Chef:
        """Exclude a chef from ranking; its last score and rank stay frozen."""

        def _save(session: Session) -> Chef | None:
            chef = session.get(Chef, chef_id)
            if chef is None:
                return None
            chef.is_archived = True
            chef.updated_at = datetime.now(UTC)
            session.add(chef)
            session.commit()
            session.refresh(chef)
            return chef

        chef = await self._run_session(_save, "archive_chef")
        if chef is None:
            raise NotFoundError("Chef", chef_id)
        return chef

    async def add_accolade(self, accolade: Accolade) -> bool:
        """Insert an accolade unless (chef, type, detail, year) already exists.

        Returns:
            True if a row was inserted.
        """

        def _save(session: Session) -> bool:
            conditions = [
                Accolade.chef_id == accolade.chef_id,
                Accolade.type == accolade.type,
                col(Accolade.detail).is_(None)
                if accolade.detail is None
                else Accolade.detail == accolade.detail,
                col(Accolade.year).is_(None)
                if accolade.year is None
                else Accolade.year == accolade.year,
            ]
            if session.exec(select(Accolade).where(*conditions)).first() is not None:
                return False
            session.add(accolade)
            session.commit()
            return True

        return await self._run_session(_save, "add_accolade")

    async def add_career_entry(self, entry: CareerEntry) -> None:
        def _save(session: Session) -> None:
            session.add(entry)
            session.commit()

        await self._run_session(_save, "add_career_entry")

    async def upsert_public_signal(self, signal: PublicSignal) -> None:
        """Insert a signal or overwrite metric/value of the chef's row for that platform."""

        def _save(session: Session) -> None:
            statement = select(PublicSignal).where(
                PublicSignal.chef_id == signal.chef_id,
                PublicSignal.platform == signal.platform,
            )
            existing = session.exec(statement).first()
            if existing:
                existing.metric = signal.metric
                existing.value = signal.value
                existing.source_url = signal.source_url
                session.add(existing)
            else:
                session.add(signal)
            session.commit()

        await self._run_session(_save, "upsert_public_signal")

    async def add_peer_standing(self, standing: PeerStanding) -> None:
        def _save(session: Session) -> None:
            session.add(standing)
            session.commit()

        await self._run_session(_save, "add_peer_standing")
