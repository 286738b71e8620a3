"""Database persistence for scoring weights."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlmodel import Session, col, select

from chef_rankings.models import ScoringWeight

from .repository import AsyncRepository

if TYPE_CHECKING:
    from sqlalchemy import Engine


class WeightRepository(AsyncRepository):
    """Persist and query per-category scoring weights."""

    def __init__(self, engine: Engine) -> None:
        super().__init__(engine)

    async def list_categories(self) -> list[tuple[str, float]]:
        """Get stored ``(category, weight)`` pairs ordered by category."""

        def _get(session: Session) -> list[tuple[str, float]]:
            statement = select(ScoringWeight).order_by(col(ScoringWeight.category))
            return [(row.category, row.weight) for row in session.exec(statement).all()]

        return await self._run_session(_get, "list_categories")

    async def upsert_weights(self, weights: Mapping[str, float]) -> None:
        """Create or update the rows for the given categories only."""

        def _save(session: Session) -> None:
            now = datetime.now(UTC)
            for category, weight in weights.items():
                statement = select(ScoringWeight).where(ScoringWeight.category == category)
                existing = session.exec(statement).first()
                if existing:
                    existing.weight = weight
                    existing.updated_at = now
                    session.add(existing)
                else:
                    session.add(ScoringWeight(category=category, weight=weight, updated_at=now))
            session.commit()

        await self._run_session(_save, "upsert_weights")
