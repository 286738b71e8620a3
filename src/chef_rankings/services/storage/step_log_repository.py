"""Database persistence for batch step outcomes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlmodel import Session, col, select

from chef_rankings.models import UpdateStepLog

from .repository import AsyncRepository

if TYPE_CHECKING:
    from sqlalchemy import Engine


class StepLogRepository(AsyncRepository):
    """Record and query the outcome of recalculation and publish runs."""

    def __init__(self, engine: Engine) -> None:
        super().__init__(engine)

    async def record(
        self,
        step_name: str,
        status: str,
        result_summary: str | None = None,
        items_affected: int | None = None,
    ) -> None:
        def _save(session: Session) -> None:
            session.add(
                UpdateStepLog(
                    step_name=step_name,
                    status=status,
                    result_summary=result_summary,
                    items_affected=items_affected,
                )
            )
            session.commit()

        await self._run_session(_save, "record_step_log")

    async def latest_by_step(self) -> dict[str, UpdateStepLog]:
        """Get the most recent log row for each step name."""

        def _get(session: Session) -> dict[str, UpdateStepLog]:
            statement = select(UpdateStepLog).order_by(col(UpdateStepLog.run_at).desc())
            latest: dict[str, UpdateStepLog] = {}
            for log in session.exec(statement).all():
                latest.setdefault(log.step_name, log)
            return latest

        return await self._run_session(_get, "latest_step_logs")
