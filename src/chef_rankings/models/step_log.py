import uuid
from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


class UpdateStepLog(SQLModel, table=True):
    """Outcome of one batch step run (recalculation, snapshot publish)."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    step_name: str = Field(index=True)  # "score_recalculation", "publish_snapshot"
    status: str  # "success" or "error"
    result_summary: str | None = None
    items_affected: int | None = None
    run_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
