"""Monthly ranking snapshots."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Double, UniqueConstraint
from sqlmodel import Field, SQLModel


class MonthlySnapshot(SQLModel, table=True):
    """A published ranking for one ``YYYY-MM`` month."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    month: str = Field(unique=True, index=True)
    published_at: datetime | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class SnapshotEntry(SQLModel, table=True):
    """One chef's rank, score and breakdown inside a snapshot.

    ``breakdown`` holds the serialized ScoreBreakdown JSON. ``delta`` is
    ``previous_rank - rank`` and is null when the chef was absent from the
    preceding snapshot.
    """

    __table_args__ = (UniqueConstraint("snapshot_id", "chef_id"),)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    snapshot_id: str = Field(index=True)
    chef_id: str = Field(index=True)
    rank: int
    total_score: float = Field(sa_type=Double)
    breakdown: str | None = None
    delta: int | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
