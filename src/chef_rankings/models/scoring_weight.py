import uuid
from datetime import UTC, datetime

from sqlalchemy import Double
from sqlmodel import Field, SQLModel


class ScoringWeight(SQLModel, table=True):
    """Stored weight for one scoring category."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    category: str = Field(unique=True, index=True)
    weight: float = Field(sa_type=Double)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
