"""Chef profile and the raw records that feed its score."""

import json
import uuid
from datetime import UTC, datetime

from sqlalchemy import Double
from sqlmodel import Field, SQLModel


def _now() -> datetime:
    return datetime.now(UTC)


class Chef(SQLModel, table=True):
    """A ranked chef.

    ``total_score`` and ``rank`` are derived fields written only by the
    recalculation batch; archived chefs keep their last values.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    name: str
    slug: str = Field(unique=True, index=True)
    city: str | None = None
    country: str | None = None
    current_restaurant: str | None = None
    cuisine_specialties: str | None = None  # JSON-encoded list of strings
    years_experience: int | None = None
    photo_url: str | None = None
    bio: str | None = None
    is_archived: bool = False
    total_score: float = Field(default=0.0, sa_type=Double)
    rank: int | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @property
    def specialties(self) -> list[str]:
        return json.loads(self.cuisine_specialties) if self.cuisine_specialties else []


class Accolade(SQLModel, table=True):
    """A formal award (Michelin star, James Beard, ...)."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    chef_id: str = Field(index=True)
    type: str  # MICHELIN_STAR, JAMES_BEARD, WORLDS_50_BEST, BOCUSE_DOR, OTHER
    detail: str | None = None
    year: int | None = None
    source_url: str | None = None
    created_at: datetime = Field(default_factory=_now)


class CareerEntry(SQLModel, table=True):
    """A position held at a restaurant."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    chef_id: str = Field(index=True)
    role: str
    restaurant: str
    city: str | None = None
    start_year: int | None = None
    end_year: int | None = None
    is_current: bool = False
    source_url: str | None = None
    created_at: datetime = Field(default_factory=_now)


class PublicSignal(SQLModel, table=True):
    """A public popularity metric such as an Instagram follower count."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    chef_id: str = Field(index=True)
    platform: str
    metric: str | None = None
    value: float | None = Field(default=None, sa_type=Double)
    source_url: str | None = None
    created_at: datetime = Field(default_factory=_now)


class PeerStanding(SQLModel, table=True):
    """A relationship with another chef (mentorship, collaboration, endorsement)."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    chef_id: str = Field(index=True)
    type: str
    detail: str | None = None
    related_chef: str | None = None
    source_url: str | None = None
    created_at: datetime = Field(default_factory=_now)
