"""Plain record shapes consumed by the breakdown calculator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AccoladeType(StrEnum):
    MICHELIN_STAR = "MICHELIN_STAR"
    JAMES_BEARD = "JAMES_BEARD"
    WORLDS_50_BEST = "WORLDS_50_BEST"
    BOCUSE_DOR = "BOCUSE_DOR"
    OTHER = "OTHER"


class PeerStandingType(StrEnum):
    """Peer standing types that carry a scoring bonus.

    Other free-form types are accepted and only count toward the base total.
    """

    MENTORED = "MENTORED"
    MENTORED_BY = "MENTORED_BY"
    COLLABORATION = "COLLABORATION"
    ENDORSEMENT = "ENDORSEMENT"


@dataclass(frozen=True)
class AccoladeRecord:
    type: str
    detail: str | None = None
    year: int | None = None
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class CareerRecord:
    role: str
    is_current: bool = False
    start_year: int | None = None
    end_year: int | None = None
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class SignalRecord:
    platform: str
    value: float | None = None
    metric: str | None = None
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class PeerRecord:
    type: str
    detail: str | None = None
    related_chef: str | None = None
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class ChefRecords:
    """Everything the breakdown calculator needs to score one chef.

    Attributes:
        chef_id: Identifier of the chef the records belong to.
        accolades: Formal awards.
        career_entries: Positions held.
        public_signals: Popularity metrics.
        peer_standings: Relationships with other chefs.
        years_experience: Total years in the industry; None counts as zero.
    """

    chef_id: str = ""
    accolades: tuple[AccoladeRecord, ...] = ()
    career_entries: tuple[CareerRecord, ...] = ()
    public_signals: tuple[SignalRecord, ...] = ()
    peer_standings: tuple[PeerRecord, ...] = ()
    years_experience: int | None = None
