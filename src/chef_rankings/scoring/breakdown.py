"""Breakdown and total score calculations.

Both functions are pure: identical records, weights and ``now`` always give
identical output.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime

from chef_rankings.core.config import DEFAULT_WINDOW_YEARS
from chef_rankings.scoring.records import (
    AccoladeRecord,
    AccoladeType,
    CareerRecord,
    ChefRecords,
    PeerRecord,
    PeerStandingType,
    SignalRecord,
)
from chef_rankings.scoring.weights import ScoreBreakdown, ScoringWeights

MAX_SCORE = 100.0

# Best single Michelin entry wins; unknown star counts score as one star.
MICHELIN_STAR_SCORES = {3: 100.0, 2: 70.0}
MICHELIN_DEFAULT_SCORE = 40.0
ACCOLADE_TYPE_SCORES = {
    AccoladeType.JAMES_BEARD: 80.0,
    AccoladeType.WORLDS_50_BEST: 90.0,
    AccoladeType.BOCUSE_DOR: 85.0,
}
MULTI_ACCOLADE_BONUS = 5.0
MULTI_ACCOLADE_BONUS_CAP = 20.0
OTHER_ACCOLADE_SCORE = 30.0
OTHER_ACCOLADE_FACTOR = 0.3

SENIOR_ROLE_PATTERN = re.compile(
    r"chef.*owner|executive|head chef|chef de cuisine", re.IGNORECASE
)

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")
_ANY_INT = re.compile(r"([0-9]+)")


def round1(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def _clamp(value: float) -> float:
    return max(0.0, min(MAX_SCORE, value))


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps come back from the database; they are stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _years_before(moment: datetime, years: int) -> datetime:
    try:
        return moment.replace(year=moment.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return moment.replace(year=moment.year - years, day=28)


@dataclass(frozen=True)
class ScoringWindow:
    """Rolling window boundaries used to filter records.

    Attributes:
        cutoff_year: Oldest calendar year that still counts.
        cutoff_date: Oldest creation timestamp that still counts.
    """

    cutoff_year: int
    cutoff_date: datetime

    @classmethod
    def ending_at(
        cls, now: datetime | None = None, years: int = DEFAULT_WINDOW_YEARS
    ) -> ScoringWindow:
        now = _as_utc(now) if now is not None else datetime.now(UTC)
        return cls(cutoff_year=now.year - years, cutoff_date=_years_before(now, years))

    def is_recent(self, created_at: datetime) -> bool:
        return _as_utc(created_at) >= self.cutoff_date

    def keeps_accolade(self, accolade: AccoladeRecord) -> bool:
        if accolade.year:
            return accolade.year >= self.cutoff_year
        return self.is_recent(accolade.created_at)

    def keeps_career_entry(self, entry: CareerRecord) -> bool:
        # A current role never ages out.
        return (
            entry.is_current
            or bool(entry.start_year and entry.start_year >= self.cutoff_year)
            or bool(entry.end_year and entry.end_year >= self.cutoff_year)
            or self.is_recent(entry.created_at)
        )

    def filter(self, records: ChefRecords) -> ChefRecords:
        """Return a copy of ``records`` with out-of-window entries removed."""
        return ChefRecords(
            chef_id=records.chef_id,
            accolades=tuple(a for a in records.accolades if self.keeps_accolade(a)),
            career_entries=tuple(
                c for c in records.career_entries if self.keeps_career_entry(c)
            ),
            public_signals=tuple(
                s for s in records.public_signals if self.is_recent(s.created_at)
            ),
            peer_standings=tuple(
                p for p in records.peer_standings if self.is_recent(p.created_at)
            ),
            years_experience=records.years_experience,
        )


def parse_star_count(detail: str | None) -> int:
    """Extract the star count from a Michelin accolade detail.

    Uses the leading integer ("3 stars", sign kept so "-3" stays negative),
    then any integer in the text ("Michelin 2 stars"), and defaults to one
    star. Counts other than 2 or 3 score as one star.
    """
    if not detail:
        return 1
    match = _LEADING_INT.match(detail) or _ANY_INT.search(detail)
    return int(match.group(1)) if match else 1


def score_michelin_stars(accolades: Sequence[AccoladeRecord]) -> float:
    best = 0.0
    for accolade in accolades:
        if accolade.type != AccoladeType.MICHELIN_STAR:
            continue
        stars = parse_star_count(accolade.detail)
        best = max(best, MICHELIN_STAR_SCORES.get(stars, MICHELIN_DEFAULT_SCORE))
    return best


def score_formal_accolades(accolades: Sequence[AccoladeRecord]) -> float:
    types = {a.type for a in accolades}
    best = max(
        [score_michelin_stars(accolades)]
        + [score for kind, score in ACCOLADE_TYPE_SCORES.items() if kind in types]
    )
    count = len(accolades)
    bonus = min(MULTI_ACCOLADE_BONUS_CAP, (count - 1) * MULTI_ACCOLADE_BONUS) if count > 1 else 0
    other = OTHER_ACCOLADE_SCORE * OTHER_ACCOLADE_FACTOR if AccoladeType.OTHER in types else 0
    return _clamp(best + bonus + other)


def score_career_track(entries: Sequence[CareerRecord], years_experience: int | None) -> float:
    year_score = min(40, (years_experience or 0) * 2)
    position_score = min(30, len(entries) * 6)
    has_senior_role = any(SENIOR_ROLE_PATTERN.search(e.role or "") for e in entries)
    role_score = 30 if has_senior_role else 15
    return _clamp(year_score + position_score + role_score)


def score_public_signals(signals: Sequence[SignalRecord]) -> float:
    total_value = sum(s.value or 0 for s in signals)
    return _clamp(len(signals) * 15 + min(50, total_value / 10000))


def score_peer_standing(peers: Sequence[PeerRecord]) -> float:
    def count(kind: PeerStandingType) -> int:
        return sum(1 for p in peers if p.type == kind)

    # Bonus types also count toward the base total.
    return _clamp(
        len(peers) * 10
        + count(PeerStandingType.MENTORED) * 15
        + count(PeerStandingType.COLLABORATION) * 10
        + count(PeerStandingType.ENDORSEMENT) * 12
    )


def calculate_breakdown(
    records: ChefRecords,
    now: datetime | None = None,
    window_years: int = DEFAULT_WINDOW_YEARS,
) -> ScoreBreakdown:
    """Compute the four category scores for one chef.

    Args:
        records: The chef's full record set.
        now: End of the rolling window. Defaults to the current UTC time.
        window_years: Length of the rolling window.

    Returns:
        ScoreBreakdown with each category clamped to [0, 100] and rounded to
        one decimal.
    """
    recent = ScoringWindow.ending_at(now, window_years).filter(records)
    return ScoreBreakdown(
        formal_accolades=round1(score_formal_accolades(recent.accolades)),
        career_track=round1(score_career_track(recent.career_entries, recent.years_experience)),
        public_signals=round1(score_public_signals(recent.public_signals)),
        peer_standing=round1(score_peer_standing(recent.peer_standings)),
    )


def calculate_total_score(breakdown: ScoreBreakdown, weights: ScoringWeights) -> float:
    """Weighted sum of the breakdown, rounded to one decimal.

    No clamping is applied; weights summing above 1.0 can push the total
    past 100.
    """
    total = (
        breakdown.formal_accolades * weights.formal_accolades
        + breakdown.career_track * weights.career_track
        + breakdown.public_signals * weights.public_signals
        + breakdown.peer_standing * weights.peer_standing
    )
    return round1(total)
