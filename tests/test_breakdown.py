"""Tests for breakdown and total score calculations."""

from datetime import UTC, datetime

import pytest

from chef_rankings.scoring import (
    DEFAULT_WEIGHTS,
    AccoladeRecord,
    CareerRecord,
    ChefRecords,
    PeerRecord,
    ScoreBreakdown,
    ScoringWeights,
    ScoringWindow,
    SignalRecord,
    calculate_breakdown,
    calculate_total_score,
    parse_star_count,
    round1,
)

NOW = datetime(2026, 6, 15, 12, 0, tzinfo=UTC)
RECENT = datetime(2025, 1, 1, tzinfo=UTC)
ANCIENT = datetime(2010, 1, 1, tzinfo=UTC)


def michelin(detail: str | None, year: int | None = 2024) -> AccoladeRecord:
    return AccoladeRecord(type="MICHELIN_STAR", detail=detail, year=year, created_at=RECENT)


def accolade(kind: str, year: int | None = 2024) -> AccoladeRecord:
    return AccoladeRecord(type=kind, year=year, created_at=RECENT)


def breakdown_of(**kwargs) -> ScoreBreakdown:
    return calculate_breakdown(ChefRecords(**kwargs), now=NOW)


class TestFormalAccolades:
    """Tests for the formal accolades category."""

    def test_no_accolades(self):
        """Test a chef without accolades scores zero."""
        assert breakdown_of().formal_accolades == 0.0

    @pytest.mark.parametrize(
        ("detail", "expected"),
        [
            ("3", 100.0),
            ("2", 70.0),
            ("1", 40.0),
            (None, 40.0),
            ("3 stars", 100.0),
            ("-3", 40.0),
        ],
    )
    def test_michelin_star_levels(self, detail, expected):
        """Test star counts map to 100 / 70 / 40."""
        assert breakdown_of(accolades=(michelin(detail),)).formal_accolades == expected

    def test_best_michelin_entry_wins(self):
        """Test the highest star entry sets the base, plus multiplicity bonus."""
        result = breakdown_of(accolades=(michelin("1"), michelin("3")))
        assert result.formal_accolades == 100.0

    @pytest.mark.parametrize(
        ("kind", "expected"),
        [("JAMES_BEARD", 80.0), ("WORLDS_50_BEST", 90.0), ("BOCUSE_DOR", 85.0)],
    )
    def test_accolade_type_scores(self, kind, expected):
        """Test single-accolade base scores per type."""
        assert breakdown_of(accolades=(accolade(kind),)).formal_accolades == expected

    def test_multiplicity_bonus(self):
        """Test each extra accolade adds 5 points."""
        result = breakdown_of(accolades=(michelin("1"), michelin("1"), michelin("1")))
        assert result.formal_accolades == 50.0

    def test_multiplicity_bonus_capped(self):
        """Test the multiplicity bonus stops at 20."""
        result = breakdown_of(accolades=tuple(michelin("1") for _ in range(10)))
        assert result.formal_accolades == 60.0

    def test_other_accolade_adds_nine(self):
        """Test an OTHER accolade alone scores 0.3 * 30."""
        assert breakdown_of(accolades=(accolade("OTHER"),)).formal_accolades == 9.0

    def test_other_with_michelin(self):
        """Test OTHER bonus stacks on base and multiplicity bonus."""
        result = breakdown_of(accolades=(michelin("2"), accolade("OTHER")))
        assert result.formal_accolades == 70.0 + 5.0 + 9.0

    def test_clamped_to_100(self):
        """Test the category never exceeds 100."""
        records = (michelin("3"), accolade("WORLDS_50_BEST"), accolade("OTHER"))
        assert breakdown_of(accolades=records).formal_accolades == 100.0

    def test_adding_three_star_raises_score(self):
        """Test adding a 3-star accolade takes a chef from 0 to 100."""
        before = breakdown_of()
        after = breakdown_of(accolades=(michelin("3"),))
        assert before.formal_accolades == 0.0
        assert after.formal_accolades == 100.0


class TestParseStarCount:
    """Tests for Michelin detail parsing."""

    def test_leading_integer(self):
        assert parse_star_count("2 Michelin stars") == 2

    def test_embedded_integer(self):
        assert parse_star_count("Michelin 3 stars") == 3

    def test_missing_detail_defaults_to_one(self):
        assert parse_star_count(None) == 1
        assert parse_star_count("") == 1

    def test_unparseable_defaults_to_one(self):
        assert parse_star_count("Three stars") == 1

    def test_negative_leading_integer_keeps_sign(self):
        assert parse_star_count("-3") == -3


class TestCareerTrack:
    """Tests for the career track category."""

    def test_no_career_defaults(self):
        """Test missing experience and roles give the base role score."""
        assert breakdown_of().career_track == 15.0

    def test_executive_chef_scenario(self):
        """Test 10 years plus one current executive role scores 56."""
        result = breakdown_of(
            years_experience=10,
            career_entries=(CareerRecord(role="Executive Chef", is_current=True, created_at=RECENT),),
        )
        assert result.career_track == 56.0

    @pytest.mark.parametrize(
        "role",
        ["Chef-Owner", "chef and owner", "Head Chef", "Chef de Cuisine", "EXECUTIVE sous chef"],
    )
    def test_senior_roles(self, role):
        """Test senior role patterns are matched case-insensitively."""
        result = breakdown_of(career_entries=(CareerRecord(role=role, created_at=RECENT),))
        assert result.career_track == 6.0 + 30.0

    def test_junior_role(self):
        """Test non-senior roles get the lower role score."""
        result = breakdown_of(career_entries=(CareerRecord(role="Line Cook", created_at=RECENT),))
        assert result.career_track == 6.0 + 15.0

    def test_year_and_position_caps(self):
        """Test years cap at 40 and positions at 30."""
        entries = tuple(CareerRecord(role="Cook", created_at=RECENT) for _ in range(8))
        result = breakdown_of(years_experience=35, career_entries=entries)
        assert result.career_track == 40.0 + 30.0 + 15.0

    def test_clamped_to_100(self):
        """Test the category never exceeds 100."""
        entries = tuple(CareerRecord(role="Executive Chef", created_at=RECENT) for _ in range(8))
        result = breakdown_of(years_experience=40, career_entries=entries)
        assert result.career_track == 100.0


class TestPublicSignals:
    """Tests for the public signals category."""

    def test_count_and_value(self):
        """Test 15 points per signal plus value / 10000."""
        signals = (SignalRecord(platform="INSTAGRAM", value=120_000, created_at=RECENT),)
        assert breakdown_of(public_signals=signals).public_signals == 15.0 + 12.0

    def test_value_component_capped(self):
        """Test the value component stops at 50."""
        signals = (SignalRecord(platform="INSTAGRAM", value=5_000_000, created_at=RECENT),)
        assert breakdown_of(public_signals=signals).public_signals == 65.0

    def test_missing_value_counts_as_zero(self):
        signals = (SignalRecord(platform="TIKTOK", created_at=RECENT),)
        assert breakdown_of(public_signals=signals).public_signals == 15.0

    def test_rounded_to_one_decimal(self):
        signals = (SignalRecord(platform="INSTAGRAM", value=12_345, created_at=RECENT),)
        assert breakdown_of(public_signals=signals).public_signals == 16.2


class TestPeerStanding:
    """Tests for the peer standing category."""

    def test_bonus_types_also_count_in_base(self):
        """Test MENTORED contributes both base and bonus points."""
        peers = (PeerRecord(type="MENTORED", created_at=RECENT),)
        assert breakdown_of(peer_standings=peers).peer_standing == 25.0

    def test_each_type_bonus(self):
        peers = (
            PeerRecord(type="COLLABORATION", created_at=RECENT),
            PeerRecord(type="ENDORSEMENT", created_at=RECENT),
            PeerRecord(type="MENTORED_BY", created_at=RECENT),
            PeerRecord(type="RIVALRY", created_at=RECENT),
        )
        assert breakdown_of(peer_standings=peers).peer_standing == 40.0 + 10.0 + 12.0

    def test_clamped_to_100(self):
        peers = tuple(PeerRecord(type="MENTORED", created_at=RECENT) for _ in range(5))
        assert breakdown_of(peer_standings=peers).peer_standing == 100.0


class TestRollingWindow:
    """Tests for the 10-year rolling window."""

    def test_accolade_year_boundary(self):
        """Test an accolade from exactly ten years ago counts, eleven does not."""
        inside = breakdown_of(accolades=(michelin("3", year=NOW.year - 10),))
        outside = breakdown_of(accolades=(michelin("3", year=NOW.year - 11),))
        assert inside.formal_accolades == 100.0
        assert outside.formal_accolades == 0.0

    def test_accolade_year_beats_created_at(self):
        """Test a set year decides even when the row is new."""
        old = AccoladeRecord(type="JAMES_BEARD", year=NOW.year - 15, created_at=NOW)
        assert breakdown_of(accolades=(old,)).formal_accolades == 0.0

    def test_accolade_without_year_uses_created_at(self):
        recent = AccoladeRecord(type="JAMES_BEARD", created_at=RECENT)
        stale = AccoladeRecord(type="JAMES_BEARD", created_at=ANCIENT)
        assert breakdown_of(accolades=(recent,)).formal_accolades == 80.0
        assert breakdown_of(accolades=(stale,)).formal_accolades == 0.0

    def test_current_role_never_excluded(self):
        """Test a current role counts regardless of age."""
        entry = CareerRecord(role="Head Chef", is_current=True, start_year=1990, created_at=ANCIENT)
        assert breakdown_of(career_entries=(entry,)).career_track == 36.0

    def test_old_career_entry_excluded(self):
        entry = CareerRecord(role="Head Chef", start_year=1990, end_year=1995, created_at=ANCIENT)
        assert breakdown_of(career_entries=(entry,)).career_track == 15.0

    def test_career_end_year_in_window(self):
        entry = CareerRecord(
            role="Sous Chef", start_year=2000, end_year=NOW.year - 10, created_at=ANCIENT
        )
        assert breakdown_of(career_entries=(entry,)).career_track == 21.0

    def test_signals_and_peers_filtered_by_created_at(self):
        result = breakdown_of(
            public_signals=(SignalRecord(platform="INSTAGRAM", created_at=ANCIENT),),
            peer_standings=(PeerRecord(type="ENDORSEMENT", created_at=ANCIENT),),
        )
        assert result.public_signals == 0.0
        assert result.peer_standing == 0.0

    def test_naive_timestamps_treated_as_utc(self):
        naive = datetime(2025, 1, 1)
        signals = (SignalRecord(platform="INSTAGRAM", created_at=naive),)
        assert breakdown_of(public_signals=signals).public_signals == 15.0

    def test_window_cutoffs(self):
        window = ScoringWindow.ending_at(NOW, years=10)
        assert window.cutoff_year == 2016
        assert window.cutoff_date == datetime(2016, 6, 15, 12, 0, tzinfo=UTC)

    def test_leap_day_cutoff(self):
        window = ScoringWindow.ending_at(datetime(2024, 2, 29, tzinfo=UTC), years=10)
        assert window.cutoff_date == datetime(2014, 2, 28, tzinfo=UTC)


class TestBreakdownProperties:
    """Tests for purity and bounds of the breakdown calculator."""

    @pytest.fixture
    def records(self):
        return ChefRecords(
            accolades=(michelin("2"), accolade("JAMES_BEARD"), accolade("OTHER")),
            career_entries=(CareerRecord(role="Chef de Cuisine", created_at=RECENT),),
            public_signals=(SignalRecord(platform="INSTAGRAM", value=250_000, created_at=RECENT),),
            peer_standings=(PeerRecord(type="COLLABORATION", created_at=RECENT),),
            years_experience=12,
        )

    def test_deterministic(self, records):
        """Test repeated calls return identical output."""
        first = calculate_breakdown(records, now=NOW)
        second = calculate_breakdown(records, now=NOW)
        assert first == second
        assert calculate_total_score(first, DEFAULT_WEIGHTS) == calculate_total_score(
            second, DEFAULT_WEIGHTS
        )

    def test_all_categories_in_range(self, records):
        for value in calculate_breakdown(records, now=NOW).as_dict().values():
            assert 0.0 <= value <= 100.0


class TestTotalScore:
    """Tests for the weighted total."""

    def test_end_to_end_default_weights(self):
        """Test the executive chef scenario totals 14.0."""
        breakdown = breakdown_of(
            years_experience=10,
            career_entries=(CareerRecord(role="Executive Chef", is_current=True, created_at=RECENT),),
        )
        assert breakdown.as_dict() == {
            "formalAccolades": 0.0,
            "careerTrack": 56.0,
            "publicSignals": 0.0,
            "peerStanding": 0.0,
        }
        assert calculate_total_score(breakdown, DEFAULT_WEIGHTS) == 14.0

    def test_weighted_sum(self):
        breakdown = ScoreBreakdown(
            formal_accolades=100, career_track=56, public_signals=27, peer_standing=25
        )
        # 35 + 14 + 4.05 + 6.25
        assert calculate_total_score(breakdown, DEFAULT_WEIGHTS) == 59.3

    def test_not_clamped_when_weights_exceed_one(self):
        """Test totals may pass 100 when weights sum above 1."""
        breakdown = ScoreBreakdown(
            formal_accolades=100, career_track=100, public_signals=100, peer_standing=100
        )
        heavy = ScoringWeights(
            formal_accolades=1, career_track=1, public_signals=0, peer_standing=0
        )
        assert calculate_total_score(breakdown, heavy) == 200.0


class TestRound1:
    """Tests for half-up rounding."""

    def test_half_rounds_up(self):
        assert round1(0.25) == 0.3
        assert round1(14.05) == 14.1

    def test_plain_values(self):
        assert round1(56.0) == 56.0
        assert round1(16.2345) == 16.2
