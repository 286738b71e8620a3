"""Tests for rank assignment."""

from chef_rankings.scoring import ScoreBreakdown, ScoredChef, assign_ranks


def scored(chef_id: str, total: float) -> ScoredChef:
    return ScoredChef(chef_id=chef_id, total_score=total, breakdown=ScoreBreakdown())


class TestAssignRanks:
    """Tests for dense 1..N ranking."""

    def test_orders_by_score_descending(self):
        ranked = assign_ranks([scored("a", 10.0), scored("b", 50.0), scored("c", 30.0)])
        assert [(s.chef_id, s.rank) for s in ranked] == [("b", 1), ("c", 2), ("a", 3)]

    def test_ties_get_distinct_consecutive_ranks(self):
        """Test equal scores never share a rank."""
        ranked = assign_ranks([scored("b", 20.0), scored("a", 20.0), scored("c", 20.0)])
        assert [s.rank for s in ranked] == [1, 2, 3]

    def test_ties_broken_by_id(self):
        """Test tie order does not depend on input order."""
        first = assign_ranks([scored("b", 20.0), scored("a", 20.0)])
        second = assign_ranks([scored("a", 20.0), scored("b", 20.0)])
        assert [s.chef_id for s in first] == ["a", "b"]
        assert [s.chef_id for s in second] == ["a", "b"]

    def test_empty(self):
        assert assign_ranks([]) == []

    def test_preserves_scores(self):
        ranked = assign_ranks([scored("a", 12.3)])
        assert ranked[0].total_score == 12.3
        assert ranked[0].rank == 1
