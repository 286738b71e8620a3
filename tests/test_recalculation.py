"""Tests for the score recalculation batch."""

import pytest

from chef_rankings.core.config import RankingConfig, RankingsConfig
from chef_rankings.core.errors import NotFoundError, StoreError
from chef_rankings.scoring import ScoringWeights
from chef_rankings.services import ScoringService
from chef_rankings.services.storage import RankingStore
from factories import THIS_YEAR, add_chef


async def seed_roster(store):
    """Three chefs scoring 38.8, 8.8 and 3.8 under default weights."""
    star = await add_chef(
        store,
        "Anne Star",
        accolades=[{"type": "MICHELIN_STAR", "detail": "3", "year": THIS_YEAR - 1}],
    )
    veteran = await add_chef(store, "Carl Veteran", years_experience=10)
    newcomer = await add_chef(store, "Bea Newcomer")
    return star, veteran, newcomer


class TestRecalculateAll:
    """Tests for ScoringService.recalculate_all."""

    async def test_assigns_dense_ranks(self, config, store):
        """Test ranks are 1..N ordered by score."""
        star, veteran, newcomer = await seed_roster(store)
        service = ScoringService(config, store)

        ranked = await service.recalculate_all(await service.get_weights())

        assert [(r.chef_id, r.rank, r.total_score) for r in ranked] == [
            (star.id, 1, 38.8),
            (veteran.id, 2, 8.8),
            (newcomer.id, 3, 3.8),
        ]
        stored = {c.id: (c.rank, c.total_score) for c in await store.list_active_chefs()}
        assert stored == {star.id: (1, 38.8), veteran.id: (2, 8.8), newcomer.id: (3, 3.8)}

    async def test_idempotent(self, config, store):
        """Test a second run with unchanged data writes identical results."""
        await seed_roster(store)
        service = ScoringService(config, store)
        weights = await service.get_weights()

        await service.recalculate_all(weights)
        first = {c.id: (c.rank, c.total_score) for c in await store.list_active_chefs()}
        await service.recalculate_all(weights)
        second = {c.id: (c.rank, c.total_score) for c in await store.list_active_chefs()}

        assert first == second

    async def test_ties_ranked_by_id(self, config, store):
        """Test tied chefs still get distinct ranks, lowest id first."""
        chefs = [await add_chef(store, f"Chef {i}") for i in range(3)]
        service = ScoringService(config, store)

        ranked = await service.recalculate_all(await service.get_weights())

        assert [r.rank for r in ranked] == [1, 2, 3]
        assert [r.chef_id for r in ranked] == sorted(c.id for c in chefs)

    async def test_archived_chef_excluded_and_frozen(self, config, store):
        """Test archiving removes a chef from ranking but keeps its last values."""
        star, veteran, newcomer = await seed_roster(store)
        service = ScoringService(config, store)
        weights = await service.get_weights()
        await service.recalculate_all(weights)

        await store.chefs.archive_chef(star.id)
        ranked = await service.recalculate_all(weights)

        assert [(r.chef_id, r.rank) for r in ranked] == [(veteran.id, 1), (newcomer.id, 2)]
        archived = await store.chefs.get_chef(star.id)
        assert archived.is_archived is True
        assert archived.rank == 1
        assert archived.total_score == 38.8

    async def test_uses_given_weights(self, config, store):
        """Test the whole batch is scored under the weights passed in."""
        await seed_roster(store)
        service = ScoringService(config, store)
        accolades_only = ScoringWeights(
            formal_accolades=1.0, career_track=0, public_signals=0, peer_standing=0
        )

        ranked = await service.recalculate_all(accolades_only)

        assert [r.total_score for r in ranked] == [100.0, 0.0, 0.0]

    async def test_per_row_writes(self, tmp_path, store):
        """Test the non-transactional write path produces the same ranks."""
        await seed_roster(store)
        config = RankingsConfig(
            database_url=store.database_url,
            export_dir=str(tmp_path),
            ranking=RankingConfig(transactional_writes=False),
        )
        service = ScoringService(config, store)

        ranked = await service.recalculate_all(await service.get_weights())

        stored = {c.id: c.rank for c in await store.list_active_chefs()}
        assert stored == {r.chef_id: r.rank for r in ranked}
        assert sorted(stored.values()) == [1, 2, 3]

    async def test_empty_roster(self, config, store):
        service = ScoringService(config, store)
        assert await service.recalculate_all(await service.get_weights()) == []

    async def test_progress_callback(self, config, store):
        """Test progress is reported from 0 to total."""
        await seed_roster(store)
        service = ScoringService(config, store)
        calls = []

        await service.recalculate_all(
            await service.get_weights(), on_progress=lambda *args: calls.append(args)
        )

        assert calls[0] == (0, 3, "Calculating scores...")
        assert calls[-1] == (3, 3, "Done")


class FailingReadStore:
    """Store double whose record read fails on the second chef."""

    def __init__(self, store: RankingStore, fail_on: str) -> None:
        self._store = store
        self.fail_on = fail_on
        self.writes = 0

    async def list_active_chefs(self):
        return await self._store.list_active_chefs()

    async def get_chef_with_records(self, chef_id):
        if chef_id == self.fail_on:
            raise StoreError("get_chef_with_records", "connection lost")
        return await self._store.get_chef_with_records(chef_id)

    async def update_scores_and_ranks(self, ranked):
        self.writes += 1

    async def update_chef_score_and_rank(self, chef_id, total_score, rank):
        self.writes += 1


class FailingWriteStore:
    """Store double whose per-row rank write fails on the Nth call."""

    def __init__(self, store: RankingStore, fail_on_call: int) -> None:
        self._store = store
        self.fail_on_call = fail_on_call
        self.calls = 0

    def __getattr__(self, name):
        return getattr(self._store, name)

    async def update_chef_score_and_rank(self, chef_id, total_score, rank):
        self.calls += 1
        if self.calls == self.fail_on_call:
            raise StoreError("update_chef_score_and_rank", "disk full")
        await self._store.update_chef_score_and_rank(chef_id, total_score, rank)


class TestRecalculationFailures:
    """Tests for aborting the batch on store errors."""

    async def test_read_failure_writes_nothing(self, config, store):
        """Test a failed record read aborts before any rank is written."""
        _, veteran, _ = await seed_roster(store)
        failing = FailingReadStore(store, fail_on=veteran.id)
        service = ScoringService(config, failing)

        with pytest.raises(StoreError):
            await service.recalculate_all(ScoringWeights())

        assert failing.writes == 0
        assert all(c.rank is None for c in await store.list_active_chefs())

    async def test_write_failure_propagates_and_rerun_repairs(self, tmp_path, store):
        """Test a failed per-row write raises and the next run restores ranks 1..N."""
        star, veteran, newcomer = await seed_roster(store)
        config = RankingsConfig(
            database_url=store.database_url,
            export_dir=str(tmp_path),
            ranking=RankingConfig(transactional_writes=False),
        )
        weights = ScoringWeights()
        failing = ScoringService(config, FailingWriteStore(store, fail_on_call=2))

        with pytest.raises(StoreError):
            await failing.recalculate_all(weights)

        partial = {c.id: c.rank for c in await store.list_active_chefs()}
        assert partial == {star.id: 1, veteran.id: None, newcomer.id: None}

        await ScoringService(config, store).recalculate_all(weights)

        repaired = {c.id: c.rank for c in await store.list_active_chefs()}
        assert repaired == {star.id: 1, veteran.id: 2, newcomer.id: 3}


class TestScoreChef:
    """Tests for scoring a single chef."""

    async def test_does_not_write(self, config, store):
        star = await add_chef(
            store,
            "Solo Chef",
            years_experience=10,
            career=[{"role": "Executive Chef", "restaurant": "Solo", "is_current": True}],
        )
        service = ScoringService(config, store)

        total, breakdown = await service.score_chef(star.id)

        assert total == 14.0
        assert breakdown.career_track == 56.0
        assert (await store.chefs.get_chef(star.id)).rank is None

    async def test_unknown_chef(self, config, store):
        service = ScoringService(config, store)
        with pytest.raises(NotFoundError):
            await service.score_chef("missing")


class TestGetWeights:
    """Tests for effective weight resolution against the store."""

    async def test_stored_rows_override_defaults(self, config, store):
        await store.weights.upsert_weights({"careerTrack": 0.4})
        weights = await ScoringService(config, store).get_weights()
        assert weights.career_track == 0.4
        assert weights.formal_accolades == 0.35

    async def test_configured_defaults(self, tmp_path):
        config = RankingsConfig.model_validate(
            {
                "database_url": f"duckdb:///{tmp_path / 'w.duckdb'}",
                "scoring": {"default_weights": {"formal_accolades": 0.5}},
            }
        )
        store = RankingStore(config)
        try:
            weights = await ScoringService(config, store).get_weights()
        finally:
            await store.close()
        assert weights.formal_accolades == 0.5
