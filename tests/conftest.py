"""Shared fixtures for store-backed tests."""

import pytest

from chef_rankings.core.config import RankingsConfig
from chef_rankings.services.storage import RankingStore


@pytest.fixture
def config(tmp_path):
    """Create a config pointing at a temporary DuckDB file."""
    return RankingsConfig(
        database_url=f"duckdb:///{tmp_path / 'rankings.duckdb'}",
        export_dir=str(tmp_path / "exports"),
    )


@pytest.fixture
async def store(config):
    """Create a ranking store with empty tables."""
    store = RankingStore(config)
    yield store
    await store.close()
