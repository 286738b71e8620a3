"""Services for scoring, snapshots, imports and exports."""

from chef_rankings.services.importer import ChefImportService, ImportResult
from chef_rankings.services.scoring import RankingRow, ScoringService, rank_delta
from chef_rankings.services.snapshot import SnapshotService, SnapshotView

__all__ = [
    "ChefImportService",
    "ImportResult",
    "RankingRow",
    "ScoringService",
    "SnapshotService",
    "SnapshotView",
    "rank_delta",
]
