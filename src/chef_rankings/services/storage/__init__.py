from .chef_repository import ChefRepository
from .export_store import ExportStore
from .snapshot_repository import SnapshotRepository, SnapshotWithEntries
from .step_log_repository import StepLogRepository
from .store import RankingStore
from .weight_repository import WeightRepository

__all__ = [
    "ChefRepository",
    "ExportStore",
    "RankingStore",
    "SnapshotRepository",
    "SnapshotWithEntries",
    "StepLogRepository",
    "WeightRepository",
]
