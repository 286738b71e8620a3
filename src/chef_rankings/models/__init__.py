from .chef import Accolade, CareerEntry, Chef, PeerStanding, PublicSignal
from .scoring_weight import ScoringWeight
from .snapshot import MonthlySnapshot, SnapshotEntry
from .step_log import UpdateStepLog

__all__ = [
    "Accolade",
    "CareerEntry",
    "Chef",
    "MonthlySnapshot",
    "PeerStanding",
    "PublicSignal",
    "ScoringWeight",
    "SnapshotEntry",
    "UpdateStepLog",
]
