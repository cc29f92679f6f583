"""Application services for vital-log."""

from .backup import DataBackup
from .events import Event, EventBus
from .sync import SyncService, SyncState, SyncStatus
from .tracker import HealthTracker

__all__ = [
    "DataBackup",
    "Event",
    "EventBus",
    "HealthTracker",
    "SyncService",
    "SyncState",
    "SyncStatus",
]
