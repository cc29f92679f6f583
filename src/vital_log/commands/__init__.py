"""CLI commands for vital-log."""

from .backup import backup
from .history import history
from .init import init
from .plans import plans
from .profile import profile
from .records import records
from .serve import serve
from .session import session
from .stats import stats
from .sync import sync
from .workout import workout

__all__ = [
    "backup",
    "history",
    "init",
    "plans",
    "profile",
    "records",
    "serve",
    "session",
    "stats",
    "sync",
    "workout",
]
