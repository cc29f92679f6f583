"""Storage layer for vital-log."""

from .engine import get_db_path, init_db
from .local import (
    COLLECTIONS,
    CURRENT_MEASUREMENT_SESSION,
    CURRENT_WORKOUT_SESSION,
    CUSTOM_WORKOUTS,
    MEASUREMENT_SESSIONS,
    ONE_REP_MAX_RECORDS,
    PROFILE,
    WORKOUT_SESSIONS,
    LocalStore,
)
from .remote import HttpRemoteStore, InMemoryRemoteStore, RemoteStore, create_remote_store
from .repositories import DocumentRepository

__all__ = [
    "COLLECTIONS",
    "create_remote_store",
    "CURRENT_MEASUREMENT_SESSION",
    "CURRENT_WORKOUT_SESSION",
    "CUSTOM_WORKOUTS",
    "DocumentRepository",
    "get_db_path",
    "HttpRemoteStore",
    "init_db",
    "InMemoryRemoteStore",
    "LocalStore",
    "MEASUREMENT_SESSIONS",
    "ONE_REP_MAX_RECORDS",
    "PROFILE",
    "RemoteStore",
    "WORKOUT_SESSIONS",
]
