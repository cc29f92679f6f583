"""Typed load/save of the tracker's collections on top of the document table."""

import json
from pathlib import Path
from typing import Any, Callable, TypeVar

import structlog

from ..errors import MALFORMED_DATA_ERRORS
from ..models.profile import UserProfile
from ..models.records import OneRepMax
from ..models.sessions import MeasurementSession, WorkoutSession
from ..models.templates import CustomWorkout
from .repositories import LOCAL_NAMESPACE, DocumentRepository

logger = structlog.get_logger(__name__)

MEASUREMENT_SESSIONS = "measurement_sessions"
WORKOUT_SESSIONS = "workout_sessions"
CUSTOM_WORKOUTS = "custom_workouts"
ONE_REP_MAX_RECORDS = "one_rep_max_records"
PROFILE = "profile"
CURRENT_MEASUREMENT_SESSION = "current_measurement_session"
CURRENT_WORKOUT_SESSION = "current_workout_session"

# Collections replicated to the remote store
COLLECTIONS = (MEASUREMENT_SESSIONS, WORKOUT_SESSIONS, CUSTOM_WORKOUTS)

T = TypeVar("T")

_DECODE_ERRORS = (json.JSONDecodeError, *MALFORMED_DATA_ERRORS)


class LocalStore:
    """Persists history, profile and in-progress sessions for one device.

    Unreadable documents are logged and treated as missing, so a corrupt
    entry never prevents the tracker from starting.
    """

    def __init__(self, db_path: Path | None = None, namespace: str = LOCAL_NAMESPACE):
        self.repo = DocumentRepository(db_path, namespace)
        self.log = logger.bind(component="local_store", namespace=namespace)

    async def _load_list(self, key: str, factory: Callable[[dict], T]) -> list[T]:
        try:
            data = await self.repo.get(key)
            if data is None:
                return []
            return [factory(item) for item in data]
        except _DECODE_ERRORS as e:
            self.log.warning("local_load_failed", key=key, error=str(e))
            return []

    async def _load_one(self, key: str, factory: Callable[[dict], T]) -> T | None:
        try:
            data = await self.repo.get(key)
            if data is None:
                return None
            return factory(data)
        except _DECODE_ERRORS as e:
            self.log.warning("local_load_failed", key=key, error=str(e))
            return None

    async def _save_optional(self, key: str, value: Any | None) -> None:
        if value is None:
            await self.repo.delete(key)
        else:
            await self.repo.put(key, value.to_dict())

    async def load_measurement_sessions(self) -> list[MeasurementSession]:
        return await self._load_list(MEASUREMENT_SESSIONS, MeasurementSession.from_dict)

    async def save_measurement_sessions(self, sessions: list[MeasurementSession]) -> None:
        await self.repo.put(MEASUREMENT_SESSIONS, [s.to_dict() for s in sessions])

    async def load_workout_sessions(self) -> list[WorkoutSession]:
        return await self._load_list(WORKOUT_SESSIONS, WorkoutSession.from_dict)

    async def save_workout_sessions(self, workouts: list[WorkoutSession]) -> None:
        await self.repo.put(WORKOUT_SESSIONS, [w.to_dict() for w in workouts])

    async def load_custom_workouts(self) -> list[CustomWorkout]:
        return await self._load_list(CUSTOM_WORKOUTS, CustomWorkout.from_dict)

    async def save_custom_workouts(self, workouts: list[CustomWorkout]) -> None:
        await self.repo.put(CUSTOM_WORKOUTS, [w.to_dict() for w in workouts])

    async def load_one_rep_maxes(self) -> list[OneRepMax]:
        return await self._load_list(ONE_REP_MAX_RECORDS, OneRepMax.from_dict)

    async def save_one_rep_maxes(self, records: list[OneRepMax]) -> None:
        await self.repo.put(ONE_REP_MAX_RECORDS, [r.to_dict() for r in records])

    async def load_profile(self) -> UserProfile | None:
        return await self._load_one(PROFILE, UserProfile.from_dict)

    async def save_profile(self, profile: UserProfile | None) -> None:
        await self._save_optional(PROFILE, profile)

    async def load_current_session(self) -> MeasurementSession | None:
        return await self._load_one(CURRENT_MEASUREMENT_SESSION, MeasurementSession.from_dict)

    async def save_current_session(self, session: MeasurementSession | None) -> None:
        await self._save_optional(CURRENT_MEASUREMENT_SESSION, session)

    async def load_current_workout(self) -> WorkoutSession | None:
        return await self._load_one(CURRENT_WORKOUT_SESSION, WorkoutSession.from_dict)

    async def save_current_workout(self, workout: WorkoutSession | None) -> None:
        await self._save_optional(CURRENT_WORKOUT_SESSION, workout)

    async def replace_collections(
        self,
        measurement_sessions: list[MeasurementSession],
        workout_sessions: list[WorkoutSession],
        profile: UserProfile | None = None,
        custom_workouts: list[CustomWorkout] | None = None,
    ) -> None:
        """Replace the synced collections in one transaction.

        Both histories are always replaced; the profile and custom workouts
        only when given.
        """
        documents: dict[str, Any] = {
            MEASUREMENT_SESSIONS: [s.to_dict() for s in measurement_sessions],
            WORKOUT_SESSIONS: [w.to_dict() for w in workout_sessions],
        }
        if custom_workouts is not None:
            documents[CUSTOM_WORKOUTS] = [w.to_dict() for w in custom_workouts]
        if profile is not None:
            documents[PROFILE] = profile.to_dict()
        await self.repo.put_many(documents)
        self.log.info(
            "local_collections_replaced",
            measurement_sessions=len(measurement_sessions),
            workout_sessions=len(workout_sessions),
            custom_workouts=None if custom_workouts is None else len(custom_workouts),
            profile=profile is not None,
        )
