"""Tracker owning the in-progress sessions, history, plans and records.

The tracker is the only writer of local state. Every accepted change is
persisted through the ``LocalStore`` and announced on the ``EventBus``;
rejected changes return ``False`` and leave both memory and storage alone.
"""

from datetime import date, datetime

import structlog

from ..config import SessionConfig
from ..models.analytics import (
    ExerciseStats,
    FitnessTrendPoint,
    RollingAverage,
    TimeRange,
    TrendAnalysis,
    TrendDirection,
)
from ..models.exercises import ExerciseSet, ExerciseType
from ..models.profile import UserProfile
from ..models.readings import BloodPressureReading, HealthMetric, MetricType
from ..models.records import OneRepMax
from ..models.sessions import MeasurementSession, WorkoutSession, WorkoutState
from ..models.templates import CustomWorkout, WorkoutTemplate
from ..store.local import LocalStore
from . import aggregation
from .events import EventBus
from .sync import SyncService

logger = structlog.get_logger(__name__)


class HealthTracker:
    """Records readings, metrics and workouts for one user."""

    def __init__(
        self,
        store: LocalStore,
        config: SessionConfig | None = None,
        events: EventBus | None = None,
    ):
        self.store = store
        self.config = config or SessionConfig()
        self.events = events or EventBus()
        self.log = logger.bind(component="tracker")

        self.current_session = MeasurementSession()
        self.sessions: list[MeasurementSession] = []
        self.current_workout = WorkoutSession()
        self.workouts: list[WorkoutSession] = []
        self.profile: UserProfile | None = None
        self.custom_workouts: list[CustomWorkout] = []
        self.one_rep_maxes: list[OneRepMax] = []

    async def load(self) -> None:
        """Load all state from the local store."""
        self.sessions = await self.store.load_measurement_sessions()
        self.workouts = await self.store.load_workout_sessions()
        self.profile = await self.store.load_profile()
        self.custom_workouts = await self.store.load_custom_workouts()
        self.one_rep_maxes = await self.store.load_one_rep_maxes()
        self.current_session = await self.store.load_current_session() or MeasurementSession()
        self.current_workout = await self.store.load_current_workout() or WorkoutSession()
        self.log.debug(
            "tracker_loaded",
            sessions=len(self.sessions),
            workouts=len(self.workouts),
            custom_workouts=len(self.custom_workouts),
            has_profile=self.profile is not None,
        )

    def attach_sync(self, sync: SyncService) -> None:
        """Reload from the local store whenever ``sync`` pulls.

        Without this, the next save would write the stale in-memory history
        back over what the pull brought down.
        """
        sync.add_pull_hook(self.load)

    def _publish(self, event_type: str, message: str, **data) -> None:
        self.events.publish(event_type, message, data or None)

    # Measurement session

    async def _save_current_session(self) -> None:
        await self.store.save_current_session(self.current_session)

    async def start_session(self) -> bool:
        """Start (or restart) the current measurement session."""
        if not self.current_session.start(reset_clock=self.config.restart_resets_clock):
            return False
        await self._save_current_session()
        self._publish("session.started", "Measurement session started", session_id=self.current_session.id)
        return True

    async def stop_session(self) -> None:
        """Pause the current session without completing it."""
        self.current_session.stop()
        await self._save_current_session()
        self._publish("session.stopped", "Measurement session stopped", session_id=self.current_session.id)

    def can_add_reading(self) -> bool:
        return self.current_session.can_add_reading(self.config.max_readings_per_session)

    def _below_reading_cap(self) -> bool:
        cap = self.config.max_readings_per_session
        return cap is None or len(self.current_session.readings) < cap

    async def add_reading(
        self,
        systolic: int,
        diastolic: int,
        heart_rate: int | None = None,
        timestamp: datetime | None = None,
    ) -> bool:
        """Add a blood pressure reading to the current session.

        Returns:
            False if the reading is invalid, the session is full, or the
            session is inactive and auto-start is disabled
        """
        reading = BloodPressureReading(
            systolic=systolic,
            diastolic=diastolic,
            heart_rate=heart_rate,
            timestamp=timestamp or datetime.now(),
        )
        if not self._below_reading_cap():
            self.log.info("reading_rejected", reason="session_full")
            return False
        if not self.current_session.add_reading(reading, auto_start=self.config.auto_start_on_add):
            self.log.info("reading_rejected", reason="invalid_or_inactive")
            return False

        await self._save_current_session()
        self._publish(
            "session.reading_added",
            f"Reading {reading.get_display()} added",
            session_id=self.current_session.id,
            reading=reading.to_dict(),
        )
        return True

    async def add_metric(
        self,
        metric_type: MetricType,
        value: float,
        timestamp: datetime | None = None,
    ) -> bool:
        """Add a standalone health metric to the current session."""
        metric = HealthMetric(type=metric_type, value=value, timestamp=timestamp or datetime.now())
        if not self.current_session.add_metric(metric, auto_start=self.config.auto_start_on_add):
            self.log.info("metric_rejected", metric_type=metric_type.value, value=value)
            return False

        await self._save_current_session()
        self._publish(
            "session.metric_added",
            f"{metric.get_display()} added",
            session_id=self.current_session.id,
            metric=metric.to_dict(),
        )
        return True

    async def remove_reading(self, index: int) -> bool:
        if not self.current_session.remove_reading(index):
            return False
        await self._save_current_session()
        self._publish("session.reading_removed", "Reading removed", index=index)
        return True

    async def remove_metric(self, index: int) -> bool:
        if not self.current_session.remove_metric(index):
            return False
        await self._save_current_session()
        self._publish("session.metric_removed", "Metric removed", index=index)
        return True

    async def complete_session(self) -> MeasurementSession | None:
        """Complete the current session and move it into history.

        An empty session is not saved and stays current.

        Returns:
            The completed session, or None if there was nothing to save
        """
        session = self.current_session
        if not session.readings and not session.metrics:
            return None

        session.complete()
        self.sessions.insert(0, session)
        self.current_session = MeasurementSession()
        await self.store.save_measurement_sessions(self.sessions)
        await self.store.save_current_session(None)

        self.log.info("session_completed", session_id=session.id, readings=len(session.readings))
        self._publish(
            "session.completed",
            f"Session saved: {session.get_display()}",
            session_id=session.id,
            readings=len(session.readings),
            metrics=len(session.metrics),
        )
        return session

    async def discard_session(self) -> None:
        """Throw away the current session."""
        discarded = self.current_session
        self.current_session = MeasurementSession()
        await self.store.save_current_session(None)
        self._publish("session.discarded", "Measurement session discarded", session_id=discarded.id)

    # Measurement history

    async def _history_changed(self, removed: int, reason: str) -> int:
        if removed:
            await self.store.save_measurement_sessions(self.sessions)
            self._publish("history.deleted", f"Deleted {removed} session(s)", count=removed, reason=reason)
        return removed

    def get_session(self, session_id: str) -> MeasurementSession | None:
        return next((s for s in self.sessions if s.id == session_id), None)

    def sessions_on(self, day: date) -> list[MeasurementSession]:
        """Sessions whose start time falls on a calendar day."""
        return [s for s in self.sessions if s.start_time.date() == day]

    async def delete_session(self, session_id: str) -> bool:
        before = len(self.sessions)
        self.sessions = [s for s in self.sessions if s.id != session_id]
        return await self._history_changed(before - len(self.sessions), "id") > 0

    async def delete_session_at(self, index: int) -> bool:
        if not 0 <= index < len(self.sessions):
            return False
        del self.sessions[index]
        return await self._history_changed(1, "index") > 0

    async def delete_sessions_on(self, day: date) -> int:
        """Delete every session started on a calendar day."""
        before = len(self.sessions)
        self.sessions = [s for s in self.sessions if s.start_time.date() != day]
        return await self._history_changed(before - len(self.sessions), "date")

    async def delete_all_sessions(self) -> int:
        removed = len(self.sessions)
        self.sessions = []
        return await self._history_changed(removed, "all")

    # Workout session

    async def _save_current_workout(self) -> None:
        await self.store.save_current_workout(self.current_workout)

    async def _workout_changed(self, ok: bool, event_type: str, message: str, **data) -> bool:
        if ok:
            await self._save_current_workout()
            self._publish(event_type, message, workout_id=self.current_workout.id, **data)
        return ok

    async def start_workout(self) -> bool:
        ok = self.current_workout.start()
        return await self._workout_changed(ok, "workout.started", "Workout started")

    async def pause_workout(self) -> bool:
        ok = self.current_workout.pause()
        return await self._workout_changed(ok, "workout.paused", "Workout paused")

    async def resume_workout(self) -> bool:
        ok = self.current_workout.resume()
        return await self._workout_changed(ok, "workout.resumed", "Workout resumed")

    async def add_exercise(self, exercise_type: ExerciseType) -> bool:
        ok = self.current_workout.add_exercise_session(exercise_type)
        return await self._workout_changed(
            ok,
            "workout.exercise_added",
            f"{exercise_type.display_name} added",
            exercise_type=exercise_type.value,
        )

    async def remove_exercise(self, index: int) -> bool:
        ok = self.current_workout.remove_exercise_session(index)
        return await self._workout_changed(ok, "workout.exercise_removed", "Exercise removed", index=index)

    async def complete_exercise(self, index: int) -> bool:
        ok = self.current_workout.complete_exercise(index)
        return await self._workout_changed(
            ok, "workout.exercise_completed", "Exercise completed", index=index
        )

    async def add_set(
        self,
        exercise_index: int,
        reps: int | None = None,
        weight: float | None = None,
        time: float | None = None,
    ) -> bool:
        """Log a set against an exercise of the active workout."""
        exercise_set = ExerciseSet(reps=reps, weight=weight, time=time)
        ok = self.current_workout.add_set(exercise_index, exercise_set)
        return await self._workout_changed(
            ok,
            "workout.set_added",
            f"Set logged: {exercise_set.get_display()}",
            exercise_index=exercise_index,
            set=exercise_set.to_dict(),
        )

    async def remove_set(self, exercise_index: int, set_index: int) -> bool:
        ok = self.current_workout.remove_set(exercise_index, set_index)
        return await self._workout_changed(
            ok,
            "workout.set_removed",
            "Set removed",
            exercise_index=exercise_index,
            set_index=set_index,
        )

    async def load_template(self, template: WorkoutTemplate) -> bool:
        """Replace the current workout with a fresh one seeded from a template.

        Rejected while the current workout has logged sets.
        """
        if self.current_workout.total_sets:
            return False

        workout = WorkoutSession()
        for planned in template.exercises:
            workout.add_exercise_session(planned.exercise_type)
        self.current_workout = workout
        return await self._workout_changed(
            True, "workout.template_loaded", f"Loaded template {template.name}", template=template.name
        )

    async def finish_workout(self) -> WorkoutSession | None:
        """Complete the current workout and move it into history.

        Returns:
            The completed workout, or None if it had no exercises
        """
        workout = self.current_workout
        if not workout.exercise_sessions or workout.state == WorkoutState.COMPLETED:
            return None

        workout.complete()
        self.workouts.insert(0, workout)
        self.current_workout = WorkoutSession()
        await self.store.save_workout_sessions(self.workouts)
        await self.store.save_current_workout(None)

        self.log.info("workout_completed", workout_id=workout.id, sets=workout.total_sets)
        self._publish(
            "workout.completed",
            f"Workout saved: {workout.get_display()}",
            workout_id=workout.id,
            exercises=workout.total_exercises,
            sets=workout.total_sets,
        )
        return workout

    async def discard_workout(self) -> None:
        discarded = self.current_workout
        self.current_workout = WorkoutSession()
        await self.store.save_current_workout(None)
        self._publish("workout.discarded", "Workout discarded", workout_id=discarded.id)

    async def delete_workout(self, workout_id: str) -> bool:
        before = len(self.workouts)
        self.workouts = [w for w in self.workouts if w.id != workout_id]
        if len(self.workouts) == before:
            return False
        await self.store.save_workout_sessions(self.workouts)
        self._publish("history.deleted", "Deleted 1 workout", count=1, reason="workout_id")
        return True

    async def toggle_workout_favorite(self, workout_id: str) -> bool:
        """Flip the favorite flag of a workout in history.

        The flag is the only field of a history entry that may change.
        """
        workout = next((w for w in self.workouts if w.id == workout_id), None)
        if workout is None:
            return False
        workout.is_favorite = not workout.is_favorite
        await self.store.save_workout_sessions(self.workouts)
        self._publish(
            "workout.favorite_toggled",
            "Workout favorited" if workout.is_favorite else "Workout unfavorited",
            workout_id=workout_id,
            is_favorite=workout.is_favorite,
        )
        return True

    # Custom workouts

    def get_custom_workout(self, key: str) -> CustomWorkout | None:
        """Find a custom workout by id or, case-insensitively, by name."""
        lowered = key.strip().lower()
        for workout in self.custom_workouts:
            if workout.id == key or workout.name.lower() == lowered:
                return workout
        return None

    async def _custom_workouts_changed(self, event_type: str, message: str, **data) -> None:
        await self.store.save_custom_workouts(self.custom_workouts)
        self._publish(event_type, message, **data)

    async def save_custom_workout(self, workout: CustomWorkout) -> bool:
        """Add a new custom workout.

        Returns:
            False if it has no exercises or its id is already saved
        """
        if not workout.exercises or any(w.id == workout.id for w in self.custom_workouts):
            return False
        self.custom_workouts.append(workout)
        await self._custom_workouts_changed(
            "custom_workout.saved", f"Saved custom workout {workout.name}", workout_id=workout.id
        )
        return True

    async def update_custom_workout(self, workout: CustomWorkout) -> bool:
        for index, existing in enumerate(self.custom_workouts):
            if existing.id == workout.id:
                self.custom_workouts[index] = workout
                await self._custom_workouts_changed(
                    "custom_workout.updated", f"Updated custom workout {workout.name}", workout_id=workout.id
                )
                return True
        return False

    async def delete_custom_workout(self, workout_id: str) -> bool:
        before = len(self.custom_workouts)
        self.custom_workouts = [w for w in self.custom_workouts if w.id != workout_id]
        if len(self.custom_workouts) == before:
            return False
        await self._custom_workouts_changed(
            "custom_workout.deleted", "Deleted custom workout", workout_id=workout_id
        )
        return True

    async def toggle_custom_workout_favorite(self, workout_id: str) -> bool:
        workout = next((w for w in self.custom_workouts if w.id == workout_id), None)
        if workout is None:
            return False
        workout.is_favorite = not workout.is_favorite
        await self._custom_workouts_changed(
            "custom_workout.favorite_toggled",
            f"{workout.name} {'favorited' if workout.is_favorite else 'unfavorited'}",
            workout_id=workout_id,
            is_favorite=workout.is_favorite,
        )
        return True

    async def load_custom_workout(self, workout_id: str) -> bool:
        """Seed the current workout from a custom workout and count the use.

        Follows the same rules as ``load_template``.
        """
        workout = next((w for w in self.custom_workouts if w.id == workout_id), None)
        if workout is None or not await self.load_template(workout.to_template()):
            return False
        workout.mark_used()
        await self.store.save_custom_workouts(self.custom_workouts)
        return True

    # One-rep maxes

    def _sort_one_rep_maxes(self) -> None:
        self.one_rep_maxes.sort(key=lambda r: r.date, reverse=True)

    async def add_one_rep_max(self, record: OneRepMax) -> bool:
        """Record a one-rep max, newest first.

        Lighter records for the same lift are dropped; heavier or equal
        ones are kept.
        """
        if record.weight <= 0 or not record.lift_name.strip():
            return False
        self.one_rep_maxes = [
            r for r in self.one_rep_maxes
            if not (r.lift_name == record.lift_name and r.weight < record.weight)
        ]
        self.one_rep_maxes.append(record)
        self._sort_one_rep_maxes()
        await self.store.save_one_rep_maxes(self.one_rep_maxes)
        self._publish(
            "one_rep_max.added", f"New 1RM: {record.get_display()}", record=record.to_dict()
        )
        return True

    async def update_one_rep_max(self, record: OneRepMax) -> bool:
        for index, existing in enumerate(self.one_rep_maxes):
            if existing.id == record.id:
                self.one_rep_maxes[index] = record
                self._sort_one_rep_maxes()
                await self.store.save_one_rep_maxes(self.one_rep_maxes)
                self._publish("one_rep_max.updated", "1RM updated", record=record.to_dict())
                return True
        return False

    async def delete_one_rep_max(self, record_id: str) -> bool:
        before = len(self.one_rep_maxes)
        self.one_rep_maxes = [r for r in self.one_rep_maxes if r.id != record_id]
        if len(self.one_rep_maxes) == before:
            return False
        await self.store.save_one_rep_maxes(self.one_rep_maxes)
        self._publish("one_rep_max.deleted", "1RM deleted", record_id=record_id)
        return True

    def one_rep_max_for(self, lift_name: str) -> OneRepMax | None:
        """Most recent record for a lift."""
        return next((r for r in self.one_rep_maxes if r.lift_name == lift_name), None)

    def one_rep_max_history(self, lift_name: str) -> list[OneRepMax]:
        return [r for r in self.one_rep_maxes if r.lift_name == lift_name]

    def heaviest_one_rep_max(self) -> OneRepMax | None:
        return max(self.one_rep_maxes, key=lambda r: r.weight, default=None)

    # Profile

    async def set_profile(self, profile: UserProfile) -> None:
        profile.touch()
        self.profile = profile
        await self.store.save_profile(profile)
        self._publish("profile.updated", "Profile updated", user_id=profile.id)

    # Statistics

    def rolling_averages(self, now: datetime | None = None) -> list[RollingAverage]:
        return aggregation.rolling_averages(self.sessions, now=now)

    def fitness_trends(
        self, exercise_type: ExerciseType, time_range: TimeRange, now: datetime | None = None
    ) -> list[FitnessTrendPoint]:
        return aggregation.fitness_trends(self.workouts, exercise_type, time_range, now)

    def trend_analysis(
        self, exercise_type: ExerciseType, time_range: TimeRange, now: datetime | None = None
    ) -> TrendAnalysis:
        return aggregation.trend_analysis(self.workouts, exercise_type, time_range, now)

    def exercise_stats(self, exercise_type: ExerciseType) -> ExerciseStats:
        return aggregation.exercise_stats(self.workouts, exercise_type)

    def metric_average(
        self, metric_type: MetricType, days: int = 30, now: datetime | None = None
    ) -> float | None:
        return aggregation.metric_average(self.sessions, metric_type, days, now)

    def metric_trend(
        self, metric_type: MetricType, days: int = 7, now: datetime | None = None
    ) -> TrendDirection:
        return aggregation.metric_trend(self.sessions, metric_type, days, now)
