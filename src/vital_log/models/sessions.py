"""Measurement and workout session state machines.

Mutators return ``True`` when the change was applied and ``False`` when it
was rejected (invalid input, index out of range, wrong state). Nothing here
raises for those cases.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from uuid import uuid4

from .exercises import ExerciseSet, ExerciseType
from .readings import BloodPressureReading, HealthMetric, MetricType


def _mean(values: list[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _format_dt(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _in_bounds(index: int, items: list) -> bool:
    return 0 <= index < len(items)


class MeasurementState(str, Enum):
    """Lifecycle of a measurement session."""

    EMPTY = "empty"
    ACTIVE = "active"
    STOPPED = "stopped"
    COMPLETED = "completed"


@dataclass
class MeasurementSession:
    """A bounded group of blood pressure readings and health metrics."""

    id: str = field(default_factory=lambda: str(uuid4()))
    readings: list[BloodPressureReading] = field(default_factory=list)
    metrics: list[HealthMetric] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: datetime | None = None
    is_active: bool = False

    @property
    def is_completed(self) -> bool:
        return self.end_time is not None

    @property
    def state(self) -> MeasurementState:
        if self.is_completed:
            return MeasurementState.COMPLETED
        if self.is_active:
            return MeasurementState.ACTIVE
        if self.readings or self.metrics:
            return MeasurementState.STOPPED
        return MeasurementState.EMPTY

    def start(self, reset_clock: bool = True) -> bool:
        """Mark the session active.

        Args:
            reset_clock: Reset start_time to now, discarding any earlier
                start reference point

        Returns:
            False if the session is already completed
        """
        if self.is_completed:
            return False
        self.is_active = True
        if reset_clock:
            self.start_time = datetime.now()
        return True

    def stop(self) -> None:
        """Deactivate without completing."""
        self.is_active = False

    def complete(self) -> None:
        """Stamp the end time and deactivate.

        The first end time is kept if called again.
        """
        if self.end_time is None:
            self.end_time = datetime.now()
        self.is_active = False

    def _accepts_mutation(self, auto_start_enabled: bool) -> bool:
        if self.is_completed:
            return False
        if self.is_active:
            return True
        if auto_start_enabled:
            return auto_start(self)
        return False

    def add_reading(self, reading: BloodPressureReading, auto_start: bool = True) -> bool:
        """Append a valid reading, auto-starting the session if allowed."""
        if not reading.is_valid:
            return False
        if not self._accepts_mutation(auto_start):
            return False
        self.readings.append(reading)
        return True

    def add_metric(self, metric: HealthMetric, auto_start: bool = True) -> bool:
        """Append a valid metric, auto-starting the session if allowed."""
        if not metric.is_valid:
            return False
        if not self._accepts_mutation(auto_start):
            return False
        self.metrics.append(metric)
        return True

    def remove_reading(self, index: int) -> bool:
        if self.is_completed or not _in_bounds(index, self.readings):
            return False
        del self.readings[index]
        return True

    def remove_metric(self, index: int) -> bool:
        if self.is_completed or not _in_bounds(index, self.metrics):
            return False
        del self.metrics[index]
        return True

    def can_add_reading(self, max_readings: int | None = None) -> bool:
        """Check the session is active and below the reading cap."""
        if not self.is_active:
            return False
        return max_readings is None or len(self.readings) < max_readings

    @property
    def average_systolic(self) -> float:
        return _mean([r.systolic for r in self.readings]) or 0

    @property
    def average_diastolic(self) -> float:
        return _mean([r.diastolic for r in self.readings]) or 0

    @property
    def average_heart_rate(self) -> float | None:
        return _mean([r.heart_rate for r in self.readings if r.heart_rate is not None])

    @property
    def duration(self) -> timedelta:
        return (self.end_time or datetime.now()) - self.start_time

    def metrics_for_type(self, metric_type: MetricType) -> list[HealthMetric]:
        return [m for m in self.metrics if m.type == metric_type]

    def average_for_type(self, metric_type: MetricType) -> float | None:
        return _mean([m.value for m in self.metrics_for_type(metric_type)])

    def get_display(self) -> str:
        """Get the rounded average reading, e.g. ``121/79 HR 70``."""
        from ..services.aggregation import round_half_up

        result = f"{round_half_up(self.average_systolic)}/{round_half_up(self.average_diastolic)}"
        if self.average_heart_rate is not None:
            result += f" HR {round_half_up(self.average_heart_rate)}"
        return result

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "readings": [r.to_dict() for r in self.readings],
            "metrics": [m.to_dict() for m in self.metrics],
            "start_time": self.start_time.isoformat(),
            "end_time": _format_dt(self.end_time),
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MeasurementSession":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            readings=[BloodPressureReading.from_dict(r) for r in data.get("readings", [])],
            metrics=[HealthMetric.from_dict(m) for m in data.get("metrics", [])],
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=_parse_dt(data.get("end_time")),
            is_active=data.get("is_active", False),
        )


def auto_start(session: MeasurementSession) -> bool:
    """Start an inactive session so it can take a new reading or metric.

    The session clock is reset, as for an explicit start.

    Returns:
        True if the session is active afterwards
    """
    if session.is_active:
        return True
    return session.start(reset_clock=True)


@dataclass
class ExerciseSession:
    """All sets of one exercise within a workout.

    Sets can no longer be added or removed once the exercise is completed.
    """

    exercise_type: ExerciseType
    sets: list[ExerciseSet] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: datetime | None = None
    is_completed: bool = False
    id: str = field(default_factory=lambda: str(uuid4()))

    def add_set(self, exercise_set: ExerciseSet) -> bool:
        if self.is_completed or not exercise_set.is_valid:
            return False
        self.sets.append(exercise_set)
        return True

    def remove_set(self, index: int) -> bool:
        if self.is_completed or not _in_bounds(index, self.sets):
            return False
        del self.sets[index]
        return True

    def complete(self) -> None:
        if self.end_time is None:
            self.end_time = datetime.now()
        self.is_completed = True

    @property
    def total_reps(self) -> int:
        return sum(s.reps for s in self.sets if s.reps is not None)

    @property
    def total_weight(self) -> float:
        return sum(s.weight for s in self.sets if s.weight is not None)

    @property
    def total_time(self) -> float:
        return sum(s.time for s in self.sets if s.time is not None)

    @property
    def average_weight(self) -> float | None:
        return _mean([s.weight for s in self.sets if s.weight is not None])

    @property
    def max_weight(self) -> float | None:
        weights = [s.weight for s in self.sets if s.weight is not None]
        return max(weights) if weights else None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "exercise_type": self.exercise_type.value,
            "sets": [s.to_dict() for s in self.sets],
            "start_time": self.start_time.isoformat(),
            "end_time": _format_dt(self.end_time),
            "is_completed": self.is_completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseSession":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            exercise_type=ExerciseType(data["exercise_type"]),
            sets=[ExerciseSet.from_dict(s) for s in data.get("sets", [])],
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=_parse_dt(data.get("end_time")),
            is_completed=data.get("is_completed", False),
        )


class WorkoutState(str, Enum):
    """Workout session lifecycle."""

    NOT_STARTED = "not_started"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


@dataclass
class WorkoutSession:
    """A workout made of one exercise session per exercise.

    NOT_STARTED -> ACTIVE <-> PAUSED -> COMPLETED. Completed is terminal and
    every mutator returns False afterwards.
    """

    exercise_sessions: list[ExerciseSession] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.now)
    end_time: datetime | None = None
    is_active: bool = False
    is_paused: bool = False
    is_completed: bool = False
    is_favorite: bool = False
    id: str = field(default_factory=lambda: str(uuid4()))

    def __post_init__(self):
        if self.is_completed:
            self._close_exercises()

    def _close_exercises(self) -> None:
        for exercise in self.exercise_sessions:
            if exercise.end_time is None:
                exercise.end_time = self.end_time
            exercise.complete()

    @property
    def state(self) -> WorkoutState:
        if self.is_completed:
            return WorkoutState.COMPLETED
        if self.is_paused:
            return WorkoutState.PAUSED
        if self.is_active:
            return WorkoutState.ACTIVE
        return WorkoutState.NOT_STARTED

    def start(self) -> bool:
        """Start a new workout, or continue a paused one."""
        state = self.state
        if state == WorkoutState.NOT_STARTED:
            self.start_time = datetime.now()
        elif state != WorkoutState.PAUSED:
            return False
        self.is_active = True
        self.is_paused = False
        return True

    def pause(self) -> bool:
        if self.state != WorkoutState.ACTIVE:
            return False
        self.is_active = False
        self.is_paused = True
        return True

    def resume(self) -> bool:
        if self.state != WorkoutState.PAUSED:
            return False
        self.is_active = True
        self.is_paused = False
        return True

    def complete(self) -> bool:
        if self.is_completed:
            return False
        self.end_time = datetime.now()
        self.is_active = False
        self.is_paused = False
        self.is_completed = True
        self._close_exercises()
        return True

    def add_exercise_session(self, exercise_type: ExerciseType) -> bool:
        """Append an empty exercise session.

        Allowed before the workout starts so templates can be loaded.
        """
        if self.is_completed:
            return False
        self.exercise_sessions.append(ExerciseSession(exercise_type=exercise_type))
        return True

    def remove_exercise_session(self, index: int) -> bool:
        if self.is_completed or not _in_bounds(index, self.exercise_sessions):
            return False
        del self.exercise_sessions[index]
        return True

    def add_set(self, exercise_index: int, exercise_set: ExerciseSet) -> bool:
        """Add a set to an exercise of an active workout."""
        if self.state != WorkoutState.ACTIVE:
            return False
        if not _in_bounds(exercise_index, self.exercise_sessions):
            return False
        return self.exercise_sessions[exercise_index].add_set(exercise_set)

    def remove_set(self, exercise_index: int, set_index: int) -> bool:
        if self.is_completed or not _in_bounds(exercise_index, self.exercise_sessions):
            return False
        return self.exercise_sessions[exercise_index].remove_set(set_index)

    def complete_exercise(self, exercise_index: int) -> bool:
        if self.is_completed or not _in_bounds(exercise_index, self.exercise_sessions):
            return False
        self.exercise_sessions[exercise_index].complete()
        return True

    @property
    def total_exercises(self) -> int:
        return len(self.exercise_sessions)

    @property
    def total_sets(self) -> int:
        return sum(len(e.sets) for e in self.exercise_sessions)

    @property
    def total_reps(self) -> int:
        return sum(e.total_reps for e in self.exercise_sessions)

    @property
    def duration(self) -> timedelta:
        return (self.end_time or datetime.now()) - self.start_time

    def get_display(self) -> str:
        """Get a one-line workout summary."""
        parts = []
        if self.total_exercises:
            parts.append(f"{self.total_exercises} exercises")
        if self.total_sets:
            parts.append(f"{self.total_sets} sets")
        if self.total_reps:
            parts.append(f"{self.total_reps} reps")
        minutes, seconds = divmod(int(self.duration.total_seconds()), 60)
        if minutes:
            parts.append(f"{minutes}:{seconds:02d}")
        elif seconds:
            parts.append(f"{seconds}s")
        return ", ".join(parts) if parts else "No exercises"

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "exercise_sessions": [e.to_dict() for e in self.exercise_sessions],
            "start_time": self.start_time.isoformat(),
            "end_time": _format_dt(self.end_time),
            "is_active": self.is_active,
            "is_paused": self.is_paused,
            "is_completed": self.is_completed,
            "is_favorite": self.is_favorite,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutSession":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            exercise_sessions=[
                ExerciseSession.from_dict(e) for e in data.get("exercise_sessions", [])
            ],
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=_parse_dt(data.get("end_time")),
            is_active=data.get("is_active", False),
            is_paused=data.get("is_paused", False),
            is_completed=data.get("is_completed", False),
            is_favorite=data.get("is_favorite", False),
        )
