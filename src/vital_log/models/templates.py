"""Pre-built workout templates and user-defined custom workouts."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import uuid4

from .exercises import ExerciseType


class TemplateCategory(str, Enum):
    UPPER_BODY = "upper_body"
    LOWER_BODY = "lower_body"
    FULL_BODY = "full_body"
    CORE = "core"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


@dataclass(frozen=True)
class TemplateExercise:
    """A planned exercise within a template."""

    exercise_type: ExerciseType
    sets: int
    reps: int | None = None
    time: int | None = None  # seconds
    rest_time: int = 60  # seconds
    notes: str = ""

    def get_display(self) -> str:
        """Get a planned-exercise line, e.g. ``4 sets x 8 reps``."""
        result = f"{self.sets} sets"
        if self.reps is not None:
            result += f" x {self.reps} reps"
        if self.time is not None:
            result += f" x {self.time}s"
        return result

    def to_dict(self) -> dict:
        return {
            "exercise_type": self.exercise_type.value,
            "sets": self.sets,
            "reps": self.reps,
            "time": self.time,
            "rest_time": self.rest_time,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TemplateExercise":
        return cls(
            exercise_type=ExerciseType(data["exercise_type"]),
            sets=int(data["sets"]),
            reps=data.get("reps"),
            time=data.get("time"),
            rest_time=data.get("rest_time", 60),
            notes=data.get("notes", ""),
        )


@dataclass(frozen=True)
class WorkoutTemplate:
    """A named list of exercises that can seed a new workout."""

    name: str
    category: TemplateCategory
    description: str
    exercises: tuple[TemplateExercise, ...] = field(default_factory=tuple)
    estimated_duration: int = 45  # minutes
    difficulty: Difficulty = Difficulty.INTERMEDIATE

    @property
    def slug(self) -> str:
        return self.name.lower().replace(" ", "-")


PRE_BUILT_WORKOUTS: list[WorkoutTemplate] = [
    WorkoutTemplate(
        name="Push Day",
        category=TemplateCategory.UPPER_BODY,
        description="Chest, shoulders and triceps",
        exercises=(
            TemplateExercise(ExerciseType.BENCH_PRESS, sets=4, reps=8, rest_time=120),
            TemplateExercise(ExerciseType.INCLINE_BENCH_PRESS, sets=3, reps=10, rest_time=90),
            TemplateExercise(ExerciseType.OVERHEAD_PRESS, sets=3, reps=8, rest_time=90),
            TemplateExercise(ExerciseType.LATERAL_RAISE, sets=3, reps=12),
            TemplateExercise(ExerciseType.TRICEPS_KICKBACK, sets=3, reps=12),
        ),
        estimated_duration=45,
    ),
    WorkoutTemplate(
        name="Pull Day",
        category=TemplateCategory.UPPER_BODY,
        description="Back and biceps",
        exercises=(
            TemplateExercise(ExerciseType.DEADLIFTS, sets=4, reps=5, rest_time=180),
            TemplateExercise(ExerciseType.BENT_OVER_ROWS, sets=4, reps=8, rest_time=120),
            TemplateExercise(ExerciseType.PULL_UPS, sets=3, reps=8, rest_time=90),
            TemplateExercise(ExerciseType.BARBELL_CURL, sets=3, reps=10),
            TemplateExercise(ExerciseType.HAMMER_CURL, sets=3, reps=12),
        ),
        estimated_duration=50,
    ),
    WorkoutTemplate(
        name="Leg Day",
        category=TemplateCategory.LOWER_BODY,
        description="Quads, hamstrings, glutes and calves",
        exercises=(
            TemplateExercise(ExerciseType.SQUAT, sets=4, reps=6, rest_time=180),
            TemplateExercise(ExerciseType.ROMANIAN_DEADLIFT, sets=3, reps=8, rest_time=120),
            TemplateExercise(ExerciseType.LUNGES, sets=3, reps=10, rest_time=90),
            TemplateExercise(ExerciseType.LEG_CURL, sets=3, reps=12),
            TemplateExercise(ExerciseType.STANDING_CALF_RAISE, sets=4, reps=15, rest_time=45),
        ),
        estimated_duration=55,
    ),
    WorkoutTemplate(
        name="Full Body Strength",
        category=TemplateCategory.FULL_BODY,
        description="Compound lifts for the whole body",
        exercises=(
            TemplateExercise(ExerciseType.SQUAT, sets=3, reps=5, rest_time=180),
            TemplateExercise(ExerciseType.BENCH_PRESS, sets=3, reps=5, rest_time=180),
            TemplateExercise(ExerciseType.BENT_OVER_ROWS, sets=3, reps=8, rest_time=120),
            TemplateExercise(ExerciseType.FARMERS_CARRY, sets=3, time=40, rest_time=90),
        ),
        estimated_duration=50,
        difficulty=Difficulty.BEGINNER,
    ),
    WorkoutTemplate(
        name="Core Strength",
        category=TemplateCategory.CORE,
        description="Anti-extension and rotation work",
        exercises=(
            TemplateExercise(ExerciseType.WEIGHTED_PLANK, sets=3, time=45),
            TemplateExercise(ExerciseType.AB_ROLLOUT, sets=3, reps=10),
            TemplateExercise(ExerciseType.HANGING_LEG_RAISE, sets=3, reps=12),
            TemplateExercise(ExerciseType.RUSSIAN_TWIST, sets=3, reps=20, rest_time=45),
            TemplateExercise(ExerciseType.SUITCASE_CARRY, sets=3, time=30, rest_time=90),
        ),
        estimated_duration=25,
        difficulty=Difficulty.BEGINNER,
    ),
]


def get_template(name: str) -> WorkoutTemplate | None:
    """Find a template by name or slug, case-insensitively."""
    key = name.strip().lower()
    for template in PRE_BUILT_WORKOUTS:
        if key in (template.name.lower(), template.slug):
            return template
    return None


@dataclass
class CustomWorkout:
    """A workout plan saved by the user.

    Custom workouts load into the current workout the same way pre-built
    templates do, and additionally track favorites and usage.
    """

    name: str
    exercises: list[TemplateExercise] = field(default_factory=list)
    description: str | None = None
    created_date: datetime = field(default_factory=datetime.now)
    is_favorite: bool = False
    last_used: datetime | None = None
    use_count: int = 0
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def display_name(self) -> str:
        return f"* {self.name}" if self.is_favorite else self.name

    @property
    def total_exercises(self) -> int:
        return len(self.exercises)

    @property
    def total_sets(self) -> int:
        return sum(e.sets for e in self.exercises)

    @property
    def total_reps(self) -> int:
        return sum((e.reps or 0) * e.sets for e in self.exercises)

    @property
    def estimated_duration(self) -> int:
        """Estimated minutes: two minutes per set plus rest between sets."""
        rest = sum(e.rest_time * e.sets for e in self.exercises)
        return (self.total_sets * 120 + rest) // 60

    def mark_used(self) -> None:
        self.use_count += 1
        self.last_used = datetime.now()

    def to_template(self) -> WorkoutTemplate:
        """View this workout as a template so it can seed a session."""
        return WorkoutTemplate(
            name=self.name,
            category=TemplateCategory.FULL_BODY,
            description=self.description or "",
            exercises=tuple(self.exercises),
            estimated_duration=self.estimated_duration,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "exercises": [e.to_dict() for e in self.exercises],
            "created_date": self.created_date.isoformat(),
            "is_favorite": self.is_favorite,
            "last_used": self.last_used.isoformat() if self.last_used else None,
            "use_count": self.use_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CustomWorkout":
        """Create from dictionary."""
        last_used = data.get("last_used")
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description"),
            exercises=[TemplateExercise.from_dict(e) for e in data.get("exercises", [])],
            created_date=datetime.fromisoformat(data["created_date"]),
            is_favorite=data.get("is_favorite", False),
            last_used=datetime.fromisoformat(last_used) if last_used else None,
            use_count=data.get("use_count", 0),
        )
