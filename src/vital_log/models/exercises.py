"""Exercise types, their capabilities and recorded sets."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import uuid4


class ExerciseCategory(str, Enum):
    """Broad exercise groupings."""

    UPPER_BODY = "upper_body"
    LOWER_BODY = "lower_body"
    CORE_ABS = "core_abs"
    FULL_BODY = "full_body"
    MACHINE_BASED = "machine_based"


class ExerciseType(str, Enum):
    """Exercises that can be logged in a workout."""

    # Upper Body - Chest
    BENCH_PRESS = "bench_press"
    INCLINE_BENCH_PRESS = "incline_bench_press"
    DECLINE_BENCH_PRESS = "decline_bench_press"
    CHEST_FLY = "chest_fly"
    WEIGHTED_PUSH_UPS = "weighted_push_ups"
    SQUEEZE_PRESS = "squeeze_press"

    # Upper Body - Back
    DEADLIFTS = "deadlifts"
    BENT_OVER_ROWS = "bent_over_rows"
    PENDLAY_ROW = "pendlay_row"
    SEAL_ROW = "seal_row"
    SINGLE_ARM_DUMBBELL_ROW = "single_arm_dumbbell_row"
    INVERTED_ROW = "inverted_row"
    LAT_PULLDOWN = "lat_pulldown"
    PULL_UPS = "pull_ups"
    T_BAR_ROW = "t_bar_row"
    MEADOWS_ROW = "meadows_row"

    # Upper Body - Shoulders
    OVERHEAD_PRESS = "overhead_press"
    PUSH_PRESS = "push_press"
    ARNOLD_PRESS = "arnold_press"
    LATERAL_RAISE = "lateral_raise"
    FRONT_RAISE = "front_raise"
    REAR_DELT_FLY = "rear_delt_fly"
    UPRIGHT_ROW = "upright_row"
    Z_PRESS = "z_press"

    # Upper Body - Arms
    BARBELL_CURL = "barbell_curl"
    DUMBBELL_CURL = "dumbbell_curl"
    CONCENTRATION_CURL = "concentration_curl"
    PREACHER_CURL = "preacher_curl"
    CABLE_CURL = "cable_curl"
    HAMMER_CURL = "hammer_curl"
    CLOSE_GRIP_BENCH_PRESS = "close_grip_bench_press"
    SKULL_CRUSHERS = "skull_crushers"
    OVERHEAD_TRICEPS_EXTENSION = "overhead_triceps_extension"
    TRICEPS_KICKBACK = "triceps_kickback"
    CABLE_PUSHDOWNS = "cable_pushdowns"
    WEIGHTED_DIPS = "weighted_dips"

    # Lower Body
    SQUAT = "squat"
    SPLIT_SQUATS = "split_squats"
    STEP_UPS = "step_ups"
    LEG_PRESS = "leg_press"
    LUNGES = "lunges"
    ROMANIAN_DEADLIFT = "romanian_deadlift"
    GOOD_MORNING = "good_morning"
    HIP_THRUST = "hip_thrust"
    GLUTE_BRIDGE = "glute_bridge"
    NORDIC_CURL = "nordic_curl"
    KETTLEBELL_SWING = "kettlebell_swing"
    SINGLE_LEG_DEADLIFT = "single_leg_deadlift"
    STANDING_CALF_RAISE = "standing_calf_raise"
    SEATED_CALF_RAISE = "seated_calf_raise"

    # Core / Abs
    WEIGHTED_SIT_UPS = "weighted_sit_ups"
    WEIGHTED_CRUNCH = "weighted_crunch"
    WEIGHTED_PLANK = "weighted_plank"
    AB_ROLLOUT = "ab_rollout"
    HANGING_LEG_RAISE = "hanging_leg_raise"
    CABLE_CRUNCH = "cable_crunch"
    RUSSIAN_TWIST = "russian_twist"
    TURKISH_GET_UP = "turkish_get_up"

    # Full Body & Power
    CLEAN_AND_PRESS = "clean_and_press"
    POWER_CLEAN = "power_clean"
    SNATCH = "snatch"
    THRUSTER = "thruster"
    FARMERS_CARRY = "farmers_carry"
    SUITCASE_CARRY = "suitcase_carry"
    OVERHEAD_CARRY = "overhead_carry"

    # Machine-Based
    CHEST_PRESS = "chest_press"
    PEC_DECK = "pec_deck"
    ROW_MACHINE = "row_machine"
    SHOULDER_PRESS_MACHINE = "shoulder_press_machine"
    LEG_EXTENSION = "leg_extension"
    LEG_CURL = "leg_curl"
    HACK_SQUAT_MACHINE = "hack_squat_machine"
    SMITH_MACHINE = "smith_machine"

    @property
    def info(self) -> "ExerciseInfo":
        return EXERCISE_CATALOG[self]

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()


@dataclass(frozen=True)
class ExerciseInfo:
    """Capabilities of an exercise type."""

    category: ExerciseCategory
    supports_weight: bool = True
    supports_reps: bool = True
    supports_time: bool = False
    unit: str = "lbs"


_CATEGORY_MEMBERS: dict[ExerciseCategory, list[ExerciseType]] = {
    ExerciseCategory.UPPER_BODY: [
        ExerciseType.BENCH_PRESS,
        ExerciseType.INCLINE_BENCH_PRESS,
        ExerciseType.DECLINE_BENCH_PRESS,
        ExerciseType.CHEST_FLY,
        ExerciseType.WEIGHTED_PUSH_UPS,
        ExerciseType.SQUEEZE_PRESS,
        ExerciseType.DEADLIFTS,
        ExerciseType.BENT_OVER_ROWS,
        ExerciseType.PENDLAY_ROW,
        ExerciseType.SEAL_ROW,
        ExerciseType.SINGLE_ARM_DUMBBELL_ROW,
        ExerciseType.INVERTED_ROW,
        ExerciseType.LAT_PULLDOWN,
        ExerciseType.PULL_UPS,
        ExerciseType.T_BAR_ROW,
        ExerciseType.MEADOWS_ROW,
        ExerciseType.OVERHEAD_PRESS,
        ExerciseType.PUSH_PRESS,
        ExerciseType.ARNOLD_PRESS,
        ExerciseType.LATERAL_RAISE,
        ExerciseType.FRONT_RAISE,
        ExerciseType.REAR_DELT_FLY,
        ExerciseType.UPRIGHT_ROW,
        ExerciseType.Z_PRESS,
        ExerciseType.BARBELL_CURL,
        ExerciseType.DUMBBELL_CURL,
        ExerciseType.CONCENTRATION_CURL,
        ExerciseType.PREACHER_CURL,
        ExerciseType.CABLE_CURL,
        ExerciseType.HAMMER_CURL,
        ExerciseType.CLOSE_GRIP_BENCH_PRESS,
        ExerciseType.SKULL_CRUSHERS,
        ExerciseType.OVERHEAD_TRICEPS_EXTENSION,
        ExerciseType.TRICEPS_KICKBACK,
        ExerciseType.CABLE_PUSHDOWNS,
        ExerciseType.WEIGHTED_DIPS,
    ],
    ExerciseCategory.LOWER_BODY: [
        ExerciseType.SQUAT,
        ExerciseType.SPLIT_SQUATS,
        ExerciseType.STEP_UPS,
        ExerciseType.LEG_PRESS,
        ExerciseType.LUNGES,
        ExerciseType.ROMANIAN_DEADLIFT,
        ExerciseType.GOOD_MORNING,
        ExerciseType.HIP_THRUST,
        ExerciseType.GLUTE_BRIDGE,
        ExerciseType.NORDIC_CURL,
        ExerciseType.KETTLEBELL_SWING,
        ExerciseType.SINGLE_LEG_DEADLIFT,
        ExerciseType.STANDING_CALF_RAISE,
        ExerciseType.SEATED_CALF_RAISE,
    ],
    ExerciseCategory.CORE_ABS: [
        ExerciseType.WEIGHTED_SIT_UPS,
        ExerciseType.WEIGHTED_CRUNCH,
        ExerciseType.WEIGHTED_PLANK,
        ExerciseType.AB_ROLLOUT,
        ExerciseType.HANGING_LEG_RAISE,
        ExerciseType.CABLE_CRUNCH,
        ExerciseType.RUSSIAN_TWIST,
        ExerciseType.TURKISH_GET_UP,
    ],
    ExerciseCategory.FULL_BODY: [
        ExerciseType.CLEAN_AND_PRESS,
        ExerciseType.POWER_CLEAN,
        ExerciseType.SNATCH,
        ExerciseType.THRUSTER,
        ExerciseType.FARMERS_CARRY,
        ExerciseType.SUITCASE_CARRY,
        ExerciseType.OVERHEAD_CARRY,
    ],
    ExerciseCategory.MACHINE_BASED: [
        ExerciseType.CHEST_PRESS,
        ExerciseType.PEC_DECK,
        ExerciseType.ROW_MACHINE,
        ExerciseType.SHOULDER_PRESS_MACHINE,
        ExerciseType.LEG_EXTENSION,
        ExerciseType.LEG_CURL,
        ExerciseType.HACK_SQUAT_MACHINE,
        ExerciseType.SMITH_MACHINE,
    ],
}

# Holds and carries are the only exercises logged by duration
TIMED_EXERCISES = {
    ExerciseType.WEIGHTED_PLANK,
    ExerciseType.TURKISH_GET_UP,
    ExerciseType.FARMERS_CARRY,
    ExerciseType.SUITCASE_CARRY,
    ExerciseType.OVERHEAD_CARRY,
}

EXERCISE_CATALOG: dict[ExerciseType, ExerciseInfo] = {
    exercise_type: ExerciseInfo(
        category=category,
        supports_time=exercise_type in TIMED_EXERCISES,
    )
    for category, members in _CATEGORY_MEMBERS.items()
    for exercise_type in members
}


def exercises_in_category(category: ExerciseCategory) -> list[ExerciseType]:
    """List exercise types belonging to a category."""
    return [t for t, info in EXERCISE_CATALOG.items() if info.category == category]


@dataclass
class ExerciseSet:
    """A single set of an exercise.

    At least one of reps, weight (lbs) or time (seconds) should be positive
    for the set to be accepted into a session.
    """

    reps: int | None = None
    weight: float | None = None
    time: float | None = None
    timestamp: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def is_valid(self) -> bool:
        from ..validation import is_valid_set

        return is_valid_set(self.reps, self.weight, self.time)

    def get_display(self) -> str:
        """Get a human-readable set description."""
        parts = []
        if self.reps is not None:
            parts.append(f"{self.reps} reps")
        if self.weight is not None:
            parts.append(f"{self.weight:g} lbs")
        if self.time is not None:
            minutes, seconds = divmod(int(self.time), 60)
            parts.append(f"{minutes}:{seconds:02d}" if minutes else f"{seconds}s")
        return " / ".join(parts)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "reps": self.reps,
            "weight": self.weight,
            "time": self.time,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseSet":
        """Create from dictionary."""
        return cls(
            id=data.get("id") or str(uuid4()),
            reps=data.get("reps"),
            weight=data.get("weight"),
            time=data.get("time"),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )
