"""Data models for vital-log."""

from .analytics import (
    BPCategory,
    ExerciseStats,
    FitnessTrendPoint,
    RollingAverage,
    TimeRange,
    TrendAnalysis,
    TrendDirection,
)
from .exercises import EXERCISE_CATALOG, ExerciseCategory, ExerciseInfo, ExerciseSet, ExerciseType
from .profile import UserPreferences, UserProfile
from .readings import METRIC_TYPES, BloodPressureReading, HealthMetric, MetricType
from .records import MAJOR_LIFTS, OneRepMax, epley_one_rep_max
from .sessions import (
    ExerciseSession,
    MeasurementSession,
    MeasurementState,
    WorkoutSession,
    WorkoutState,
    auto_start,
)
from .templates import (
    PRE_BUILT_WORKOUTS,
    CustomWorkout,
    TemplateExercise,
    WorkoutTemplate,
    get_template,
)

__all__ = [
    "auto_start",
    "BloodPressureReading",
    "BPCategory",
    "CustomWorkout",
    "epley_one_rep_max",
    "EXERCISE_CATALOG",
    "ExerciseCategory",
    "ExerciseInfo",
    "ExerciseSession",
    "ExerciseSet",
    "ExerciseStats",
    "ExerciseType",
    "FitnessTrendPoint",
    "get_template",
    "HealthMetric",
    "MAJOR_LIFTS",
    "MeasurementSession",
    "MeasurementState",
    "METRIC_TYPES",
    "MetricType",
    "OneRepMax",
    "PRE_BUILT_WORKOUTS",
    "RollingAverage",
    "TemplateExercise",
    "TimeRange",
    "TrendAnalysis",
    "TrendDirection",
    "UserPreferences",
    "UserProfile",
    "WorkoutSession",
    "WorkoutState",
    "WorkoutTemplate",
]
