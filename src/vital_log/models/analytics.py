"""Derived statistics. None of these are persisted."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .exercises import ExerciseType


class BPCategory(str, Enum):
    """Blood pressure category from the fixed threshold ladder."""

    NORMAL = "normal"
    ELEVATED = "elevated"
    HIGH_STAGE_1 = "high_stage_1"
    HIGH_STAGE_2 = "high_stage_2"
    HYPERTENSIVE_CRISIS = "hypertensive_crisis"

    @property
    def label(self) -> str:
        labels = {
            BPCategory.NORMAL: "Normal",
            BPCategory.ELEVATED: "Elevated",
            BPCategory.HIGH_STAGE_1: "High Stage 1",
            BPCategory.HIGH_STAGE_2: "High Stage 2",
            BPCategory.HYPERTENSIVE_CRISIS: "Hypertensive Crisis",
        }
        return labels[self]


class TrendDirection(str, Enum):
    """Direction of a trend over time."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class TimeRange(str, Enum):
    """Look-back range for fitness trends."""

    WEEK = "week"
    MONTH = "month"
    THREE_MONTHS = "three_months"
    YEAR = "year"


@dataclass
class RollingAverage:
    """Average blood pressure over a trailing window of days."""

    window_days: int
    avg_systolic: float
    avg_diastolic: float
    avg_heart_rate: float | None
    reading_count: int
    session_count: int
    window_start: datetime
    window_end: datetime

    @property
    def period_label(self) -> str:
        return f"{self.window_days}-Day"

    @property
    def category(self) -> BPCategory:
        from ..services.aggregation import classify_bp

        return classify_bp(self.avg_systolic, self.avg_diastolic)

    def to_dict(self) -> dict:
        return {
            "window_days": self.window_days,
            "avg_systolic": self.avg_systolic,
            "avg_diastolic": self.avg_diastolic,
            "avg_heart_rate": self.avg_heart_rate,
            "reading_count": self.reading_count,
            "session_count": self.session_count,
            "window_start": self.window_start.isoformat(),
            "window_end": self.window_end.isoformat(),
            "category": self.category.value,
        }


@dataclass
class FitnessTrendPoint:
    """One exercise session reduced to the numbers used for trends."""

    date: datetime
    total_reps: int
    average_weight: float
    max_weight: float
    total_time: float
    sets: int


@dataclass
class TrendAnalysis:
    """Weight progression for one exercise type over a time range."""

    direction: TrendDirection
    weight_delta: float
    avg_weight: float
    max_weight: float
    sample_count: int
    percent_improvement: float

    def get_delta_display(self) -> str:
        if self.weight_delta == 0:
            return "No change"
        return f"{self.weight_delta:+.1f} lbs"

    def get_improvement_display(self) -> str:
        if self.percent_improvement == 0:
            return "0%"
        return f"{self.percent_improvement:+.1f}%"

    def to_dict(self) -> dict:
        return {
            "direction": self.direction.value,
            "weight_delta": self.weight_delta,
            "avg_weight": self.avg_weight,
            "max_weight": self.max_weight,
            "sample_count": self.sample_count,
            "percent_improvement": self.percent_improvement,
        }


@dataclass
class ExerciseStats:
    """Lifetime totals for one exercise type."""

    exercise_type: ExerciseType
    total_sessions: int
    total_sets: int
    total_reps: int
    total_time: float
    max_weight: float
    average_weight: float

    def to_dict(self) -> dict:
        return {
            "exercise_type": self.exercise_type.value,
            "total_sessions": self.total_sessions,
            "total_sets": self.total_sets,
            "total_reps": self.total_reps,
            "total_time": self.total_time,
            "max_weight": self.max_weight,
            "average_weight": self.average_weight,
        }
