"""Statistics over session history.

Everything here is a pure function of the history passed in and ``now``.
Callers pass ``now`` explicitly in tests; it defaults to the current time.
"""

import calendar
import math
from datetime import datetime, timedelta
from typing import Iterable

from ..models.analytics import (
    BPCategory,
    ExerciseStats,
    FitnessTrendPoint,
    RollingAverage,
    TimeRange,
    TrendAnalysis,
    TrendDirection,
)
from ..models.exercises import ExerciseType
from ..models.readings import HealthMetric, MetricType
from ..models.sessions import ExerciseSession, MeasurementSession, WorkoutSession

ROLLING_WINDOWS = (3, 7, 14, 21, 30)

# Absolute change in average weight (lbs) needed to call a trend
TREND_WEIGHT_THRESHOLD = 5.0

# Relative change (percent) needed to call a metric trend
METRIC_TREND_PERCENT_THRESHOLD = 5.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def classify_bp(systolic: float, diastolic: float) -> BPCategory:
    """Classify a reading with the fixed threshold ladder.

    Values are rounded first. Rungs are checked top-down and the first match
    wins, so 179/70 is stage 2 and 180/70 is a crisis.
    """
    sys_value = round_half_up(systolic)
    dia_value = round_half_up(diastolic)

    if sys_value >= 180 or dia_value >= 120:
        return BPCategory.HYPERTENSIVE_CRISIS
    if sys_value >= 140 or dia_value >= 90:
        return BPCategory.HIGH_STAGE_2
    if sys_value >= 130 or dia_value >= 80:
        return BPCategory.HIGH_STAGE_1
    if sys_value >= 120 or dia_value >= 80:
        return BPCategory.ELEVATED
    return BPCategory.NORMAL


def _mean(values: list[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)


def rolling_average(
    sessions: Iterable[MeasurementSession],
    window_days: int,
    now: datetime | None = None,
) -> RollingAverage | None:
    """Average all readings of sessions started within the last window_days.

    The window is inclusive on both ends. Returns None when no session in the
    window has a reading.
    """
    end = now or datetime.now()
    start = end - timedelta(days=window_days)

    in_window = [s for s in sessions if start <= s.start_time <= end]
    if not in_window:
        return None

    readings = [r for s in in_window for r in s.readings]
    if not readings:
        return None

    return RollingAverage(
        window_days=window_days,
        avg_systolic=_mean([r.systolic for r in readings]),
        avg_diastolic=_mean([r.diastolic for r in readings]),
        avg_heart_rate=_mean([r.heart_rate for r in readings if r.heart_rate is not None]),
        reading_count=len(readings),
        session_count=len(in_window),
        window_start=start,
        window_end=end,
    )


def rolling_averages(
    sessions: Iterable[MeasurementSession],
    now: datetime | None = None,
    windows: Iterable[int] = ROLLING_WINDOWS,
) -> list[RollingAverage]:
    """Compute rolling averages for each window.

    Windows without data are left out, so the result may be shorter than
    ``windows`` or empty.
    """
    sessions = list(sessions)
    now = now or datetime.now()
    results = []
    for days in windows:
        average = rolling_average(sessions, days, now)
        if average is not None:
            results.append(average)
    return results


def _subtract_months(value: datetime, months: int) -> datetime:
    month_index = value.year * 12 + (value.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def time_range_cutoff(time_range: TimeRange, now: datetime | None = None) -> datetime:
    """Get the earliest start time included in a time range."""
    now = now or datetime.now()
    if time_range == TimeRange.WEEK:
        return now - timedelta(weeks=1)
    if time_range == TimeRange.MONTH:
        return _subtract_months(now, 1)
    if time_range == TimeRange.THREE_MONTHS:
        return _subtract_months(now, 3)
    if time_range == TimeRange.YEAR:
        return _subtract_months(now, 12)
    raise ValueError(f"Unknown time range: {time_range!r}")


def _sessions_of_type(
    workouts: Iterable[WorkoutSession], exercise_type: ExerciseType
) -> list[ExerciseSession]:
    return [
        exercise
        for workout in workouts
        for exercise in workout.exercise_sessions
        if exercise.exercise_type == exercise_type
    ]


def fitness_trends(
    workouts: Iterable[WorkoutSession],
    exercise_type: ExerciseType,
    time_range: TimeRange,
    now: datetime | None = None,
) -> list[FitnessTrendPoint]:
    """Collect chronological trend points for one exercise type."""
    cutoff = time_range_cutoff(time_range, now)
    recent = [w for w in workouts if w.start_time >= cutoff]

    points = [
        FitnessTrendPoint(
            date=exercise.start_time,
            total_reps=exercise.total_reps,
            average_weight=exercise.average_weight or 0,
            max_weight=exercise.max_weight or 0,
            total_time=exercise.total_time,
            sets=len(exercise.sets),
        )
        for exercise in _sessions_of_type(recent, exercise_type)
    ]
    return sorted(points, key=lambda p: p.date)


def analyze_trend_points(points: list[FitnessTrendPoint]) -> TrendAnalysis:
    """Reduce chronological trend points to a direction and improvement."""
    if len(points) < 2:
        first = points[0] if points else None
        return TrendAnalysis(
            direction=TrendDirection.STABLE,
            weight_delta=0,
            avg_weight=first.average_weight if first else 0,
            max_weight=first.max_weight if first else 0,
            sample_count=len(points),
            percent_improvement=0,
        )

    first_weight = points[0].average_weight
    last_weight = points[-1].average_weight
    delta = last_weight - first_weight

    if delta > TREND_WEIGHT_THRESHOLD:
        direction = TrendDirection.INCREASING
    elif delta < -TREND_WEIGHT_THRESHOLD:
        direction = TrendDirection.DECREASING
    else:
        direction = TrendDirection.STABLE

    return TrendAnalysis(
        direction=direction,
        weight_delta=delta,
        avg_weight=sum(p.average_weight for p in points) / len(points),
        max_weight=max(p.max_weight for p in points),
        sample_count=len(points),
        percent_improvement=(delta / first_weight * 100) if first_weight > 0 else 0,
    )


def trend_analysis(
    workouts: Iterable[WorkoutSession],
    exercise_type: ExerciseType,
    time_range: TimeRange,
    now: datetime | None = None,
) -> TrendAnalysis:
    """Analyze weight progression for an exercise over a time range."""
    return analyze_trend_points(fitness_trends(workouts, exercise_type, time_range, now))


def exercise_stats(
    workouts: Iterable[WorkoutSession], exercise_type: ExerciseType
) -> ExerciseStats:
    """Lifetime totals for an exercise across the whole history."""
    sessions = _sessions_of_type(workouts, exercise_type)
    max_weights = [s.max_weight for s in sessions if s.max_weight is not None]

    return ExerciseStats(
        exercise_type=exercise_type,
        total_sessions=len(sessions),
        total_sets=sum(len(s.sets) for s in sessions),
        total_reps=sum(s.total_reps for s in sessions),
        total_time=sum(s.total_time for s in sessions),
        max_weight=max(max_weights) if max_weights else 0,
        average_weight=_mean(max_weights) or 0,
    )


def _recent_metrics(
    sessions: Iterable[MeasurementSession],
    metric_type: MetricType,
    days: int,
    now: datetime | None,
) -> list[HealthMetric]:
    cutoff = (now or datetime.now()) - timedelta(days=days)
    metrics = [
        m
        for s in sessions
        for m in s.metrics
        if m.type == metric_type and m.timestamp >= cutoff
    ]
    return sorted(metrics, key=lambda m: m.timestamp)


def metric_average(
    sessions: Iterable[MeasurementSession],
    metric_type: MetricType,
    days: int = 30,
    now: datetime | None = None,
) -> float | None:
    """Average value of a metric type recorded in the last ``days`` days."""
    return _mean([m.value for m in _recent_metrics(sessions, metric_type, days, now)])


def metric_trend(
    sessions: Iterable[MeasurementSession],
    metric_type: MetricType,
    days: int = 7,
    now: datetime | None = None,
) -> TrendDirection:
    """Compare the first and last value of a metric over the last ``days`` days."""
    metrics = _recent_metrics(sessions, metric_type, days, now)
    if len(metrics) < 2 or metrics[0].value == 0:
        return TrendDirection.STABLE

    first = metrics[0].value
    change_percent = (metrics[-1].value - first) / first * 100
    if change_percent > METRIC_TREND_PERCENT_THRESHOLD:
        return TrendDirection.INCREASING
    if change_percent < -METRIC_TREND_PERCENT_THRESHOLD:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE
