"""Plausibility checks for readings, metrics and exercise sets.

All checks return booleans. Callers decide how to surface a rejection.
"""

from .models.readings import METRIC_TYPES, MetricType

SYSTOLIC_RANGE = (50, 300)
DIASTOLIC_RANGE = (30, 200)
HEART_RATE_RANGE = (30, 200)


def _in_range(value: float, bounds: tuple[float, float]) -> bool:
    low, high = bounds
    return low <= value <= high


def is_valid_reading(systolic: int, diastolic: int, heart_rate: int | None = None) -> bool:
    """Check a blood pressure reading.

    Systolic and diastolic must be in range and systolic must exceed
    diastolic. Heart rate is optional but must be in range when given.
    """
    if not _in_range(systolic, SYSTOLIC_RANGE):
        return False
    if not _in_range(diastolic, DIASTOLIC_RANGE):
        return False
    if systolic <= diastolic:
        return False
    if heart_rate is not None and not _in_range(heart_rate, HEART_RATE_RANGE):
        return False
    return True


def is_valid_metric(metric_type: MetricType | str, value: float) -> bool:
    """Check a metric value against the range for its type.

    Raises:
        ValueError: If the metric type is unknown
    """
    try:
        info = METRIC_TYPES[MetricType(metric_type)]
    except (ValueError, KeyError):
        raise ValueError(f"Unknown metric type: {metric_type!r}") from None
    return info.min_value <= value <= info.max_value


def is_valid_set(
    reps: int | None = None,
    weight: float | None = None,
    time: float | None = None,
) -> bool:
    """Check that at least one populated field of a set is positive."""
    return any(v is not None and v > 0 for v in (reps, weight, time))
