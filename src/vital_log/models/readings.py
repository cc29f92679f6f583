"""Blood pressure readings and standalone health metrics."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class MetricType(str, Enum):
    """Kinds of standalone health metric."""

    WEIGHT = "weight"
    BLOOD_SUGAR = "blood_sugar"
    HEART_RATE = "heart_rate"
    BLOOD_PRESSURE = "blood_pressure"
    BODY_FAT = "body_fat"


@dataclass(frozen=True)
class MetricTypeInfo:
    """Display and plausibility data for a metric type."""

    label: str
    unit: str
    min_value: float
    max_value: float


# Plausible range per metric type, inclusive on both ends
METRIC_TYPES: dict[MetricType, MetricTypeInfo] = {
    MetricType.WEIGHT: MetricTypeInfo("Weight", "lbs", 50, 500),
    MetricType.BLOOD_SUGAR: MetricTypeInfo("Blood Sugar", "mg/dL", 20, 600),
    MetricType.HEART_RATE: MetricTypeInfo("Heart Rate", "bpm", 30, 200),
    MetricType.BLOOD_PRESSURE: MetricTypeInfo("Blood Pressure", "mmHg", 50, 300),
    MetricType.BODY_FAT: MetricTypeInfo("Body Fat", "%", 1, 50),
}


@dataclass(frozen=True)
class BloodPressureReading:
    """A single blood pressure measurement."""

    systolic: int
    diastolic: int
    heart_rate: int | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_valid(self) -> bool:
        from ..validation import is_valid_reading

        return is_valid_reading(self.systolic, self.diastolic, self.heart_rate)

    def get_display(self) -> str:
        """Get a short string such as ``120/80 HR 72``."""
        result = f"{self.systolic}/{self.diastolic}"
        if self.heart_rate is not None:
            result += f" HR {self.heart_rate}"
        return result

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "systolic": self.systolic,
            "diastolic": self.diastolic,
            "heart_rate": self.heart_rate,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BloodPressureReading":
        """Create from dictionary."""
        return cls(
            systolic=int(data["systolic"]),
            diastolic=int(data["diastolic"]),
            heart_rate=data.get("heart_rate"),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


@dataclass(frozen=True)
class HealthMetric:
    """A standalone health measurement such as weight or blood sugar."""

    type: MetricType
    value: float
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_valid(self) -> bool:
        from ..validation import is_valid_metric

        return is_valid_metric(self.type, self.value)

    @property
    def unit(self) -> str:
        return METRIC_TYPES[self.type].unit

    def get_display(self) -> str:
        """Get the value formatted with its unit."""
        if self.type in (MetricType.WEIGHT, MetricType.BLOOD_SUGAR, MetricType.BODY_FAT):
            return f"{self.value:.1f} {self.unit}"
        return f"{int(self.value)} {self.unit}"

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "type": self.type.value,
            "value": self.value,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HealthMetric":
        """Create from dictionary."""
        return cls(
            type=MetricType(data["type"]),
            value=float(data["value"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )
