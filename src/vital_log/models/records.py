"""One-rep-max personal records and estimation formulas."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import uuid4

MAJOR_LIFTS = [
    "Bench Press",
    "Deadlift",
    "Back Squat",
    "Front Squat",
    "Overhead Press",
    "Barbell Row",
    "Power Clean",
    "Snatch",
    "Clean & Jerk",
    "Incline Bench Press",
    "Sumo Deadlift",
    "Romanian Deadlift",
]


@dataclass(frozen=True)
class OneRepMax:
    """A tested or estimated one-rep max for a lift, in lbs."""

    lift_name: str
    weight: float
    date: datetime = field(default_factory=datetime.now)
    notes: str | None = None
    is_custom: bool = False
    id: str = field(default_factory=lambda: str(uuid4()))

    def get_display(self) -> str:
        return f"{self.lift_name}: {self.weight:.1f} lbs ({self.date.strftime('%Y-%m-%d')})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "lift_name": self.lift_name,
            "weight": self.weight,
            "date": self.date.isoformat(),
            "notes": self.notes,
            "is_custom": self.is_custom,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OneRepMax":
        return cls(
            id=data["id"],
            lift_name=data["lift_name"],
            weight=float(data["weight"]),
            date=datetime.fromisoformat(data["date"]),
            notes=data.get("notes"),
            is_custom=data.get("is_custom", False),
        )


def epley_one_rep_max(weight: float, reps: int) -> float:
    """Estimate a one-rep max with the Epley formula, ``w * (1 + r/30)``."""
    if reps <= 0:
        return 0
    return weight * (1 + reps / 30.0)


def brzycki_one_rep_max(weight: float, reps: int) -> float:
    """Estimate a one-rep max with the Brzycki formula."""
    if reps <= 0:
        return 0
    return weight / (1.0278 - 0.0278 * reps)


def weight_for_reps(one_rep_max: float, target_reps: int) -> float:
    """Invert Epley: the working weight for a target rep count."""
    if target_reps <= 0:
        return 0
    return one_rep_max / (1 + target_reps / 30.0)


def percent_of_max(weight: float, one_rep_max: float) -> float:
    if one_rep_max <= 0:
        return 0
    return weight / one_rep_max * 100
