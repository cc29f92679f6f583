"""Backup bundles: the complete history and profile as one JSON document."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..errors import MALFORMED_DATA_ERRORS, BackupFormatError
from ..models.profile import UserProfile
from ..models.records import OneRepMax
from ..models.sessions import MeasurementSession, WorkoutSession
from ..models.templates import CustomWorkout
from ..store.local import LocalStore

FORMAT_VERSION = "1.0"


@dataclass
class DataBackup:
    """Snapshot of everything a user has recorded."""

    measurement_sessions: list[MeasurementSession] = field(default_factory=list)
    workout_sessions: list[WorkoutSession] = field(default_factory=list)
    profile: UserProfile | None = None
    custom_workouts: list[CustomWorkout] = field(default_factory=list)
    one_rep_maxes: list[OneRepMax] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    format_version: str = FORMAT_VERSION

    @classmethod
    async def create(cls, store: LocalStore) -> "DataBackup":
        """Snapshot the local store."""
        return cls(
            measurement_sessions=await store.load_measurement_sessions(),
            workout_sessions=await store.load_workout_sessions(),
            profile=await store.load_profile(),
            custom_workouts=await store.load_custom_workouts(),
            one_rep_maxes=await store.load_one_rep_maxes(),
        )

    def to_dict(self) -> dict:
        return {
            "measurement_sessions": [s.to_dict() for s in self.measurement_sessions],
            "workout_sessions": [w.to_dict() for w in self.workout_sessions],
            "profile": self.profile.to_dict() if self.profile else None,
            "custom_workouts": [w.to_dict() for w in self.custom_workouts],
            "one_rep_max_records": [r.to_dict() for r in self.one_rep_maxes],
            "created_at": self.created_at.isoformat(),
            "format_version": self.format_version,
        }

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> "DataBackup":
        """Parse a bundle.

        Raises:
            BackupFormatError: On an unknown format version or malformed content
        """
        if not isinstance(data, dict):
            raise BackupFormatError("Backup must be a JSON object")

        version = data.get("format_version")
        if version != FORMAT_VERSION:
            raise BackupFormatError(f"Unsupported backup format version: {version!r}")

        try:
            return cls(
                measurement_sessions=[
                    MeasurementSession.from_dict(s) for s in data.get("measurement_sessions", [])
                ],
                workout_sessions=[WorkoutSession.from_dict(w) for w in data.get("workout_sessions", [])],
                profile=UserProfile.from_dict(data["profile"]) if data.get("profile") else None,
                custom_workouts=[CustomWorkout.from_dict(w) for w in data.get("custom_workouts", [])],
                one_rep_maxes=[OneRepMax.from_dict(r) for r in data.get("one_rep_max_records", [])],
                created_at=datetime.fromisoformat(data["created_at"]),
                format_version=version,
            )
        except MALFORMED_DATA_ERRORS as e:
            raise BackupFormatError(f"Malformed backup: {e}") from e

    @classmethod
    def from_json(cls, text: str) -> "DataBackup":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise BackupFormatError(f"Backup is not valid JSON: {e}") from e
        return cls.from_dict(data)

    @classmethod
    def read(cls, path: Path) -> "DataBackup":
        return cls.from_json(path.read_text())

    def write(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json())

    def get_summary(self) -> str:
        """Generate a short description of the bundle."""
        readings = sum(len(s.readings) for s in self.measurement_sessions)
        sets = sum(w.total_sets for w in self.workout_sessions)
        summary = f"Backup created {self.created_at.strftime('%Y-%m-%d %H:%M')} (format {self.format_version})\n"
        summary += f"Measurement sessions: {len(self.measurement_sessions)} ({readings} readings)\n"
        summary += f"Workouts: {len(self.workout_sessions)} ({sets} sets)\n"
        summary += f"Custom workouts: {len(self.custom_workouts)}\n"
        summary += f"One-rep max records: {len(self.one_rep_maxes)}\n"
        if self.profile:
            summary += f"Profile: {self.profile.display_name or self.profile.email}\n"
        else:
            summary += "Profile: none\n"
        return summary
