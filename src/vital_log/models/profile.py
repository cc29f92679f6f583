"""User profile data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class UnitSystem(str, Enum):
    """Preferred measurement units."""

    IMPERIAL = "imperial"
    METRIC = "metric"


class Theme(str, Enum):
    """Display theme preference."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


@dataclass
class UserPreferences:
    """Per-user display and reminder preferences."""

    units: UnitSystem = UnitSystem.IMPERIAL
    notifications_enabled: bool = True
    reminder_time: str | None = None  # HH:MM
    theme: Theme = Theme.SYSTEM

    def to_dict(self) -> dict:
        return {
            "units": self.units.value,
            "notifications_enabled": self.notifications_enabled,
            "reminder_time": self.reminder_time,
            "theme": self.theme.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserPreferences":
        return cls(
            units=UnitSystem(data.get("units", "imperial")),
            notifications_enabled=data.get("notifications_enabled", True),
            reminder_time=data.get("reminder_time"),
            theme=Theme(data.get("theme", "system")),
        )


@dataclass
class UserProfile:
    """Account profile synced alongside the session history."""

    id: str
    email: str
    display_name: str | None = None
    photo_url: str | None = None
    preferences: UserPreferences = field(default_factory=UserPreferences)
    created_at: datetime = field(default_factory=datetime.now)
    last_updated: datetime = field(default_factory=datetime.now)

    def touch(self) -> None:
        """Record a profile change."""
        self.last_updated = datetime.now()

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "email": self.email,
            "display_name": self.display_name,
            "photo_url": self.photo_url,
            "preferences": self.preferences.to_dict(),
            "created_at": self.created_at.isoformat(),
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            email=data["email"],
            display_name=data.get("display_name"),
            photo_url=data.get("photo_url"),
            preferences=UserPreferences.from_dict(data.get("preferences", {})),
            created_at=datetime.fromisoformat(data["created_at"]),
            last_updated=datetime.fromisoformat(data["last_updated"]),
        )

    def get_summary(self) -> str:
        """Generate a short profile summary."""
        name = self.display_name or self.email
        summary = f"User: {name} ({self.id})\n"
        summary += f"Units: {self.preferences.units.value}\n"
        summary += f"Theme: {self.preferences.theme.value}\n"
        if self.preferences.notifications_enabled and self.preferences.reminder_time:
            summary += f"Reminder: {self.preferences.reminder_time}\n"
        summary += f"Last updated: {self.last_updated.strftime('%Y-%m-%d %H:%M')}\n"
        return summary
