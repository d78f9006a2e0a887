"""Persisted application state partitions."""

from uuid import UUID

from pydantic import BaseModel, Field

from nutrilog.domain.models import ThemeMode, UnitSystem

MAX_RECENT_FOODS = 10


class SessionState(BaseModel):
    """Signed-in identity and onboarding flags."""

    user_id: UUID | None = None
    email: str | None = None
    is_authenticated: bool = False
    has_completed_onboarding: bool = False


class NotificationSettings(BaseModel):
    """Reminder toggles; scheduling lives in the client."""

    enabled: bool = True
    meal_reminders: bool = True
    workout_reminders: bool = True


class SettingsState(BaseModel):
    """Display preferences for the client."""

    theme: ThemeMode = ThemeMode.SYSTEM
    units: UnitSystem = UnitSystem.METRIC
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)


class RecentFood(BaseModel):
    id: UUID
    name: str
    brand: str | None = None


class RecentFoodsState(BaseModel):
    """Most recently logged foods, newest first."""

    items: list[RecentFood] = Field(default_factory=list)
