"""Domain models for user profiles."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID

from nutrilog.domain.nutrition import (
    ActivityLevel,
    CustomNutritionGoals,
    Gender,
    GoalType,
    MacroRatios,
)


class UnitSystem(str, Enum):
    """Display unit system."""

    METRIC = "metric"
    IMPERIAL = "imperial"


class ThemeMode(str, Enum):
    """Client theme preference."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


DEFAULT_MACRO_RATIOS = MacroRatios(protein=30, carbs=40, fat=30)


@dataclass(frozen=True)
class NutritionGoals:
    """Goal configuration for a user."""

    goal_type: GoalType
    calorie_goal: int
    macro_ratios: MacroRatios = DEFAULT_MACRO_RATIOS
    target_weight: float | None = None
    weekly_weight_change: float | None = None
    custom_goals: CustomNutritionGoals = field(default_factory=CustomNutritionGoals)


@dataclass(frozen=True)
class UserPreferences:
    """Stored display preferences for a user."""

    units: UnitSystem = UnitSystem.METRIC
    theme: ThemeMode = ThemeMode.SYSTEM


@dataclass(frozen=True)
class UserProfile:
    """Represents a user stored in the database."""

    id: UUID
    email: str
    name: str
    date_of_birth: date
    gender: Gender
    height: float
    current_weight: float
    activity_level: ActivityLevel
    goals: NutritionGoals
    preferences: UserPreferences
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class NewUserProfile:
    """Registration data for a profile that has not been stored yet."""

    email: str
    name: str
    date_of_birth: date
    gender: Gender
    height: float
    current_weight: float
    activity_level: ActivityLevel
    goal_type: GoalType
    target_weight: float | None = None
    weekly_weight_change: float | None = None
    calorie_goal: int | None = None
    macro_ratios: MacroRatios = DEFAULT_MACRO_RATIOS
    preferences: UserPreferences = field(default_factory=UserPreferences)
