"""Domain models for diary statistics."""

from dataclasses import dataclass
from datetime import date

from nutrilog.domain.nutrition import NutritionalInfo


@dataclass(frozen=True)
class DaySummary:
    """Totals and goal progress for one day."""

    day: date
    total: NutritionalInfo
    calorie_goal: int
    calorie_progress: int


@dataclass(frozen=True)
class WeeklyAverages:
    """Average daily intake over a week."""

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float


@dataclass(frozen=True)
class WeekSummary:
    """Monday-based week of daily summaries."""

    days: list[DaySummary]
    averages: WeeklyAverages
    calories_burned: int
