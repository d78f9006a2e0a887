"""Nutrition domain models."""

from dataclasses import dataclass
from enum import Enum


class ActivityLevel(str, Enum):
    """Ordinal activity levels used for TDEE multipliers."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class GoalType(str, Enum):
    """What the user is working toward."""

    LOSE_WEIGHT = "lose_weight"
    GAIN_WEIGHT = "gain_weight"
    MAINTAIN = "maintain"
    BUILD_MUSCLE = "build_muscle"


class Gender(str, Enum):
    """Gender used by the BMR formula."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


@dataclass(frozen=True)
class NutritionalInfo:
    """Nutrient amounts, either per 100g or for a consumed portion."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    cholesterol: float = 0.0

    @classmethod
    def zero(cls) -> "NutritionalInfo":
        """Return a record with every nutrient set to zero."""
        return cls()


@dataclass(frozen=True)
class MacroRatios:
    """Macro split as percentages of the calorie goal."""

    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class CustomNutritionGoals:
    """User overrides for the non-macro daily targets."""

    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None
    cholesterol: float | None = None
