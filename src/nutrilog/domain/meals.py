"""Domain models for the daily food diary."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from uuid import UUID

from nutrilog.domain.foods import FoodItem, ServingSize
from nutrilog.domain.nutrition import NutritionalInfo


class MealType(str, Enum):
    """Meal slot a food was eaten in."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class ConsumedFood:
    """Logged portion of a food with its nutrition snapshot."""

    id: UUID
    food_item: FoodItem
    serving_size: ServingSize
    quantity: float
    nutrition_consumed: NutritionalInfo


@dataclass(frozen=True)
class MealEntry:
    """Foods eaten in one meal slot of a day."""

    id: UUID
    meal_type: MealType
    timestamp: datetime
    foods: list[ConsumedFood] = field(default_factory=list)
    location: str | None = None


@dataclass(frozen=True)
class DailyNutrition:
    """A user's diary for one calendar day."""

    id: UUID
    user_id: UUID
    date: date
    calorie_goal: int
    total_nutrition: NutritionalInfo
    meals: list[MealEntry] = field(default_factory=list)
    water_intake: float = 0.0
    notes: str | None = None

    def meal(self, meal_type: MealType) -> MealEntry | None:
        """Return the meal entry for a meal slot, if one exists."""
        for meal in self.meals:
            if meal.meal_type == meal_type:
                return meal
        return None

    def all_foods(self) -> list[ConsumedFood]:
        """Return consumed foods across every meal, in meal order."""
        return [food for meal in self.meals for food in meal.foods]

    def find_food(self, entry_id: UUID) -> ConsumedFood | None:
        """Return a consumed food by id, if it was logged on this day."""
        for food in self.all_foods():
            if food.id == entry_id:
                return food
        return None
