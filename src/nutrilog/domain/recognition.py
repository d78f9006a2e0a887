"""Models for AI food recognition results."""

import re
from dataclasses import dataclass

from pydantic import BaseModel, Field, field_validator

from nutrilog.domain.foods import FoodItem

_NUMBER_PATTERN = re.compile(r"[-+]?\d*\.?\d+")


class RecognizedFood(BaseModel):
    """Single food item returned by the recognition endpoint."""

    name: str = "Unknown Food"
    brand: str | None = None
    category: str | None = None
    serving_size: str | None = None
    calories: float = Field(default=0.0, ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)
    fiber: float = Field(default=0.0, ge=0.0)
    sugar: float = Field(default=0.0, ge=0.0)
    sodium: float = Field(default=0.0, ge=0.0)

    @field_validator(
        "calories", "protein", "carbs", "fat", "fiber", "sugar", "sodium", mode="before"
    )
    @classmethod
    def _parse_amount(cls, value: object) -> float:
        """Accept numbers or strings such as "12g" and "150mg"."""
        if value is None:
            return 0.0
        if isinstance(value, int | float):
            return float(value)
        match = _NUMBER_PATTERN.search(str(value))
        return float(match.group()) if match else 0.0


class RecognitionResult(BaseModel):
    """Structured output of the recognition endpoint."""

    items: list[RecognizedFood]


PLACEHOLDER_FOOD = RecognizedFood(
    name="Unknown Food Item",
    brand="Generic",
    serving_size="1 serving",
    calories=100,
    protein=2,
    carbs=15,
    fat=3,
    fiber=1,
    sugar=2,
    sodium=150,
)


@dataclass(frozen=True)
class FoodInputResult:
    """Outcome of turning text or a photo into a food item."""

    item: RecognizedFood
    confidence: float
    is_fallback: bool
    saved_food: FoodItem | None = None
