"""Domain models for the food catalog."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from nutrilog.domain.nutrition import NutritionalInfo


class FoodCategory(str, Enum):
    """Catalog category of a food item."""

    PROTEIN = "protein"
    GRAIN = "grain"
    VEGETABLE = "vegetable"
    FRUIT = "fruit"
    DAIRY = "dairy"
    FAT = "fat"
    BEVERAGE = "beverage"
    SNACK = "snack"
    OTHER = "other"


class MeasurementUnit(str, Enum):
    """Unit label attached to a serving size."""

    G = "g"
    OZ = "oz"
    ML = "ml"
    CUP = "cup"
    TBSP = "tbsp"
    TSP = "tsp"
    PIECE = "piece"
    SLICE = "slice"


@dataclass(frozen=True)
class ServingSize:
    """Named portion of a food with its weight in grams."""

    id: UUID
    name: str
    weight: float
    unit: MeasurementUnit


@dataclass(frozen=True)
class NewServingSize:
    """Serving size that has not been stored yet."""

    name: str
    weight: float
    unit: MeasurementUnit


@dataclass(frozen=True)
class FoodItem:
    """Nutritional reference record for one food."""

    id: UUID
    name: str
    category: FoodCategory
    nutrition_per_100g: NutritionalInfo
    serving_sizes: list[ServingSize]
    is_custom: bool
    created_at: datetime
    updated_at: datetime
    brand: str | None = None
    barcode: str | None = None
    image_url: str | None = None

    def serving_size(self, serving_size_id: UUID) -> ServingSize | None:
        """Return the serving size with the given id, if it belongs to this food."""
        for serving in self.serving_sizes:
            if serving.id == serving_size_id:
                return serving
        return None


@dataclass(frozen=True)
class NewFoodItem:
    """Food item payload for catalog creation."""

    name: str
    category: FoodCategory
    nutrition_per_100g: NutritionalInfo
    serving_sizes: list[NewServingSize] = field(default_factory=list)
    is_custom: bool = True
    brand: str | None = None
    barcode: str | None = None
    image_url: str | None = None


COMMON_SERVING_SIZES: dict[FoodCategory, tuple[NewServingSize, ...]] = {
    FoodCategory.PROTEIN: (
        NewServingSize("100g", 100, MeasurementUnit.G),
        NewServingSize("1 piece (85g)", 85, MeasurementUnit.PIECE),
        NewServingSize("1 oz", 28.35, MeasurementUnit.OZ),
    ),
    FoodCategory.GRAIN: (
        NewServingSize("100g", 100, MeasurementUnit.G),
        NewServingSize("1 cup cooked", 195, MeasurementUnit.CUP),
        NewServingSize("1 slice", 30, MeasurementUnit.SLICE),
    ),
    FoodCategory.VEGETABLE: (
        NewServingSize("100g", 100, MeasurementUnit.G),
        NewServingSize("1 cup", 150, MeasurementUnit.CUP),
        NewServingSize("1 medium", 120, MeasurementUnit.PIECE),
    ),
    FoodCategory.FRUIT: (
        NewServingSize("100g", 100, MeasurementUnit.G),
        NewServingSize("1 medium", 150, MeasurementUnit.PIECE),
        NewServingSize("1 cup", 150, MeasurementUnit.CUP),
    ),
    FoodCategory.DAIRY: (
        NewServingSize("100g", 100, MeasurementUnit.G),
        NewServingSize("1 cup", 240, MeasurementUnit.CUP),
        NewServingSize("1 tbsp", 15, MeasurementUnit.TBSP),
    ),
    FoodCategory.BEVERAGE: (
        NewServingSize("100ml", 100, MeasurementUnit.ML),
        NewServingSize("1 cup (240ml)", 240, MeasurementUnit.CUP),
        NewServingSize("1 bottle (330ml)", 330, MeasurementUnit.PIECE),
    ),
}

DEFAULT_SERVING_SIZES: tuple[NewServingSize, ...] = (
    NewServingSize("100g", 100, MeasurementUnit.G),
    NewServingSize("1 serving", 100, MeasurementUnit.PIECE),
)
