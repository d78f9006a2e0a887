"""Food recognition from free text or photos."""

import base64
import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from nutrilog.domain.foods import (
    FoodCategory,
    FoodItem,
    MeasurementUnit,
    NewFoodItem,
    NewServingSize,
)
from nutrilog.domain.nutrition import NutritionalInfo
from nutrilog.domain.recognition import (
    PLACEHOLDER_FOOD,
    FoodInputResult,
    RecognitionResult,
    RecognizedFood,
)
from nutrilog.services.foods import FoodService

_logger = logging.getLogger(__name__)

RECOGNIZED_CONFIDENCE = 0.9
_FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

_NUTRIENT_SCHEMA = {"type": "number", "minimum": 0}

RECOGNITION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "brand": {"type": "string"},
                    "category": {"type": "string"},
                    "serving_size": {"type": "string"},
                    "calories": _NUTRIENT_SCHEMA,
                    "protein": _NUTRIENT_SCHEMA,
                    "carbs": _NUTRIENT_SCHEMA,
                    "fat": _NUTRIENT_SCHEMA,
                    "fiber": _NUTRIENT_SCHEMA,
                    "sugar": _NUTRIENT_SCHEMA,
                    "sodium": _NUTRIENT_SCHEMA,
                },
                "required": [
                    "name",
                    "brand",
                    "category",
                    "serving_size",
                    "calories",
                    "protein",
                    "carbs",
                    "fat",
                    "fiber",
                    "sugar",
                    "sodium",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["items"],
    "additionalProperties": False,
}

TEXT_INSTRUCTIONS = (
    "You are a professional nutritionist. For each food item mentioned, "
    "provide nutritional information per 100 g. Use the most specific and "
    "culturally accurate name possible, and 'Generic' as the brand when none "
    "is named. Grams for macros, milligrams for sodium."
)

IMAGE_INSTRUCTIONS = (
    "You are a professional nutritionist and food recognition expert. "
    "Identify every food visible in the image. For each item give a specific "
    "name, the brand if recognizable (otherwise 'Generic'), a short category, "
    "a realistic serving size and nutritional information per 100 g. Grams "
    "for macros, milligrams for sodium."
)

_CATEGORY_KEYWORDS: tuple[tuple[FoodCategory, tuple[str, ...]], ...] = (
    (FoodCategory.BEVERAGE, ("drink", "coffee", "tea", "juice", "smoothie", "water")),
    (FoodCategory.DAIRY, ("dairy", "egg", "cheese", "milk", "yogurt")),
    (FoodCategory.PROTEIN, ("meat", "seafood", "fish", "chicken", "entree")),
    (FoodCategory.GRAIN, ("bread", "pasta", "noodle", "rice", "grain", "cereal")),
    (FoodCategory.VEGETABLE, ("salad", "vegetable", "vegan", "vegetarian")),
    (FoodCategory.FRUIT, ("fruit", "berry", "apple", "banana")),
    (FoodCategory.SNACK, ("snack", "cookie", "cake", "dessert", "pastr", "pie")),
)


class FoodRecognitionError(RuntimeError):
    """Raised when the recognition endpoint cannot be reached or fails."""


class FoodRecognitionClient(Protocol):
    """Interface for the food recognition model."""

    async def recognize(
        self,
        *,
        model: str,
        instructions: str,
        text: str,
        image_data_url: str | None,
        schema: dict[str, object],
    ) -> str:
        """Return the model's raw JSON text."""


@dataclass
class FoodInputService:
    """Turns free text or photos into food items.

    Unusable model output never reaches the caller as an error: it is
    replaced by a generic placeholder item flagged as a fallback.
    """

    client: FoodRecognitionClient
    food_service: FoodService
    text_model: str
    image_model: str

    async def recognize_text(
        self, text: str, *, save: bool = False
    ) -> FoodInputResult:
        """Recognize foods described in free text."""
        if not text or not text.strip():
            raise ValueError("Input is empty")
        raw = await self._call(
            model=self.text_model,
            instructions=TEXT_INSTRUCTIONS,
            text=f"Analyze these food items: {text.strip()}",
            image_data_url=None,
        )
        return await self._build_result(raw, save=save)

    async def recognize_image(
        self, image_bytes: bytes, *, save: bool = False
    ) -> FoodInputResult:
        """Recognize foods visible in a photo."""
        if not image_bytes:
            raise ValueError("Image is empty")
        raw = await self._call(
            model=self.image_model,
            instructions=IMAGE_INSTRUCTIONS,
            text="Analyze this food image and identify all food items visible.",
            image_data_url=to_data_url(image_bytes),
        )
        return await self._build_result(raw, save=save)

    async def save_recognized(self, item: RecognizedFood) -> FoodItem:
        """Store a recognized item as a custom catalog food."""
        return await self.food_service.create_food(to_new_food(item))

    async def _call(
        self,
        *,
        model: str,
        instructions: str,
        text: str,
        image_data_url: str | None,
    ) -> str:
        try:
            return await self.client.recognize(
                model=model,
                instructions=instructions,
                text=text,
                image_data_url=image_data_url,
                schema=RECOGNITION_SCHEMA,
            )
        except Exception as exc:
            _logger.exception("Food recognition request failed")
            raise FoodRecognitionError("Food recognition request failed") from exc

    async def _build_result(self, raw: str, *, save: bool) -> FoodInputResult:
        items = parse_recognition(raw)
        if not items:
            _logger.warning("Food recognition returned no usable items")
            return FoodInputResult(
                item=PLACEHOLDER_FOOD, confidence=0.0, is_fallback=True
            )
        item = items[0]
        saved = await self.save_recognized(item) if save else None
        return FoodInputResult(
            item=item,
            confidence=RECOGNIZED_CONFIDENCE,
            is_fallback=False,
            saved_food=saved,
        )


def parse_recognition(raw: str) -> list[RecognizedFood]:
    """Parse model output, tolerating markdown fences and surrounding prose."""
    text = _FENCE_PATTERN.sub("", raw.strip())
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end < start:
        return []
    try:
        payload = json.loads(text[start : end + 1])
        return RecognitionResult.model_validate(payload).items
    except (json.JSONDecodeError, ValidationError):
        _logger.warning("Could not parse food recognition output")
        return []


def to_new_food(item: RecognizedFood) -> NewFoodItem:
    """Map a recognized item to a custom food with a single 100 g serving."""
    return NewFoodItem(
        name=item.name,
        brand=item.brand,
        category=map_category(item.category),
        nutrition_per_100g=NutritionalInfo(
            calories=item.calories,
            protein=item.protein,
            carbs=item.carbs,
            fat=item.fat,
            fiber=item.fiber,
            sugar=item.sugar,
            sodium=item.sodium,
        ),
        serving_sizes=[
            NewServingSize(item.serving_size or "1 serving", 100, MeasurementUnit.G)
        ],
        is_custom=True,
    )


def map_category(label: str | None) -> FoodCategory:
    """Best-effort mapping from a free-text category to a catalog category."""
    if not label:
        return FoodCategory.OTHER
    lowered = label.lower()
    for value in FoodCategory:
        if lowered == value.value:
            return value
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return FoodCategory.OTHER


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{_detect_mime_type(image_bytes)};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
