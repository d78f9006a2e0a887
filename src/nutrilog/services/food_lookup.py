"""Remote food lookups against USDA FoodData Central."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from nutrilog.domain.foods import (
    FoodCategory,
    FoodItem,
    MeasurementUnit,
    NewFoodItem,
    NewServingSize,
)
from nutrilog.domain.lookup import RemoteFoodDetails, RemoteFoodSummary
from nutrilog.domain.nutrition import NutritionalInfo
from nutrilog.services.cache import Cache
from nutrilog.services.foods import FoodService

_ENERGY_IDS = (1008, 2047, 2048)
_NUTRIENT_IDS = {
    "protein": 1003,
    "fat": 1004,
    "carbs": 1005,
    "fiber": 1079,
    "sugar": 2000,
    "sodium": 1093,
    "cholesterol": 1253,
}

_logger = logging.getLogger(__name__)


class FdcClient(Protocol):
    """Interface for FoodData Central API interactions."""

    async def search_foods(
        self,
        query: str,
        page_size: int = 10,
        data_types: list[str] | None = None,
    ) -> dict[str, object]:
        """Search foods and return raw API data."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Fetch a food by FDC id and return raw API data."""


@dataclass
class FoodLookupService:
    """Searches the remote catalog and imports results as custom foods."""

    fdc_client: FdcClient
    cache: Cache
    food_service: FoodService
    search_ttl_seconds: int = 3600
    food_ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 10) -> list[RemoteFoodSummary]:
        """Search FDC foods with caching; a blank query matches nothing."""
        cleaned = query.strip()
        if not cleaned:
            return []
        cache_key = f"fdc:search:{cleaned.lower()}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.search_foods(cleaned, page_size=limit),
            action="search",
        )
        foods = [_parse_summary(food) for food in payload.get("foods", [])]
        self.cache.set(cache_key, foods, ttl_seconds=self.search_ttl_seconds)
        _logger.info("FDC search: query=%s results=%s", cleaned, len(foods))
        return foods

    async def get_food(self, fdc_id: int) -> RemoteFoodDetails:
        """Retrieve a food with all eight nutrients per 100 g."""
        cache_key = f"fdc:food:{fdc_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, RemoteFoodDetails):
            return cached

        payload = await self._call_with_retry(
            lambda: self.fdc_client.get_food(fdc_id),
            action=f"get_food:{fdc_id}",
        )
        details = RemoteFoodDetails(
            summary=_parse_summary(payload),
            nutrition_per_100g=extract_nutrition(payload.get("foodNutrients", [])),
            serving_size_g=_serving_grams(payload),
            barcode=payload.get("gtinUpc"),
        )
        self.cache.set(cache_key, details, ttl_seconds=self.food_ttl_seconds)
        return details

    async def import_food(
        self, fdc_id: int, category: FoodCategory = FoodCategory.OTHER
    ) -> FoodItem:
        """Copy a remote food into the local catalog as a custom item."""
        details = await self.get_food(fdc_id)
        servings = [NewServingSize("100g", 100, MeasurementUnit.G)]
        if details.serving_size_g and details.serving_size_g != 100:
            servings.append(
                NewServingSize(
                    f"1 serving ({details.serving_size_g:g}g)",
                    details.serving_size_g,
                    MeasurementUnit.PIECE,
                )
            )
        summary = details.summary
        return await self.food_service.create_food(
            NewFoodItem(
                name=summary.description.strip() or f"FDC food {fdc_id}",
                category=category,
                nutrition_per_100g=details.nutrition_per_100g,
                serving_sizes=servings,
                is_custom=True,
                brand=summary.brand_name or summary.brand_owner,
                barcode=details.barcode,
            )
        )

    async def _call_with_retry(
        self, func: Callable[[], Awaitable[dict[str, object]]], *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _parse_summary(food: dict[str, object]) -> RemoteFoodSummary:
    return RemoteFoodSummary(
        fdc_id=int(food["fdcId"]),
        description=str(food.get("description") or ""),
        brand_owner=food.get("brandOwner"),
        brand_name=food.get("brandName"),
        data_type=food.get("dataType"),
    )


def _serving_grams(payload: dict[str, object]) -> float | None:
    size = payload.get("servingSize")
    unit = str(payload.get("servingSizeUnit") or "g").lower()
    if size is None or unit not in {"g", "grm", "ml", "mlt"}:
        return None
    return float(size)


def extract_nutrition(food_nutrients: list[dict[str, object]]) -> NutritionalInfo:
    """Pick the eight tracked nutrients out of an FDC nutrient list.

    Handles both the detail shape (``nutrient.id`` + ``amount``) and the
    search shape (``nutrientId`` + ``value``).
    """
    amounts: dict[int, float] = {}
    for nutrient in food_nutrients:
        info = nutrient.get("nutrient") or {}
        nutrient_id = info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("amount", nutrient.get("value"))
        if nutrient_id is None or amount is None:
            continue
        amounts.setdefault(int(nutrient_id), float(amount))
    calories = next(
        (amounts[energy_id] for energy_id in _ENERGY_IDS if energy_id in amounts), 0.0
    )
    return NutritionalInfo(
        calories=calories,
        **{
            name: amounts.get(nutrient_id, 0.0)
            for name, nutrient_id in _NUTRIENT_IDS.items()
        },
    )
