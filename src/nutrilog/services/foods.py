"""Services for the food catalog and user favorites."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from nutrilog.domain.foods import (
    COMMON_SERVING_SIZES,
    DEFAULT_SERVING_SIZES,
    FoodItem,
    NewFoodItem,
)

_logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 20


class FoodRepository(Protocol):
    """Persistence interface for catalog foods and favorites."""

    async def create_food(self, food: NewFoodItem) -> FoodItem:
        """Store a food with its serving sizes and return it."""

    async def get_food(self, food_id: UUID) -> FoodItem | None:
        """Return a food with its serving sizes, if present."""

    async def search_foods(self, query: str, limit: int) -> list[FoodItem]:
        """Return foods whose name contains the query, alphabetically."""

    async def add_favorite(self, user_id: UUID, food_id: UUID) -> None:
        """Mark a food as a favorite; repeated calls are no-ops."""

    async def remove_favorite(self, user_id: UUID, food_id: UUID) -> None:
        """Unmark a favorite food."""

    async def list_favorites(self, user_id: UUID) -> list[FoodItem]:
        """Return the user's favorite foods."""


@dataclass
class FoodService:
    """Application service for catalog lookups and favorites."""

    repository: FoodRepository

    async def create_food(self, food: NewFoodItem) -> FoodItem:
        """Create a catalog food, defaulting serving sizes from its category."""
        if not food.name.strip():
            raise ValueError("Food name must not be empty")
        if any(serving.weight <= 0 for serving in food.serving_sizes):
            raise ValueError("Serving size weight must be positive")
        if not food.serving_sizes:
            defaults = COMMON_SERVING_SIZES.get(food.category, DEFAULT_SERVING_SIZES)
            food = replace(food, serving_sizes=list(defaults))
        created = await self.repository.create_food(food)
        _logger.info("Created food: id=%s name=%s", created.id, created.name)
        return created

    async def get_food(self, food_id: UUID) -> FoodItem | None:
        """Return a catalog food."""
        return await self.repository.get_food(food_id)

    async def search(
        self, query: str | None, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[FoodItem]:
        """Search foods by name; a blank query matches nothing."""
        if not query or not query.strip():
            return []
        return await self.repository.search_foods(query.strip(), limit)

    async def add_favorite(self, user_id: UUID, food_id: UUID) -> None:
        await self.repository.add_favorite(user_id, food_id)

    async def remove_favorite(self, user_id: UUID, food_id: UUID) -> None:
        await self.repository.remove_favorite(user_id, food_id)

    async def list_favorites(self, user_id: UUID) -> list[FoodItem]:
        return await self.repository.list_favorites(user_id)
