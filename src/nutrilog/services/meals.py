"""Daily food diary service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID, uuid4

from nutrilog.domain.foods import FoodItem, ServingSize
from nutrilog.domain.meals import ConsumedFood, DailyNutrition, MealType
from nutrilog.domain.nutrition import NutritionalInfo
from nutrilog.services.calculator import (
    calculate_nutrition_consumed,
    calculate_total_nutrition,
)
from nutrilog.services.foods import FoodRepository
from nutrilog.services.users import UserRepository

_logger = logging.getLogger(__name__)


class DailyLogRepository(Protocol):
    """Persistence interface for daily diaries."""

    async def get_daily(self, user_id: UUID, day: date) -> DailyNutrition | None:
        """Return a hydrated diary for a user and day, if present."""

    async def create_daily(
        self, user_id: UUID, day: date, calorie_goal: int
    ) -> DailyNutrition:
        """Create an empty diary, or return the existing one."""

    async def add_consumed_food(
        self,
        daily_id: UUID,
        meal_type: MealType,
        timestamp: datetime,
        food: ConsumedFood,
    ) -> bool:
        """Attach a consumed food to the day's meal slot, creating the slot.

        Returns False when a consumed food with the same id already exists.
        """

    async def replace_consumed_food(self, food: ConsumedFood) -> None:
        """Overwrite a consumed food's serving, quantity and nutrition."""

    async def delete_consumed_food(self, entry_id: UUID) -> None:
        """Remove a consumed food."""

    async def find_entry_day(self, entry_id: UUID) -> UUID | None:
        """Return the diary id a consumed food belongs to, if any."""

    async def refresh_totals(
        self,
        daily_id: UUID,
        summarize: Callable[[list[ConsumedFood]], NutritionalInfo],
    ) -> DailyNutrition:
        """Recompute and store the denormalized day totals atomically."""

    async def set_water_intake(self, daily_id: UUID, amount: float) -> None:
        """Store the day's water intake in millilitres."""

    async def list_daily(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailyNutrition]:
        """Return diaries between two days inclusive, oldest first."""


@dataclass
class DailyLogService:
    """Application service for logging foods and water against a day.

    Day totals are a denormalized sum of every consumed food's nutrition
    snapshot. Every mutation of the meal list ends with ``_refresh_totals``,
    which rebuilds the sum from storage in the transaction that stores it.
    """

    repository: DailyLogRepository
    food_repository: FoodRepository
    user_repository: UserRepository

    async def get_day(self, user_id: UUID, day: date) -> DailyNutrition | None:
        """Return the diary for a day without creating it."""
        return await self.repository.get_daily(user_id, day)

    async def load_day(self, user_id: UUID, day: date) -> DailyNutrition | None:
        """Return the diary for a day, creating an empty one if needed.

        New diaries snapshot the user's current calorie goal. Returns None
        when the user does not exist.
        """
        daily = await self.repository.get_daily(user_id, day)
        if daily is not None:
            return daily
        profile = await self.user_repository.get_user(user_id)
        if profile is None:
            return None
        return await self.repository.create_daily(
            user_id, day, profile.goals.calorie_goal
        )

    async def add_food_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: date,
        meal_type: MealType,
        food_id: UUID,
        serving_size_id: UUID,
        quantity: float,
        entry_id: UUID | None = None,
    ) -> DailyNutrition | None:
        """Log a portion of a food in a meal slot.

        A repeated ``entry_id`` is treated as a resubmission, also when both
        submissions are in flight together: the day is returned unchanged.
        """
        if quantity <= 0:
            raise ValueError("Quantity must be positive")
        food_item = await self.food_repository.get_food(food_id)
        if food_item is None:
            return None
        serving = _require_serving(food_item, serving_size_id)
        daily = await self.load_day(user_id, day)
        if daily is None:
            return None
        if entry_id is not None and await self._entry_logged(entry_id, daily.id):
            _logger.info("Ignoring repeated food entry: entry_id=%s", entry_id)
            return await self._refresh_totals(daily.id)

        consumed = ConsumedFood(
            id=entry_id or uuid4(),
            food_item=food_item,
            serving_size=serving,
            quantity=quantity,
            nutrition_consumed=calculate_nutrition_consumed(
                food_item.nutrition_per_100g, quantity, serving.weight
            ),
        )
        inserted = await self.repository.add_consumed_food(
            daily.id, meal_type, datetime.now(tz=UTC), consumed
        )
        if not inserted and await self._entry_logged(consumed.id, daily.id):
            _logger.info("Ignoring repeated food entry: entry_id=%s", consumed.id)
        return await self._refresh_totals(daily.id)

    async def update_food_entry(
        self,
        user_id: UUID,
        day: date,
        entry_id: UUID,
        quantity: float | None = None,
        serving_size_id: UUID | None = None,
    ) -> DailyNutrition | None:
        """Change the quantity or serving of a logged food and re-snapshot it."""
        if quantity is not None and quantity <= 0:
            raise ValueError("Quantity must be positive")
        daily = await self.repository.get_daily(user_id, day)
        if daily is None:
            return None
        current = daily.find_food(entry_id)
        if current is None:
            return None
        serving = current.serving_size
        if serving_size_id is not None:
            serving = _require_serving(current.food_item, serving_size_id)
        new_quantity = quantity if quantity is not None else current.quantity
        updated = replace(
            current,
            serving_size=serving,
            quantity=new_quantity,
            nutrition_consumed=calculate_nutrition_consumed(
                current.food_item.nutrition_per_100g, new_quantity, serving.weight
            ),
        )
        await self.repository.replace_consumed_food(updated)
        return await self._refresh_totals(daily.id)

    async def delete_food_entry(
        self, user_id: UUID, day: date, entry_id: UUID
    ) -> DailyNutrition | None:
        """Remove a logged food from the day."""
        daily = await self.repository.get_daily(user_id, day)
        if daily is None or daily.find_food(entry_id) is None:
            return None
        await self.repository.delete_consumed_food(entry_id)
        return await self._refresh_totals(daily.id)

    async def update_water_intake(
        self, user_id: UUID, day: date, amount: float
    ) -> DailyNutrition | None:
        """Set the day's water intake in millilitres."""
        if amount < 0:
            raise ValueError("Water intake must not be negative")
        daily = await self.load_day(user_id, day)
        if daily is None:
            return None
        await self.repository.set_water_intake(daily.id, amount)
        return replace(daily, water_intake=amount)

    async def calculate_daily_nutrition(
        self, user_id: UUID, day: date
    ) -> NutritionalInfo:
        """Return the day's totals, all zero when nothing was logged."""
        daily = await self.repository.get_daily(user_id, day)
        if daily is None:
            return NutritionalInfo.zero()
        return daily.total_nutrition

    async def list_days(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailyNutrition]:
        return await self.repository.list_daily(user_id, start, end)

    async def _entry_logged(self, entry_id: UUID, daily_id: UUID) -> bool:
        """Return True when ``entry_id`` is already logged on this day."""
        existing_day = await self.repository.find_entry_day(entry_id)
        if existing_day is not None and existing_day != daily_id:
            raise ValueError("Entry id is already used on another day")
        return existing_day == daily_id

    async def _refresh_totals(self, daily_id: UUID) -> DailyNutrition:
        return await self.repository.refresh_totals(
            daily_id, calculate_total_nutrition
        )


def _require_serving(food_item: FoodItem, serving_size_id: UUID) -> ServingSize:
    serving = food_item.serving_size(serving_size_id)
    if serving is None:
        raise ValueError(
            f"Serving size {serving_size_id} does not belong to {food_item.name}"
        )
    return serving
