"""SQLite repository for daily diaries."""

import sqlite3
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from nutrilog.adapters.sqlite_database import SqliteDatabase
from nutrilog.adapters.sqlite_food_repository import (
    NUTRIENT_COLUMNS,
    hydrate_foods,
    parse_nutrition,
)
from nutrilog.domain.foods import FoodItem
from nutrilog.domain.meals import ConsumedFood, DailyNutrition, MealEntry, MealType
from nutrilog.domain.nutrition import NutritionalInfo
from nutrilog.services.meals import DailyLogRepository


@dataclass
class SqliteDailyLogRepository(DailyLogRepository):
    """SQLite-backed repository for diaries, meal entries and consumed foods."""

    database: SqliteDatabase

    async def get_daily(self, user_id: UUID, day: date) -> DailyNutrition | None:
        def select(connection: sqlite3.Connection) -> DailyNutrition | None:
            row = connection.execute(
                "SELECT * FROM daily_nutrition WHERE user_id = ? AND date = ?",
                (str(user_id), day.isoformat()),
            ).fetchone()
            if row is None:
                return None
            return _hydrate_days(connection, [row])[0]

        return await self.database.run(select)

    async def create_daily(
        self, user_id: UUID, day: date, calorie_goal: int
    ) -> DailyNutrition:
        """Insert an empty diary unless one exists, then return the stored row."""
        now = datetime.now(tz=UTC).isoformat()

        def insert(connection: sqlite3.Connection) -> DailyNutrition:
            connection.execute(
                """
                INSERT OR IGNORE INTO daily_nutrition (
                    id, user_id, date, calorie_goal, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (str(uuid4()), str(user_id), day.isoformat(), calorie_goal, now, now),
            )
            row = connection.execute(
                "SELECT * FROM daily_nutrition WHERE user_id = ? AND date = ?",
                (str(user_id), day.isoformat()),
            ).fetchone()
            if row is None:
                raise RuntimeError("Failed to create daily nutrition")
            return _hydrate_days(connection, [row])[0]

        return await self.database.run(insert)

    async def add_consumed_food(
        self,
        daily_id: UUID,
        meal_type: MealType,
        timestamp: datetime,
        food: ConsumedFood,
    ) -> bool:
        """Attach a food to the day's meal slot in one transaction.

        The slot is created on first use. Returns False when a consumed food
        with the same id is already stored.
        """
        nutrition = food.nutrition_consumed

        def insert(connection: sqlite3.Connection) -> bool:
            connection.execute(
                """
                INSERT OR IGNORE INTO meal_entries (
                    id, daily_nutrition_id, meal_type, timestamp
                ) VALUES (?, ?, ?, ?)
                """,
                (str(uuid4()), str(daily_id), meal_type.value, timestamp.isoformat()),
            )
            meal_row = connection.execute(
                "SELECT id FROM meal_entries "
                "WHERE daily_nutrition_id = ? AND meal_type = ?",
                (str(daily_id), meal_type.value),
            ).fetchone()
            if meal_row is None:
                raise RuntimeError("Failed to create meal entry")
            cursor = connection.execute(
                """
                INSERT OR IGNORE INTO consumed_foods (
                    id, meal_entry_id, food_item_id, serving_size_id, quantity,
                    calories, protein, carbs, fat, fiber, sugar, sodium,
                    cholesterol, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(food.id),
                    meal_row["id"],
                    str(food.food_item.id),
                    str(food.serving_size.id),
                    food.quantity,
                    *(getattr(nutrition, column) for column in NUTRIENT_COLUMNS),
                    datetime.now(tz=UTC).isoformat(),
                ),
            )
            return cursor.rowcount == 1

        return await self.database.run(insert)

    async def replace_consumed_food(self, food: ConsumedFood) -> None:
        nutrition = food.nutrition_consumed
        await self.database.run(
            lambda connection: connection.execute(
                """
                UPDATE consumed_foods SET
                    serving_size_id = ?, quantity = ?, calories = ?, protein = ?,
                    carbs = ?, fat = ?, fiber = ?, sugar = ?, sodium = ?,
                    cholesterol = ?
                WHERE id = ?
                """,
                (
                    str(food.serving_size.id),
                    food.quantity,
                    *(getattr(nutrition, column) for column in NUTRIENT_COLUMNS),
                    str(food.id),
                ),
            )
        )

    async def delete_consumed_food(self, entry_id: UUID) -> None:
        await self.database.run(
            lambda connection: connection.execute(
                "DELETE FROM consumed_foods WHERE id = ?", (str(entry_id),)
            )
        )

    async def find_entry_day(self, entry_id: UUID) -> UUID | None:
        row = await self.database.run(
            lambda connection: connection.execute(
                """
                SELECT meal_entries.daily_nutrition_id FROM consumed_foods
                JOIN meal_entries ON meal_entries.id = consumed_foods.meal_entry_id
                WHERE consumed_foods.id = ?
                """,
                (str(entry_id),),
            ).fetchone()
        )
        return UUID(row[0]) if row else None

    async def refresh_totals(
        self,
        daily_id: UUID,
        summarize: Callable[[list[ConsumedFood]], NutritionalInfo],
    ) -> DailyNutrition:
        """Recompute and store a diary's totals from its stored foods."""

        def update(connection: sqlite3.Connection) -> DailyNutrition:
            row = connection.execute(
                "SELECT * FROM daily_nutrition WHERE id = ?", (str(daily_id),)
            ).fetchone()
            if row is None:
                raise RuntimeError("Failed to reload daily nutrition")
            daily = _hydrate_days(connection, [row])[0]
            totals = summarize(daily.all_foods())
            connection.execute(
                """
                UPDATE daily_nutrition SET
                    total_calories = ?, total_protein = ?, total_carbs = ?,
                    total_fat = ?, total_fiber = ?, total_sugar = ?,
                    total_sodium = ?, total_cholesterol = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    *(getattr(totals, column) for column in NUTRIENT_COLUMNS),
                    datetime.now(tz=UTC).isoformat(),
                    str(daily_id),
                ),
            )
            return replace(daily, total_nutrition=totals)

        return await self.database.run(update)

    async def set_water_intake(self, daily_id: UUID, amount: float) -> None:
        await self.database.run(
            lambda connection: connection.execute(
                "UPDATE daily_nutrition SET water_intake = ?, updated_at = ? "
                "WHERE id = ?",
                (amount, datetime.now(tz=UTC).isoformat(), str(daily_id)),
            )
        )

    async def list_daily(
        self, user_id: UUID, start: date, end: date
    ) -> list[DailyNutrition]:
        def select(connection: sqlite3.Connection) -> list[DailyNutrition]:
            rows = connection.execute(
                """
                SELECT * FROM daily_nutrition
                WHERE user_id = ? AND date BETWEEN ? AND ?
                ORDER BY date
                """,
                (str(user_id), start.isoformat(), end.isoformat()),
            ).fetchall()
            return _hydrate_days(connection, rows)

        return await self.database.run(select)


def _placeholders(values: Sequence[object]) -> str:
    return ", ".join("?" for _ in values)


def _hydrate_days(
    connection: sqlite3.Connection, rows: Sequence[sqlite3.Row]
) -> list[DailyNutrition]:
    """Load meal entries, consumed foods and their catalog foods for diary rows."""
    if not rows:
        return []
    daily_ids = [row["id"] for row in rows]
    meal_rows = connection.execute(
        "SELECT * FROM meal_entries WHERE daily_nutrition_id IN "  # noqa: S608
        f"({_placeholders(daily_ids)}) ORDER BY timestamp",
        daily_ids,
    ).fetchall()
    meal_ids = [row["id"] for row in meal_rows]
    consumed_rows = (
        connection.execute(
            "SELECT * FROM consumed_foods WHERE meal_entry_id IN "  # noqa: S608
            f"({_placeholders(meal_ids)}) ORDER BY created_at, rowid",
            meal_ids,
        ).fetchall()
        if meal_ids
        else []
    )
    food_ids = sorted({row["food_item_id"] for row in consumed_rows})
    food_rows = (
        connection.execute(
            "SELECT * FROM food_items WHERE id IN "  # noqa: S608
            f"({_placeholders(food_ids)})",
            food_ids,
        ).fetchall()
        if food_ids
        else []
    )
    foods: dict[str, FoodItem] = {
        str(food.id): food for food in hydrate_foods(connection, food_rows)
    }

    consumed_by_meal: dict[str, list[ConsumedFood]] = {}
    for row in consumed_rows:
        consumed_by_meal.setdefault(row["meal_entry_id"], []).append(
            _parse_consumed(row, foods[row["food_item_id"]])
        )
    meals_by_day: dict[str, list[MealEntry]] = {}
    for row in meal_rows:
        meals_by_day.setdefault(row["daily_nutrition_id"], []).append(
            MealEntry(
                id=UUID(row["id"]),
                meal_type=MealType(row["meal_type"]),
                timestamp=datetime.fromisoformat(row["timestamp"]),
                foods=consumed_by_meal.get(row["id"], []),
                location=row["location"],
            )
        )
    return [
        DailyNutrition(
            id=UUID(row["id"]),
            user_id=UUID(row["user_id"]),
            date=date.fromisoformat(row["date"]),
            calorie_goal=int(row["calorie_goal"]),
            total_nutrition=parse_nutrition(row, prefix="total_"),
            meals=meals_by_day.get(row["id"], []),
            water_intake=float(row["water_intake"]),
            notes=row["notes"],
        )
        for row in rows
    ]


def _parse_consumed(row: sqlite3.Row, food_item: FoodItem) -> ConsumedFood:
    serving = food_item.serving_size(UUID(row["serving_size_id"]))
    if serving is None:
        raise RuntimeError("Failed to resolve serving size for consumed food")
    return ConsumedFood(
        id=UUID(row["id"]),
        food_item=food_item,
        serving_size=serving,
        quantity=float(row["quantity"]),
        nutrition_consumed=parse_nutrition(row),
    )
