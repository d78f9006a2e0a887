"""SQLite repository for catalog foods and favorites."""

import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID, uuid4

from nutrilog.adapters.sqlite_database import SqliteDatabase
from nutrilog.domain.foods import (
    FoodCategory,
    FoodItem,
    MeasurementUnit,
    NewFoodItem,
    ServingSize,
)
from nutrilog.domain.nutrition import NutritionalInfo
from nutrilog.services.foods import FoodRepository

NUTRIENT_COLUMNS = (
    "calories",
    "protein",
    "carbs",
    "fat",
    "fiber",
    "sugar",
    "sodium",
    "cholesterol",
)


@dataclass
class SqliteFoodRepository(FoodRepository):
    """SQLite-backed repository for the food catalog."""

    database: SqliteDatabase

    async def create_food(self, food: NewFoodItem) -> FoodItem:
        """Insert a food and its serving sizes in one transaction."""
        now = datetime.now(tz=UTC)
        item = FoodItem(
            id=uuid4(),
            name=food.name,
            category=food.category,
            nutrition_per_100g=food.nutrition_per_100g,
            serving_sizes=[
                ServingSize(
                    id=uuid4(),
                    name=serving.name,
                    weight=serving.weight,
                    unit=serving.unit,
                )
                for serving in food.serving_sizes
            ],
            is_custom=food.is_custom,
            created_at=now,
            updated_at=now,
            brand=food.brand,
            barcode=food.barcode,
            image_url=food.image_url,
        )

        def insert(connection: sqlite3.Connection) -> None:
            nutrition = item.nutrition_per_100g
            connection.execute(
                """
                INSERT INTO food_items (
                    id, name, brand, barcode, category, image_url, is_custom,
                    calories, protein, carbs, fat, fiber, sugar, sodium,
                    cholesterol, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(item.id),
                    item.name,
                    item.brand,
                    item.barcode,
                    item.category.value,
                    item.image_url,
                    int(item.is_custom),
                    *(getattr(nutrition, column) for column in NUTRIENT_COLUMNS),
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
            connection.executemany(
                """
                INSERT INTO serving_sizes (id, food_item_id, name, weight, unit, position)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        str(serving.id),
                        str(item.id),
                        serving.name,
                        serving.weight,
                        serving.unit.value,
                        position,
                    )
                    for position, serving in enumerate(item.serving_sizes)
                ],
            )

        await self.database.run(insert)
        return item

    async def get_food(self, food_id: UUID) -> FoodItem | None:
        """Return a food with its serving sizes."""

        def select(connection: sqlite3.Connection) -> FoodItem | None:
            row = connection.execute(
                "SELECT * FROM food_items WHERE id = ?", (str(food_id),)
            ).fetchone()
            if row is None:
                return None
            return hydrate_foods(connection, [row])[0]

        return await self.database.run(select)

    async def search_foods(self, query: str, limit: int) -> list[FoodItem]:
        """Case-insensitive substring match on the name, ordered by name."""
        pattern = f"%{_escape_like(query)}%"

        def select(connection: sqlite3.Connection) -> list[FoodItem]:
            rows = connection.execute(
                """
                SELECT * FROM food_items
                WHERE name LIKE ? ESCAPE '\\'
                ORDER BY name COLLATE NOCASE
                LIMIT ?
                """,
                (pattern, limit),
            ).fetchall()
            return hydrate_foods(connection, rows)

        return await self.database.run(select)

    async def add_favorite(self, user_id: UUID, food_id: UUID) -> None:
        """Insert a favorite unless the pair already exists."""
        await self.database.run(
            lambda connection: connection.execute(
                """
                INSERT OR IGNORE INTO favorites (id, user_id, food_item_id, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    str(uuid4()),
                    str(user_id),
                    str(food_id),
                    datetime.now(tz=UTC).isoformat(),
                ),
            )
        )

    async def remove_favorite(self, user_id: UUID, food_id: UUID) -> None:
        await self.database.run(
            lambda connection: connection.execute(
                "DELETE FROM favorites WHERE user_id = ? AND food_item_id = ?",
                (str(user_id), str(food_id)),
            )
        )

    async def list_favorites(self, user_id: UUID) -> list[FoodItem]:
        """Return favorites, most recently added first."""

        def select(connection: sqlite3.Connection) -> list[FoodItem]:
            rows = connection.execute(
                """
                SELECT food_items.* FROM favorites
                JOIN food_items ON food_items.id = favorites.food_item_id
                WHERE favorites.user_id = ?
                ORDER BY favorites.created_at DESC
                """,
                (str(user_id),),
            ).fetchall()
            return hydrate_foods(connection, rows)

        return await self.database.run(select)


def hydrate_foods(
    connection: sqlite3.Connection, rows: Sequence[sqlite3.Row]
) -> list[FoodItem]:
    """Attach serving sizes to food rows, preserving row order."""
    if not rows:
        return []
    food_ids = [row["id"] for row in rows]
    placeholders = ", ".join("?" for _ in food_ids)
    serving_rows = connection.execute(
        "SELECT * FROM serving_sizes WHERE food_item_id IN "  # noqa: S608
        f"({placeholders}) ORDER BY position",
        food_ids,
    ).fetchall()
    servings: dict[str, list[ServingSize]] = {food_id: [] for food_id in food_ids}
    for serving_row in serving_rows:
        servings[serving_row["food_item_id"]].append(parse_serving_size(serving_row))
    return [parse_food(row, servings[row["id"]]) for row in rows]


def parse_nutrition(row: sqlite3.Row, prefix: str = "") -> NutritionalInfo:
    """Read the eight nutrient columns, optionally prefixed."""
    return NutritionalInfo(
        **{column: float(row[f"{prefix}{column}"]) for column in NUTRIENT_COLUMNS}
    )


def parse_serving_size(row: sqlite3.Row) -> ServingSize:
    return ServingSize(
        id=UUID(row["id"]),
        name=row["name"],
        weight=float(row["weight"]),
        unit=MeasurementUnit(row["unit"]),
    )


def parse_food(row: sqlite3.Row, serving_sizes: list[ServingSize]) -> FoodItem:
    """Parse a food_items row into a domain model."""
    return FoodItem(
        id=UUID(row["id"]),
        name=row["name"],
        category=FoodCategory(row["category"]),
        nutrition_per_100g=parse_nutrition(row),
        serving_sizes=serving_sizes,
        is_custom=bool(row["is_custom"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        brand=row["brand"],
        barcode=row["barcode"],
        image_url=row["image_url"],
    )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
