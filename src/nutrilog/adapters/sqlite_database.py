"""Embedded SQLite database shared by the repositories."""

import asyncio
import json
import logging
import sqlite3
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import partial
from typing import TypeVar
from uuid import NAMESPACE_URL, UUID, uuid5

T = TypeVar("T")

_logger = logging.getLogger(__name__)

_SEED_NAMESPACE = uuid5(NAMESPACE_URL, "https://nutrilog.local/seed")

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT UNIQUE NOT NULL,
    name TEXT NOT NULL,
    date_of_birth TEXT NOT NULL,
    gender TEXT NOT NULL,
    height REAL NOT NULL,
    current_weight REAL NOT NULL,
    activity_level TEXT NOT NULL,
    goal_type TEXT NOT NULL,
    target_weight REAL,
    weekly_weight_change REAL,
    calorie_goal INTEGER NOT NULL,
    macro_protein REAL NOT NULL,
    macro_carbs REAL NOT NULL,
    macro_fat REAL NOT NULL,
    custom_fiber REAL,
    custom_sugar REAL,
    custom_sodium REAL,
    custom_cholesterol REAL,
    units TEXT NOT NULL DEFAULT 'metric',
    theme TEXT NOT NULL DEFAULT 'system',
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS food_items (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    brand TEXT,
    barcode TEXT,
    category TEXT NOT NULL,
    image_url TEXT,
    is_custom INTEGER NOT NULL DEFAULT 0,
    calories REAL NOT NULL,
    protein REAL NOT NULL,
    carbs REAL NOT NULL,
    fat REAL NOT NULL,
    fiber REAL NOT NULL,
    sugar REAL NOT NULL,
    sodium REAL NOT NULL,
    cholesterol REAL NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS serving_sizes (
    id TEXT PRIMARY KEY,
    food_item_id TEXT NOT NULL,
    name TEXT NOT NULL,
    weight REAL NOT NULL,
    unit TEXT NOT NULL,
    position INTEGER NOT NULL DEFAULT 0,
    UNIQUE (id, food_item_id),
    FOREIGN KEY (food_item_id) REFERENCES food_items (id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS daily_nutrition (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    date TEXT NOT NULL,
    calorie_goal INTEGER NOT NULL,
    water_intake REAL NOT NULL DEFAULT 0,
    notes TEXT,
    total_calories REAL NOT NULL DEFAULT 0,
    total_protein REAL NOT NULL DEFAULT 0,
    total_carbs REAL NOT NULL DEFAULT 0,
    total_fat REAL NOT NULL DEFAULT 0,
    total_fiber REAL NOT NULL DEFAULT 0,
    total_sugar REAL NOT NULL DEFAULT 0,
    total_sodium REAL NOT NULL DEFAULT 0,
    total_cholesterol REAL NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    UNIQUE (user_id, date),
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS meal_entries (
    id TEXT PRIMARY KEY,
    daily_nutrition_id TEXT NOT NULL,
    meal_type TEXT NOT NULL,
    timestamp TEXT NOT NULL,
    location TEXT,
    FOREIGN KEY (daily_nutrition_id) REFERENCES daily_nutrition (id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS consumed_foods (
    id TEXT PRIMARY KEY,
    meal_entry_id TEXT NOT NULL,
    food_item_id TEXT NOT NULL,
    serving_size_id TEXT NOT NULL,
    quantity REAL NOT NULL,
    calories REAL NOT NULL,
    protein REAL NOT NULL,
    carbs REAL NOT NULL,
    fat REAL NOT NULL,
    fiber REAL NOT NULL,
    sugar REAL NOT NULL,
    sodium REAL NOT NULL,
    cholesterol REAL NOT NULL,
    created_at TEXT NOT NULL,
    FOREIGN KEY (meal_entry_id) REFERENCES meal_entries (id) ON DELETE CASCADE,
    FOREIGN KEY (food_item_id) REFERENCES food_items (id),
    FOREIGN KEY (serving_size_id, food_item_id)
        REFERENCES serving_sizes (id, food_item_id)
);

CREATE TABLE IF NOT EXISTS exercises (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    category TEXT NOT NULL,
    met_value REAL,
    muscle_groups TEXT NOT NULL,
    instructions TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS workout_sessions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    date TEXT NOT NULL,
    total_duration INTEGER NOT NULL,
    calories_burned INTEGER NOT NULL,
    notes TEXT,
    created_at TEXT NOT NULL,
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS exercise_sets (
    id TEXT PRIMARY KEY,
    workout_session_id TEXT NOT NULL,
    exercise_id TEXT NOT NULL,
    position INTEGER NOT NULL DEFAULT 0,
    duration REAL,
    distance REAL,
    intensity TEXT,
    calories_burned INTEGER NOT NULL,
    FOREIGN KEY (workout_session_id) REFERENCES workout_sessions (id) ON DELETE CASCADE,
    FOREIGN KEY (exercise_id) REFERENCES exercises (id)
);

CREATE TABLE IF NOT EXISTS strength_sets (
    id TEXT PRIMARY KEY,
    exercise_set_id TEXT NOT NULL,
    position INTEGER NOT NULL DEFAULT 0,
    reps INTEGER NOT NULL,
    weight REAL NOT NULL,
    rest_time INTEGER,
    FOREIGN KEY (exercise_set_id) REFERENCES exercise_sets (id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS weight_entries (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    weight REAL NOT NULL,
    date TEXT NOT NULL,
    notes TEXT,
    created_at TEXT NOT NULL,
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS favorites (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    food_item_id TEXT NOT NULL,
    created_at TEXT NOT NULL,
    UNIQUE (user_id, food_item_id),
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE,
    FOREIGN KEY (food_item_id) REFERENCES food_items (id)
);

CREATE TABLE IF NOT EXISTS app_state (
    partition TEXT PRIMARY KEY,
    payload TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_daily_nutrition_user_date ON daily_nutrition(user_id, date);
CREATE UNIQUE INDEX IF NOT EXISTS idx_meal_entries_daily_type ON meal_entries(daily_nutrition_id, meal_type);
CREATE INDEX IF NOT EXISTS idx_food_items_name ON food_items(name);
CREATE INDEX IF NOT EXISTS idx_food_items_barcode ON food_items(barcode);
CREATE INDEX IF NOT EXISTS idx_weight_entries_user_date ON weight_entries(user_id, date);
CREATE INDEX IF NOT EXISTS idx_workout_sessions_user_date ON workout_sessions(user_id, date);
"""

SEED_FOODS: tuple[dict[str, object], ...] = (
    {
        "key": "apple",
        "name": "Apple",
        "category": "fruit",
        "calories": 52,
        "protein": 0.3,
        "carbs": 14,
        "fat": 0.2,
        "fiber": 2.4,
        "sugar": 10,
        "sodium": 1,
        "cholesterol": 0,
    },
    {
        "key": "banana",
        "name": "Banana",
        "category": "fruit",
        "calories": 89,
        "protein": 1.1,
        "carbs": 23,
        "fat": 0.3,
        "fiber": 2.6,
        "sugar": 12,
        "sodium": 1,
        "cholesterol": 0,
    },
    {
        "key": "chicken-breast",
        "name": "Chicken Breast",
        "category": "protein",
        "calories": 165,
        "protein": 31,
        "carbs": 0,
        "fat": 3.6,
        "fiber": 0,
        "sugar": 0,
        "sodium": 74,
        "cholesterol": 85,
    },
    {
        "key": "brown-rice",
        "name": "Brown Rice",
        "category": "grain",
        "calories": 123,
        "protein": 2.6,
        "carbs": 23,
        "fat": 0.9,
        "fiber": 1.8,
        "sugar": 0.4,
        "sodium": 5,
        "cholesterol": 0,
    },
    {
        "key": "broccoli",
        "name": "Broccoli",
        "category": "vegetable",
        "calories": 34,
        "protein": 2.8,
        "carbs": 7,
        "fat": 0.4,
        "fiber": 2.6,
        "sugar": 1.5,
        "sodium": 33,
        "cholesterol": 0,
    },
)

SEED_SERVING_SIZES: tuple[tuple[str, float, str], ...] = (
    ("100g", 100, "g"),
    ("1 medium", 150, "piece"),
    ("1 cup", 150, "cup"),
)

SEED_EXERCISES: tuple[dict[str, object], ...] = (
    {"key": "running", "name": "Running", "category": "cardio", "met": 8.0,
     "muscles": ["legs"]},
    {"key": "cycling", "name": "Cycling", "category": "cardio", "met": 6.8,
     "muscles": ["legs"]},
    {"key": "pushups", "name": "Push-ups", "category": "strength", "met": 4.0,
     "muscles": ["chest", "arms"]},
    {"key": "squats", "name": "Squats", "category": "strength", "met": 5.0,
     "muscles": ["legs", "glutes"]},
    {"key": "planks", "name": "Planks", "category": "strength", "met": 3.5,
     "muscles": ["abs"]},
)


class DatabaseNotInitializedError(RuntimeError):
    """Raised when the database is used before ``initialize`` has completed."""


def seed_id(kind: str, key: str) -> UUID:
    """Return the stable id of a seeded catalog row."""
    return uuid5(_SEED_NAMESPACE, f"{kind}:{key}")


@dataclass
class SqliteDatabase:
    """Single lazily-opened SQLite connection with coroutine accessors.

    Blocking calls run on a one-thread executor, so statements from
    concurrent callers are serialized. Each ``run`` call is one transaction.
    The executor lives from ``initialize`` to ``close``, so a closed database
    can be initialized again.
    """

    path: str
    _connection: sqlite3.Connection | None = field(default=None, init=False, repr=False)
    _executor: ThreadPoolExecutor | None = field(default=None, init=False, repr=False)

    @property
    def is_initialized(self) -> bool:
        """Return True once the schema exists and seed data is in place."""
        return self._connection is not None

    async def initialize(self) -> None:
        """Open the connection, create the schema and seed reference data once."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="nutrilog-sqlite"
            )
        await self._submit(self._initialize_sync)

    async def run(self, operation: Callable[[sqlite3.Connection], T]) -> T:
        """Run ``operation`` against the connection inside one transaction."""
        connection = self._connection
        if connection is None:
            raise DatabaseNotInitializedError("Database not initialized")
        return await self._submit(partial(_run_in_transaction, connection, operation))

    async def close(self) -> None:
        """Close the connection and stop the worker thread."""
        executor = self._executor
        if executor is None:
            return
        await self._submit(self._close_sync)
        self._executor = None
        executor.shutdown(wait=True)

    async def _submit(self, func: Callable[[], T]) -> T:
        if self._executor is None:
            raise DatabaseNotInitializedError("Database not initialized")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func)

    def _initialize_sync(self) -> None:
        if self._connection is not None:
            return
        connection = sqlite3.connect(self.path, check_same_thread=False)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        connection.execute("PRAGMA journal_mode = WAL")
        connection.executescript(SCHEMA)
        with connection:
            _seed_reference_data(connection)
        self._connection = connection
        _logger.info("Database ready: path=%s", self.path)

    def _close_sync(self) -> None:
        if self._connection is None:
            return
        self._connection.close()
        self._connection = None


def _run_in_transaction(
    connection: sqlite3.Connection, operation: Callable[[sqlite3.Connection], T]
) -> T:
    with connection:
        return operation(connection)


def _seed_reference_data(connection: sqlite3.Connection) -> None:
    now = datetime.now(tz=UTC).isoformat()
    food_count = connection.execute("SELECT COUNT(*) FROM food_items").fetchone()[0]
    if food_count == 0:
        for food in SEED_FOODS:
            food_id = str(seed_id("food", str(food["key"])))
            connection.execute(
                """
                INSERT INTO food_items (
                    id, name, category, calories, protein, carbs, fat,
                    fiber, sugar, sodium, cholesterol, is_custom,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
                """,
                (
                    food_id,
                    food["name"],
                    food["category"],
                    food["calories"],
                    food["protein"],
                    food["carbs"],
                    food["fat"],
                    food["fiber"],
                    food["sugar"],
                    food["sodium"],
                    food["cholesterol"],
                    now,
                    now,
                ),
            )
            for position, (name, weight, unit) in enumerate(SEED_SERVING_SIZES):
                connection.execute(
                    """
                    INSERT INTO serving_sizes (
                        id, food_item_id, name, weight, unit, position
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        str(seed_id("serving", f"{food['key']}-{unit}")),
                        food_id,
                        name,
                        weight,
                        unit,
                        position,
                    ),
                )
        _logger.info("Seeded %s catalog foods", len(SEED_FOODS))

    exercise_count = connection.execute("SELECT COUNT(*) FROM exercises").fetchone()[0]
    if exercise_count == 0:
        for exercise in SEED_EXERCISES:
            connection.execute(
                """
                INSERT INTO exercises (
                    id, name, category, met_value, muscle_groups, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    str(seed_id("exercise", str(exercise["key"]))),
                    exercise["name"],
                    exercise["category"],
                    exercise["met"],
                    json.dumps(exercise["muscles"]),
                    now,
                ),
            )
        _logger.info("Seeded %s catalog exercises", len(SEED_EXERCISES))
