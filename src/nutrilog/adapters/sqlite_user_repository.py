"""SQLite repository for user profiles."""

import sqlite3
from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from nutrilog.adapters.sqlite_database import SqliteDatabase
from nutrilog.domain.models import (
    NewUserProfile,
    NutritionGoals,
    ThemeMode,
    UnitSystem,
    UserPreferences,
    UserProfile,
)
from nutrilog.domain.nutrition import (
    ActivityLevel,
    CustomNutritionGoals,
    Gender,
    GoalType,
    MacroRatios,
)
from nutrilog.services.users import UserRepository


@dataclass
class SqliteUserRepository(UserRepository):
    """SQLite-backed repository for user profiles."""

    database: SqliteDatabase

    async def create_user(
        self, registration: NewUserProfile, calorie_goal: int
    ) -> UserProfile:
        """Insert a profile row and return it."""
        now = datetime.now(tz=UTC)
        profile = UserProfile(
            id=uuid4(),
            email=registration.email,
            name=registration.name,
            date_of_birth=registration.date_of_birth,
            gender=registration.gender,
            height=registration.height,
            current_weight=registration.current_weight,
            activity_level=registration.activity_level,
            goals=NutritionGoals(
                goal_type=registration.goal_type,
                calorie_goal=calorie_goal,
                macro_ratios=registration.macro_ratios,
                target_weight=registration.target_weight,
                weekly_weight_change=registration.weekly_weight_change,
            ),
            preferences=registration.preferences,
            created_at=now,
            updated_at=now,
        )

        def insert(connection: sqlite3.Connection) -> None:
            connection.execute(
                """
                INSERT INTO users (
                    id, email, name, date_of_birth, gender, height, current_weight,
                    activity_level, goal_type, target_weight, weekly_weight_change,
                    calorie_goal, macro_protein, macro_carbs, macro_fat,
                    custom_fiber, custom_sugar, custom_sodium, custom_cholesterol,
                    units, theme, created_at, updated_at
                ) VALUES (
                    :id, :email, :name, :date_of_birth, :gender, :height,
                    :current_weight, :activity_level, :goal_type, :target_weight,
                    :weekly_weight_change, :calorie_goal, :macro_protein,
                    :macro_carbs, :macro_fat, :custom_fiber, :custom_sugar,
                    :custom_sodium, :custom_cholesterol, :units, :theme,
                    :created_at, :updated_at
                )
                """,
                _to_row(profile),
            )

        await self.database.run(insert)
        return profile

    async def get_user(self, user_id: UUID) -> UserProfile | None:
        """Return a profile by id, if present."""
        row = await self.database.run(
            lambda connection: connection.execute(
                "SELECT * FROM users WHERE id = ?", (str(user_id),)
            ).fetchone()
        )
        return _parse_user(row) if row else None

    async def get_by_email(self, email: str) -> UserProfile | None:
        """Return a profile by email, if present."""
        row = await self.database.run(
            lambda connection: connection.execute(
                "SELECT * FROM users WHERE email = ?", (email,)
            ).fetchone()
        )
        return _parse_user(row) if row else None

    async def update_user(self, profile: UserProfile) -> UserProfile:
        """Overwrite every mutable column of a profile."""

        def update(connection: sqlite3.Connection) -> int:
            cursor = connection.execute(
                """
                UPDATE users SET
                    name = :name, date_of_birth = :date_of_birth, gender = :gender,
                    height = :height, current_weight = :current_weight,
                    activity_level = :activity_level, goal_type = :goal_type,
                    target_weight = :target_weight,
                    weekly_weight_change = :weekly_weight_change,
                    calorie_goal = :calorie_goal, macro_protein = :macro_protein,
                    macro_carbs = :macro_carbs, macro_fat = :macro_fat,
                    custom_fiber = :custom_fiber, custom_sugar = :custom_sugar,
                    custom_sodium = :custom_sodium,
                    custom_cholesterol = :custom_cholesterol,
                    units = :units, theme = :theme, updated_at = :updated_at
                WHERE id = :id
                """,
                _to_row(profile),
            )
            return cursor.rowcount

        if await self.database.run(update) == 0:
            raise RuntimeError("Failed to update user profile")
        return profile

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a profile; dependent rows cascade."""
        await self.database.run(
            lambda connection: connection.execute(
                "DELETE FROM users WHERE id = ?", (str(user_id),)
            )
        )


def _to_row(profile: UserProfile) -> dict[str, object]:
    goals = profile.goals
    return {
        "id": str(profile.id),
        "email": profile.email,
        "name": profile.name,
        "date_of_birth": profile.date_of_birth.isoformat(),
        "gender": profile.gender.value,
        "height": profile.height,
        "current_weight": profile.current_weight,
        "activity_level": profile.activity_level.value,
        "goal_type": goals.goal_type.value,
        "target_weight": goals.target_weight,
        "weekly_weight_change": goals.weekly_weight_change,
        "calorie_goal": goals.calorie_goal,
        "macro_protein": goals.macro_ratios.protein,
        "macro_carbs": goals.macro_ratios.carbs,
        "macro_fat": goals.macro_ratios.fat,
        "custom_fiber": goals.custom_goals.fiber,
        "custom_sugar": goals.custom_goals.sugar,
        "custom_sodium": goals.custom_goals.sodium,
        "custom_cholesterol": goals.custom_goals.cholesterol,
        "units": profile.preferences.units.value,
        "theme": profile.preferences.theme.value,
        "created_at": profile.created_at.isoformat(),
        "updated_at": profile.updated_at.isoformat(),
    }


def _parse_user(row: sqlite3.Row) -> UserProfile:
    """Parse a users row into a domain model."""
    return UserProfile(
        id=UUID(row["id"]),
        email=row["email"],
        name=row["name"],
        date_of_birth=date.fromisoformat(row["date_of_birth"]),
        gender=Gender(row["gender"]),
        height=float(row["height"]),
        current_weight=float(row["current_weight"]),
        activity_level=ActivityLevel(row["activity_level"]),
        goals=NutritionGoals(
            goal_type=GoalType(row["goal_type"]),
            calorie_goal=int(row["calorie_goal"]),
            macro_ratios=MacroRatios(
                protein=row["macro_protein"],
                carbs=row["macro_carbs"],
                fat=row["macro_fat"],
            ),
            target_weight=row["target_weight"],
            weekly_weight_change=row["weekly_weight_change"],
            custom_goals=CustomNutritionGoals(
                fiber=row["custom_fiber"],
                sugar=row["custom_sugar"],
                sodium=row["custom_sodium"],
                cholesterol=row["custom_cholesterol"],
            ),
        ),
        preferences=UserPreferences(
            units=UnitSystem(row["units"]), theme=ThemeMode(row["theme"])
        ),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )
