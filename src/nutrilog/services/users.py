"""User profile business logic."""

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from nutrilog.domain.models import NewUserProfile, UserProfile
from nutrilog.domain.nutrition import NutritionalInfo
from nutrilog.services.calculator import (
    apply_custom_goals,
    calculate_age,
    calculate_calorie_goal,
    calculate_calorie_goal_for_profile,
    calculate_macro_goals,
)

_PROFILE_FIELDS = frozenset(
    {"name", "date_of_birth", "gender", "height", "current_weight", "activity_level"}
)
_GOAL_FIELDS = frozenset(
    {
        "goal_type",
        "target_weight",
        "weekly_weight_change",
        "calorie_goal",
        "macro_ratios",
        "custom_goals",
    }
)
_PREFERENCE_FIELDS = frozenset({"units", "theme"})


class UserRepository(Protocol):
    """Persistence interface for user profiles."""

    async def create_user(
        self, registration: NewUserProfile, calorie_goal: int
    ) -> UserProfile:
        """Create and return a new profile."""

    async def get_user(self, user_id: UUID) -> UserProfile | None:
        """Return the profile for an id, if present."""

    async def get_by_email(self, email: str) -> UserProfile | None:
        """Return the profile registered with an email, if present."""

    async def update_user(self, profile: UserProfile) -> UserProfile:
        """Replace a stored profile and return it."""

    async def delete_user(self, user_id: UUID) -> None:
        """Delete a profile together with everything the user logged."""


@dataclass
class UserService:
    """Application service for profile lifecycle and goals."""

    repository: UserRepository

    async def create_profile(
        self, registration: NewUserProfile, today: date | None = None
    ) -> UserProfile:
        """Store a new profile, deriving the calorie goal when none is given."""
        if await self.repository.get_by_email(registration.email):
            raise ValueError(f"A profile already exists for {registration.email}")
        calorie_goal = registration.calorie_goal
        if calorie_goal is None:
            calorie_goal = calculate_calorie_goal(
                weight_kg=registration.current_weight,
                height_cm=registration.height,
                age=calculate_age(registration.date_of_birth, today),
                gender=registration.gender,
                activity_level=registration.activity_level,
                goal_type=registration.goal_type,
                weekly_weight_change=registration.weekly_weight_change,
            )
        return await self.repository.create_user(registration, calorie_goal)

    async def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return a stored profile."""
        return await self.repository.get_user(user_id)

    async def get_by_email(self, email: str) -> UserProfile | None:
        return await self.repository.get_by_email(email)

    async def update_profile(
        self, user_id: UUID, updates: dict[str, object]
    ) -> UserProfile | None:
        """Apply a partial update to profile, goal and preference fields."""
        profile = await self.repository.get_user(user_id)
        if profile is None:
            return None
        unknown = set(updates) - _PROFILE_FIELDS - _GOAL_FIELDS - _PREFERENCE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        updated = replace(
            profile,
            **{key: value for key, value in updates.items() if key in _PROFILE_FIELDS},
            goals=replace(
                profile.goals,
                **{key: value for key, value in updates.items() if key in _GOAL_FIELDS},
            ),
            preferences=replace(
                profile.preferences,
                **{
                    key: value
                    for key, value in updates.items()
                    if key in _PREFERENCE_FIELDS
                },
            ),
            updated_at=datetime.now(tz=UTC),
        )
        return await self.repository.update_user(updated)

    async def recalculate_calorie_goal(
        self, user_id: UUID, today: date | None = None
    ) -> UserProfile | None:
        """Recompute the calorie goal from current biometrics and store it."""
        profile = await self.repository.get_user(user_id)
        if profile is None:
            return None
        calorie_goal = calculate_calorie_goal_for_profile(profile, today)
        return await self.update_profile(user_id, {"calorie_goal": calorie_goal})

    async def get_nutrition_goals(self, user_id: UUID) -> NutritionalInfo | None:
        """Return daily nutrient targets with the user's overrides applied."""
        profile = await self.repository.get_user(user_id)
        if profile is None:
            return None
        goals = calculate_macro_goals(
            profile.goals.calorie_goal, profile.goals.macro_ratios
        )
        return apply_custom_goals(goals, profile.goals.custom_goals)

    async def reset(self, user_id: UUID) -> None:
        """Remove the profile and all of its logged data."""
        await self.repository.delete_user(user_id)
