"""Workout logging service."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID, uuid4

from nutrilog.domain.workouts import (
    Exercise,
    ExerciseSet,
    NewExerciseSet,
    StrengthIntensity,
    WorkoutSession,
)
from nutrilog.services.calculator import (
    calculate_exercise_calories,
    calculate_strength_calories,
    round_half_up,
)
from nutrilog.services.users import UserRepository
from nutrilog.services.weight import WeightRepository

_logger = logging.getLogger(__name__)


class WorkoutRepository(Protocol):
    """Persistence interface for the exercise catalog and workout sessions."""

    async def list_exercises(self) -> list[Exercise]:
        """Return the exercise catalog ordered by name."""

    async def get_exercise(self, exercise_id: UUID) -> Exercise | None:
        """Return a catalog exercise, if present."""

    async def create_session(self, session: WorkoutSession) -> WorkoutSession:
        """Store a session with its exercise and strength sets."""

    async def get_session(self, session_id: UUID) -> WorkoutSession | None:
        """Return a stored session, if present."""

    async def delete_session(self, session_id: UUID) -> None:
        """Delete a session; its sets cascade."""

    async def list_sessions(
        self, user_id: UUID, start: date, end: date
    ) -> list[WorkoutSession]:
        """Return sessions between two days inclusive, newest first."""


@dataclass
class WorkoutService:
    """Application service that prices exercise sets and stores workouts."""

    repository: WorkoutRepository
    user_repository: UserRepository
    weight_repository: WeightRepository

    async def list_exercises(self) -> list[Exercise]:
        return await self.repository.list_exercises()

    async def log_workout(
        self,
        user_id: UUID,
        day: date,
        exercises: list[NewExerciseSet],
        notes: str | None = None,
        strength_intensity: StrengthIntensity = StrengthIntensity.MODERATE,
    ) -> WorkoutSession | None:
        """Compute calories for each exercise set and store the session.

        Calories use the latest logged body weight, falling back to the
        profile weight. Exercises without a MET value are priced with the
        generic strength table at ``strength_intensity``.
        """
        if not exercises:
            raise ValueError("A workout needs at least one exercise")
        if any(item.duration is not None and item.duration < 0 for item in exercises):
            raise ValueError("Exercise duration must not be negative")
        body_weight = await self._body_weight(user_id)
        if body_weight is None:
            return None

        sets: list[ExerciseSet] = []
        for item in exercises:
            exercise = await self.repository.get_exercise(item.exercise_id)
            if exercise is None:
                raise ValueError(f"Unknown exercise: {item.exercise_id}")
            minutes = item.duration or 0.0
            if exercise.met_value is not None:
                calories = calculate_exercise_calories(
                    exercise.met_value, body_weight, minutes, item.intensity
                )
            else:
                calories = calculate_strength_calories(
                    body_weight, minutes, strength_intensity
                )
            sets.append(
                ExerciseSet(
                    id=uuid4(),
                    exercise_id=exercise.id,
                    calories_burned=calories,
                    duration=item.duration,
                    distance=item.distance,
                    intensity=item.intensity,
                    sets=list(item.sets),
                )
            )

        session = WorkoutSession(
            id=uuid4(),
            user_id=user_id,
            date=day,
            exercises=sets,
            total_duration=int(
                round_half_up(sum(item.duration or 0.0 for item in sets))
            ),
            calories_burned=sum(item.calories_burned for item in sets),
            notes=notes,
        )
        stored = await self.repository.create_session(session)
        _logger.info(
            "Logged workout: user_id=%s calories=%s", user_id, stored.calories_burned
        )
        return stored

    async def get_workout(self, session_id: UUID) -> WorkoutSession | None:
        return await self.repository.get_session(session_id)

    async def delete_workout(self, user_id: UUID, session_id: UUID) -> bool:
        """Delete a session owned by the user; False when there is none."""
        session = await self.repository.get_session(session_id)
        if session is None or session.user_id != user_id:
            return False
        await self.repository.delete_session(session_id)
        return True

    async def list_workouts(
        self, user_id: UUID, start: date, end: date
    ) -> list[WorkoutSession]:
        return await self.repository.list_sessions(user_id, start, end)

    async def calories_burned(self, user_id: UUID, start: date, end: date) -> int:
        """Total calories burned across sessions in a date range."""
        sessions = await self.repository.list_sessions(user_id, start, end)
        return sum(session.calories_burned for session in sessions)

    async def _body_weight(self, user_id: UUID) -> float | None:
        latest = await self.weight_repository.get_latest(user_id)
        if latest is not None:
            return latest.weight
        profile = await self.user_repository.get_user(user_id)
        return profile.current_weight if profile else None
