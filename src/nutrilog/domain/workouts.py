"""Domain models for exercises and workouts."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from uuid import UUID


class ExerciseCategory(str, Enum):
    """Category of a catalog exercise."""

    CARDIO = "cardio"
    STRENGTH = "strength"
    FLEXIBILITY = "flexibility"
    SPORTS = "sports"


class MuscleGroup(str, Enum):
    """Muscle group worked by an exercise."""

    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    LEGS = "legs"
    ABS = "abs"
    GLUTES = "glutes"


class Intensity(str, Enum):
    """Per-set effort, scales the MET value."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class StrengthIntensity(str, Enum):
    """Effort level for strength sessions without a catalog MET value."""

    LIGHT = "light"
    MODERATE = "moderate"
    VIGOROUS = "vigorous"


@dataclass(frozen=True)
class Exercise:
    """Reference catalog entry."""

    id: UUID
    name: str
    category: ExerciseCategory
    muscle_groups: list[MuscleGroup]
    met_value: float | None = None
    instructions: str | None = None


@dataclass(frozen=True)
class StrengthSet:
    """One set of a strength exercise."""

    reps: int
    weight: float
    rest_time: int | None = None


@dataclass(frozen=True)
class ExerciseSet:
    """A single exercise performed during a workout."""

    id: UUID
    exercise_id: UUID
    calories_burned: int
    duration: float | None = None
    distance: float | None = None
    intensity: Intensity | None = None
    sets: list[StrengthSet] = field(default_factory=list)


@dataclass(frozen=True)
class NewExerciseSet:
    """Exercise input for a workout that is being logged."""

    exercise_id: UUID
    duration: float | None = None
    distance: float | None = None
    intensity: Intensity | None = None
    sets: list[StrengthSet] = field(default_factory=list)


@dataclass(frozen=True)
class WorkoutSession:
    """A logged workout with its derived totals."""

    id: UUID
    user_id: UUID
    date: date
    exercises: list[ExerciseSet]
    total_duration: int
    calories_burned: int
    notes: str | None = None
