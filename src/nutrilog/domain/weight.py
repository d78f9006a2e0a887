"""Domain models for weight tracking."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class WeightEntry:
    """A point-in-time weight measurement."""

    id: UUID
    user_id: UUID
    weight: float
    date: date
    notes: str | None = None


@dataclass(frozen=True)
class WeightProgress:
    """Journey from the starting weight toward the target weight."""

    starting_weight: float | None
    current_weight: float | None
    target_weight: float | None
    change: float
    progress_percent: int
