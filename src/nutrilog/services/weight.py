"""Weight history service."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from nutrilog.domain.weight import WeightEntry, WeightProgress
from nutrilog.services.calculator import calculate_progress, round_half_up
from nutrilog.services.users import UserRepository

_logger = logging.getLogger(__name__)

DEFAULT_HISTORY_DAYS = 30


class WeightRepository(Protocol):
    """Persistence interface for weight entries."""

    async def add_entry(
        self, user_id: UUID, weight: float, day: date, notes: str | None
    ) -> WeightEntry:
        """Store a measurement and return it."""

    async def list_entries(
        self, user_id: UUID, since: date | None = None
    ) -> list[WeightEntry]:
        """Return entries newest first, optionally from a day onwards."""

    async def get_latest(self, user_id: UUID) -> WeightEntry | None:
        """Return the most recent entry."""

    async def get_first(self, user_id: UUID) -> WeightEntry | None:
        """Return the earliest entry."""


@dataclass
class WeightService:
    """Application service for weight measurements and goal progress."""

    repository: WeightRepository
    user_repository: UserRepository

    async def add_entry(
        self,
        user_id: UUID,
        weight: float,
        day: date | None = None,
        notes: str | None = None,
    ) -> WeightEntry | None:
        """Record a measurement and sync the profile's current weight.

        The profile follows the most recent entry, so a backdated
        measurement leaves the current weight alone.
        """
        if weight <= 0:
            raise ValueError("Weight must be positive")
        profile = await self.user_repository.get_user(user_id)
        if profile is None:
            return None
        entry = await self.repository.add_entry(
            user_id, weight, day or date.today(), notes
        )
        latest = await self.repository.get_latest(user_id)
        if latest is not None and latest.weight != profile.current_weight:
            await self.user_repository.update_user(
                replace(
                    profile,
                    current_weight=latest.weight,
                    updated_at=datetime.now(tz=UTC),
                )
            )
            _logger.info("Updated current weight: user_id=%s", user_id)
        return entry

    async def list_entries(
        self, user_id: UUID, days: int = DEFAULT_HISTORY_DAYS, today: date | None = None
    ) -> list[WeightEntry]:
        """Return entries from the last ``days`` days, newest first."""
        cutoff = (today or date.today()) - timedelta(days=days)
        return await self.repository.list_entries(user_id, since=cutoff)

    async def latest(self, user_id: UUID) -> WeightEntry | None:
        return await self.repository.get_latest(user_id)

    async def first(self, user_id: UUID) -> WeightEntry | None:
        return await self.repository.get_first(user_id)

    async def progress(self, user_id: UUID) -> WeightProgress | None:
        """Return the journey from the first measurement toward the target."""
        profile = await self.user_repository.get_user(user_id)
        if profile is None:
            return None
        first = await self.repository.get_first(user_id)
        latest = await self.repository.get_latest(user_id)
        starting = first.weight if first else None
        current = latest.weight if latest else profile.current_weight
        target = profile.goals.target_weight
        change = round_half_up(current - starting, 1) if starting is not None else 0.0
        percent = 0
        if starting is not None and target is not None and starting != target:
            percent = calculate_progress(
                max(0.0, (starting - current) / (starting - target)) * 100, 100
            )
        return WeightProgress(
            starting_weight=starting,
            current_weight=current,
            target_weight=target,
            change=change,
            progress_percent=percent,
        )
