"""Application state controller.

State lives in three named partitions that are loaded once at startup and
written back after each mutation of the partition.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol, TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError

from nutrilog.domain.app_state import (
    MAX_RECENT_FOODS,
    NotificationSettings,
    RecentFood,
    RecentFoodsState,
    SessionState,
    SettingsState,
)
from nutrilog.domain.foods import FoodItem
from nutrilog.domain.models import ThemeMode, UnitSystem

ModelT = TypeVar("ModelT", bound=BaseModel)

_logger = logging.getLogger(__name__)

SESSION_PARTITION = "session"
SETTINGS_PARTITION = "settings"
RECENT_FOODS_PARTITION = "recent_foods"


class StateRepository(Protocol):
    """Persistence interface for serialized state partitions."""

    async def load(self, partition: str) -> dict[str, object] | None:
        """Return a partition payload, if one was saved."""

    async def save(self, partition: str, payload: dict[str, object]) -> None:
        """Replace a partition payload."""

    async def clear(self) -> None:
        """Delete every partition."""


@dataclass
class AppStateController:
    """Owns the session, settings and recent-foods state."""

    repository: StateRepository
    session: SessionState = field(default_factory=SessionState)
    settings: SettingsState = field(default_factory=SettingsState)
    recent_foods: RecentFoodsState = field(default_factory=RecentFoodsState)

    async def load(self) -> None:
        """Deserialize every partition, keeping defaults for missing or bad ones."""
        self.session = await self._load(SESSION_PARTITION, SessionState)
        self.settings = await self._load(SETTINGS_PARTITION, SettingsState)
        self.recent_foods = await self._load(RECENT_FOODS_PARTITION, RecentFoodsState)

    @property
    def current_user_id(self) -> UUID | None:
        if not self.session.is_authenticated:
            return None
        return self.session.user_id

    async def sign_in(
        self, user_id: UUID | None, email: str, *, onboarded: bool = False
    ) -> SessionState:
        """Mark an identity as signed in on this device.

        ``user_id`` stays empty until the identity has a local profile.
        """
        self.session = SessionState(
            user_id=user_id,
            email=email,
            is_authenticated=True,
            has_completed_onboarding=onboarded,
        )
        await self._save(SESSION_PARTITION, self.session)
        return self.session

    async def complete_onboarding(self) -> SessionState:
        self.session = self.session.model_copy(
            update={"has_completed_onboarding": True}
        )
        await self._save(SESSION_PARTITION, self.session)
        return self.session

    async def sign_out(self) -> None:
        self.session = SessionState()
        await self._save(SESSION_PARTITION, self.session)

    async def update_settings(
        self, theme: ThemeMode | None = None, units: UnitSystem | None = None
    ) -> SettingsState:
        updates: dict[str, object] = {}
        if theme is not None:
            updates["theme"] = theme
        if units is not None:
            updates["units"] = units
        self.settings = self.settings.model_copy(update=updates)
        await self._save(SETTINGS_PARTITION, self.settings)
        return self.settings

    async def update_notifications(self, **toggles: bool) -> SettingsState:
        """Merge notification toggles into the current settings."""
        unknown = set(toggles) - set(NotificationSettings.model_fields)
        if unknown:
            names = ", ".join(sorted(unknown))
            raise ValueError(f"Unknown notification toggles: {names}")
        notifications = self.settings.notifications.model_copy(update=toggles)
        self.settings = self.settings.model_copy(
            update={"notifications": notifications}
        )
        await self._save(SETTINGS_PARTITION, self.settings)
        return self.settings

    async def add_recent_food(self, food: FoodItem) -> list[RecentFood]:
        """Move a food to the front of the recent list, capped in length."""
        entry = RecentFood(id=food.id, name=food.name, brand=food.brand)
        others = [item for item in self.recent_foods.items if item.id != food.id]
        items = [entry, *others]
        self.recent_foods = RecentFoodsState(items=items[:MAX_RECENT_FOODS])
        await self._save(RECENT_FOODS_PARTITION, self.recent_foods)
        return self.recent_foods.items

    async def reset(self) -> None:
        """Drop every partition and return to defaults."""
        await self.repository.clear()
        self.session = SessionState()
        self.settings = SettingsState()
        self.recent_foods = RecentFoodsState()

    async def _load(self, partition: str, model: type[ModelT]) -> ModelT:
        payload = await self.repository.load(partition)
        if payload is None:
            return model()
        try:
            return model.model_validate(payload)
        except ValidationError:
            _logger.warning("Discarding unreadable state partition: %s", partition)
            return model()

    async def _save(self, partition: str, state: BaseModel) -> None:
        await self.repository.save(partition, state.model_dump(mode="json"))
