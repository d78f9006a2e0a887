"""Daily food log, water intake and summary endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from nutrilog.api.dependencies import not_found, require_user
from nutrilog.api.schemas import (
    FoodEntryRequest,
    FoodEntryUpdateRequest,
    WaterIntakeRequest,
)

if TYPE_CHECKING:
    from nutrilog.containers import AppContainer

router = APIRouter(prefix="/diary", tags=["diary"])


@router.get("/{day}")
async def get_day(
    day: date, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return the day's record, creating an empty one on first access."""
    container: AppContainer = request.app.state.container
    daily = await container.daily_log_service.load_day(user_id, day)
    if daily is None:
        raise not_found("Profile")
    return {"day": daily}


@router.post("/{day}/entries", status_code=status.HTTP_201_CREATED)
async def add_entry(
    day: date,
    body: FoodEntryRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Log a food; repeating the same ``entry_id`` is a no-op."""
    container: AppContainer = request.app.state.container
    daily = await container.daily_log_service.add_food_entry(
        user_id,
        day,
        body.meal_type,
        body.food_id,
        body.serving_size_id,
        body.quantity,
        entry_id=body.entry_id,
    )
    if daily is None:
        raise not_found("Food")
    for consumed in daily.all_foods():
        if consumed.food_item.id == body.food_id:
            await container.app_state.add_recent_food(consumed.food_item)
            break
    return {"day": daily}


@router.patch("/{day}/entries/{entry_id}")
async def update_entry(
    day: date,
    entry_id: UUID,
    body: FoodEntryUpdateRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    daily = await container.daily_log_service.update_food_entry(
        user_id,
        day,
        entry_id,
        quantity=body.quantity,
        serving_size_id=body.serving_size_id,
    )
    if daily is None:
        raise not_found("Entry")
    return {"day": daily}


@router.delete("/{day}/entries/{entry_id}")
async def delete_entry(
    day: date,
    entry_id: UUID,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    daily = await container.daily_log_service.delete_food_entry(
        user_id, day, entry_id
    )
    if daily is None:
        raise not_found("Entry")
    return {"day": daily}


@router.put("/{day}/water")
async def set_water(
    day: date,
    body: WaterIntakeRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    daily = await container.daily_log_service.update_water_intake(
        user_id, day, body.amount
    )
    if daily is None:
        raise not_found("Profile")
    return {"day": daily}


@router.get("/{day}/totals")
async def get_totals(
    day: date, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    totals = await container.daily_log_service.calculate_daily_nutrition(
        user_id, day
    )
    return {"totals": totals}


@router.get("/{day}/summary")
async def get_summary(
    day: date, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Totals against goal, with calories burned in workouts."""
    container: AppContainer = request.app.state.container
    summary = await container.stats_service.get_day(user_id, day)
    if summary is None:
        raise not_found("Profile")
    return {"summary": summary}


@router.get("/{day}/week")
async def get_week(
    day: date, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Monday-based week containing ``day`` with daily averages."""
    container: AppContainer = request.app.state.container
    week = await container.stats_service.get_week(user_id, day)
    if week is None:
        raise not_found("Profile")
    return {"week": week}
