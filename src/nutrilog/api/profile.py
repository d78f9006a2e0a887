"""Session, settings and profile endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from nutrilog.api.dependencies import not_found, require_user
from nutrilog.api.schemas import (
    ProfileCreateRequest,
    ProfileUpdateRequest,
    SettingsUpdateRequest,
)

if TYPE_CHECKING:
    from nutrilog.containers import AppContainer

router = APIRouter(tags=["profile"])


@router.get("/session")
async def get_session(request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return {"session": container.app_state.session}


@router.get("/settings")
async def get_settings(request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return {"settings": container.app_state.settings}


@router.patch("/settings")
async def update_settings(
    body: SettingsUpdateRequest, request: Request
) -> dict[str, object]:
    """Change display preferences and notification toggles."""
    container: AppContainer = request.app.state.container
    settings = await container.app_state.update_settings(
        theme=body.theme, units=body.units
    )
    if body.notifications is not None:
        toggles = body.notifications.model_dump(exclude_none=True)
        settings = await container.app_state.update_notifications(**toggles)
    return {"settings": settings}


@router.post("/profile", status_code=status.HTTP_201_CREATED)
async def create_profile(
    body: ProfileCreateRequest, request: Request
) -> dict[str, object]:
    """Finish onboarding: store the profile and sign it in locally."""
    container: AppContainer = request.app.state.container
    profile = await container.user_service.create_profile(body.to_domain())
    session = await container.app_state.sign_in(
        profile.id, profile.email, onboarded=True
    )
    await container.app_state.update_settings(
        theme=profile.preferences.theme, units=profile.preferences.units
    )
    return {"profile": profile, "session": session}


@router.get("/profile")
async def get_profile(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    profile = await container.user_service.get_profile(user_id)
    if profile is None:
        raise not_found("Profile")
    return {"profile": profile}


@router.patch("/profile")
async def update_profile(
    body: ProfileUpdateRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    profile = await container.user_service.update_profile(user_id, body.to_updates())
    if profile is None:
        raise not_found("Profile")
    return {"profile": profile}


@router.post("/profile/recalculate-goal")
async def recalculate_goal(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Recompute the calorie goal from the current weight and activity."""
    container: AppContainer = request.app.state.container
    profile = await container.user_service.recalculate_calorie_goal(user_id)
    if profile is None:
        raise not_found("Profile")
    return {"profile": profile}


@router.get("/profile/goals")
async def get_goals(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    goals = await container.user_service.get_nutrition_goals(user_id)
    if goals is None:
        raise not_found("Profile")
    return {"goals": goals}


@router.delete("/profile")
async def delete_profile(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    """Delete the profile with all logged data and clear local state."""
    container: AppContainer = request.app.state.container
    await container.user_service.reset(user_id)
    await container.app_state.reset()
    return {"status": "deleted"}
