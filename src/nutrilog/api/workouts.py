"""Exercise catalog and workout endpoints."""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from nutrilog.api.dependencies import not_found, require_user
from nutrilog.api.schemas import WorkoutRequest

if TYPE_CHECKING:
    from nutrilog.containers import AppContainer

router = APIRouter(prefix="/workouts", tags=["workouts"])

DEFAULT_HISTORY_DAYS = 30


@router.get("/exercises")
async def list_exercises(request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return {"exercises": await container.workout_service.list_exercises()}


@router.get("")
async def list_workouts(
    request: Request,
    start: date | None = None,
    end: date | None = None,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """List sessions in a date range, the last 30 days by default."""
    container: AppContainer = request.app.state.container
    end = end or date.today()
    start = start or end - timedelta(days=DEFAULT_HISTORY_DAYS)
    sessions = await container.workout_service.list_workouts(user_id, start, end)
    return {"workouts": sessions}


@router.post("", status_code=status.HTTP_201_CREATED)
async def log_workout(
    body: WorkoutRequest, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    session = await container.workout_service.log_workout(
        user_id,
        body.day,
        [item.to_domain() for item in body.exercises],
        notes=body.notes,
        strength_intensity=body.strength_intensity,
    )
    if session is None:
        raise not_found("Profile")
    return {"workout": session}


@router.get("/{session_id}")
async def get_workout(
    session_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    session = await container.workout_service.get_workout(session_id)
    if session is None or session.user_id != user_id:
        raise not_found("Workout")
    return {"workout": session}


@router.delete("/{session_id}")
async def delete_workout(
    session_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    if not await container.workout_service.delete_workout(user_id, session_id):
        raise not_found("Workout")
    return {"status": "deleted"}
