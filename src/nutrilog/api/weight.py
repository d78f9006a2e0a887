"""Weight tracking endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from nutrilog.api.dependencies import not_found, require_user
from nutrilog.api.schemas import WeightEntryRequest

if TYPE_CHECKING:
    from nutrilog.containers import AppContainer

router = APIRouter(prefix="/weight", tags=["weight"])


@router.get("")
async def list_entries(
    request: Request,
    days: int = Query(default=30, ge=1, le=3650),
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    entries = await container.weight_service.list_entries(user_id, days)
    return {"entries": entries}


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_entry(
    body: WeightEntryRequest,
    request: Request,
    user_id: UUID = Depends(require_user),
) -> dict[str, object]:
    """Record a measurement; the profile follows the newest entry."""
    container: AppContainer = request.app.state.container
    entry = await container.weight_service.add_entry(
        user_id, body.weight, body.day, body.notes
    )
    if entry is None:
        raise not_found("Profile")
    return {"entry": entry}


@router.get("/progress")
async def get_progress(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    progress = await container.weight_service.progress(user_id)
    if progress is None:
        raise not_found("Profile")
    return {"progress": progress}
