"""Food catalog, favorites and remote lookup endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from nutrilog.api.dependencies import not_found, require_user
from nutrilog.api.schemas import FoodCreateRequest, ImportFoodRequest
from nutrilog.domain.foods import FoodCategory

if TYPE_CHECKING:
    from nutrilog.containers import AppContainer
    from nutrilog.services.food_lookup import FoodLookupService

router = APIRouter(prefix="/foods", tags=["foods"])


def _lookup_service(request: Request) -> FoodLookupService:
    container: AppContainer = request.app.state.container
    if container.food_lookup_service is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="FoodData Central lookup is not configured",
        )
    return container.food_lookup_service


@router.get("/search")
async def search_foods(
    request: Request,
    q: str = "",
    limit: int = Query(default=20, ge=1, le=100),
) -> dict[str, object]:
    """Search the local catalog by name."""
    container: AppContainer = request.app.state.container
    return {"foods": await container.food_service.search(q, limit)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_food(body: FoodCreateRequest, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    food = await container.food_service.create_food(body.to_domain())
    return {"food": food}


@router.get("/favorites")
async def list_favorites(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return {"foods": await container.food_service.list_favorites(user_id)}


@router.get("/recent")
async def list_recent(request: Request) -> dict[str, object]:
    """Foods most recently logged on this device, newest first."""
    container: AppContainer = request.app.state.container
    return {"foods": container.app_state.recent_foods.items}


@router.get("/remote/search")
async def search_remote_foods(
    request: Request,
    q: str = "",
    limit: int = Query(default=10, ge=1, le=50),
) -> dict[str, object]:
    """Search USDA FoodData Central."""
    lookup = _lookup_service(request)
    return {"foods": await lookup.search(q, limit)}


@router.get("/remote/{fdc_id}")
async def get_remote_food(fdc_id: int, request: Request) -> dict[str, object]:
    lookup = _lookup_service(request)
    return {"food": await lookup.get_food(fdc_id)}


@router.post("/remote/{fdc_id}/import", status_code=status.HTTP_201_CREATED)
async def import_remote_food(
    fdc_id: int, request: Request, body: ImportFoodRequest | None = None
) -> dict[str, object]:
    """Copy a FoodData Central item into the local catalog."""
    lookup = _lookup_service(request)
    category = body.category if body is not None else FoodCategory.OTHER
    return {"food": await lookup.import_food(fdc_id, category)}


@router.get("/{food_id}")
async def get_food(food_id: UUID, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    food = await container.food_service.get_food(food_id)
    if food is None:
        raise not_found("Food")
    return {"food": food}


@router.put("/{food_id}/favorite")
async def add_favorite(
    food_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    if await container.food_service.get_food(food_id) is None:
        raise not_found("Food")
    await container.food_service.add_favorite(user_id, food_id)
    return {"status": "added"}


@router.delete("/{food_id}/favorite")
async def remove_favorite(
    food_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    await container.food_service.remove_favorite(user_id, food_id)
    return {"status": "removed"}
