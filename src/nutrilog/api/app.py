"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from nutrilog.adapters.sqlite_database import DatabaseNotInitializedError
from nutrilog.api.auth import router as auth_router
from nutrilog.api.diary import router as diary_router
from nutrilog.api.food_input import router as food_input_router
from nutrilog.api.foods import router as foods_router
from nutrilog.api.profile import router as profile_router
from nutrilog.api.weight import router as weight_router
from nutrilog.api.workouts import router as workouts_router
from nutrilog.app_logging import configure_logging
from nutrilog.containers import AppContainer
from nutrilog.services.auth import AuthenticationError
from nutrilog.services.food_input import FoodRecognitionError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await app.state.container.database.initialize()
        await app.state.container.app_state.load()
        logger.info("Local store ready: %s", container.settings.database_path)
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    for router in (
        auth_router,
        profile_router,
        foods_router,
        diary_router,
        workouts_router,
        weight_router,
        food_input_router,
    ):
        app.include_router(router)

    def _error(status_code: int, detail: str) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": detail})

    @app.exception_handler(ValueError)
    async def invalid_input(request: Request, exc: ValueError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(AuthenticationError)
    async def auth_failed(request: Request, exc: AuthenticationError) -> JSONResponse:
        return _error(status.HTTP_401_UNAUTHORIZED, str(exc))

    @app.exception_handler(FoodRecognitionError)
    async def recognition_failed(
        request: Request, exc: FoodRecognitionError
    ) -> JSONResponse:
        return _error(status.HTTP_502_BAD_GATEWAY, str(exc))

    @app.exception_handler(httpx.HTTPError)
    async def upstream_failed(request: Request, exc: httpx.HTTPError) -> JSONResponse:
        logger.warning("Upstream request failed: %s", exc)
        return _error(status.HTTP_502_BAD_GATEWAY, "Food lookup failed")

    @app.exception_handler(DatabaseNotInitializedError)
    async def store_unavailable(
        request: Request, exc: DatabaseNotInitializedError
    ) -> JSONResponse:
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
