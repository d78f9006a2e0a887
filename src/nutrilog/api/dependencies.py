"""Shared request dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import HTTPException, Request, status

if TYPE_CHECKING:
    from nutrilog.containers import AppContainer


async def require_user(request: Request) -> UUID:
    """Return the signed-in user's profile id or reject the request."""
    container: AppContainer = request.app.state.container
    user_id = container.app_state.current_user_id
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sign in and complete onboarding first",
        )
    return user_id


def not_found(what: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found"
    )
