"""Account endpoints backed by the hosted identity provider."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from nutrilog.api.schemas import (
    AttributesRequest,
    ConfirmationRequest,
    CredentialsRequest,
    EmailRequest,
    NewPasswordRequest,
    SignUpRequest,
)

if TYPE_CHECKING:
    from nutrilog.containers import AppContainer
    from nutrilog.domain.auth import AuthSession

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-up")
async def sign_up(body: SignUpRequest, request: Request) -> dict[str, object]:
    """Register an account; most providers then require an emailed code."""
    container: AppContainer = request.app.state.container
    result = container.auth_service.sign_up(body.email, body.password, body.attributes)
    return {"result": result}


@router.post("/confirm")
async def confirm_sign_up(
    body: ConfirmationRequest, request: Request
) -> dict[str, object]:
    """Confirm a new account and sign it in on this device."""
    container: AppContainer = request.app.state.container
    session = container.auth_service.confirm_sign_up(body.email, body.code)
    return await _start_session(container, session)


@router.post("/sign-in")
async def sign_in(body: CredentialsRequest, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    session = container.auth_service.sign_in(body.email, body.password)
    return await _start_session(container, session)


@router.post("/sign-out")
async def sign_out(request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    container.auth_service.sign_out()
    await container.app_state.sign_out()
    return {"session": container.app_state.session}


@router.post("/forgot-password")
async def forgot_password(body: EmailRequest, request: Request) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    container.auth_service.forgot_password(body.email)
    return {"status": "sent"}


@router.post("/confirm-new-password")
async def confirm_new_password(
    body: NewPasswordRequest, request: Request
) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    container.auth_service.confirm_new_password(
        body.email, body.code, body.new_password
    )
    return {"status": "updated"}


@router.post("/resend-code")
async def resend_code(body: EmailRequest, request: Request) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    container.auth_service.resend_confirmation_code(body.email)
    return {"status": "sent"}


@router.put("/attributes")
async def update_attributes(
    body: AttributesRequest, request: Request
) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    container.auth_service.update_attributes(body.attributes)
    return {"status": "updated"}


async def _start_session(
    container: AppContainer, session: AuthSession
) -> dict[str, object]:
    profile = await container.user_service.get_by_email(session.email)
    state = await container.app_state.sign_in(
        profile.id if profile else None,
        session.email,
        onboarded=profile is not None,
    )
    return {"auth": session, "session": state, "profile": profile}
