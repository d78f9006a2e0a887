"""Domain models for identity provider results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthSession:
    """Tokens issued after a successful sign-in or confirmation."""

    subject: str
    email: str
    access_token: str
    refresh_token: str | None = None
    expires_at: int | None = None


@dataclass(frozen=True)
class SignUpResult:
    subject: str | None
    confirmation_required: bool
