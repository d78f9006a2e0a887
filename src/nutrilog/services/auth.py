"""Account flows through the external identity provider."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

from nutrilog.domain.auth import AuthSession, SignUpResult

T = TypeVar("T")

_logger = logging.getLogger(__name__)


class AuthenticationError(RuntimeError):
    """Raised when the identity provider rejects or fails a request."""


class IdentityProvider(Protocol):
    """Interface for the hosted identity provider."""

    def sign_up(
        self, email: str, password: str, attributes: dict[str, str]
    ) -> SignUpResult:
        """Register an account and trigger a confirmation code."""

    def confirm_sign_up(self, email: str, code: str) -> AuthSession:
        """Confirm an account with the emailed code."""

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for tokens."""

    def sign_out(self) -> None:
        """End the provider session."""

    def forgot_password(self, email: str) -> None:
        """Send a password reset code."""

    def confirm_new_password(self, email: str, code: str, new_password: str) -> None:
        """Set a new password using a reset code."""

    def resend_confirmation_code(self, email: str) -> None:
        """Send the sign-up confirmation code again."""

    def update_attributes(self, attributes: dict[str, str]) -> None:
        """Store profile attributes on the signed-in account."""


@dataclass
class AuthService:
    """Application service for account flows.

    Every provider failure surfaces as ``AuthenticationError`` so callers
    handle one exception type regardless of the provider in use.
    """

    provider: IdentityProvider

    def sign_up(
        self, email: str, password: str, attributes: dict[str, str] | None = None
    ) -> SignUpResult:
        _require(email=email, password=password)
        return self._call(
            "sign up", self.provider.sign_up, email, password, attributes or {}
        )

    def confirm_sign_up(self, email: str, code: str) -> AuthSession:
        _require(email=email, code=code)
        return self._call("confirm sign up", self.provider.confirm_sign_up, email, code)

    def sign_in(self, email: str, password: str) -> AuthSession:
        _require(email=email, password=password)
        return self._call("sign in", self.provider.sign_in, email, password)

    def sign_out(self) -> None:
        self._call("sign out", self.provider.sign_out)

    def forgot_password(self, email: str) -> None:
        _require(email=email)
        self._call("forgot password", self.provider.forgot_password, email)

    def confirm_new_password(self, email: str, code: str, new_password: str) -> None:
        _require(email=email, code=code, password=new_password)
        self._call(
            "confirm new password",
            self.provider.confirm_new_password,
            email,
            code,
            new_password,
        )

    def resend_confirmation_code(self, email: str) -> None:
        _require(email=email)
        self._call("resend code", self.provider.resend_confirmation_code, email)

    def update_attributes(self, attributes: dict[str, str]) -> None:
        if not attributes:
            raise ValueError("No attributes to update")
        self._call("update attributes", self.provider.update_attributes, attributes)

    @staticmethod
    def _call(action: str, func: Callable[..., T], *args: object) -> T:
        try:
            return func(*args)
        except AuthenticationError:
            raise
        except Exception as exc:
            _logger.warning("Identity provider failed to %s: %s", action, exc)
            raise AuthenticationError(f"Failed to {action}: {exc}") from exc


def _require(**values: str) -> None:
    for name, value in values.items():
        if not value or not value.strip():
            raise ValueError(f"{name.capitalize()} must not be empty")
