"""Supabase Auth implementation of the identity provider."""

from dataclasses import dataclass

from supabase import Client, create_client

from nutrilog.domain.auth import AuthSession, SignUpResult
from nutrilog.services.auth import IdentityProvider


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Identity provider backed by Supabase Auth."""

    client: Client

    @classmethod
    def create(cls, url: str, anon_key: str) -> "SupabaseIdentityProvider":
        """Create a provider for a Supabase project."""
        return cls(client=create_client(url, anon_key))

    def sign_up(
        self, email: str, password: str, attributes: dict[str, str]
    ) -> SignUpResult:
        response = self.client.auth.sign_up(
            {"email": email, "password": password, "options": {"data": attributes}}
        )
        return SignUpResult(
            subject=response.user.id if response.user else None,
            confirmation_required=response.session is None,
        )

    def confirm_sign_up(self, email: str, code: str) -> AuthSession:
        response = self.client.auth.verify_otp(
            {"email": email, "token": code, "type": "signup"}
        )
        return _to_session(response, email)

    def sign_in(self, email: str, password: str) -> AuthSession:
        response = self.client.auth.sign_in_with_password(
            {"email": email, "password": password}
        )
        return _to_session(response, email)

    def sign_out(self) -> None:
        self.client.auth.sign_out()

    def forgot_password(self, email: str) -> None:
        self.client.auth.reset_password_for_email(email)

    def confirm_new_password(self, email: str, code: str, new_password: str) -> None:
        self.client.auth.verify_otp({"email": email, "token": code, "type": "recovery"})
        self.client.auth.update_user({"password": new_password})

    def resend_confirmation_code(self, email: str) -> None:
        self.client.auth.resend({"type": "signup", "email": email})

    def update_attributes(self, attributes: dict[str, str]) -> None:
        self.client.auth.update_user({"data": attributes})


def _to_session(response: object, email: str) -> AuthSession:
    session = getattr(response, "session", None)
    user = getattr(response, "user", None)
    if session is None or user is None:
        raise RuntimeError("Failed to obtain an auth session")
    return AuthSession(
        subject=str(user.id),
        email=user.email or email,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=session.expires_at,
    )
