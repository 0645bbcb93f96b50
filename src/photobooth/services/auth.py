"""Bearer-token authentication."""

from dataclasses import dataclass
from typing import Protocol

from photobooth.domain.errors import AuthenticationError
from photobooth.domain.models import AuthUser


class AuthGateway(Protocol):
    """Interface to the external authentication provider."""

    def resolve_user(self, token: str) -> AuthUser | None:
        """Return the user owning the token, or None if it is not valid."""


@dataclass
class AuthService:
    """Resolves an Authorization header to an authenticated user."""

    gateway: AuthGateway

    def authenticate(self, authorization: str | None) -> AuthUser:
        """Return the caller or raise AuthenticationError."""
        if not authorization or not authorization.startswith("Bearer "):
            raise AuthenticationError(
                "Missing or invalid authorization header", code="MISSING_TOKEN"
            )
        token = authorization[len("Bearer ") :].strip()
        if not token:
            raise AuthenticationError(
                "Missing or invalid authorization header", code="MISSING_TOKEN"
            )
        user = self.gateway.resolve_user(token)
        if user is None:
            raise AuthenticationError("Invalid or expired token", code="INVALID_TOKEN")
        return user
