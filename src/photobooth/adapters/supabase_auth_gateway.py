"""Supabase Auth token resolution."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AuthApiError, Client

from photobooth.domain.errors import AuthenticationError
from photobooth.domain.models import AuthUser
from photobooth.services.auth import AuthGateway

HTTP_SERVER_ERROR = 500


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Resolves access tokens with the Supabase Auth API."""

    client: Client

    def resolve_user(self, token: str) -> AuthUser | None:
        """Return the user for an access token, if the provider accepts it."""
        try:
            response = self.client.auth.get_user(token)
        except AuthApiError as exc:
            if exc.status >= HTTP_SERVER_ERROR:
                raise
            raise AuthenticationError(
                "Invalid or expired token", code="INVALID_TOKEN"
            ) from exc
        if response is None or response.user is None:
            return None
        user = response.user
        return AuthUser(id=UUID(str(user.id)), email=getattr(user, "email", None))
