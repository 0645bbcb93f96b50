"""AI photo records."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from photobooth.domain.errors import NotFoundError
from photobooth.domain.ids import require_id
from photobooth.domain.models import AuthUser, StoredMedia
from photobooth.domain.photos import STYLE_ORDER, AIPhotoRecord, Style
from photobooth.services.storage import StorageService


class AIPhotoRepository(Protocol):
    """Persistence interface for AI photo rows."""

    def create_ai_photo(self, session_id: UUID, style: Style) -> AIPhotoRecord:
        """Create a row with no storage URL yet."""

    def update_ai_photo_url(self, ai_photo_id: UUID, generated_url: str) -> None:
        """Record the storage path of a finished photo."""

    def get_ai_photo(self, ai_photo_id: UUID, user_id: UUID) -> AIPhotoRecord | None:
        """Return a photo reachable through the user's events, if present."""

    def list_by_session(self, session_id: UUID, user_id: UUID) -> list[AIPhotoRecord]:
        """Return photos of a session reachable through the user's events."""


@dataclass
class AIPhotoService:
    """Ownership-scoped reads over generated photos."""

    repository: AIPhotoRepository
    storage: StorageService

    def get_photo(self, user: AuthUser, ai_photo_id: str | UUID | None) -> AIPhotoRecord:
        resolved_id = require_id(ai_photo_id, "MISSING_AIPHOTO_ID", "AI Photo ID")
        photo = self.repository.get_ai_photo(resolved_id, user.id)
        if photo is None:
            raise NotFoundError("AI Photo not found", code="AIPHOTO_NOT_FOUND")
        return photo

    def list_session_photos(
        self, user: AuthUser, session_id: str | UUID | None
    ) -> list[AIPhotoRecord]:
        """Return the session's photos in fixed style order."""
        resolved_id = require_id(session_id, "MISSING_SESSION_ID", "Session ID")
        photos = self.repository.list_by_session(resolved_id, user.id)
        return sorted(photos, key=lambda photo: STYLE_ORDER.index(photo.style))

    def get_ai_photo_media(
        self,
        user: AuthUser,
        ai_photo_id: str | None,
        mode: str | None,
        expires: int | None,
    ) -> StoredMedia:
        photo = self.get_photo(user, ai_photo_id)
        if not photo.generated_url:
            raise NotFoundError(
                "AI Photo file not found in storage", code="FILE_NOT_FOUND"
            )
        return self.storage.read_media(photo.generated_url, mode, expires)
