"""Time-limited share links with QR codes for generated photos."""

import io
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

import qrcode

from photobooth.domain.errors import (
    NotFoundError,
    ShareExpiredError,
    ValidationError,
)
from photobooth.domain.ids import require_id
from photobooth.domain.models import AuthUser
from photobooth.domain.shares import SharedPhotoRecord
from photobooth.services.events import EventService
from photobooth.services.photos import AIPhotoService
from photobooth.services.storage import StorageService

DEFAULT_SHARE_EXPIRY_SECONDS = 7 * 24 * 60 * 60

_logger = logging.getLogger(__name__)


class ShareRepository(Protocol):
    """Persistence interface for shared photos."""

    def create_shared_photo(
        self,
        ai_photo_id: UUID,
        event_id: UUID,
        selected_url: str,
        qr_expires_at: datetime,
    ) -> SharedPhotoRecord:
        """Create a share with an empty QR code path."""

    def get_by_id(self, share_id: UUID, user_id: UUID) -> SharedPhotoRecord | None:
        """Return a share whose event is owned by the user, if present."""

    def get_by_ai_photo(self, ai_photo_id: UUID) -> SharedPhotoRecord | None:
        """Return the first share of an AI photo, if any."""

    def list_by_event(self, event_id: UUID, user_id: UUID) -> list[SharedPhotoRecord]:
        """Return the event's shares, newest first."""

    def update_qr_code_url(self, share_id: UUID, qr_code_url: str) -> SharedPhotoRecord:
        """Set the QR code path and return the updated share."""


@dataclass(frozen=True)
class ShareView:
    """Share as seen by its owner."""

    share: SharedPhotoRecord
    expired: bool
    share_url: str | None = None


def render_qr_code(data: str) -> bytes:
    """Render ``data`` as a black-on-white PNG QR code."""
    qr = qrcode.QRCode(version=1, box_size=10, border=5)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@dataclass
class ShareService:
    """Creates and serves share links for the caller's photos."""

    repository: ShareRepository
    photo_service: AIPhotoService
    event_service: EventService
    storage: StorageService
    default_expiry_seconds: int = DEFAULT_SHARE_EXPIRY_SECONDS

    def create_share(
        self,
        user: AuthUser,
        event_id: str | None,
        ai_photo_id: str | None,
        expires_in_seconds: int | None = None,
    ) -> ShareView:
        """Return an unexpired share for the photo, creating one if needed."""
        require_id(event_id, "MISSING_EVENT_ID", "Event ID")
        require_id(ai_photo_id, "MISSING_AIPHOTO_ID", "AI Photo ID")
        if expires_in_seconds is None:
            expires_in_seconds = self.default_expiry_seconds
        if expires_in_seconds < 0:
            raise ValidationError(
                "expiresInSeconds must not be negative", code="INVALID_EXPIRY"
            )

        event = self.event_service.get_event(user, event_id)
        photo = self.photo_service.get_photo(user, ai_photo_id)
        if photo.event_id is not None and photo.event_id != event.id:
            raise NotFoundError("AI Photo not found", code="AIPHOTO_NOT_FOUND")
        if not photo.generated_url:
            raise NotFoundError(
                "AI Photo file not found in storage", code="FILE_NOT_FOUND"
            )

        existing = self.repository.get_by_ai_photo(photo.id)
        if existing is not None and not existing.is_expired():
            share_url = self._signed_share_url(existing)
            if not existing.qr_code_url:
                existing = self._attach_qr_code(user, existing, share_url)
            return ShareView(share=existing, expired=False, share_url=share_url)

        expires_at = datetime.now(tz=UTC) + timedelta(seconds=expires_in_seconds)
        share = self.repository.create_shared_photo(
            photo.id, event.id, photo.generated_url, expires_at
        )
        share_url = self._signed_share_url(share)
        share = self._attach_qr_code(user, share, share_url)
        _logger.info(
            "Share created: share=%s photo=%s expires_at=%s",
            share.id,
            photo.id,
            expires_at.isoformat(),
        )
        return ShareView(share=share, expired=share.is_expired(), share_url=share_url)

    def get_share(self, user: AuthUser, share_id: str | None) -> ShareView:
        """Return the caller's share, flagging it when expired."""
        share = self._require_share(user, share_id)
        return ShareView(share=share, expired=share.is_expired())

    def list_event_shares(
        self, user: AuthUser, event_id: str | None
    ) -> list[ShareView]:
        event = self.event_service.get_event(user, event_id)
        now = datetime.now(tz=UTC)
        return [
            ShareView(share=share, expired=share.is_expired(now))
            for share in self.repository.list_by_event(event.id, user.id)
        ]

    def get_qr_code(self, user: AuthUser, share_id: str | None) -> bytes:
        """Return the QR code PNG of a live share."""
        share = self._require_share(user, share_id)
        if share.is_expired():
            raise ShareExpiredError("Share link has expired")
        if not share.qr_code_url:
            raise NotFoundError("QR code not found", code="QR_CODE_NOT_FOUND")
        data = self.storage.download(share.qr_code_url)
        if data is None:
            raise NotFoundError("QR code not found", code="QR_CODE_NOT_FOUND")
        return data

    def _require_share(self, user: AuthUser, share_id: str | None) -> SharedPhotoRecord:
        resolved_id = require_id(share_id, "MISSING_SHARE_ID", "Share ID")
        share = self.repository.get_by_id(resolved_id, user.id)
        if share is None:
            raise NotFoundError("Share not found", code="SHARE_NOT_FOUND")
        return share

    def _signed_share_url(self, share: SharedPhotoRecord) -> str:
        """Sign the photo for as long as the share lives, at least one second."""
        expires_at = share.qr_expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        remaining = (expires_at - datetime.now(tz=UTC)).total_seconds()
        return self.storage.create_signed_url(share.selected_url, max(int(remaining), 1))

    def _attach_qr_code(
        self, user: AuthUser, share: SharedPhotoRecord, share_url: str
    ) -> SharedPhotoRecord:
        path = self.storage.upload_qr_code(
            str(user.id), str(share.event_id), str(share.id), render_qr_code(share_url)
        )
        return self.repository.update_qr_code_url(share.id, path)
