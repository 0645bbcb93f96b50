"""Event and photo session management."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from photobooth.domain.errors import NotFoundError, ValidationError
from photobooth.domain.events import EventRecord, PhotoSessionRecord
from photobooth.domain.ids import require_id
from photobooth.domain.models import AuthUser, StoredMedia, UploadFile
from photobooth.services.storage import StorageService

_logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    """Treat a naive datetime as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class EventRepository(Protocol):
    """Persistence interface for events."""

    def create_event(
        self, user_id: UUID, name: str, start_date: datetime, end_date: datetime
    ) -> EventRecord:
        """Create an event and return it."""

    def get_event(self, event_id: UUID, user_id: UUID) -> EventRecord | None:
        """Return a live event owned by the user, if present."""

    def list_events(self, user_id: UUID, descending: bool = True) -> list[EventRecord]:
        """Return the user's live events ordered by creation time."""

    def update_logo_url(self, event_id: UUID, logo_url: str) -> None:
        """Set the storage path of the event logo."""


class SessionRepository(Protocol):
    """Persistence interface for photo sessions."""

    def create_session(self, event_id: UUID) -> PhotoSessionRecord:
        """Create a session under an event and return it."""

    def get_session(self, session_id: UUID, user_id: UUID) -> PhotoSessionRecord | None:
        """Return a session whose event is live and owned by the user."""

    def update_photo_url(self, session_id: UUID, photo_url: str) -> None:
        """Set the storage path of the session's source photo."""


@dataclass
class EventService:
    """Ownership-scoped operations over events and their sessions."""

    event_repository: EventRepository
    session_repository: SessionRepository
    storage: StorageService

    def create_event(
        self,
        user: AuthUser,
        name: str | None,
        start_date: datetime | None,
        end_date: datetime | None,
    ) -> EventRecord:
        """Create an event for the caller."""
        if not name or not name.strip():
            raise ValidationError(
                "Missing required field: name", code="MISSING_REQUIRED_FIELD"
            )
        if start_date is None:
            raise ValidationError(
                "Missing required field: startDate", code="MISSING_REQUIRED_FIELD"
            )
        if end_date is None:
            raise ValidationError(
                "Missing required field: endDate", code="MISSING_REQUIRED_FIELD"
            )
        start_date = _as_utc(start_date)
        end_date = _as_utc(end_date)
        if end_date < start_date:
            raise ValidationError(
                "endDate must not be before startDate", code="INVALID_DATE_RANGE"
            )
        event = self.event_repository.create_event(
            user.id, name.strip(), start_date, end_date
        )
        _logger.info("Event created: event=%s user=%s", event.id, user.id)
        return event

    def get_event(self, user: AuthUser, event_id: str | UUID | None) -> EventRecord:
        """Return the caller's event or raise NotFoundError."""
        resolved_id = require_id(event_id, "MISSING_EVENT_ID", "Event ID")
        event = self.event_repository.get_event(resolved_id, user.id)
        if event is None:
            raise NotFoundError("Event not found", code="EVENT_NOT_FOUND")
        return event

    def list_events(self, user: AuthUser, order: str = "desc") -> list[EventRecord]:
        if order not in {"asc", "desc"}:
            raise ValidationError("order must be 'asc' or 'desc'", code="INVALID_ORDER")
        return self.event_repository.list_events(user.id, descending=order == "desc")

    def upload_logo(
        self, user: AuthUser, event_id: str | None, file: UploadFile | None
    ) -> tuple[EventRecord, str]:
        """Store an event logo and record its path."""
        resolved_id = require_id(event_id, "MISSING_EVENT_ID", "Event ID")
        if file is None:
            raise ValidationError("No logo file provided", code="MISSING_LOGO_FILE")
        self.storage.validate(file)
        event = self.get_event(user, resolved_id)
        path = self.storage.upload_logo(str(user.id), str(event.id), file)
        self.event_repository.update_logo_url(event.id, path)
        return event, path

    def get_logo(
        self,
        user: AuthUser,
        event_id: str | None,
        mode: str | None,
        expires: int | None,
    ) -> StoredMedia:
        event = self.get_event(user, event_id)
        if not event.logo_url:
            raise NotFoundError("Logo not set for this event", code="LOGO_NOT_FOUND")
        return self.storage.read_media(event.logo_url, mode, expires)

    def create_session(
        self, user: AuthUser, event_id: str | UUID | None
    ) -> PhotoSessionRecord:
        """Open a capture session inside one of the caller's events."""
        event = self.get_event(user, event_id)
        return self.session_repository.create_session(event.id)

    def get_session(
        self, user: AuthUser, session_id: str | UUID | None
    ) -> PhotoSessionRecord:
        """Return the caller's session or raise NotFoundError."""
        resolved_id = require_id(session_id, "MISSING_SESSION_ID", "Session ID")
        session = self.session_repository.get_session(resolved_id, user.id)
        if session is None:
            raise NotFoundError(
                "Photo session not found", code="SESSION_NOT_FOUND"
            )
        return session

    def get_event_session(
        self,
        user: AuthUser,
        event_id: str | UUID | None,
        session_id: str | UUID | None,
    ) -> tuple[EventRecord, PhotoSessionRecord]:
        """Resolve an event and a session that must belong to it."""
        event = self.get_event(user, event_id)
        session = self.get_session(user, session_id)
        if session.event_id != event.id:
            raise NotFoundError(
                "Photo session not found", code="SESSION_NOT_FOUND"
            )
        return event, session

    def upload_session_photo(
        self,
        user: AuthUser,
        event_id: str | None,
        session_id: str | None,
        file: UploadFile | None,
    ) -> tuple[PhotoSessionRecord, str]:
        """Store the session's source photo and record its path."""
        require_id(event_id, "MISSING_EVENT_ID", "Event ID")
        require_id(session_id, "MISSING_SESSION_ID", "Session ID")
        if file is None:
            raise ValidationError("Photo file is required", code="MISSING_PHOTO_FILE")
        self.storage.validate(file)
        event, session = self.get_event_session(user, event_id, session_id)
        path = self.storage.upload_session_photo(
            str(user.id), str(event.id), str(session.id), str(uuid4()), file
        )
        self.session_repository.update_photo_url(session.id, path)
        return session, path

    def get_session_photo(
        self,
        user: AuthUser,
        session_id: str | None,
        mode: str | None,
        expires: int | None,
    ) -> StoredMedia:
        session = self.get_session(user, session_id)
        if not session.photo_url:
            raise NotFoundError(
                "No photo found for this session", code="PHOTO_NOT_FOUND"
            )
        return self.storage.read_media(session.photo_url, mode, expires)
