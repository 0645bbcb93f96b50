"""Domain models for events and photo sessions."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class EventRecord:
    """Represents a persisted event owned by one user."""

    id: UUID
    user_id: UUID
    name: str
    logo_url: str | None
    start_date: datetime
    end_date: datetime
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class PhotoSessionRecord:
    """Represents a capture session inside an event."""

    id: UUID
    event_id: UUID
    photo_url: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None
