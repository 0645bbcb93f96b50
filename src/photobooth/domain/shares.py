"""Domain models for shared photos."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID


@dataclass(frozen=True)
class SharedPhotoRecord:
    """Represents a time-limited share of one AI photo."""

    id: UUID
    ai_photo_id: UUID
    event_id: UUID
    selected_url: str
    qr_code_url: str
    qr_expires_at: datetime
    created_at: datetime | None = None
    event_name: str | None = None
    style: str | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True once the expiry timestamp has been reached."""
        current = now or datetime.now(tz=UTC)
        expires_at = self.qr_expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return current >= expires_at
