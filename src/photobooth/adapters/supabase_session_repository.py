"""Supabase-backed photo session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from photobooth.adapters.supabase_rows import parse_datetime
from photobooth.domain.events import PhotoSessionRecord
from photobooth.services.events import SessionRepository


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for photo sessions.

    Sessions carry no owner column; reads join the parent event and filter on
    its owner and soft-delete flag.
    """

    client: Client

    def create_session(self, event_id: UUID) -> PhotoSessionRecord:
        """Create a session row and return it."""
        response = (
            self.client.table("photo_sessions")
            .insert({"event_id": str(event_id)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create photo session")
        return _parse_session(response.data[0])

    def get_session(self, session_id: UUID, user_id: UUID) -> PhotoSessionRecord | None:
        """Return a session whose event is live and owned by the user."""
        response = (
            self.client.table("photo_sessions")
            .select(
                "id, event_id, photo_url, created_at, updated_at, "
                "events!inner(user_id, is_deleted)"
            )
            .eq("id", str(session_id))
            .eq("events.user_id", str(user_id))
            .eq("events.is_deleted", False)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def update_photo_url(self, session_id: UUID, photo_url: str) -> None:
        """Set the storage path of the session's source photo."""
        self.client.table("photo_sessions").update(
            {"photo_url": photo_url, "updated_at": datetime.now(tz=UTC).isoformat()}
        ).eq("id", str(session_id)).execute()


def _parse_session(row: dict[str, object]) -> PhotoSessionRecord:
    return PhotoSessionRecord(
        id=UUID(str(row["id"])),
        event_id=UUID(str(row["event_id"])),
        photo_url=row.get("photo_url") or None,
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
    )
