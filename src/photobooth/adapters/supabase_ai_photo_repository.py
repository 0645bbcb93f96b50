"""Supabase-backed AI photo repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from photobooth.adapters.supabase_rows import embedded, parse_datetime, parse_uuid
from photobooth.domain.photos import AIPhotoRecord, Style
from photobooth.services.photos import AIPhotoRepository

_OWNED_COLUMNS = (
    "id, session_id, style, generated_url, created_at, updated_at, "
    "photo_sessions!inner(event_id, events!inner(user_id, is_deleted))"
)


@dataclass
class SupabaseAIPhotoRepository(AIPhotoRepository):
    """Supabase implementation for AI photo rows."""

    client: Client

    def create_ai_photo(self, session_id: UUID, style: Style) -> AIPhotoRecord:
        """Create a row with no storage URL yet."""
        response = (
            self.client.table("ai_photos")
            .insert({"session_id": str(session_id), "style": style.value})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create AI photo")
        return _parse_ai_photo(response.data[0])

    def update_ai_photo_url(self, ai_photo_id: UUID, generated_url: str) -> None:
        """Record the storage path of a finished photo."""
        self.client.table("ai_photos").update(
            {
                "generated_url": generated_url,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            }
        ).eq("id", str(ai_photo_id)).execute()

    def get_ai_photo(self, ai_photo_id: UUID, user_id: UUID) -> AIPhotoRecord | None:
        """Return a photo reachable through the user's live events."""
        response = (
            self.client.table("ai_photos")
            .select(_OWNED_COLUMNS)
            .eq("id", str(ai_photo_id))
            .eq("photo_sessions.events.user_id", str(user_id))
            .eq("photo_sessions.events.is_deleted", False)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_ai_photo(response.data[0])

    def list_by_session(self, session_id: UUID, user_id: UUID) -> list[AIPhotoRecord]:
        """Return the session's photos reachable through the user's live events."""
        response = (
            self.client.table("ai_photos")
            .select(_OWNED_COLUMNS)
            .eq("session_id", str(session_id))
            .eq("photo_sessions.events.user_id", str(user_id))
            .eq("photo_sessions.events.is_deleted", False)
            .order("created_at")
            .execute()
        )
        return [_parse_ai_photo(row) for row in response.data or []]


def _parse_ai_photo(row: dict[str, object]) -> AIPhotoRecord:
    session = embedded(row, "photo_sessions")
    return AIPhotoRecord(
        id=UUID(str(row["id"])),
        session_id=UUID(str(row["session_id"])),
        style=Style(row["style"]),
        generated_url=row.get("generated_url") or None,
        event_id=parse_uuid(session.get("event_id")),
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
    )
