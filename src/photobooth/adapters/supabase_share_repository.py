"""Supabase-backed shared photo repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from photobooth.adapters.supabase_rows import embedded, parse_datetime
from photobooth.domain.shares import SharedPhotoRecord
from photobooth.services.sharing import ShareRepository

_SHARE_COLUMNS = (
    "id, ai_photo_id, event_id, selected_url, qr_code_url, qr_expires_at, created_at"
)
_OWNED_COLUMNS = (
    f"{_SHARE_COLUMNS}, events!inner(name, user_id, is_deleted), ai_photos(style)"
)


@dataclass
class SupabaseShareRepository(ShareRepository):
    """Supabase implementation for shared photos."""

    client: Client

    def create_shared_photo(
        self,
        ai_photo_id: UUID,
        event_id: UUID,
        selected_url: str,
        qr_expires_at: datetime,
    ) -> SharedPhotoRecord:
        """Create a share with an empty QR code path."""
        response = (
            self.client.table("shared_photos")
            .insert(
                {
                    "ai_photo_id": str(ai_photo_id),
                    "event_id": str(event_id),
                    "selected_url": selected_url,
                    "qr_code_url": "",
                    "qr_expires_at": qr_expires_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create shared photo")
        return _parse_share(response.data[0])

    def get_by_id(self, share_id: UUID, user_id: UUID) -> SharedPhotoRecord | None:
        """Return a share whose event is owned by the user, if present."""
        response = (
            self.client.table("shared_photos")
            .select(_OWNED_COLUMNS)
            .eq("id", str(share_id))
            .eq("events.user_id", str(user_id))
            .eq("events.is_deleted", False)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_share(response.data[0])

    def get_by_ai_photo(self, ai_photo_id: UUID) -> SharedPhotoRecord | None:
        """Return the first share of an AI photo, if any."""
        response = (
            self.client.table("shared_photos")
            .select(_SHARE_COLUMNS)
            .eq("ai_photo_id", str(ai_photo_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_share(response.data[0])

    def list_by_event(self, event_id: UUID, user_id: UUID) -> list[SharedPhotoRecord]:
        """Return the event's shares, newest first."""
        response = (
            self.client.table("shared_photos")
            .select(_OWNED_COLUMNS)
            .eq("event_id", str(event_id))
            .eq("events.user_id", str(user_id))
            .eq("events.is_deleted", False)
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_share(row) for row in response.data or []]

    def update_qr_code_url(self, share_id: UUID, qr_code_url: str) -> SharedPhotoRecord:
        """Set the QR code path and return the updated share."""
        response = (
            self.client.table("shared_photos")
            .update({"qr_code_url": qr_code_url})
            .eq("id", str(share_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update shared photo")
        return _parse_share(response.data[0])


def _parse_share(row: dict[str, object]) -> SharedPhotoRecord:
    event = embedded(row, "events")
    photo = embedded(row, "ai_photos")
    return SharedPhotoRecord(
        id=UUID(str(row["id"])),
        ai_photo_id=UUID(str(row["ai_photo_id"])),
        event_id=UUID(str(row["event_id"])),
        selected_url=str(row["selected_url"]),
        qr_code_url=str(row.get("qr_code_url") or ""),
        qr_expires_at=parse_datetime(row["qr_expires_at"]),
        created_at=parse_datetime(row.get("created_at")),
        event_name=event.get("name"),
        style=photo.get("style"),
    )
