"""Supabase-backed event repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from photobooth.adapters.supabase_rows import parse_datetime
from photobooth.domain.events import EventRecord
from photobooth.services.events import EventRepository

_EVENT_COLUMNS = "id, user_id, name, logo_url, start_date, end_date, created_at, updated_at"


@dataclass
class SupabaseEventRepository(EventRepository):
    """Supabase implementation for events; soft-deleted rows are invisible."""

    client: Client

    def create_event(
        self, user_id: UUID, name: str, start_date: datetime, end_date: datetime
    ) -> EventRecord:
        """Create an event row and return it."""
        response = (
            self.client.table("events")
            .insert(
                {
                    "user_id": str(user_id),
                    "name": name,
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                    "is_deleted": False,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create event")
        return _parse_event(response.data[0])

    def get_event(self, event_id: UUID, user_id: UUID) -> EventRecord | None:
        """Return a live event owned by the user, if present."""
        response = (
            self.client.table("events")
            .select(_EVENT_COLUMNS)
            .eq("id", str(event_id))
            .eq("user_id", str(user_id))
            .eq("is_deleted", False)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_event(response.data[0])

    def list_events(self, user_id: UUID, descending: bool = True) -> list[EventRecord]:
        """Return the user's live events ordered by creation time."""
        response = (
            self.client.table("events")
            .select(_EVENT_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("is_deleted", False)
            .order("created_at", desc=descending)
            .execute()
        )
        return [_parse_event(row) for row in response.data or []]

    def update_logo_url(self, event_id: UUID, logo_url: str) -> None:
        """Set the storage path of the event logo."""
        self.client.table("events").update(
            {"logo_url": logo_url, "updated_at": datetime.now(tz=UTC).isoformat()}
        ).eq("id", str(event_id)).execute()


def _parse_event(row: dict[str, object]) -> EventRecord:
    return EventRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row["name"]),
        logo_url=row.get("logo_url") or None,
        start_date=parse_datetime(row["start_date"]),
        end_date=parse_datetime(row["end_date"]),
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
    )
