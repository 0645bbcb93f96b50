"""Helpers for reading PostgREST rows."""

from datetime import UTC, datetime
from uuid import UUID


def parse_datetime(raw: object) -> datetime | None:
    """Parse an ISO timestamp, treating naive values as UTC."""
    if not isinstance(raw, str) or not raw:
        return None
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_uuid(raw: object) -> UUID | None:
    if raw is None or raw == "":
        return None
    return UUID(str(raw))


def embedded(row: dict[str, object], name: str) -> dict[str, object]:
    """Return an embedded relation, which PostgREST may render as a list."""
    value = row.get(name)
    if isinstance(value, list):
        return value[0] if value else {}
    if isinstance(value, dict):
        return value
    return {}
