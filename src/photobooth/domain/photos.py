"""Domain models for AI-generated photos."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class Style(StrEnum):
    """Fixed stylistic variants, in generation order."""

    ANIME = "Anime"
    WATERCOLOR = "Watercolor"
    OIL = "Oil"
    DISNEY = "Disney"

    @property
    def folder(self) -> str:
        return self.value.lower()


STYLE_ORDER: tuple[Style, ...] = tuple(Style)


@dataclass(frozen=True)
class AIPhotoRecord:
    """Represents one stylized variant of a session portrait."""

    id: UUID
    session_id: UUID
    style: Style
    generated_url: str | None
    event_id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
