"""Models for provider generation jobs and pipeline results."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID

from photobooth.domain.photos import Style


class JobStatus(StrEnum):
    """Lifecycle of a provider job as seen by the job watcher."""

    PENDING = "PENDING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"
    TIMED_OUT = "TIMED_OUT"
    CANCELLED = "CANCELLED"

    @classmethod
    def from_provider(cls, raw: str | None) -> "JobStatus":
        """Map a provider status string onto the watcher states."""
        if raw == "COMPLETE":
            return cls.COMPLETE
        if raw == "FAILED":
            return cls.FAILED
        return cls.PENDING

    @property
    def is_terminal(self) -> bool:
        return self is not JobStatus.PENDING


@dataclass(frozen=True)
class JobSnapshot:
    """Single status poll of a provider job."""

    status: JobStatus
    image_urls: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class GenerationJob:
    """A submitted provider job bound to the photo row it fills."""

    generation_id: str
    ai_photo_id: UUID
    style: Style
    prompt: str


@dataclass(frozen=True)
class GeneratedImage:
    """Outcome for one style once stored."""

    ai_photo_id: UUID
    style: Style
    storage_url: str
    public_url: str
    generation_id: str
    has_logo: bool


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a full generation request."""

    image_id: str
    event_id: UUID
    session_id: UUID
    images: list[GeneratedImage]
