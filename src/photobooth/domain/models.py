"""Domain models shared across the photobooth services."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class AuthUser:
    """Identity resolved from a bearer token."""

    id: UUID
    email: str | None = None


@dataclass(frozen=True)
class UploadFile:
    """In-memory file received from a client or produced by the pipeline."""

    name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        if "." not in self.name:
            return ""
        return self.name.rsplit(".", 1)[1].lower()


@dataclass(frozen=True)
class StoredMedia:
    """Media read back from storage, either as bytes or as a signed URL."""

    content_type: str | None = None
    data: bytes | None = None
    signed_url: str | None = None
    expires_in: int | None = None
    name: str | None = None
