"""Validation, path building and ownership checks for object storage."""

import re
from dataclasses import dataclass
from typing import Protocol

from photobooth.domain.errors import (
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from photobooth.domain.models import StoredMedia, UploadFile

ALLOWED_TYPES = ("image/png", "image/jpeg", "image/jpg", "image/webp")
ALLOWED_EXTS = ("png", "jpg", "jpeg", "webp")
MAX_FILE_SIZE = 5 * 1024 * 1024
DEFAULT_CACHE_CONTROL = "3600"

MIME_MAP = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
}
EXT_FOR_MIME = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
}

PATH_TEMPLATES = {
    "LOGO": "{user_id}/{event_id}/Logo/logo.{ext}",
    "PHOTO": "{user_id}/{event_id}/Photos/{session_id}/{photo_id}.{ext}",
    "AI_PHOTO": "{user_id}/{event_id}/Photos/{session_id}/{style}/{filename}.{ext}",
    "QR_CODE": "{user_id}/{event_id}/Shares/{share_id}/qr.png",
}

SIGNED_URL_DEFAULT_SECONDS = 600
SIGNED_URL_MIN_SECONDS = 10
SIGNED_URL_MAX_SECONDS = 3600

_SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class ObjectStorage(Protocol):
    """Interface for a bucket-scoped object store."""

    def upload(
        self,
        path: str,
        data: bytes,
        content_type: str,
        cache_control: str,
        upsert: bool,
    ) -> str:
        """Store bytes at a path and return the stored path."""

    def download(self, path: str) -> bytes | None:
        """Return the stored bytes, or None when the object is missing."""

    def create_signed_url(self, path: str, expires_in: int) -> str:
        """Return a time-limited URL for the object."""


def looks_like_image(mime_type: str, data: bytes) -> bool:
    """Check that the leading bytes match the declared image type."""
    head = data[:12]
    is_png = head[:4] == b"\x89PNG"
    is_jpeg = head[:3] == b"\xff\xd8\xff"
    is_webp = head[:4] == b"RIFF" and head[8:12] == b"WEBP"
    if mime_type == "image/png":
        return is_png
    if mime_type in {"image/jpeg", "image/jpg"}:
        return is_jpeg
    if mime_type == "image/webp":
        return is_webp
    return False


def detect_image_type(data: bytes) -> str | None:
    """Infer an allowed MIME type from file signatures."""
    for mime_type in ("image/png", "image/jpeg", "image/webp"):
        if looks_like_image(mime_type, data):
            return mime_type
    return None


def infer_mime_from_filename(filename: str, fallback: str = "image/jpeg") -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return MIME_MAP.get(ext, fallback)


def validate_upload(
    file: UploadFile,
    *,
    allow_types: tuple[str, ...] = ALLOWED_TYPES,
    allow_exts: tuple[str, ...] = ALLOWED_EXTS,
    max_size: int = MAX_FILE_SIZE,
) -> None:
    """Reject files with a bad name, type, size or disguised content."""
    if not file.data:
        raise ValidationError("File is empty", code="EMPTY_FILE")
    if not file.extension:
        raise ValidationError(
            "File must have a valid extension", code="INVALID_FILE_NAME"
        )
    if file.extension not in allow_exts:
        raise ValidationError(
            f"Invalid file extension. Allowed: {', '.join(allow_exts)}",
            code="INVALID_FILE_EXTENSION",
        )
    if file.content_type not in allow_types:
        raise ValidationError(
            f"Invalid file type. Allowed: {', '.join(allow_types)}",
            code="INVALID_FILE_TYPE",
        )
    if file.size > max_size:
        max_size_mb = max_size // (1024 * 1024)
        raise ValidationError(
            f"File too large. Maximum size is {max_size_mb}MB",
            code="FILE_TOO_LARGE",
        )
    if not looks_like_image(file.content_type, file.data):
        raise ValidationError(
            "File content does not match its declared type",
            code="INVALID_FILE_CONTENT",
        )


def build_path(template: str, **params: str) -> str:
    """Fill a path template; every parameter must be one safe segment."""
    for key, value in params.items():
        if not _SAFE_SEGMENT.match(value) or ".." in value:
            raise ValidationError(
                f"Invalid path segment for {key}", code="INVALID_PATH"
            )
    return PATH_TEMPLATES[template].format(**params)


def assert_path_owned_by_user(user_id: str, path: str) -> None:
    """Refuse traversal, absolute paths and paths outside the user's prefix."""
    if not path or not isinstance(path, str):
        raise ValidationError("Invalid path", code="INVALID_PATH")
    if ".." in path or path.startswith(("/", "\\")):
        raise ValidationError("Invalid path", code="INVALID_PATH")
    if not path.startswith(f"{user_id}/"):
        raise ForbiddenError("Forbidden", code="FORBIDDEN_PATH")


def clamp_signed_url_seconds(expires: int | None) -> int:
    if not expires:
        return SIGNED_URL_DEFAULT_SECONDS
    return min(max(expires, SIGNED_URL_MIN_SECONDS), SIGNED_URL_MAX_SECONDS)


@dataclass
class StorageService:
    """Uploads validated media under user-scoped paths."""

    storage: ObjectStorage
    max_upload_bytes: int = MAX_FILE_SIZE

    def validate(self, file: UploadFile) -> None:
        """Validate a client upload against the configured ceiling."""
        validate_upload(file, max_size=self.max_upload_bytes)

    def upload(
        self,
        user_id: str,
        path: str,
        data: bytes,
        content_type: str,
        cache_control: str = DEFAULT_CACHE_CONTROL,
    ) -> str:
        """Write bytes to a path owned by the user and return the path."""
        assert_path_owned_by_user(user_id, path)
        return self.storage.upload(
            path,
            data,
            content_type=content_type,
            cache_control=cache_control,
            upsert=True,
        )

    def upload_logo(self, user_id: str, event_id: str, file: UploadFile) -> str:
        path = build_path("LOGO", user_id=user_id, event_id=event_id, ext=file.extension)
        return self.upload(user_id, path, file.data, file.content_type)

    def upload_session_photo(
        self,
        user_id: str,
        event_id: str,
        session_id: str,
        photo_id: str,
        file: UploadFile,
    ) -> str:
        path = build_path(
            "PHOTO",
            user_id=user_id,
            event_id=event_id,
            session_id=session_id,
            photo_id=photo_id,
            ext=file.extension,
        )
        return self.upload(user_id, path, file.data, file.content_type)

    def upload_ai_photo(  # noqa: PLR0913
        self,
        user_id: str,
        event_id: str,
        session_id: str,
        style: str,
        data: bytes,
        content_type: str,
    ) -> str:
        path = build_path(
            "AI_PHOTO",
            user_id=user_id,
            event_id=event_id,
            session_id=session_id,
            style=style,
            filename=style,
            ext=EXT_FOR_MIME.get(content_type, "jpg"),
        )
        return self.upload(user_id, path, data, content_type)

    def upload_qr_code(
        self, user_id: str, event_id: str, share_id: str, data: bytes
    ) -> str:
        path = build_path(
            "QR_CODE", user_id=user_id, event_id=event_id, share_id=share_id
        )
        return self.upload(user_id, path, data, "image/png")

    def download(self, path: str) -> bytes | None:
        return self.storage.download(path)

    def create_signed_url(self, path: str, expires_in: int) -> str:
        return self.storage.create_signed_url(path, expires_in)

    def read_media(
        self, path: str, mode: str | None, expires: int | None = None
    ) -> StoredMedia:
        """Return a signed URL in ``signed`` mode, otherwise the raw bytes."""
        if mode == "signed":
            seconds = clamp_signed_url_seconds(expires)
            return StoredMedia(
                signed_url=self.storage.create_signed_url(path, seconds),
                expires_in=seconds,
            )
        data = self.storage.download(path)
        if data is None:
            raise NotFoundError("File not found in storage", code="FILE_NOT_FOUND")
        content_type = detect_image_type(data) or infer_mime_from_filename(path)
        return StoredMedia(
            content_type=content_type, data=data, name=path.rsplit("/", 1)[-1]
        )
