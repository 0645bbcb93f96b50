"""Supabase Storage bucket adapter."""

import logging
from dataclasses import dataclass

from supabase import Client, StorageException

from photobooth.domain.errors import UploadFailedError
from photobooth.services.storage import ObjectStorage

_logger = logging.getLogger(__name__)


def _is_missing_object(exc: StorageException) -> bool:
    status = str(getattr(exc, "status", ""))
    return status == "404" or "not found" in str(exc).lower()


@dataclass
class SupabaseObjectStorage(ObjectStorage):
    """Stores objects in one Supabase Storage bucket."""

    client: Client
    bucket: str

    def _bucket(self):  # type: ignore[no-untyped-def]
        return self.client.storage.from_(self.bucket)

    def upload(  # noqa: PLR0913
        self,
        path: str,
        data: bytes,
        content_type: str,
        cache_control: str,
        upsert: bool,
    ) -> str:
        """Store bytes at a path and return the stored path."""
        try:
            self._bucket().upload(
                path=path,
                file=data,
                file_options={
                    "content-type": content_type,
                    "cache-control": cache_control,
                    "upsert": "true" if upsert else "false",
                },
            )
        except Exception as exc:
            raise UploadFailedError(f"Failed to upload {path}: {exc}") from exc
        return path

    def download(self, path: str) -> bytes | None:
        """Return the stored bytes, or None when the object does not exist."""
        try:
            data = self._bucket().download(path)
        except StorageException as exc:
            if not _is_missing_object(exc):
                raise
            _logger.warning("Storage object missing: path=%s", path)
            return None
        return data or None

    def create_signed_url(self, path: str, expires_in: int) -> str:
        """Return a time-limited URL for the object."""
        try:
            response = self._bucket().create_signed_url(path, expires_in)
        except Exception as exc:
            raise UploadFailedError(
                f"Failed to create signed URL for {path}: {exc}",
                code="SIGNED_URL_ERROR",
            ) from exc
        url = response.get("signedURL") or response.get("signedUrl")
        if not url:
            raise UploadFailedError(
                f"Failed to create signed URL for {path}", code="SIGNED_URL_ERROR"
            )
        return url
