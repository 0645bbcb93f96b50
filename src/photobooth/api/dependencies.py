"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, Request, UploadFile
from fastapi.responses import JSONResponse, Response

from photobooth.api.schemas import signed_url_payload, success
from photobooth.domain.models import AuthUser, StoredMedia
from photobooth.domain.models import UploadFile as IncomingFile

if TYPE_CHECKING:
    from photobooth.containers import AppContainer


async def require_user(
    request: Request, authorization: str | None = Header(default=None)
) -> AuthUser:
    """Resolve the bearer token to the calling user."""
    container: AppContainer = request.app.state.container
    return container.auth_service.authenticate(authorization)


async def read_upload(upload: UploadFile | None) -> IncomingFile | None:
    """Buffer a multipart file into memory."""
    if upload is None:
        return None
    data = await upload.read()
    return IncomingFile(
        name=upload.filename or "",
        content_type=upload.content_type or "",
        data=data,
    )


def media_response(media: StoredMedia) -> Response:
    """Return a signed-URL envelope or the raw bytes."""
    if media.signed_url is not None:
        return JSONResponse(
            success(signed_url_payload(media), "Signed URL created successfully")
        )
    return Response(
        content=media.data or b"",
        media_type=media.content_type,
        headers={
            "Content-Disposition": f'inline; filename="{media.name or "image"}"',
            "Cache-Control": "public, max-age=3600",
        },
    )
