"""Photo session endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import Response  # noqa: TC002

from photobooth.api.dependencies import media_response, read_upload, require_user
from photobooth.api.schemas import CreateSessionRequest, session_payload, success
from photobooth.domain.models import AuthUser  # noqa: TC001

if TYPE_CHECKING:
    from photobooth.containers import AppContainer

router = APIRouter(prefix="/api/v1/session", tags=["sessions"])


@router.post("/create")
async def create_session(
    body: CreateSessionRequest,
    request: Request,
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    """Open a capture session inside one of the caller's events."""
    container: AppContainer = request.app.state.container
    session = container.event_service.create_session(user, body.event_id)
    return success(session_payload(session), "Session created successfully")


@router.get("/get")
async def get_session(
    request: Request,
    session_id: str | None = Query(default=None, alias="sessionId"),
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    session = container.event_service.get_session(user, session_id)
    return success(session_payload(session), "Session retrieved successfully")


@router.post("/photo")
async def upload_photo(
    request: Request,
    event_id: str | None = Form(default=None, alias="eventId"),
    session_id: str | None = Form(default=None, alias="sessionId"),
    photo_file: UploadFile | None = File(default=None, alias="photoFile"),
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    """Store the session's source photo."""
    container: AppContainer = request.app.state.container
    session, path = container.event_service.upload_session_photo(
        user, event_id, session_id, await read_upload(photo_file)
    )
    return success(
        {"sessionId": str(session.id), "photoUrl": path}, "Photo uploaded successfully"
    )


@router.get("/photo")
async def get_photo(  # noqa: PLR0913
    request: Request,
    session_id: str | None = Query(default=None, alias="sessionId"),
    mode: str | None = None,
    expires: int | None = None,
    user: AuthUser = Depends(require_user),
) -> Response:
    """Return the session photo as bytes or a signed URL."""
    container: AppContainer = request.app.state.container
    media = container.event_service.get_session_photo(user, session_id, mode, expires)
    return media_response(media)
