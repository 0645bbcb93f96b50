"""AI photo endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response  # noqa: TC002

from photobooth.api.dependencies import media_response, require_user
from photobooth.api.schemas import ai_photo_payload, success
from photobooth.domain.models import AuthUser  # noqa: TC001

if TYPE_CHECKING:
    from photobooth.containers import AppContainer

router = APIRouter(prefix="/api/v1/aiphoto", tags=["aiphotos"])


@router.get("/get-aiphoto-by-id")
async def get_ai_photo_by_id(
    request: Request,
    ai_photo_id: str | None = Query(default=None, alias="aiPhotoId"),
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    photo = container.photo_service.get_photo(user, ai_photo_id)
    return success(ai_photo_payload(photo), "AI Photo retrieved successfully")


@router.get("/get-aiphotos-by-session")
async def get_ai_photos_by_session(
    request: Request,
    session_id: str | None = Query(default=None, alias="sessionId"),
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    """List a session's photos in style order."""
    container: AppContainer = request.app.state.container
    photos = container.photo_service.list_session_photos(user, session_id)
    return success(
        [ai_photo_payload(photo) for photo in photos], "AI Photos retrieved successfully"
    )


@router.get("")
async def get_ai_photo_media(  # noqa: PLR0913
    request: Request,
    ai_photo_id: str | None = Query(default=None, alias="aiPhotoId"),
    mode: str | None = None,
    expires: int | None = None,
    user: AuthUser = Depends(require_user),
) -> Response:
    """Return the generated image as bytes or a signed URL."""
    container: AppContainer = request.app.state.container
    media = container.photo_service.get_ai_photo_media(
        user, ai_photo_id, mode, expires
    )
    return media_response(media)
