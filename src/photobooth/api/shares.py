"""Share link endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from photobooth.api.dependencies import require_user
from photobooth.api.schemas import CreateShareRequest, share_payload, success
from photobooth.domain.models import AuthUser  # noqa: TC001

if TYPE_CHECKING:
    from photobooth.containers import AppContainer

router = APIRouter(prefix="/api/v1/share", tags=["shares"])


@router.post("/create")
async def create_share(
    body: CreateShareRequest,
    request: Request,
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    """Create a share for a photo, or return its live share."""
    container: AppContainer = request.app.state.container
    view = container.share_service.create_share(
        user, body.event_id, body.ai_photo_id, body.expires_in_seconds
    )
    return success(share_payload(view), "Share created successfully")


@router.get("/get-share-by-id")
async def get_share_by_id(
    request: Request,
    share_id: str | None = Query(default=None, alias="shareId"),
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    view = container.share_service.get_share(user, share_id)
    return success(share_payload(view), "Share retrieved successfully")


@router.get("/get-shares-by-event")
async def get_shares_by_event(
    request: Request,
    event_id: str | None = Query(default=None, alias="eventId"),
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    """List an event's shares, newest first."""
    container: AppContainer = request.app.state.container
    views = container.share_service.list_event_shares(user, event_id)
    return success(
        [share_payload(view) for view in views], "Shares retrieved successfully"
    )


@router.get("/qrcode")
async def get_qr_code(
    request: Request,
    share_id: str | None = Query(default=None, alias="shareId"),
    user: AuthUser = Depends(require_user),
) -> Response:
    """Return the QR code PNG of a live share."""
    container: AppContainer = request.app.state.container
    data = container.share_service.get_qr_code(user, share_id)
    return Response(
        content=data,
        media_type="image/png",
        headers={
            "Content-Disposition": 'inline; filename="qr-code.png"',
            "Cache-Control": "private, max-age=3600",
        },
    )
