"""Event endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import Response  # noqa: TC002

from photobooth.api.dependencies import media_response, read_upload, require_user
from photobooth.api.schemas import CreateEventRequest, event_payload, success
from photobooth.domain.models import AuthUser  # noqa: TC001

if TYPE_CHECKING:
    from photobooth.containers import AppContainer

router = APIRouter(prefix="/api/v1/event", tags=["events"])


@router.post("/create")
async def create_event(
    body: CreateEventRequest,
    request: Request,
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    """Create an event owned by the caller."""
    container: AppContainer = request.app.state.container
    event = container.event_service.create_event(
        user, body.name, body.start_date, body.end_date
    )
    return success(event_payload(event), "Event created successfully")


@router.get("/get-event-by-id")
async def get_event_by_id(
    request: Request,
    event_id: str | None = Query(default=None, alias="eventId"),
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    event = container.event_service.get_event(user, event_id)
    return success(event_payload(event), "Event retrieved successfully")


@router.get("/get-events-by-user")
async def get_events_by_user(
    request: Request,
    order: str = "desc",
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    """List the caller's events by creation time."""
    container: AppContainer = request.app.state.container
    events = container.event_service.list_events(user, order)
    return success(
        [event_payload(event) for event in events], "Events retrieved successfully"
    )


@router.post("/logo")
async def upload_logo(
    request: Request,
    event_id: str | None = Form(default=None, alias="eventId"),
    logo: UploadFile | None = File(default=None),
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    """Upload or replace the event logo."""
    container: AppContainer = request.app.state.container
    event, path = container.event_service.upload_logo(
        user, event_id, await read_upload(logo)
    )
    return success(
        {"eventId": str(event.id), "logoUrl": path}, "Logo uploaded successfully"
    )


@router.get("/logo")
async def get_logo(  # noqa: PLR0913
    request: Request,
    event_id: str | None = Query(default=None, alias="eventId"),
    mode: str | None = None,
    expires: int | None = None,
    user: AuthUser = Depends(require_user),
) -> Response:
    """Return the event logo as bytes or a signed URL."""
    container: AppContainer = request.app.state.container
    media = container.event_service.get_logo(user, event_id, mode, expires)
    return media_response(media)
