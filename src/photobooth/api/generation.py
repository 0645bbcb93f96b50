"""Image generation endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from photobooth.api.dependencies import read_upload, require_user
from photobooth.api.schemas import generation_payload, success
from photobooth.domain.models import AuthUser  # noqa: TC001

if TYPE_CHECKING:
    from photobooth.containers import AppContainer

router = APIRouter(prefix="/api/v1/leonardo", tags=["generation"])


@router.post("/generate")
async def generate(
    request: Request,
    image: UploadFile | None = File(default=None),
    event_id: str | None = Form(default=None, alias="eventId"),
    session_id: str | None = Form(default=None, alias="sessionId"),
    user: AuthUser = Depends(require_user),
) -> dict[str, object]:
    """Generate the four stylized variants of an uploaded portrait."""
    container: AppContainer = request.app.state.container
    result = await container.generation_orchestrator.generate(
        user, await read_upload(image), event_id, session_id
    )
    return success(generation_payload(result), "Images generated successfully")


@router.get("/me", dependencies=[Depends(require_user)])
async def provider_account(request: Request) -> dict[str, object]:
    """Return the generation provider's account information."""
    container: AppContainer = request.app.state.container
    info = await container.generation_client.get_user_info()
    return success(info, "User info retrieved successfully")
