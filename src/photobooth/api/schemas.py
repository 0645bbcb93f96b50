"""Request bodies and response serializers for the HTTP API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from photobooth.domain.events import EventRecord, PhotoSessionRecord
from photobooth.domain.generation import GenerationResult
from photobooth.domain.models import StoredMedia
from photobooth.domain.photos import AIPhotoRecord
from photobooth.services.sharing import ShareView


class CreateEventRequest(BaseModel):
    """Body of POST /event/create."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    start_date: datetime | None = Field(default=None, alias="startDate")
    end_date: datetime | None = Field(default=None, alias="endDate")


class CreateSessionRequest(BaseModel):
    """Body of POST /session/create."""

    model_config = ConfigDict(populate_by_name=True)

    event_id: str | None = Field(default=None, alias="eventId")


class CreateShareRequest(BaseModel):
    """Body of POST /share/create."""

    model_config = ConfigDict(populate_by_name=True)

    event_id: str | None = Field(default=None, alias="eventId")
    ai_photo_id: str | None = Field(default=None, alias="aiphotoId")
    expires_in_seconds: int | None = Field(default=None, alias="expiresInSeconds")


def success(data: object = None, message: str | None = None) -> dict[str, object]:
    """Wrap a payload in the success envelope."""
    return {"success": True, "data": data, "message": message}


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def event_payload(event: EventRecord) -> dict[str, object]:
    return {
        "id": str(event.id),
        "userId": str(event.user_id),
        "name": event.name,
        "logoUrl": event.logo_url,
        "startDate": _iso(event.start_date),
        "endDate": _iso(event.end_date),
        "createdAt": _iso(event.created_at),
        "updatedAt": _iso(event.updated_at),
    }


def session_payload(session: PhotoSessionRecord) -> dict[str, object]:
    return {
        "id": str(session.id),
        "eventId": str(session.event_id),
        "photoUrl": session.photo_url,
        "createdAt": _iso(session.created_at),
        "updatedAt": _iso(session.updated_at),
    }


def ai_photo_payload(photo: AIPhotoRecord) -> dict[str, object]:
    return {
        "id": str(photo.id),
        "sessionId": str(photo.session_id),
        "style": photo.style.value,
        "generatedUrl": photo.generated_url,
        "createdAt": _iso(photo.created_at),
        "updatedAt": _iso(photo.updated_at),
    }


def share_payload(view: ShareView) -> dict[str, object]:
    share = view.share
    payload: dict[str, object] = {
        "shareId": str(share.id),
        "aiPhotoId": str(share.ai_photo_id),
        "eventId": str(share.event_id),
        "selectedUrl": share.selected_url,
        "qrCodeUrl": share.qr_code_url,
        "expiresAt": _iso(share.qr_expires_at),
        "createdAt": _iso(share.created_at),
        "expired": view.expired,
    }
    if share.event_name is not None:
        payload["eventName"] = share.event_name
    if share.style is not None:
        payload["style"] = share.style
    if view.share_url is not None:
        payload["shareUrl"] = view.share_url
    return payload


def generation_payload(result: GenerationResult) -> dict[str, object]:
    return {
        "imageId": result.image_id,
        "eventId": str(result.event_id),
        "sessionId": str(result.session_id),
        "images": [
            {
                "aiPhotoId": str(image.ai_photo_id),
                "style": image.style.value,
                "storageUrl": image.storage_url,
                "publicUrl": image.public_url,
                "generationId": image.generation_id,
                "hasLogo": image.has_logo,
            }
            for image in result.images
        ],
    }


def signed_url_payload(media: StoredMedia) -> dict[str, object]:
    return {"url": media.signed_url, "expiresIn": media.expires_in}
