"""Shared test fixtures."""

import asyncio
import io
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest
from PIL import Image

from photobooth.adapters.leonardo_client import GenerationClient
from photobooth.config import Settings
from photobooth.containers import AppContainer
from photobooth.domain.events import EventRecord, PhotoSessionRecord
from photobooth.domain.generation import JobSnapshot, JobStatus
from photobooth.domain.models import AuthUser, UploadFile
from photobooth.domain.photos import AIPhotoRecord, Style
from photobooth.domain.shares import SharedPhotoRecord
from photobooth.services.auth import AuthGateway, AuthService
from photobooth.services.events import EventRepository, EventService, SessionRepository
from photobooth.services.generation import (
    GenerationConfig,
    GenerationOrchestrator,
    JobWatcher,
    PollPolicy,
)
from photobooth.services.photos import AIPhotoRepository, AIPhotoService
from photobooth.services.sharing import ShareRepository, ShareService
from photobooth.services.storage import ObjectStorage, StorageService

TEST_PROMPTS = ("anime prompt", "watercolor prompt", "oil prompt", "disney prompt")


def image_bytes(
    size: tuple[int, int] = (64, 48), fmt: str = "PNG", color: str = "red"
) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def png_upload(size: tuple[int, int] = (64, 48), name: str = "portrait.png") -> UploadFile:
    return UploadFile(name=name, content_type="image/png", data=image_bytes(size))


async def no_sleep(_delay: float) -> None:
    await asyncio.sleep(0)


@dataclass
class InMemoryEventRepository(EventRepository):
    """In-memory event repository for tests."""

    events: dict[UUID, EventRecord] = field(default_factory=dict)
    deleted: set[UUID] = field(default_factory=set)

    def create_event(
        self, user_id: UUID, name: str, start_date: datetime, end_date: datetime
    ) -> EventRecord:
        event = EventRecord(
            id=uuid4(),
            user_id=user_id,
            name=name,
            logo_url=None,
            start_date=start_date,
            end_date=end_date,
            created_at=datetime.now(tz=UTC),
        )
        self.events[event.id] = event
        return event

    def get_event(self, event_id: UUID, user_id: UUID) -> EventRecord | None:
        event = self.events.get(event_id)
        if event is None or event.user_id != user_id or event.id in self.deleted:
            return None
        return event

    def list_events(self, user_id: UUID, descending: bool = True) -> list[EventRecord]:
        owned = [
            event
            for event in self.events.values()
            if event.user_id == user_id and event.id not in self.deleted
        ]
        return sorted(owned, key=lambda event: event.created_at, reverse=descending)

    def update_logo_url(self, event_id: UUID, logo_url: str) -> None:
        self.events[event_id] = replace(self.events[event_id], logo_url=logo_url)


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository resolving ownership through events."""

    event_repository: InMemoryEventRepository
    sessions: dict[UUID, PhotoSessionRecord] = field(default_factory=dict)

    def create_session(self, event_id: UUID) -> PhotoSessionRecord:
        session = PhotoSessionRecord(id=uuid4(), event_id=event_id, photo_url=None)
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: UUID, user_id: UUID) -> PhotoSessionRecord | None:
        session = self.sessions.get(session_id)
        if session is None:
            return None
        if self.event_repository.get_event(session.event_id, user_id) is None:
            return None
        return session

    def update_photo_url(self, session_id: UUID, photo_url: str) -> None:
        self.sessions[session_id] = replace(
            self.sessions[session_id], photo_url=photo_url
        )


@dataclass
class InMemoryAIPhotoRepository(AIPhotoRepository):
    """In-memory AI photo repository resolving ownership through sessions."""

    session_repository: InMemorySessionRepository
    photos: dict[UUID, AIPhotoRecord] = field(default_factory=dict)

    def create_ai_photo(self, session_id: UUID, style: Style) -> AIPhotoRecord:
        photo = AIPhotoRecord(
            id=uuid4(),
            session_id=session_id,
            style=style,
            generated_url=None,
            created_at=datetime.now(tz=UTC),
        )
        self.photos[photo.id] = photo
        return photo

    def update_ai_photo_url(self, ai_photo_id: UUID, generated_url: str) -> None:
        self.photos[ai_photo_id] = replace(
            self.photos[ai_photo_id], generated_url=generated_url
        )

    def get_ai_photo(self, ai_photo_id: UUID, user_id: UUID) -> AIPhotoRecord | None:
        photo = self.photos.get(ai_photo_id)
        if photo is None:
            return None
        session = self.session_repository.get_session(photo.session_id, user_id)
        if session is None:
            return None
        return replace(photo, event_id=session.event_id)

    def list_by_session(self, session_id: UUID, user_id: UUID) -> list[AIPhotoRecord]:
        session = self.session_repository.get_session(session_id, user_id)
        if session is None:
            return []
        return [
            replace(photo, event_id=session.event_id)
            for photo in self.photos.values()
            if photo.session_id == session_id
        ]


@dataclass
class InMemoryShareRepository(ShareRepository):
    """In-memory share repository for tests."""

    event_repository: InMemoryEventRepository
    shares: dict[UUID, SharedPhotoRecord] = field(default_factory=dict)

    def create_shared_photo(
        self,
        ai_photo_id: UUID,
        event_id: UUID,
        selected_url: str,
        qr_expires_at: datetime,
    ) -> SharedPhotoRecord:
        share = SharedPhotoRecord(
            id=uuid4(),
            ai_photo_id=ai_photo_id,
            event_id=event_id,
            selected_url=selected_url,
            qr_code_url="",
            qr_expires_at=qr_expires_at,
            created_at=datetime.now(tz=UTC),
        )
        self.shares[share.id] = share
        return share

    def get_by_id(self, share_id: UUID, user_id: UUID) -> SharedPhotoRecord | None:
        share = self.shares.get(share_id)
        if share is None:
            return None
        event = self.event_repository.get_event(share.event_id, user_id)
        if event is None:
            return None
        return replace(share, event_name=event.name)

    def get_by_ai_photo(self, ai_photo_id: UUID) -> SharedPhotoRecord | None:
        for share in self.shares.values():
            if share.ai_photo_id == ai_photo_id:
                return share
        return None

    def list_by_event(self, event_id: UUID, user_id: UUID) -> list[SharedPhotoRecord]:
        if self.event_repository.get_event(event_id, user_id) is None:
            return []
        owned = [share for share in self.shares.values() if share.event_id == event_id]
        return sorted(owned, key=lambda share: share.created_at, reverse=True)

    def update_qr_code_url(self, share_id: UUID, qr_code_url: str) -> SharedPhotoRecord:
        share = replace(self.shares[share_id], qr_code_url=qr_code_url)
        self.shares[share_id] = share
        return share


@dataclass
class FakeObjectStorage(ObjectStorage):
    """Bucket stand-in that keeps objects in a dict."""

    objects: dict[str, bytes] = field(default_factory=dict)
    content_types: dict[str, str] = field(default_factory=dict)
    cache_controls: dict[str, str] = field(default_factory=dict)
    signed: list[tuple[str, int]] = field(default_factory=list)

    def upload(  # noqa: PLR0913
        self,
        path: str,
        data: bytes,
        content_type: str,
        cache_control: str,
        upsert: bool,
    ) -> str:
        self.objects[path] = data
        self.content_types[path] = content_type
        self.cache_controls[path] = cache_control
        return path

    def download(self, path: str) -> bytes | None:
        return self.objects.get(path)

    def create_signed_url(self, path: str, expires_in: int) -> str:
        self.signed.append((path, expires_in))
        return f"https://storage.test/{path}?expires={expires_in}"


@dataclass
class FakeAuthGateway(AuthGateway):
    """Resolves tokens from a fixed table."""

    users: dict[str, AuthUser] = field(default_factory=dict)

    def resolve_user(self, token: str) -> AuthUser | None:
        return self.users.get(token)


@dataclass
class FakeGenerationClient(GenerationClient):
    """Scriptable generation provider.

    Jobs complete on the first poll unless ``scripts`` holds a list of
    snapshots for the generation id; the last snapshot repeats.
    """

    photo_repository: InMemoryAIPhotoRepository | None = None
    scripts: dict[str, list[JobSnapshot]] = field(default_factory=dict)
    downloads: dict[str, tuple[bytes, str | None]] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    submissions: list[dict[str, object]] = field(default_factory=list)
    polls: dict[str, int] = field(default_factory=dict)
    rows_at_first_call: int | None = None
    user_info: dict[str, object] = field(
        default_factory=lambda: {"user_details": [{"user": {"username": "booth"}}]}
    )

    def _record(self, name: str) -> None:
        if self.rows_at_first_call is None and self.photo_repository is not None:
            self.rows_at_first_call = len(self.photo_repository.photos)
        self.calls.append(name)

    async def upload_image(self, data: bytes, extension: str = "jpg") -> str:
        self._record("upload_image")
        return "init-image-1"

    async def submit_generation(  # noqa: PLR0913
        self,
        *,
        prompt: str,
        model_id: str,
        style_id: str,
        init_image_id: str,
        is_landscape: bool,
    ) -> str:
        self._record("submit_generation")
        generation_id = f"gen-{len(self.submissions)}"
        self.submissions.append(
            {
                "generation_id": generation_id,
                "prompt": prompt,
                "model_id": model_id,
                "style_id": style_id,
                "init_image_id": init_image_id,
                "is_landscape": is_landscape,
            }
        )
        return generation_id

    async def get_generation(self, generation_id: str) -> JobSnapshot:
        self._record("get_generation")
        count = self.polls.get(generation_id, 0)
        self.polls[generation_id] = count + 1
        script = self.scripts.get(generation_id)
        if script:
            return script[min(count, len(script) - 1)]
        return JobSnapshot(
            status=JobStatus.COMPLETE,
            image_urls=[f"https://cdn.test/{generation_id}.png"],
        )

    async def download_image(self, url: str) -> tuple[bytes, str | None]:
        self._record("download_image")
        return self.downloads.get(url, (image_bytes((96, 64)), "image/png"))

    async def get_user_info(self) -> dict[str, object]:
        self._record("get_user_info")
        return self.user_info


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        leonardo_api_key="leonardo-key",
        leonardo_model_id="model-1",
        leonardo_style_id="style-1",
        leonardo_prompts=list(TEST_PROMPTS),
        generation_poll_interval_seconds=0,
        generation_timeout_seconds=5,
    )


@pytest.fixture
def user() -> AuthUser:
    return AuthUser(id=uuid4(), email="host@example.com")


@pytest.fixture
def other_user() -> AuthUser:
    return AuthUser(id=uuid4(), email="someone@example.com")


@pytest.fixture
def object_storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def storage_service(object_storage: FakeObjectStorage) -> StorageService:
    return StorageService(object_storage)


@pytest.fixture
def event_repository() -> InMemoryEventRepository:
    return InMemoryEventRepository()


@pytest.fixture
def session_repository(
    event_repository: InMemoryEventRepository,
) -> InMemorySessionRepository:
    return InMemorySessionRepository(event_repository)


@pytest.fixture
def photo_repository(
    session_repository: InMemorySessionRepository,
) -> InMemoryAIPhotoRepository:
    return InMemoryAIPhotoRepository(session_repository)


@pytest.fixture
def share_repository(event_repository: InMemoryEventRepository) -> InMemoryShareRepository:
    return InMemoryShareRepository(event_repository)


@pytest.fixture
def generation_client(
    photo_repository: InMemoryAIPhotoRepository,
) -> FakeGenerationClient:
    return FakeGenerationClient(photo_repository=photo_repository)


@pytest.fixture
def event_service(
    event_repository: InMemoryEventRepository,
    session_repository: InMemorySessionRepository,
    storage_service: StorageService,
) -> EventService:
    return EventService(event_repository, session_repository, storage_service)


@pytest.fixture
def photo_service(
    photo_repository: InMemoryAIPhotoRepository, storage_service: StorageService
) -> AIPhotoService:
    return AIPhotoService(photo_repository, storage_service)


@pytest.fixture
def share_service(
    share_repository: InMemoryShareRepository,
    photo_service: AIPhotoService,
    event_service: EventService,
    storage_service: StorageService,
) -> ShareService:
    return ShareService(share_repository, photo_service, event_service, storage_service)


@pytest.fixture
def poll_policy() -> PollPolicy:
    return PollPolicy(interval_seconds=0, timeout_seconds=5)


@pytest.fixture
def orchestrator(  # noqa: PLR0913
    generation_client: FakeGenerationClient,
    event_service: EventService,
    photo_repository: InMemoryAIPhotoRepository,
    storage_service: StorageService,
    poll_policy: PollPolicy,
) -> GenerationOrchestrator:
    config = GenerationConfig(
        model_id="model-1",
        style_id="style-1",
        prompts=TEST_PROMPTS,
        poll_policy=poll_policy,
    )
    return GenerationOrchestrator(
        client=generation_client,
        config=config,
        event_service=event_service,
        photo_repository=photo_repository,
        storage=storage_service,
        watcher=JobWatcher(generation_client, poll_policy, sleep=no_sleep),
    )


@pytest.fixture
def owned_session(
    user: AuthUser, event_service: EventService
) -> tuple[EventRecord, PhotoSessionRecord]:
    event = event_service.create_event(
        user,
        "Summer Gala",
        datetime(2025, 7, 1, tzinfo=UTC),
        datetime(2025, 7, 2, tzinfo=UTC),
    )
    session = event_service.create_session(user, event.id)
    return event, session


@pytest.fixture
def auth_gateway(user: AuthUser, other_user: AuthUser) -> FakeAuthGateway:
    return FakeAuthGateway(users={"user-token": user, "other-token": other_user})


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    auth_gateway: FakeAuthGateway,
    event_service: EventService,
    photo_service: AIPhotoService,
    share_service: ShareService,
    generation_client: FakeGenerationClient,
    orchestrator: GenerationOrchestrator,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        auth_service=AuthService(auth_gateway),
        event_service=event_service,
        photo_service=photo_service,
        share_service=share_service,
        generation_client=generation_client,
        generation_orchestrator=orchestrator,
        close_resources=close_resources,
    )
