"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from photobooth.adapters.leonardo_client import GenerationClient, HttpxLeonardoClient
from photobooth.adapters.supabase_ai_photo_repository import SupabaseAIPhotoRepository
from photobooth.adapters.supabase_auth_gateway import SupabaseAuthGateway
from photobooth.adapters.supabase_event_repository import SupabaseEventRepository
from photobooth.adapters.supabase_session_repository import SupabaseSessionRepository
from photobooth.adapters.supabase_share_repository import SupabaseShareRepository
from photobooth.adapters.supabase_storage import SupabaseObjectStorage
from photobooth.config import Settings
from photobooth.services.auth import AuthService
from photobooth.services.events import EventService
from photobooth.services.generation import (
    GenerationConfig,
    GenerationOrchestrator,
    JobWatcher,
    PollPolicy,
)
from photobooth.services.imaging import ImageDecorator
from photobooth.services.photos import AIPhotoService
from photobooth.services.sharing import ShareService
from photobooth.services.storage import StorageService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    event_service: EventService
    photo_service: AIPhotoService
    share_service: ShareService
    generation_client: GenerationClient
    generation_orchestrator: GenerationOrchestrator
    close_resources: Callable[[], Awaitable[None]]


def build_generation_config(settings: Settings) -> GenerationConfig:
    """Translate flat settings into the orchestrator's configuration."""
    return GenerationConfig(
        model_id=settings.leonardo_model_id,
        style_id=settings.leonardo_style_id,
        prompts=tuple(settings.leonardo_prompts),
        poll_policy=PollPolicy(
            interval_seconds=settings.generation_poll_interval_seconds,
            backoff_factor=settings.generation_poll_backoff,
            max_interval_seconds=settings.generation_poll_max_interval_seconds,
            timeout_seconds=settings.generation_timeout_seconds,
            max_polls=settings.generation_poll_max_polls,
        ),
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    storage = StorageService(
        storage=SupabaseObjectStorage(supabase_client, resolved_settings.storage_bucket),
        max_upload_bytes=resolved_settings.max_upload_bytes,
    )
    photo_repository = SupabaseAIPhotoRepository(supabase_client)
    auth_service = AuthService(SupabaseAuthGateway(supabase_client))
    event_service = EventService(
        event_repository=SupabaseEventRepository(supabase_client),
        session_repository=SupabaseSessionRepository(supabase_client),
        storage=storage,
    )
    photo_service = AIPhotoService(repository=photo_repository, storage=storage)
    share_service = ShareService(
        repository=SupabaseShareRepository(supabase_client),
        photo_service=photo_service,
        event_service=event_service,
        storage=storage,
        default_expiry_seconds=resolved_settings.share_default_expiry_seconds,
    )
    leonardo_client = HttpxLeonardoClient.create(
        api_key=resolved_settings.leonardo_api_key,
        base_url=resolved_settings.leonardo_base_url,
    )
    generation_config = build_generation_config(resolved_settings)
    orchestrator = GenerationOrchestrator(
        client=leonardo_client,
        config=generation_config,
        event_service=event_service,
        photo_repository=photo_repository,
        storage=storage,
        watcher=JobWatcher(leonardo_client, generation_config.poll_policy),
        decorator=ImageDecorator(),
    )

    async def close_resources() -> None:
        await leonardo_client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        event_service=event_service,
        photo_service=photo_service,
        share_service=share_service,
        generation_client=leonardo_client,
        generation_orchestrator=orchestrator,
        close_resources=close_resources,
    )
