"""AI photo generation pipeline.

A request reserves one AIPhoto row per style, uploads the source portrait to
the provider once, submits one job per style and then, per style, waits for
the job, downloads the result, frames it and stores it under the caller's
prefix. The first failing style fails the request at once while the other
styles keep running. Rows are never rolled back: a failed style leaves its
row with no URL while the other styles keep theirs.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from functools import partial

from photobooth.adapters.leonardo_client import GenerationClient
from photobooth.domain.errors import (
    GenerationCancelledError,
    GenerationFailedError,
    GenerationTimeoutError,
    UploadFailedError,
    ValidationError,
)
from photobooth.domain.events import EventRecord, PhotoSessionRecord
from photobooth.domain.generation import (
    GeneratedImage,
    GenerationJob,
    GenerationResult,
    JobStatus,
)
from photobooth.domain.ids import require_id
from photobooth.domain.models import AuthUser, UploadFile
from photobooth.domain.photos import STYLE_ORDER, Style
from photobooth.services.events import EventService
from photobooth.services.imaging import ImageDecorator, read_size
from photobooth.services.photos import AIPhotoRepository
from photobooth.services.storage import (
    ALLOWED_TYPES,
    StorageService,
    detect_image_type,
    looks_like_image,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollPolicy:
    """How long and how often to poll a provider job."""

    interval_seconds: float = 3.0
    backoff_factor: float = 1.0
    max_interval_seconds: float = 30.0
    timeout_seconds: float | None = 600.0
    max_polls: int | None = None


@dataclass(frozen=True)
class GenerationConfig:
    """Provider identifiers and prompts used for every request."""

    model_id: str
    style_id: str
    prompts: tuple[str, ...]
    poll_policy: PollPolicy = field(default_factory=PollPolicy)

    def __post_init__(self) -> None:
        if len(self.prompts) != len(STYLE_ORDER):
            raise ValueError("One prompt per style is required")

    def prompt_for(self, style: Style) -> str:
        return self.prompts[STYLE_ORDER.index(style)]


@dataclass
class JobWatcher:
    """Drives one provider job from PENDING to a terminal state."""

    client: GenerationClient
    policy: PollPolicy
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    clock: Callable[[], float] = time.monotonic

    async def wait(
        self, generation_id: str, cancel_event: asyncio.Event | None = None
    ) -> str:
        """Return the first result URL once the job completes.

        Raises GenerationFailedError when the provider reports failure,
        GenerationTimeoutError past the deadline or poll limit and
        GenerationCancelledError once ``cancel_event`` is set. Transport
        errors from the client propagate unchanged.
        """
        policy = self.policy
        deadline = (
            None
            if policy.timeout_seconds is None
            else self.clock() + policy.timeout_seconds
        )
        interval = policy.interval_seconds
        polls = 0
        state = JobStatus.PENDING
        while not state.is_terminal:
            if cancel_event is not None and cancel_event.is_set():
                state = JobStatus.CANCELLED
                break
            snapshot = await self.client.get_generation(generation_id)
            polls += 1
            state = snapshot.status
            if state is JobStatus.COMPLETE:
                if not snapshot.image_urls:
                    raise GenerationFailedError(
                        f"Generation {generation_id} completed without images"
                    )
                _logger.info(
                    "Generation complete: id=%s polls=%s", generation_id, polls
                )
                return snapshot.image_urls[0]
            if state is JobStatus.FAILED:
                break
            if policy.max_polls is not None and polls >= policy.max_polls:
                state = JobStatus.TIMED_OUT
                break
            delay = interval
            if deadline is not None:
                remaining = deadline - self.clock()
                if remaining <= 0:
                    state = JobStatus.TIMED_OUT
                    break
                delay = min(delay, remaining)
            await self._pause(delay, cancel_event)
            interval = min(interval * policy.backoff_factor, policy.max_interval_seconds)

        if state is JobStatus.FAILED:
            raise GenerationFailedError(f"Generation {generation_id} failed")
        if state is JobStatus.CANCELLED:
            raise GenerationCancelledError(
                f"Wait for generation {generation_id} was cancelled"
            )
        raise GenerationTimeoutError(
            f"Generation {generation_id} did not finish after {polls} polls"
        )

    async def _pause(self, delay: float, cancel_event: asyncio.Event | None) -> None:
        if cancel_event is None:
            await self.sleep(delay)
            return
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=delay)
        except TimeoutError:
            return


@dataclass
class GenerationOrchestrator:
    """Turns one portrait into four stored, stylized photos."""

    client: GenerationClient
    config: GenerationConfig
    event_service: EventService
    photo_repository: AIPhotoRepository
    storage: StorageService
    watcher: JobWatcher
    decorator: ImageDecorator = field(default_factory=ImageDecorator)
    _running_jobs: set[asyncio.Future[GeneratedImage]] = field(
        default_factory=set, init=False, repr=False
    )

    async def generate(
        self,
        user: AuthUser,
        image: UploadFile | None,
        event_id: str | None,
        session_id: str | None,
        cancel_event: asyncio.Event | None = None,
    ) -> GenerationResult:
        """Run the full pipeline for one request."""
        if image is None:
            raise ValidationError("Image is required", code="MISSING_IMAGE")
        require_id(event_id, "MISSING_EVENT_ID", "Event ID")
        require_id(session_id, "MISSING_SESSION_ID", "Session ID")
        self.storage.validate(image)
        event, session = self.event_service.get_event_session(
            user, event_id, session_id
        )
        size = read_size(image.data)

        records = [
            self.photo_repository.create_ai_photo(session.id, style)
            for style in STYLE_ORDER
        ]
        _logger.info(
            "Reserved %s AI photos: event=%s session=%s",
            len(records),
            event.id,
            session.id,
        )

        image_id = await self.client.upload_image(image.data, image.extension or "jpg")
        generation_ids = await asyncio.gather(
            *(
                self.client.submit_generation(
                    prompt=self.config.prompt_for(record.style),
                    model_id=self.config.model_id,
                    style_id=self.config.style_id,
                    init_image_id=image_id,
                    is_landscape=size.is_landscape,
                )
                for record in records
            )
        )
        jobs = [
            GenerationJob(
                generation_id=generation_id,
                ai_photo_id=record.id,
                style=record.style,
                prompt=self.config.prompt_for(record.style),
            )
            for record, generation_id in zip(records, generation_ids, strict=True)
        ]

        logo = self._load_logo(event)
        tasks = [
            asyncio.ensure_future(
                self._complete_job(user, event, session, job, logo, cancel_event)
            )
            for job in jobs
        ]
        for job, task in zip(jobs, tasks, strict=True):
            self._running_jobs.add(task)
            task.add_done_callback(partial(self._job_finished, job))

        # Unfinished siblings keep running and fill their rows on their own.
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        for task in tasks:
            if task.done() and not task.cancelled():
                failure = task.exception()
                if failure is not None:
                    raise failure

        return GenerationResult(
            image_id=image_id,
            event_id=event.id,
            session_id=session.id,
            images=[task.result() for task in tasks],
        )

    def _job_finished(
        self, job: GenerationJob, task: asyncio.Future[GeneratedImage]
    ) -> None:
        self._running_jobs.discard(task)
        if task.cancelled():
            _logger.warning(
                "Processing of %s photo was cancelled: generation=%s",
                job.style,
                job.generation_id,
            )
            return
        failure = task.exception()
        if failure is not None:
            _logger.error(
                "Failed to process %s photo: generation=%s error=%s",
                job.style,
                job.generation_id,
                failure,
            )

    async def _complete_job(  # noqa: PLR0913
        self,
        user: AuthUser,
        event: EventRecord,
        session: PhotoSessionRecord,
        job: GenerationJob,
        logo: bytes | None,
        cancel_event: asyncio.Event | None,
    ) -> GeneratedImage:
        provider_url = await self.watcher.wait(job.generation_id, cancel_event)
        data, declared_type = await self.client.download_image(provider_url)
        content_type = (
            declared_type if declared_type in ALLOWED_TYPES else detect_image_type(data)
        )
        if content_type is None or not looks_like_image(content_type, data):
            raise UploadFailedError(
                f"Generated {job.style} image is not a valid image",
                code="INVALID_GENERATED_IMAGE",
            )

        data, content_type, has_logo = self._decorate(job.style, data, content_type, logo)
        path = self.storage.upload_ai_photo(
            str(user.id),
            str(event.id),
            str(session.id),
            job.style.folder,
            data,
            content_type,
        )
        self.photo_repository.update_ai_photo_url(job.ai_photo_id, path)
        return GeneratedImage(
            ai_photo_id=job.ai_photo_id,
            style=job.style,
            storage_url=path,
            public_url=provider_url,
            generation_id=job.generation_id,
            has_logo=has_logo,
        )

    def _load_logo(self, event: EventRecord) -> bytes | None:
        if not event.logo_url or not event.logo_url.strip():
            return None
        logo = self.storage.download(event.logo_url)
        if logo is None:
            _logger.warning("Logo unavailable for event %s, using border", event.id)
        return logo

    def _decorate(
        self, style: Style, data: bytes, content_type: str, logo: bytes | None
    ) -> tuple[bytes, str, bool]:
        """Frame the image; on a decoding problem keep the provider bytes."""
        try:
            if logo is not None:
                return self.decorator.merge_logo(data, logo), "image/jpeg", True
            return self.decorator.add_border(data), "image/jpeg", False
        except (OSError, ValueError) as exc:
            _logger.warning("Failed to decorate %s photo: %s", style, exc)
            return data, content_type, False
