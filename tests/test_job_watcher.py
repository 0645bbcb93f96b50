"""Tests for provider job polling."""

import asyncio
from dataclasses import dataclass, field

import pytest

from photobooth.domain.errors import (
    GenerationCancelledError,
    GenerationFailedError,
    GenerationTimeoutError,
)
from photobooth.domain.generation import JobSnapshot, JobStatus
from photobooth.services.generation import JobWatcher, PollPolicy
from tests.conftest import FakeGenerationClient, no_sleep

PENDING = JobSnapshot(status=JobStatus.PENDING)


@dataclass
class _SteppingClock:
    now: float = 0.0
    step: float = 1.0

    def __call__(self) -> float:
        self.now += self.step
        return self.now


@dataclass
class _RecordingSleep:
    delays: list[float] = field(default_factory=list)

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def test_wait_returns_first_image_url() -> None:
    client = FakeGenerationClient(
        scripts={
            "gen-1": [
                PENDING,
                PENDING,
                JobSnapshot(
                    status=JobStatus.COMPLETE,
                    image_urls=["https://cdn.test/a.png", "https://cdn.test/b.png"],
                ),
            ]
        }
    )
    watcher = JobWatcher(client, PollPolicy(interval_seconds=0), sleep=no_sleep)

    url = asyncio.run(watcher.wait("gen-1"))

    assert url == "https://cdn.test/a.png"
    assert client.polls["gen-1"] == 3


def test_wait_fails_fast_on_provider_failure() -> None:
    client = FakeGenerationClient(
        scripts={"gen-1": [JobSnapshot(status=JobStatus.FAILED)]}
    )
    watcher = JobWatcher(client, PollPolicy(), sleep=no_sleep)

    with pytest.raises(GenerationFailedError):
        asyncio.run(watcher.wait("gen-1"))

    assert client.polls["gen-1"] == 1


def test_complete_without_images_is_a_failure() -> None:
    client = FakeGenerationClient(
        scripts={"gen-1": [JobSnapshot(status=JobStatus.COMPLETE)]}
    )
    watcher = JobWatcher(client, PollPolicy(), sleep=no_sleep)

    with pytest.raises(GenerationFailedError):
        asyncio.run(watcher.wait("gen-1"))


def test_wait_times_out_at_deadline() -> None:
    client = FakeGenerationClient(scripts={"gen-1": [PENDING]})
    watcher = JobWatcher(
        client,
        PollPolicy(interval_seconds=1, timeout_seconds=3),
        sleep=no_sleep,
        clock=_SteppingClock(),
    )

    with pytest.raises(GenerationTimeoutError) as exc_info:
        asyncio.run(watcher.wait("gen-1"))

    assert exc_info.value.status_code == 504
    assert client.polls["gen-1"] < 5


def test_wait_stops_after_max_polls() -> None:
    client = FakeGenerationClient(scripts={"gen-1": [PENDING]})
    watcher = JobWatcher(
        client,
        PollPolicy(interval_seconds=0, timeout_seconds=None, max_polls=3),
        sleep=no_sleep,
    )

    with pytest.raises(GenerationTimeoutError):
        asyncio.run(watcher.wait("gen-1"))

    assert client.polls["gen-1"] == 3


def test_interval_backs_off_up_to_cap() -> None:
    client = FakeGenerationClient(scripts={"gen-1": [PENDING]})
    sleep = _RecordingSleep()
    watcher = JobWatcher(
        client,
        PollPolicy(
            interval_seconds=1,
            backoff_factor=2,
            max_interval_seconds=5,
            timeout_seconds=None,
            max_polls=5,
        ),
        sleep=sleep,
    )

    with pytest.raises(GenerationTimeoutError):
        asyncio.run(watcher.wait("gen-1"))

    assert sleep.delays == [1, 2, 4, 5]


def test_wait_honours_cancellation() -> None:
    client = FakeGenerationClient(scripts={"gen-1": [PENDING]})
    watcher = JobWatcher(client, PollPolicy(interval_seconds=0.01, timeout_seconds=None))

    async def run() -> None:
        cancel = asyncio.Event()
        task = asyncio.create_task(watcher.wait("gen-1", cancel))
        await asyncio.sleep(0.05)
        cancel.set()
        await task

    with pytest.raises(GenerationCancelledError):
        asyncio.run(run())

    assert client.polls["gen-1"] >= 1


def test_wait_with_preset_cancellation_never_polls() -> None:
    client = FakeGenerationClient(scripts={"gen-1": [PENDING]})
    watcher = JobWatcher(client, PollPolicy(), sleep=no_sleep)

    async def run() -> None:
        cancel = asyncio.Event()
        cancel.set()
        await watcher.wait("gen-1", cancel)

    with pytest.raises(GenerationCancelledError):
        asyncio.run(run())

    assert "gen-1" not in client.polls
