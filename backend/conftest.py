from typing import Any, Dict, List, Optional

import pytest

from veoforge.config import VeoSettings
from veoforge.models import ProgressMode, Quality
from veoforge.services.infrastructure.orchestration import (
    JobRegistry,
    ProgressDriver,
    VideoJobOrchestrator,
    VirtualScheduler,
)
from veoforge.services.infrastructure.veo import (
    PollClient,
    PollResult,
    SubmissionClient,
    SubmissionResult,
    VideoDownloader,
)

_CONFIG_ENV_VARS = (
    "USE_VERTEX_AI",
    "GCP_PROJECT_ID",
    "GCP_LOCATION",
    "VEO_MODEL_STANDARD",
    "VEO_MODEL_HIGH",
    "VEO_ASPECT_RATIO",
    "STATUS_POLL_INTERVAL_SECONDS",
    "SEQUENTIAL_WAIT_TIMEOUT_SECONDS",
    "MAX_PARALLEL_SUBMISSIONS",
    "PROGRESS_MODE",
    "LOG_LEVEL",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def mock_cloud_env(monkeypatch):
    """Automatically pin upstream environment variables for all tests"""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "mock-key")


class FakeSubmissionClient(SubmissionClient):
    """Accepts every prompt unless an error is queued for that call number (1-based)."""

    def __init__(self, scheduler: Optional[VirtualScheduler] = None, with_handle: bool = False):
        self.scheduler = scheduler
        self.with_handle = with_handle
        self.errors: Dict[int, BaseException] = {}
        self.calls: List[Dict[str, Any]] = []

    async def submit(self, prompt: str, quality: Quality) -> SubmissionResult:
        call_number = len(self.calls) + 1
        self.calls.append({
            "prompt": prompt,
            "quality": quality,
            "at": self.scheduler.now() if self.scheduler else None,
        })
        if call_number in self.errors:
            raise self.errors[call_number]

        operation_id = f"operations/op-{call_number}"
        handle = f"handle-{call_number}" if self.with_handle else None
        return SubmissionResult(id=operation_id, operation_handle=handle)


class FakePollClient(PollClient):
    """Replays queued results per handle; the last queued result repeats."""

    def __init__(self):
        self.responses: Dict[Any, List[Any]] = {}
        self.calls: List[Any] = []

    def queue(self, handle: Any, *results: Any) -> None:
        self.responses.setdefault(handle, []).extend(results)

    async def poll(self, operation_handle: Any) -> PollResult:
        self.calls.append(operation_handle)
        queued = self.responses.get(operation_handle)
        if not queued:
            return PollResult(done=False)
        item = queued.pop(0) if len(queued) > 1 else queued[0]
        if isinstance(item, BaseException):
            raise item
        return item


class FakeDownloader(VideoDownloader):
    def __init__(self, payload: bytes = b"video-bytes", error: Optional[BaseException] = None):
        self.payload = payload
        self.error = error
        self.calls: List[str] = []

    async def download(self, uri: str) -> bytes:
        self.calls.append(uri)
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def scheduler():
    return VirtualScheduler()


@pytest.fixture
def registry():
    return JobRegistry()


@pytest.fixture
def submission_client(scheduler):
    return FakeSubmissionClient(scheduler)


@pytest.fixture
def poll_client():
    return FakePollClient()


@pytest.fixture
def downloader():
    return FakeDownloader()


@pytest.fixture
def settings():
    return VeoSettings(
        gemini_api_key="mock-key",
        status_poll_interval=1.0,
        sequential_wait_timeout=900.0,
        max_parallel_submissions=4,
        progress_mode=ProgressMode.AUTO,
    )


@pytest.fixture
def progress_driver(registry, scheduler, poll_client):
    return ProgressDriver(registry, scheduler, poll_client=poll_client)


@pytest.fixture
def orchestrator(registry, submission_client, progress_driver, scheduler, settings):
    return VideoJobOrchestrator(registry, submission_client, progress_driver, scheduler, settings)
