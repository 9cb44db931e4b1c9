"""
VideoGenerationUseCase - the query and command surface for callers.

Wires the segmenter, orchestrator, registry and progress driver together
and exposes dispatch, status and download. Transport layers translate their
requests into these calls and map the domain exceptions to responses.
"""

from datetime import UTC, datetime
from typing import Optional, Sequence

from veoforge.config import CONNECTION_TEST_PROMPT, VeoSettings, load_settings
from veoforge.core import (
    JobNotReadyError,
    NoResultError,
    NotFoundError,
    get_logger,
    setup_logging,
    upstream_credentials_report,
)
from veoforge.models import (
    NOT_FOUND_STATUS,
    BatchResult,
    ConnectionTestResult,
    DispatchOptions,
    DispatchRequest,
    JobState,
    JobStatusResponse,
    Quality,
    Segment,
    SegmentDescription,
)
from veoforge.services.infrastructure.orchestration import (
    AsyncioScheduler,
    Job,
    JobRegistry,
    ProgressDriver,
    Scheduler,
    VideoJobOrchestrator,
)
from veoforge.services.infrastructure.veo import (
    SubmissionClient,
    VeoClient,
    VideoDownloader,
    build_placeholder_video,
    classify_submission_error,
)
from veoforge.services.segmentation import SegmentationLimits, segment_script

from .base import UseCase

logger = get_logger(__name__, component="video_generation")


def _to_datetime(timestamp: Optional[float]) -> Optional[datetime]:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=UTC)


class VideoGenerationUseCase(UseCase[DispatchRequest, BatchResult]):
    """Segment scripts, dispatch segments and answer status and download queries."""

    def __init__(
        self,
        orchestrator: VideoJobOrchestrator,
        registry: JobRegistry,
        progress_driver: ProgressDriver,
        submission_client: Optional[SubmissionClient] = None,
        downloader: Optional[VideoDownloader] = None,
        limits: Optional[SegmentationLimits] = None,
    ):
        self.orchestrator = orchestrator
        self.registry = registry
        self.progress_driver = progress_driver
        self.submission_client = submission_client or orchestrator.submission_client
        self.downloader = downloader
        self.limits = limits

    async def execute(self, request: DispatchRequest) -> BatchResult:
        """Segment the script and dispatch every segment. EmptyScriptError aborts the whole batch."""
        segments = segment_script(request.script, self.limits)
        return await self.dispatch(segments, request.options, request.descriptions)

    async def dispatch(
        self,
        segments: Sequence[Segment],
        options: Optional[DispatchOptions] = None,
        descriptions: Optional[Sequence[Optional[SegmentDescription]]] = None,
    ) -> BatchResult:
        return await self.orchestrator.dispatch(segments, options, descriptions)

    async def get_status(self, job_id: str) -> JobStatusResponse:
        """
        Current status of a job.

        Unknown ids are reported with a not-found status instead of raising.
        For jobs advanced by polling, a fresh poll is made first.
        """
        job = self.registry.get_job(job_id)
        if job is None:
            return JobStatusResponse(
                job_id=job_id,
                status=NOT_FOUND_STATUS,
                progress=0,
                error="Video not found",
            )

        if job.polled and not job.state.is_terminal():
            job = await self.progress_driver.poll_once(job_id) or job

        return self._status_response(job)

    async def download_ready(self, job_id: str) -> bytes:
        """
        Bytes of a completed video.

        Raises:
            NotFoundError: unknown job id
            JobNotReadyError: the job has not completed

        A completed job always yields bytes: when there is no download URI or
        the download fails, a placeholder MP4 is returned.
        """
        job = self.registry.get_job(job_id)
        if job is None:
            raise NotFoundError(job_id)
        if job.state is not JobState.COMPLETED:
            raise JobNotReadyError(job_id, job.state.value)

        try:
            if not job.download_uri:
                raise NoResultError(f"No download URI recorded for video {job_id}")
            if self.downloader is None:
                raise NoResultError("No downloader configured")
            return await self.downloader.download(job.download_uri)
        except Exception as e:
            logger.warning(f"Serving placeholder video for {job_id}: {e}")
            return build_placeholder_video()

    async def test_submission(self) -> ConnectionTestResult:
        """Submit a short fixed prompt to check upstream connectivity. No job is registered."""
        try:
            submission = await self.submission_client.submit(CONNECTION_TEST_PROMPT, Quality.STANDARD)
        except Exception as e:
            error = classify_submission_error(e)
            logger.error(f"Connection test failed: {error}")
            return ConnectionTestResult(
                success=False,
                error=str(error),
                quota_exceeded=error.quota_exceeded,
            )

        done = bool(getattr(submission.operation_handle, "done", False))
        logger.info(f"Connection test succeeded: {submission.id}")
        return ConnectionTestResult(success=True, operation_name=submission.id, done=done)

    @staticmethod
    def _status_response(job: Job) -> JobStatusResponse:
        return JobStatusResponse(
            job_id=job.id,
            status=job.state.value,
            progress=job.progress,
            message=job.message,
            download_url=job.download_uri,
            thumbnail=job.thumbnail_uri,
            estimated_completion=_to_datetime(job.estimated_completion_time),
            start_time=_to_datetime(job.start_time),
            error=job.error,
            error_kind=job.error_kind.value if job.error_kind else None,
            sequence_position=job.sequence_position if job.sequential else None,
            total_in_sequence=job.total_in_sequence if job.sequential else None,
        )


def create_video_generation_use_case(
    settings: Optional[VeoSettings] = None,
    client: Optional[VeoClient] = None,
    scheduler: Optional[Scheduler] = None,
) -> VideoGenerationUseCase:
    """
    Build a use case with its own registry.

    Configures root logging from `LOG_LEVEL` and `LOG_JSON` first.

    Each call returns an isolated instance; share one per service process.
    """
    settings = settings or load_settings()
    setup_logging(level=settings.log_level, use_json=settings.log_json)

    report = upstream_credentials_report(
        use_vertex_ai=settings.use_vertex_ai,
        api_key=settings.gemini_api_key,
        project_id=settings.gcp_project_id,
    )
    if not report["ok"]:
        logger.warning(
            f"Upstream credentials incomplete for {report['backend']}: missing {', '.join(report['missing'])}"
        )

    client = client or VeoClient(settings)
    scheduler = scheduler or AsyncioScheduler()
    registry = JobRegistry()
    driver = ProgressDriver(registry, scheduler, poll_client=client)
    orchestrator = VideoJobOrchestrator(registry, client, driver, scheduler, settings)
    return VideoGenerationUseCase(
        orchestrator,
        registry,
        driver,
        submission_client=client,
        downloader=client,
    )
