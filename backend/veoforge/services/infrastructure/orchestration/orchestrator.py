"""
Video Job Orchestrator - submit one generation job per segment.

Parallel mode submits every segment independently (bounded by a
semaphore). Sequential mode submits in order and waits for each job to
finish before submitting the next; the wait is a cooperative busy-poll
with an optional deadline.

Submission failures are contained to the segment's slot in the batch
result: siblings are still submitted and the chain still continues.
"""

import asyncio
import uuid
from typing import List, Optional, Sequence

from veoforge.config import VeoSettings
from veoforge.core import (
    LogTimer,
    SequentialWaitTimeoutError,
    SubmissionError,
    get_logger,
    job_context,
    set_batch_id,
)
from veoforge.models import (
    BatchResult,
    DispatchOptions,
    ErrorKind,
    JobOutcome,
    JobState,
    ProgressMode,
    Segment,
    SegmentDescription,
)
from veoforge.services.job_spec import JobSpec, build_job_spec

from ..veo.base import SubmissionClient, SubmissionResult
from ..veo.errors import classify_submission_error
from .job_registry import Job, JobRegistry
from .progress import ProgressDriver, parallel_timeline, sequential_timeline
from .scheduler import Scheduler

logger = get_logger(__name__, component="orchestrator")


class VideoJobOrchestrator:
    """
    Usage:
        orchestrator = VideoJobOrchestrator(registry, client, driver, scheduler, settings)
        batch = await orchestrator.dispatch(segments, DispatchOptions(mode=DispatchMode.SEQUENTIAL))
    """

    def __init__(
        self,
        registry: JobRegistry,
        submission_client: SubmissionClient,
        progress_driver: ProgressDriver,
        scheduler: Scheduler,
        settings: Optional[VeoSettings] = None,
    ):
        settings = settings or VeoSettings()
        self.registry = registry
        self.submission_client = submission_client
        self.progress_driver = progress_driver
        self.scheduler = scheduler
        self.progress_mode = settings.progress_mode
        self.poll_interval = settings.status_poll_interval
        self.sequential_timeout = settings.sequential_wait_timeout
        self.max_parallel_submissions = max(1, settings.max_parallel_submissions)

    async def dispatch(
        self,
        segments: Sequence[Segment],
        options: Optional[DispatchOptions] = None,
        descriptions: Optional[Sequence[Optional[SegmentDescription]]] = None,
    ) -> BatchResult:
        """
        Submit every segment and return one outcome per segment, in input order.

        Args:
            segments: Segments from the segmenter
            options: Quality, dispatch mode and language
            descriptions: Optional structured descriptions aligned with
                the segments by position

        Returns:
            BatchResult with an outcome for each segment, success or failure
        """
        options = options or DispatchOptions()
        descriptions = list(descriptions or [])
        total = len(segments)
        specs = [
            build_job_spec(
                segment,
                options,
                sequence_position=position,
                total_segments=total,
                description=descriptions[position - 1] if position <= len(descriptions) else None,
            )
            for position, segment in enumerate(segments, start=1)
        ]

        batch_id = uuid.uuid4().hex[:12]
        set_batch_id(batch_id)
        try:
            with LogTimer(logger, f"{options.mode.value} dispatch of {total} segment(s)"):
                if options.sequential:
                    outcomes = await self._dispatch_sequential(specs)
                else:
                    outcomes = await self._dispatch_parallel(specs)
        finally:
            set_batch_id(None)

        submitted = [o for o in outcomes if o.video_id is not None]
        failed = total - len(submitted)
        if failed:
            logger.warning(f"{failed}/{total} segment(s) could not be submitted", extra={"batch_id": batch_id})

        return BatchResult(
            jobs=outcomes,
            total_estimated_time_seconds=sum(o.estimated_time for o in submitted),
            total_segments=total,
            sequential=options.sequential,
        )

    async def _dispatch_parallel(self, specs: List[JobSpec]) -> List[JobOutcome]:
        semaphore = asyncio.Semaphore(self.max_parallel_submissions)

        async def submit_bounded(spec: JobSpec) -> JobOutcome:
            async with semaphore:
                return await self._submit(spec)

        return list(await asyncio.gather(*(submit_bounded(spec) for spec in specs)))

    async def _dispatch_sequential(self, specs: List[JobSpec]) -> List[JobOutcome]:
        outcomes: List[JobOutcome] = []
        for position, spec in enumerate(specs, start=1):
            outcome = await self._submit(spec)
            outcomes.append(outcome)

            if outcome.video_id is None or position == len(specs):
                continue

            with job_context(outcome.video_id):
                logger.info(f"Waiting for video {position}/{len(specs)} before submitting the next segment")
                finished = await self._wait_until_finished(outcome.video_id)
            if finished is not None:
                outcomes[-1] = self._outcome_from_job(spec, finished)
        return outcomes

    async def _wait_until_finished(self, job_id: str) -> Optional[Job]:
        """Busy-poll the registry until the job is completed or failed, or the deadline passes."""
        deadline = None if self.sequential_timeout is None else self.scheduler.now() + self.sequential_timeout

        while True:
            job = self.registry.get_job(job_id)
            if job is None:
                logger.warning(f"Job {job_id} disappeared from the registry, continuing the chain")
                return None

            if job.polled:
                job = await self.progress_driver.poll_once(job_id) or job
            if job.state.is_terminal():
                return job

            if deadline is not None and self.scheduler.now() >= deadline:
                timeout = SequentialWaitTimeoutError(job_id, self.sequential_timeout)
                logger.error(str(timeout))
                self.registry.fail_job(job_id, at=self.scheduler.now(), kind=ErrorKind.TIMEOUT, message=str(timeout))
                return self.registry.get_job(job_id)

            await self.scheduler.sleep(self.poll_interval)

    async def _submit(self, spec: JobSpec) -> JobOutcome:
        logger.info(
            f"Submitting segment {spec.segment_index}",
            extra={
                "segment_index": spec.segment_index,
                "quality": spec.quality.value,
                "estimated_seconds": spec.estimated_seconds,
            },
        )
        try:
            submission = await self.submission_client.submit(spec.prompt, spec.quality)
            job = self._register(spec, submission)
        except Exception as e:
            error = classify_submission_error(e)
            logger.error(
                f"Error submitting segment {spec.segment_index}: {error}",
                extra={"segment_index": spec.segment_index, "quota_exceeded": error.quota_exceeded},
            )
            return self._error_outcome(spec, error)

        with job_context(job.id):
            logger.info(
                f"Segment {spec.segment_index} submitted",
                extra={"segment_index": spec.segment_index, "polled": job.polled},
            )
            self._start_progress(job, spec)
        return self._outcome_from_job(spec, job)

    def _uses_polling(self, submission: SubmissionResult) -> bool:
        if self.progress_mode is ProgressMode.SIMULATED:
            return False
        if submission.operation_handle is None or not self.progress_driver.can_poll:
            if self.progress_mode is ProgressMode.POLLED:
                logger.warning(f"Cannot poll {submission.id}, falling back to the simulated timeline")
            return False
        return True

    def _register(self, spec: JobSpec, submission: SubmissionResult) -> Job:
        now = self.scheduler.now()
        self.registry.create_job(
            Job(
                id=submission.id,
                segment_index=spec.segment_index,
                start_time=now,
                estimated_completion_time=now + spec.estimated_seconds,
                quality=spec.quality,
                sequential=spec.sequential,
                sequence_position=spec.sequence_position,
                total_in_sequence=spec.total_in_sequence,
                prompt=spec.prompt,
                polled=self._uses_polling(submission),
                operation_handle=submission.operation_handle,
                thumbnail_uri=submission.thumbnail,
            )
        )
        self.registry.mark_processing(submission.id)
        return self.registry.get_job(submission.id)

    def _start_progress(self, job: Job, spec: JobSpec) -> None:
        if job.polled:
            logger.debug(f"Job {job.id} will be advanced by polling")
            return
        if spec.sequential:
            steps = sequential_timeline(spec.sequence_position, spec.total_in_sequence)
        else:
            steps = parallel_timeline()
        self.progress_driver.start_simulation(job.id, steps)

    @staticmethod
    def _outcome_from_job(spec: JobSpec, job: Job) -> JobOutcome:
        return JobOutcome(
            segment_index=spec.segment_index,
            video_id=job.id,
            status=job.state.value,
            progress=job.progress,
            estimated_time=spec.estimated_seconds,
            download_url=job.download_uri,
            thumbnail=job.thumbnail_uri,
            error=job.error,
            sequential=spec.sequential,
            sequence_position=spec.sequence_position,
            total_in_sequence=spec.total_in_sequence,
        )

    @staticmethod
    def _error_outcome(spec: JobSpec, error: SubmissionError) -> JobOutcome:
        return JobOutcome(
            segment_index=spec.segment_index,
            video_id=None,
            status=JobState.ERROR.value,
            estimated_time=spec.estimated_seconds,
            error=str(error),
            quota_exceeded=error.quota_exceeded,
            sequential=spec.sequential,
            sequence_position=spec.sequence_position,
            total_in_sequence=spec.total_in_sequence,
        )
