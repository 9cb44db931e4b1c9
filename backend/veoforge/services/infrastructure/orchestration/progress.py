"""
Progress Driver - advance jobs towards a terminal state.

Two mechanisms:
1. Simulated: a fixed timeline of (progress, label, delay) steps scheduled
   at submission. The last step completes the job without a download URI.
2. Polled: each call to `poll_once` asks the upstream service for the
   operation state. Progress is estimated from elapsed time and capped
   below 100 until the operation reports done.

Both write through the JobRegistry, which rejects updates to finished
jobs, so a late timer can never overwrite a terminal state.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from veoforge.config.constants import (
    PARALLEL_PROGRESS_STEPS,
    POLLED_PROGRESS_CAP,
    SEQUENTIAL_PROGRESS_STEPS,
)
from veoforge.core import get_logger, job_context
from veoforge.models import ErrorKind

from ..veo.base import PollClient
from .job_registry import Job, JobRegistry
from .scheduler import Scheduler

logger = get_logger(__name__, component="progress")

NO_RESULT_MESSAGE = "No video generated in response"


@dataclass(frozen=True)
class ProgressStep:
    progress: int
    label: str
    delay: float

    @property
    def completes(self) -> bool:
        return self.progress >= 100


def parallel_timeline() -> Tuple[ProgressStep, ...]:
    return tuple(ProgressStep(pct, label, delay) for pct, label, delay in PARALLEL_PROGRESS_STEPS)


def sequential_timeline(position: int, total: int) -> Tuple[ProgressStep, ...]:
    """Shorter timeline with labels naming the clip's place in the chain."""
    return tuple(
        ProgressStep(pct, label.format(position=position, total=total), delay)
        for pct, label, delay in SEQUENTIAL_PROGRESS_STEPS
    )


def polled_progress(elapsed: float, estimated_total: float) -> int:
    if estimated_total <= 0:
        return POLLED_PROGRESS_CAP
    # Halves round up
    return max(0, min(POLLED_PROGRESS_CAP, int(elapsed / estimated_total * 100 + 0.5)))


class ProgressDriver:
    def __init__(
        self,
        registry: JobRegistry,
        scheduler: Scheduler,
        poll_client: Optional[PollClient] = None,
    ):
        self.registry = registry
        self.scheduler = scheduler
        self.poll_client = poll_client

    @property
    def can_poll(self) -> bool:
        return self.poll_client is not None

    def start_simulation(self, job_id: str, steps: Iterable[ProgressStep]) -> int:
        """Schedule every step of a timeline for one job. Returns the number of timers scheduled."""
        scheduled = 0
        for step in sorted(steps, key=lambda s: s.delay):
            self.scheduler.call_later(step.delay, self._apply_step, job_id, step)
            scheduled += 1
        logger.debug(f"Scheduled {scheduled} progress steps for {job_id}")
        return scheduled

    def _apply_step(self, job_id: str, step: ProgressStep) -> None:
        with job_context(job_id):
            job = self.registry.get_job(job_id)
            if job is None:
                logger.warning(f"Progress step for unknown job {job_id}")
                return
            if job.state.is_terminal():
                return

            logger.debug(f"Progress {step.progress}%: {step.label}")
            if step.completes:
                self.registry.complete_job(job_id, at=self.scheduler.now())
            else:
                self.registry.update_job(job_id, progress=step.progress, message=step.label)

    async def poll_once(self, job_id: str) -> Optional[Job]:
        """
        Refresh one job from the upstream operation.

        Jobs without a handle, jobs that are already finished, and drivers
        without a poll client are returned unchanged.
        """
        job = self.registry.get_job(job_id)
        if job is None or job.state.is_terminal():
            return job
        if job.operation_handle is None or self.poll_client is None:
            return job

        with job_context(job_id):
            try:
                result = await self.poll_client.poll(job.operation_handle)
            except Exception as e:
                logger.error(f"Polling failed for {job_id}: {e}", exc_info=True)
                self.registry.fail_job(job_id, at=self.scheduler.now(), kind=ErrorKind.POLL_FAILED, message=str(e))
                return self.registry.get_job(job_id)

            now = self.scheduler.now()
            if not result.done:
                self.registry.update_job(
                    job_id,
                    progress=polled_progress(now - job.start_time, job.estimated_total_seconds),
                    message="Processing...",
                    operation_handle=result.operation_handle,
                )
            elif result.result_uri:
                logger.info(f"Operation finished with video {result.result_uri}")
                self.registry.complete_job(
                    job_id,
                    at=now,
                    download_uri=result.result_uri,
                    thumbnail_uri=result.thumbnail_uri,
                )
            else:
                message = f"{NO_RESULT_MESSAGE}: {result.error}" if result.error else NO_RESULT_MESSAGE
                logger.warning(message)
                self.registry.fail_job(job_id, at=now, kind=ErrorKind.NO_RESULT, message=message)

            return self.registry.get_job(job_id)
