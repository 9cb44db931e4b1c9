"""
Job Registry - Track video generation jobs in memory.

Every mutation happens under the registry lock, and reads hand out
snapshots, so progress timers, polling and status queries never observe a
half-applied update. Once a job is completed or failed it is frozen:
further updates are rejected.
"""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from threading import RLock
from typing import Any, Dict, List, Optional

from veoforge.core import get_logger
from veoforge.models import ErrorKind, JobState, Quality

logger = get_logger(__name__, component="job_registry")


def _iso(timestamp: Optional[float]) -> Optional[str]:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=UTC).isoformat()


@dataclass
class Job:
    id: str
    segment_index: int
    state: JobState = JobState.QUEUED
    progress: int = 0
    message: str = "Job created"
    start_time: float = 0.0
    estimated_completion_time: float = 0.0
    finished_at: Optional[float] = None
    quality: Quality = Quality.STANDARD
    sequential: bool = False
    sequence_position: int = 1
    total_in_sequence: int = 1
    prompt: str = ""
    # True when progress comes from polling the upstream operation
    polled: bool = False
    operation_handle: Any = None
    download_uri: Optional[str] = None
    thumbnail_uri: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def estimated_total_seconds(self) -> float:
        return max(self.estimated_completion_time - self.start_time, 0.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "segment_index": self.segment_index,
            "state": self.state.value,
            "progress": self.progress,
            "message": self.message,
            "start_time": _iso(self.start_time),
            "estimated_completion_time": _iso(self.estimated_completion_time),
            "finished_at": _iso(self.finished_at),
            "quality": self.quality.value,
            "sequential": self.sequential,
            "sequence_position": self.sequence_position,
            "total_in_sequence": self.total_in_sequence,
            "polled": self.polled,
            "download_uri": self.download_uri,
            "thumbnail_uri": self.thumbnail_uri,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }


class JobRegistry:
    """In-memory job store shared by the orchestrator, progress driver and status queries."""

    def __init__(self) -> None:
        self._jobs: Dict[str, Job] = {}
        self._lock = RLock()

    def __contains__(self, job_id: str) -> bool:
        with self._lock:
            return job_id in self._jobs

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def create_job(self, job: Job) -> Job:
        """Register a new job. Ids are unique for the life of the registry."""
        with self._lock:
            if job.id in self._jobs:
                raise ValueError(f"Job {job.id} is already registered")
            self._jobs[job.id] = replace(job)
            logger.debug(f"Registered job {job.id}", extra={"segment_index": job.segment_index})
            return replace(job)

    def get_job(self, job_id: str) -> Optional[Job]:
        """Snapshot of a job, or None when the id is unknown."""
        with self._lock:
            job = self._jobs.get(job_id)
            return replace(job) if job else None

    def update_job(
        self,
        job_id: str,
        state: Optional[JobState] = None,
        progress: Optional[int] = None,
        message: Optional[str] = None,
        operation_handle: Any = None,
        download_uri: Optional[str] = None,
        thumbnail_uri: Optional[str] = None,
        error: Optional[str] = None,
        error_kind: Optional[ErrorKind] = None,
        finished_at: Optional[float] = None,
    ) -> bool:
        """Apply an update. Returns False for unknown ids and for jobs already completed or failed."""
        with self._lock:
            job = self._jobs.get(job_id)
            if not job:
                return False
            if job.state.is_terminal():
                logger.debug(
                    f"Ignoring update for finished job {job_id}",
                    extra={"state": job.state.value},
                )
                return False

            if state is not None:
                job.state = state
            if progress is not None:
                job.progress = progress
            if message is not None:
                job.message = message
            if operation_handle is not None:
                job.operation_handle = operation_handle
            if download_uri is not None:
                job.download_uri = download_uri
            if thumbnail_uri is not None:
                job.thumbnail_uri = thumbnail_uri
            if error is not None:
                job.error = error
            if error_kind is not None:
                job.error_kind = error_kind
            if finished_at is not None:
                job.finished_at = finished_at
            return True

    def mark_processing(self, job_id: str, message: str = "Processing") -> bool:
        return self.update_job(job_id, state=JobState.PROCESSING, message=message)

    def complete_job(
        self,
        job_id: str,
        at: float,
        download_uri: Optional[str] = None,
        thumbnail_uri: Optional[str] = None,
        message: str = "completed",
    ) -> bool:
        completed = self.update_job(
            job_id,
            state=JobState.COMPLETED,
            progress=100,
            message=message,
            download_uri=download_uri,
            thumbnail_uri=thumbnail_uri,
            finished_at=at,
        )
        if completed:
            logger.info(f"Job {job_id} completed", extra={"download_uri": download_uri})
        return completed

    def fail_job(self, job_id: str, at: float, kind: ErrorKind, message: str) -> bool:
        failed = self.update_job(
            job_id,
            state=JobState.ERROR,
            message=message,
            error=message,
            error_kind=kind,
            finished_at=at,
        )
        if failed:
            logger.warning(f"Job {job_id} failed", extra={"error_kind": kind.value, "error": message})
        return failed

    def list_jobs(self) -> List[Job]:
        """Snapshots of all jobs, oldest first."""
        with self._lock:
            jobs = [replace(job) for job in self._jobs.values()]
        return sorted(jobs, key=lambda job: (job.start_time, job.id))
