"""
Core Exceptions
Standardized exceptions for segmentation, submission and job tracking.
"""

from typing import Optional


class VeoForgeError(Exception):
    """Base exception for all application errors."""
    pass


class ValidationError(VeoForgeError):
    """Malformed or empty input."""
    pass


class EmptyScriptError(ValidationError):
    """The script is empty or whitespace-only; there is nothing to segment."""

    def __init__(self, message: str = "Script is empty"):
        super().__init__(message)


class SubmissionError(VeoForgeError):
    """The upstream service rejected a generation job."""

    quota_exceeded = False

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class QuotaExceededError(SubmissionError):
    """Upstream rate or resource limits were hit."""

    quota_exceeded = True


class TransientUpstreamError(SubmissionError):
    """Any other upstream rejection."""
    pass


class PollError(VeoForgeError):
    """Polling a long-running operation failed."""
    pass


class NoResultError(VeoForgeError):
    """The upstream operation finished without producing a video."""
    pass


class NotFoundError(VeoForgeError):
    """No job is registered under the requested id."""

    def __init__(self, job_id: str):
        super().__init__(f"Video not found: {job_id}")
        self.job_id = job_id


class JobNotReadyError(VeoForgeError):
    """The job exists but has not completed."""

    def __init__(self, job_id: str, state: str):
        super().__init__(f"Video {job_id} is not ready for download (state: {state})")
        self.job_id = job_id
        self.state = state


class SequentialWaitTimeoutError(VeoForgeError):
    """A sequential chain waited past its deadline for the previous job."""

    def __init__(self, job_id: str, timeout_seconds: float):
        super().__init__(
            f"Timed out after {timeout_seconds:.0f}s waiting for video {job_id} to finish"
        )
        self.job_id = job_id
        self.timeout_seconds = timeout_seconds
