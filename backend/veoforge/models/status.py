"""
Job state and option enumerations.

Closed sets for job lifecycle states, quality tiers, dispatch modes and
error kinds, replacing free-form strings.
"""

from enum import Enum


class JobState(Enum):
    """Lifecycle of one video-generation job."""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

    def is_terminal(self) -> bool:
        """Check if this state is final (no further mutation)."""
        return self in (JobState.COMPLETED, JobState.ERROR)


class Quality(Enum):
    STANDARD = "standard"
    HIGH = "high"


class DispatchMode(Enum):
    """How a batch of segments is submitted."""

    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"


class ProgressMode(Enum):
    """Which mechanism advances a job's progress."""

    AUTO = "auto"            # poll when an operation handle exists, simulate otherwise
    SIMULATED = "simulated"
    POLLED = "polled"


class ErrorKind(Enum):
    QUOTA_EXCEEDED = "quota_exceeded"
    UPSTREAM = "upstream"
    POLL_FAILED = "poll_failed"
    NO_RESULT = "no_result"
    TIMEOUT = "timeout"


# Reported by status queries for ids the registry does not know.
NOT_FOUND_STATUS = "not_found"


__all__ = [
    "JobState",
    "Quality",
    "DispatchMode",
    "ProgressMode",
    "ErrorKind",
    "NOT_FOUND_STATUS",
]
