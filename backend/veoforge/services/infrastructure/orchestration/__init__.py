"""
Job orchestration: scheduling, registry, progress and dispatch.

Usage:
    from veoforge.services.infrastructure.orchestration import (
        JobRegistry, ProgressDriver, VideoJobOrchestrator, AsyncioScheduler,
    )
"""

from .job_registry import Job, JobRegistry
from .orchestrator import VideoJobOrchestrator
from .progress import (
    NO_RESULT_MESSAGE,
    ProgressDriver,
    ProgressStep,
    parallel_timeline,
    polled_progress,
    sequential_timeline,
)
from .scheduler import AsyncioScheduler, Scheduler, TimerHandle, VirtualScheduler

__all__ = [
    "Job",
    "JobRegistry",
    "VideoJobOrchestrator",
    "NO_RESULT_MESSAGE",
    "ProgressDriver",
    "ProgressStep",
    "parallel_timeline",
    "polled_progress",
    "sequential_timeline",
    "AsyncioScheduler",
    "Scheduler",
    "TimerHandle",
    "VirtualScheduler",
]
