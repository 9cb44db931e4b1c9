"""
Data models: enums, segments and API schemas.
"""

from .status import (
    JobState,
    Quality,
    DispatchMode,
    ProgressMode,
    ErrorKind,
    NOT_FOUND_STATUS,
)
from .segments import (
    Segment,
    SegmentDescription,
    CharacterDescription,
    SceneContinuity,
    ActionTimeline,
)
from .jobs import (
    DispatchOptions,
    DispatchRequest,
    JobOutcome,
    BatchResult,
    JobStatusResponse,
    ConnectionTestResult,
)

__all__ = [
    "JobState",
    "Quality",
    "DispatchMode",
    "ProgressMode",
    "ErrorKind",
    "NOT_FOUND_STATUS",
    "Segment",
    "SegmentDescription",
    "CharacterDescription",
    "SceneContinuity",
    "ActionTimeline",
    "DispatchOptions",
    "DispatchRequest",
    "JobOutcome",
    "BatchResult",
    "JobStatusResponse",
    "ConnectionTestResult",
]
