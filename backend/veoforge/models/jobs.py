"""
API schemas for dispatch and status queries

Models for per-segment outcomes, batch results and job status.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .segments import SegmentDescription
from .status import DispatchMode, Quality


class DispatchOptions(BaseModel):
    """Options for one dispatch call"""
    quality: Quality = Quality.STANDARD
    mode: DispatchMode = DispatchMode.PARALLEL
    language: str = "en"

    @property
    def sequential(self) -> bool:
        return self.mode is DispatchMode.SEQUENTIAL


class DispatchRequest(BaseModel):
    """Segment a script and dispatch every segment"""
    script: str
    options: DispatchOptions = Field(default_factory=DispatchOptions)
    # Optional structured descriptions, aligned with the segments by position
    descriptions: List[SegmentDescription] = []


class JobOutcome(BaseModel):
    """Outcome of one segment in a batch, success or failure"""
    segment_index: int
    video_id: Optional[str] = None
    status: str
    progress: int = 0
    estimated_time: float
    download_url: Optional[str] = None
    thumbnail: Optional[str] = None
    error: Optional[str] = None
    quota_exceeded: bool = False
    sequential: bool = False
    sequence_position: Optional[int] = None
    total_in_sequence: Optional[int] = None


class BatchResult(BaseModel):
    """One outcome per input segment, in input order"""
    jobs: List[JobOutcome]
    total_estimated_time_seconds: float
    total_segments: int
    sequential: bool


class JobStatusResponse(BaseModel):
    """Response to a status query"""
    job_id: str
    status: str
    progress: int = 0
    message: Optional[str] = None
    download_url: Optional[str] = None
    thumbnail: Optional[str] = None
    estimated_completion: Optional[datetime] = None
    start_time: Optional[datetime] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    sequence_position: Optional[int] = None
    total_in_sequence: Optional[int] = None


class ConnectionTestResult(BaseModel):
    """Result of a test submission that is not tracked as a job"""
    success: bool
    operation_name: Optional[str] = None
    done: bool = False
    error: Optional[str] = None
    quota_exceeded: bool = False
