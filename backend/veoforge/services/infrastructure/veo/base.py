"""
Base classes for the upstream video service

Defines the boundary the orchestrator talks to: submitting a prompt,
polling a long-running operation and downloading the finished video.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from veoforge.models import Quality


@dataclass
class SubmissionResult:
    """Handle returned by the upstream service for a submitted job"""
    id: str
    operation_handle: Any = None  # opaque; only the poll client interprets it
    thumbnail: Optional[str] = None


@dataclass
class PollResult:
    """State of a long-running operation at poll time"""
    done: bool
    result_uri: Optional[str] = None
    thumbnail_uri: Optional[str] = None
    operation_handle: Any = None  # refreshed handle, if the backend returns one
    error: Optional[str] = None


class SubmissionClient(ABC):
    """Submits a prompt as a video-generation job."""

    @abstractmethod
    async def submit(self, prompt: str, quality: Quality) -> SubmissionResult:
        """Start generation; raises on upstream rejection."""
        pass


class PollClient(ABC):
    """Reports progress of a previously submitted operation. Transport failures raise PollError."""

    @abstractmethod
    async def poll(self, operation_handle: Any) -> PollResult:
        pass


class VideoDownloader(ABC):
    """Fetches the bytes behind a result URI."""

    @abstractmethod
    async def download(self, uri: str) -> bytes:
        pass
