"""
Upstream video service boundary.

Usage:
    from veoforge.services.infrastructure.veo import VeoClient, classify_submission_error
"""

from .base import (
    PollClient,
    PollResult,
    SubmissionClient,
    SubmissionResult,
    VideoDownloader,
)
from .client import VeoClient, create_genai_client
from .errors import classify_submission_error, error_kind_for, is_quota_error
from .placeholder import build_placeholder_video

__all__ = [
    "PollClient",
    "PollResult",
    "SubmissionClient",
    "SubmissionResult",
    "VideoDownloader",
    "VeoClient",
    "create_genai_client",
    "classify_submission_error",
    "error_kind_for",
    "is_quota_error",
    "build_placeholder_video",
]
