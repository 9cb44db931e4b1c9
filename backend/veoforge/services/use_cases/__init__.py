"""
Use Cases package - entry points for callers.

Modules:
- base: Base use case abstract class
- video_generation_use_case: dispatch, status, download and connectivity check
"""

from .base import UseCase
from .video_generation_use_case import VideoGenerationUseCase, create_video_generation_use_case

__all__ = [
    "UseCase",
    "VideoGenerationUseCase",
    "create_video_generation_use_case",
]
