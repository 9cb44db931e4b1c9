"""Submission payloads for segments."""

from .builder import JobSpec, build_job_spec, estimate_generation_time
from .prompt import build_video_prompt, ensure_policy_compliance, sanitize_dialogue

__all__ = [
    "JobSpec",
    "build_job_spec",
    "estimate_generation_time",
    "build_video_prompt",
    "ensure_policy_compliance",
    "sanitize_dialogue",
]
