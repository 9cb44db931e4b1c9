"""
Core Module - Cross-cutting concerns and shared infrastructure

Organization:
    - logging.py: Structured logging configuration and utilities
    - exceptions.py: Error taxonomy for segmentation and job tracking
    - runtime.py: Environment readers and startup checks

Usage:
    from veoforge.core import get_logger, EmptyScriptError
"""

# Logging
from .logging import (
    setup_logging,
    get_logger,
    set_batch_id,
    set_job_id,
    job_context,
    clear_context,
    LogTimer,
)

# Exceptions
from .exceptions import (
    VeoForgeError,
    ValidationError,
    EmptyScriptError,
    SubmissionError,
    QuotaExceededError,
    TransientUpstreamError,
    PollError,
    NoResultError,
    NotFoundError,
    JobNotReadyError,
    SequentialWaitTimeoutError,
)

# Runtime guards
from .runtime import (
    parse_bool_env,
    env_int,
    env_float,
    env_deadline,
    upstream_credentials_report,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_batch_id",
    "set_job_id",
    "job_context",
    "clear_context",
    "LogTimer",
    # Exceptions
    "VeoForgeError",
    "ValidationError",
    "EmptyScriptError",
    "SubmissionError",
    "QuotaExceededError",
    "TransientUpstreamError",
    "PollError",
    "NoResultError",
    "NotFoundError",
    "JobNotReadyError",
    "SequentialWaitTimeoutError",
    # Runtime guards
    "parse_bool_env",
    "env_int",
    "env_float",
    "env_deadline",
    "upstream_credentials_report",
]
