"""
Upstream error classification.

The upstream error shape is not contractually guaranteed, so quota
detection is a heuristic on the message plus whatever `code`/`status`
attributes the exception carries (google-genai's APIError has both).
Everything that needs to know whether an error is a quota error goes
through `classify_submission_error`.
"""

from veoforge.config.constants import QUOTA_ERROR_MARKERS, QUOTA_ERROR_MESSAGE
from veoforge.core import QuotaExceededError, SubmissionError, TransientUpstreamError
from veoforge.models import ErrorKind


def is_quota_error(exc: BaseException) -> bool:
    haystack = [str(exc)]
    for attr in ("code", "status"):
        value = getattr(exc, attr, None)
        if value is not None:
            haystack.append(str(value))
    return any(marker in text for text in haystack for marker in QUOTA_ERROR_MARKERS)


def classify_submission_error(exc: BaseException) -> SubmissionError:
    """Wrap a raw upstream exception in the matching SubmissionError subtype."""
    if isinstance(exc, SubmissionError):
        return exc
    if is_quota_error(exc):
        return QuotaExceededError(QUOTA_ERROR_MESSAGE, cause=exc)
    return TransientUpstreamError(str(exc) or exc.__class__.__name__, cause=exc)


def error_kind_for(error: SubmissionError) -> ErrorKind:
    return ErrorKind.QUOTA_EXCEEDED if error.quota_exceeded else ErrorKind.UPSTREAM
