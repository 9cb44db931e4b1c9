"""
Structured logging configuration

Two output formats share the same records:
- JSON lines (StructuredFormatter) for log shipping and log files
- Coloured single lines (DevelopmentFormatter) for a terminal

Every record carries the dispatch batch id and the current job id when they
are set, plus the `component` given to `get_logger`. Secrets passed through
`extra=` are redacted before they reach any handler.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

SENSITIVE_KEY_TOKENS = ("password", "secret", "token", "api_key", "apikey", "authorization")
REDACTED = "***REDACTED***"

# Correlation context for a dispatch call and the job being worked on
batch_id_var: ContextVar[Optional[str]] = ContextVar("batch_id", default=None)
job_id_var: ContextVar[Optional[str]] = ContextVar("job_id", default=None)

_CORRELATION_KEYS = ("batch_id", "job_id")

# Attributes every LogRecord has; anything else came in through `extra=`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

# Third-party loggers that are too chatty below WARNING
_QUIET_LOGGERS = ("google_genai", "httpx", "httpcore", "urllib3", "asyncio")


def _correlation() -> Dict[str, str]:
    context = {"batch_id": batch_id_var.get(), "job_id": job_id_var.get()}
    return {key: value for key, value in context.items() if value}


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(token in lowered for token in SENSITIVE_KEY_TOKENS)


def _redact(value: Any, key: str = "") -> Any:
    if key and _is_sensitive(key) and not isinstance(value, (dict, list, tuple)):
        return REDACTED
    if isinstance(value, dict):
        return {k: (REDACTED if _is_sensitive(str(k)) else _redact(v, str(k))) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(_redact(item, key) for item in value)
    return value


def _record_extra(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS
        and key not in _CORRELATION_KEYS
        and key != "component"
        and not key.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        component = getattr(record, "component", None)
        if component:
            payload["component"] = component
        payload.update(_correlation())

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        extra = _record_extra(record)
        if extra:
            payload["extra"] = _redact(extra)

        # Operation handles and enums are not JSON types; fall back to str()
        return json.dumps(payload, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Coloured `time level logger [context] message` lines"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]

        context = []
        correlation = _correlation()
        if "batch_id" in correlation:
            context.append(f"batch:{correlation['batch_id'][:8]}")
        if "job_id" in correlation:
            context.append(f"job:{correlation['job_id'][-12:]}")
        segment_index = getattr(record, "segment_index", None)
        if segment_index is not None:
            context.append(f"seg:{segment_index}")
        context_str = f" [{', '.join(context)}]" if context else ""

        line = (
            f"{color}{timestamp} {record.levelname:8s}{self.RESET} "
            f"{record.name:30s}{context_str} {record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class LoggerAdapter(logging.LoggerAdapter):
    """Adds correlation ids and the adapter's fixed fields to every call"""

    def process(self, msg: str, kwargs: Any) -> tuple:
        extra = dict(self.extra or {})
        extra.update(_correlation())
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    use_json: bool = False,
    max_bytes: int = 20 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure the root logger

    Args:
        level: Logging level name
        log_file: Optional rotating log file, always written as JSON
        use_json: JSON on the console instead of coloured lines
        max_bytes: Rotation size of the log file
        backup_count: Rotated files to keep
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(StructuredFormatter() if use_json else DevelopmentFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> LoggerAdapter:
    """
    Example:
        logger = get_logger(__name__, component="orchestrator")
        logger.info("Submitting segment", extra={"segment_index": 2})
    """
    return LoggerAdapter(logging.getLogger(name), extra)


def set_batch_id(batch_id: Optional[str]) -> None:
    batch_id_var.set(batch_id)


def set_job_id(job_id: Optional[str]) -> None:
    job_id_var.set(job_id)


@contextmanager
def job_context(job_id: Optional[str]) -> Iterator[None]:
    """Tag records with `job_id` inside the block, then restore the previous id."""
    token = job_id_var.set(job_id)
    try:
        yield
    finally:
        job_id_var.reset(token)


def clear_context() -> None:
    batch_id_var.set(None)
    job_id_var.set(None)


class LogTimer:
    """Logs start, completion and failure of a block with its duration"""

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.INFO):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.started: Optional[float] = None

    @property
    def elapsed(self) -> float:
        return 0.0 if self.started is None else time.perf_counter() - self.started

    def __enter__(self) -> "LogTimer":
        self.started = time.perf_counter()
        self.logger.log(self.level, f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb) -> None:
        duration = round(self.elapsed, 3)
        if exc_type:
            self.logger.error(
                f"Failed: {self.operation}",
                extra={"duration_seconds": duration, "error": str(exc_val)},
                exc_info=True,
            )
        else:
            self.logger.log(self.level, f"Completed: {self.operation}", extra={"duration_seconds": duration})
