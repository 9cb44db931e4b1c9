"""
Tests for core/logging module

Formatters, the context-aware logger adapter, correlation ids and LogTimer.
"""

import json
import logging
import sys

import pytest
from unittest.mock import MagicMock

from veoforge.core.logging import (
    DevelopmentFormatter,
    LoggerAdapter,
    LogTimer,
    StructuredFormatter,
    batch_id_var,
    clear_context,
    get_logger,
    job_context,
    job_id_var,
    set_batch_id,
    set_job_id,
    setup_logging,
)


def _record(msg="Test message", **attrs):
    record = logging.LogRecord(
        name="test.module",
        level=logging.INFO,
        pathname="/path/to/file.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def reset_context():
    clear_context()
    yield
    clear_context()


class TestStructuredFormatter:
    """Test suite for StructuredFormatter"""

    def test_format_basic_log(self):
        parsed = json.loads(StructuredFormatter().format(_record()))

        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Test message"
        assert parsed["logger"] == "test.module"
        assert parsed["timestamp"].endswith("Z")

    def test_extra_fields_are_collected(self):
        parsed = json.loads(StructuredFormatter().format(_record(segment_index=3, quality="high")))

        assert parsed["extra"] == {"segment_index": 3, "quality": "high"}

    def test_sensitive_extra_fields_are_redacted(self):
        parsed = json.loads(StructuredFormatter().format(_record(api_key="abc123")))

        assert parsed["extra"]["api_key"] == "***REDACTED***"

    def test_correlation_ids_are_top_level(self):
        set_batch_id("batch-1")
        set_job_id("operations/op-1")

        parsed = json.loads(StructuredFormatter().format(_record(batch_id="batch-1")))

        assert parsed["batch_id"] == "batch-1"
        assert parsed["job_id"] == "operations/op-1"
        assert "extra" not in parsed

    def test_format_with_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()

        parsed = json.loads(StructuredFormatter().format(record))

        assert parsed["exception"]["type"] == "ValueError"
        assert parsed["exception"]["message"] == "boom"

    def test_non_serialisable_extra_falls_back_to_str(self):
        parsed = json.loads(StructuredFormatter().format(_record(handle=object())))

        assert parsed["extra"]["handle"].startswith("<object object")


class TestDevelopmentFormatter:
    def test_includes_level_and_message(self):
        result = DevelopmentFormatter().format(_record())

        assert "INFO" in result
        assert "Test message" in result

    def test_includes_batch_context(self):
        set_batch_id("abcdef123456")

        result = DevelopmentFormatter().format(_record())

        assert "batch:abcdef12" in result


class TestLoggerAdapter:
    def test_adds_adapter_extra_and_context(self):
        set_batch_id("batch-9")
        adapter = LoggerAdapter(logging.getLogger("test"), {"component": "orchestrator"})

        _, kwargs = adapter.process("msg", {})

        assert kwargs["extra"]["component"] == "orchestrator"
        assert kwargs["extra"]["batch_id"] == "batch-9"

    def test_call_site_extra_wins(self):
        adapter = LoggerAdapter(logging.getLogger("test"), {"component": "a"})

        _, kwargs = adapter.process("msg", {"extra": {"component": "b"}})

        assert kwargs["extra"]["component"] == "b"

    def test_get_logger_returns_adapter(self):
        logger = get_logger("veoforge.test", component="segmenter")

        assert isinstance(logger, LoggerAdapter)
        assert logger.extra == {"component": "segmenter"}


class TestContext:
    def test_set_and_clear(self):
        set_batch_id("b")
        set_job_id("j")
        assert batch_id_var.get() == "b"
        assert job_id_var.get() == "j"

        clear_context()

        assert batch_id_var.get() is None
        assert job_id_var.get() is None

    def test_job_context_restores_outer_id(self):
        set_job_id("outer")

        with job_context("inner"):
            assert job_id_var.get() == "inner"

        assert job_id_var.get() == "outer"


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)

    def test_json_handler(self):
        setup_logging(level="DEBUG", use_json=True)
        root = logging.getLogger()

        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)
        assert logging.getLogger("google_genai").level == logging.WARNING

    def test_file_handler_is_json(self, tmp_path):
        log_file = tmp_path / "logs" / "veoforge.log"

        setup_logging(level="INFO", log_file=log_file)
        root = logging.getLogger()

        assert log_file.parent.exists()
        assert isinstance(root.handlers[0].formatter, DevelopmentFormatter)
        assert isinstance(root.handlers[1].formatter, StructuredFormatter)
        for handler in root.handlers[1:]:
            handler.close()


class TestLogTimer:
    def test_logs_start_and_completion(self):
        logger = MagicMock()

        with LogTimer(logger, "dispatch"):
            pass

        messages = [call.args[1] for call in logger.log.call_args_list]
        assert messages == ["Starting: dispatch", "Completed: dispatch"]
        assert "duration_seconds" in logger.log.call_args_list[1].kwargs["extra"]

    def test_logs_failure(self):
        logger = MagicMock()

        with pytest.raises(RuntimeError):
            with LogTimer(logger, "dispatch"):
                raise RuntimeError("nope")

        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["extra"]["error"] == "nope"
