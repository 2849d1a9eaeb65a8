"""
Unit tests for logging configuration.
"""

import json
import logging
import logging.handlers
from unittest.mock import patch

import pytest

from benchsched.core.config import AppConfig, LoggingConfig
from benchsched.utils.logging import (
    JSONFormatter,
    SuiteLoggerAdapter,
    _parse_size,
    get_suite_logger,
    setup_logging,
)


class TestParseSize:
    """Test cases for size string parsing."""

    @pytest.mark.parametrize("text, expected", [
        ("10MB", 10 * 1024 ** 2),
        ("512KB", 512 * 1024),
        ("1GB", 1024 ** 3),
        ("100B", 100),
        (" 1.5mb ", int(1.5 * 1024 ** 2)),
        ("lots", 10 * 1024 ** 2),
    ])
    def test_parse(self, text, expected):
        assert _parse_size(text) == expected


class TestJSONFormatter:
    """Test cases for structured output."""

    def test_includes_suite_context(self):
        record = logging.LogRecord("benchsched.suite", logging.INFO, __file__, 10,
                                   "finished %s", ("parse",), None)
        record.suite = "parse"
        record.run_id = "run_1"

        entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "finished parse"
        assert entry["level"] == "INFO"
        assert entry["suite"] == "parse"
        assert entry["run_id"] == "run_1"

    def test_plain_record(self):
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "hi", (), None)

        entry = json.loads(JSONFormatter().format(record))

        assert "suite" not in entry


class TestSuiteLogger:
    """Test cases for suite logger adapters."""

    def test_adapter_adds_extra(self, caplog):
        adapter = get_suite_logger("parse", run_id="run_9")
        assert isinstance(adapter, SuiteLoggerAdapter)

        with caplog.at_level(logging.INFO, logger="benchsched.suite"):
            adapter.info("suite done")

        record = caplog.records[-1]
        assert record.suite == "parse"
        assert record.run_id == "run_9"

    def test_run_id_optional(self):
        assert get_suite_logger("parse").extra == {"suite": "parse"}


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_creates_log_file_handler(self, temp_dir):
        config = AppConfig(logging=LoggingConfig(file=str(temp_dir / "logs" / "run.log"), level="DEBUG"))
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level

        try:
            setup_logging(config, enable_json=True)

            assert (temp_dir / "logs").is_dir()
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 2
            assert all(isinstance(h.formatter, JSONFormatter) for h in root.handlers)
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_uses_global_config_by_default(self, temp_dir):
        config = AppConfig(logging=LoggingConfig(file=str(temp_dir / "default.log")))
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level

        try:
            with patch("benchsched.utils.logging.get_config", return_value=config):
                setup_logging()
            assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
