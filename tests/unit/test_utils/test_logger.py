"""Unit tests for logging configuration."""

import json
import logging
import logging.handlers

import pytest
from pythonjsonlogger.json import JsonFormatter

from inferdev.api.middleware.request_id import request_id_var
from inferdev.utils.logger import (
    InferDevFormatter,
    LoggerConfig,
    PerformanceLogger,
    RequestContextFilter,
    get_component_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_test_logging():
    yield
    setup_logging(environment="test")


class TestLoggerConfig:
    """Test logger setup per environment."""

    def test_component_loggers(self):
        setup_logging(environment="test")

        assert get_component_logger("survey").name == "inferdev.survey"
        with pytest.raises(ValueError):
            get_component_logger("database")

    def test_json_output_in_production(self):
        LoggerConfig(environment="production", log_level="INFO")

        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, InferDevFormatter)
        assert isinstance(handler.formatter, JsonFormatter)

    def test_rotating_file(self, tmp_path):
        log_file = tmp_path / "logs" / "inferdev.log"

        LoggerConfig(environment="development", log_file=str(log_file))

        handlers = logging.getLogger().handlers
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in handlers)
        assert log_file.parent.is_dir()


class TestFormatting:
    """Test structured log records."""

    def test_request_id_added_to_json(self):
        record = logging.LogRecord("inferdev.api", logging.INFO, __file__, 1, "hello", None, None)
        token = request_id_var.set("req-1234567890")
        try:
            RequestContextFilter().filter(record)
        finally:
            request_id_var.reset(token)

        payload = json.loads(InferDevFormatter().format(record))

        assert payload["request_id"] == "req-1234567890"
        assert payload["application"] == "inferdev"
        assert payload["message"] == "hello"

    def test_performance_logger_reports_duration(self, caplog):
        logger = logging.getLogger("inferdev.catalog.test")

        with caplog.at_level(logging.INFO, logger="inferdev.catalog.test"):
            with PerformanceLogger("load_reference_data", logger):
                pass

        record = caplog.records[-1]
        assert record.operation == "load_reference_data"
        assert record.success is True
        assert record.duration_ms >= 0
