"""Tests for structured logging setup."""

from __future__ import annotations

import json
import logging

import structlog

from scalp_core.config.schema import LoggingConfig
from scalp_core.logging import get_logger, setup_logging, setup_logging_from_config


class TestSetupLogging:
    def test_json_format(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logger = get_logger("test_json")
        logger.info("signal_evaluated", contract="ETH_USDT")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["event"] == "signal_evaluated"
        assert line["contract"] == "ETH_USDT"
        assert line["level"] == "info"
        assert "timestamp" in line

    def test_console_format(self, capsys):
        setup_logging(level="INFO", log_format="console")
        logger = get_logger("test_console")
        logger.info("hello console", action="stand aside")

        captured = capsys.readouterr()
        assert "hello console" in captured.err
        assert "stand aside" in captured.err

    def test_log_level_filtering(self, capsys):
        setup_logging(level="WARNING", log_format="json")
        logger = get_logger("test_level")
        logger.info("should be hidden")
        logger.warning("should appear")

        captured = capsys.readouterr()
        assert "should be hidden" not in captured.err
        assert "should appear" in captured.err

    def test_get_logger_with_context(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logger = get_logger("test_ctx", contract="ETH_USDT", position_status="flat")
        logger.info("context test")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["contract"] == "ETH_USDT"
        assert line["position_status"] == "flat"

    def test_stdlib_records_are_rendered(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logging.getLogger("some.library").warning("plain stdlib record")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["event"] == "plain stdlib record"
        assert line["level"] == "warning"

    def test_http_client_loggers_quietened(self):
        setup_logging(level="INFO", log_format="json")
        assert logging.getLogger("httpx").level == logging.WARNING

        setup_logging(level="ERROR", log_format="json")
        assert logging.getLogger("httpx").level == logging.ERROR

    def test_from_config(self, capsys):
        setup_logging_from_config(LoggingConfig(level="DEBUG", format="json"))
        get_logger("test_cfg").debug("debug visible")

        captured = capsys.readouterr()
        assert "debug visible" in captured.err

    def test_contextvars_binding(self, capsys):
        setup_logging(level="INFO", log_format="json")
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(tick=42)

        logger = get_logger("test_ctxvars")
        logger.info("with context var")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["tick"] == 42

        structlog.contextvars.clear_contextvars()
