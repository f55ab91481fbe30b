"""Tests for structured logging setup."""

from __future__ import annotations

import json

import structlog

from signal_fusion import __version__
from signal_fusion.logging import get_logger, setup_logging


class TestSetupLogging:
    def test_json_format(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logger = get_logger("test_json")
        logger.info("test message", asset="BTC")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["event"] == "test message"
        assert line["asset"] == "BTC"
        assert line["level"] == "info"
        assert line["logger"] == "test_json"
        assert "timestamp" in line

    def test_engine_version_stamped(self, capsys):
        setup_logging(level="INFO", log_format="json")
        get_logger("test_version").info("versioned")

        line = json.loads(capsys.readouterr().err.strip())
        assert line["engine_version"] == __version__

    def test_console_format(self, capsys):
        setup_logging(level="INFO", log_format="console")
        logger = get_logger("test_console")
        logger.info("hello console", recommendation="buy")

        captured = capsys.readouterr()
        assert "hello console" in captured.err
        assert "buy" in captured.err

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
        logger = get_logger("test_ctx", asset="ETH", market_type="crypto")
        logger.info("context test")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["asset"] == "ETH"
        assert line["market_type"] == "crypto"

    def test_contextvars_binding(self, capsys):
        setup_logging(level="INFO", log_format="json")
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id="abc123")

        logger = get_logger("test_ctxvars")
        logger.info("with context var")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["request_id"] == "abc123"

        structlog.contextvars.clear_contextvars()
