"""
Tests for tagpages.core.logging.

Tests verify:
- configure_logging renders JSON with service metadata
- DEBUG events are dropped at INFO level
- LogContext binds and unbinds context variables
"""

import json

import structlog
from structlog.testing import capture_logs

from tagpages.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    def test_json_output_has_service(self, capsys):
        configure_logging(level="INFO", json_format=True, service="blog-build")
        get_logger("tests").info("tag_pages_built", tag="news", pages=3)

        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "tag_pages_built"
        assert payload["tag"] == "news"
        assert payload["pages"] == 3
        assert payload["service.name"] == "blog-build"
        assert payload["level"] == "info"
        assert "timestamp" in payload

    def test_debug_suppressed_at_info(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("tests").debug("tag_index_built")
        assert "tag_index_built" not in capsys.readouterr().err

    def test_debug_emitted_at_debug(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        get_logger("tests").debug("tag_index_built")
        assert "tag_index_built" in capsys.readouterr().err

    def test_console_output(self, capsys):
        configure_logging(level="INFO", json_format=False, add_timestamp=False)
        get_logger("tests").info("tag_pass_completed", pages=2)
        err = capsys.readouterr().err
        assert "tag_pass_completed" in err
        assert "pages" in err


class TestGetLogger:
    def test_named_logger_emits_name(self):
        with capture_logs() as logs:
            get_logger("tagpages.indexer").info("tag_index_built", tags=2)
        assert logs == [
            {"event": "tag_index_built", "tags": 2, "log_level": "info", "logger_name": "tagpages.indexer"}
        ]

    def test_unnamed_logger(self):
        with capture_logs() as logs:
            get_logger().warning("page_path_collision")
        assert logs[0]["event"] == "page_path_collision"
        assert "logger_name" not in logs[0]

    def test_name_in_json_output(self, capsys):
        configure_logging(level="INFO", json_format=True)
        get_logger("tagpages.plugin").info("tag_pages_completed")
        payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert payload["logger_name"] == "tagpages.plugin"


class TestLogContext:
    def test_binds_inside_block(self):
        with LogContext(entry=0, metadata_key="tags"):
            ctx = structlog.contextvars.get_contextvars()
            assert ctx == {"entry": 0, "metadata_key": "tags"}
        assert structlog.contextvars.get_contextvars() == {}

    def test_keeps_unrelated_context(self):
        bind_context(run="r1")
        with LogContext(entry=1):
            pass
        assert structlog.contextvars.get_contextvars() == {"run": "r1"}
        clear_context()

    def test_context_in_output(self, capsys):
        configure_logging(level="INFO", json_format=True)
        with LogContext(entry=2):
            get_logger("tests").info("tag_pass_completed")
        payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert payload["entry"] == 2
