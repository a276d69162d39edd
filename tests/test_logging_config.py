"""
Unit tests for logging setup and the in-memory log buffer.
"""

import logging

import pytest

from orderly.utils.logging_config import (
    DetailsFormatter,
    MemoryLogHandler,
    clear_logs,
    get_logs,
    resolve_level,
    setup_logging,
    teardown_logging,
)


class TestSetupLogging:
    """Test logging configuration."""

    def test_levels(self):
        assert resolve_level("warn") == logging.WARNING
        assert resolve_level("DEBUG") == logging.DEBUG
        assert resolve_level(logging.ERROR) == logging.ERROR
        with pytest.raises(ValueError):
            resolve_level("verbose")

    def test_memory_buffer(self):
        logger = setup_logging("info")
        child = logging.getLogger("orderly.tests")

        child.debug("hidden")
        child.info("moved", extra={"details": {"from": "a", "to": "b"}})
        child.error("failed")

        logs = get_logs()
        assert [(e.level, e.message) for e in logs] == [("info", "moved"), ("error", "failed")]
        assert logs[0].details == {"from": "a", "to": "b"}
        assert logger.name == "orderly"

        clear_logs()
        assert get_logs() == []

    def test_setup_is_repeatable(self):
        setup_logging("info")
        logger = setup_logging("error")

        managed = [h for h in logger.handlers if isinstance(h, MemoryLogHandler)]
        assert len(managed) == 1
        assert logger.level == logging.ERROR

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "orderly.log"
        logger = setup_logging("debug", str(log_file))

        logger.info("written", extra={"details": {"count": 2}})
        for handler in logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "orderly - INFO - written" in content
        assert '{"count": 2}' in content

    def test_teardown_leaves_foreign_handlers(self, tmp_path):
        log_file = tmp_path / "run.log"
        logger = setup_logging("info", str(log_file))
        foreign = logging.NullHandler()
        logger.addHandler(foreign)
        try:
            teardown_logging()

            assert logger.handlers == [foreign]
            assert logger.level == logging.NOTSET
            assert get_logs() == []
        finally:
            logger.removeHandler(foreign)


def test_details_formatter():
    formatter = DetailsFormatter("%(levelname)s %(message)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    assert formatter.format(record) == "INFO hello"

    record.details = {"to": "café"}
    assert formatter.format(record) == 'INFO hello {"to": "café"}'
