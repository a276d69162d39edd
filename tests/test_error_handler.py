"""
Unit tests for error handling.
"""

import json

from orderly.utils.error_handler import (
    DestinationExistsError,
    ErrorHandler,
    ErrorSeverity,
    ErrorType,
    error_message,
)


class TestErrorHandler:
    """Test error categorization and reporting."""

    def setup_method(self):
        self.handler = ErrorHandler()

    def test_categorize_error(self):
        assert self.handler._categorize_error(DestinationExistsError("/x")) == ErrorType.CONFLICT
        assert self.handler._categorize_error(PermissionError("denied")) == ErrorType.FILE_ACCESS
        assert self.handler._categorize_error(ValueError("bad")) == ErrorType.PROCESSING
        assert self.handler._categorize_error(AttributeError("x")) == ErrorType.PROCESSING
        assert self.handler._categorize_error(ImportError("x")) == ErrorType.UNKNOWN
        assert self.handler._categorize_error(RuntimeError("x")) == ErrorType.UNKNOWN

    def test_severity(self):
        assert self.handler._determine_severity(
            PermissionError("denied"), ErrorType.FILE_ACCESS
        ) == ErrorSeverity.HIGH
        assert self.handler._determine_severity(
            FileNotFoundError("gone"), ErrorType.FILE_ACCESS
        ) == ErrorSeverity.MEDIUM
        assert self.handler._determine_severity(
            DestinationExistsError("/x"), ErrorType.CONFLICT
        ) == ErrorSeverity.LOW

    def test_programming_errors_are_not_critical(self, caplog):
        record = self.handler.handle_error(AttributeError("no attr"), "plan")

        assert record.error_type == ErrorType.PROCESSING
        assert record.severity == ErrorSeverity.HIGH
        assert not [r for r in caplog.records if r.levelname == "CRITICAL"]

    def test_handle_error_records_history(self):
        try:
            raise DestinationExistsError("/tmp/a.txt")
        except DestinationExistsError as e:
            record = self.handler.handle_error(e, "move /tmp/b.txt")

        assert record.error_type == ErrorType.CONFLICT
        assert record.to_dict()["error"] == "Target file already exists: /tmp/a.txt"
        assert "DestinationExistsError" in record.traceback

        stats = self.handler.get_error_statistics()
        assert stats["total_errors"] == 1
        assert stats["error_counts_by_type"]["conflict"] == 1
        assert len(stats["recent_errors"]) == 1

    def test_save_error_report(self, tmp_path):
        self.handler.handle_error(PermissionError(13, "Permission denied"), "rename x")
        report_path = tmp_path / "errors.json"

        self.handler.save_error_report(report_path)

        report = json.loads(report_path.read_text())
        assert report["statistics"]["total_errors"] == 1
        assert report["error_history"][0]["error"] == "Permission denied"


def test_error_message():
    assert error_message(PermissionError(13, "Permission denied")) == "Permission denied"
    assert error_message(OSError("plain")) == "plain"
    assert error_message(DestinationExistsError("/a")) == "Target file already exists: /a"
    assert isinstance(DestinationExistsError("/a"), FileExistsError)
