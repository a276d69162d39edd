"""
Error handling for the file organization system.
Provides error categorization, severity assessment and error reporting.

Operations are attempted once; the handler records and classifies failures
but never retries them.
"""

import json
import logging
import traceback
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class DestinationExistsError(FileExistsError):
    """Raised when an operation would overwrite an existing file."""

    def __init__(self, path: str):
        super().__init__(f"Target file already exists: {path}")
        self.path = path


class ErrorType(Enum):
    """Categorization of different error types."""

    FILE_ACCESS = "file_access"
    CONFLICT = "conflict"
    PROCESSING = "processing"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorRecord:
    """Record of an error occurrence."""

    def __init__(
        self,
        error: Exception,
        context: str,
        error_type: ErrorType,
        severity: ErrorSeverity,
    ):
        self.error = error
        self.context = context
        self.error_type = error_type
        self.severity = severity
        self.timestamp = datetime.now()
        self.traceback = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization."""
        return {
            "error": error_message(self.error),
            "error_class": type(self.error).__name__,
            "context": self.context,
            "error_type": self.error_type.value,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "traceback": self.traceback,
        }


def error_message(error: Exception) -> str:
    """Human readable message for an exception.

    OSErrors carrying a strerror report it instead of the errno-prefixed repr.
    """
    if isinstance(error, OSError) and not isinstance(error, DestinationExistsError):
        if error.strerror:
            return error.strerror
    return str(error)


class ErrorHandler:
    """Categorize, record and report errors."""

    def __init__(self, error_logger: Optional[logging.Logger] = None):
        """
        Initialize error handler.

        Args:
            error_logger: Logger receiving error reports (defaults to the module logger)
        """
        self.logger = error_logger or logger
        self.error_history: List[ErrorRecord] = []
        self.error_counts: Dict[ErrorType, int] = {
            error_type: 0 for error_type in ErrorType
        }

    def handle_error(self, error: Exception, context: str) -> ErrorRecord:
        """
        Record an error and log it according to its category.

        Args:
            error: The exception to handle
            context: Context describing where the error occurred

        Returns:
            The ErrorRecord created for this occurrence
        """
        error_type = self._categorize_error(error)
        severity = self._determine_severity(error, error_type)

        error_record = ErrorRecord(error, context, error_type, severity)
        self.error_history.append(error_record)
        self.error_counts[error_type] += 1

        message = error_message(error)
        if error_type == ErrorType.CONFLICT:
            self.logger.warning(f"Conflict in {context}: {message}")
        elif error_type == ErrorType.FILE_ACCESS:
            self.logger.debug(f"File access error in {context}: {message}")
        else:
            self.logger.debug(f"Traceback: {error_record.traceback}")

        return error_record

    def _categorize_error(self, error: Exception) -> ErrorType:
        """Categorize the error type."""
        if isinstance(error, FileExistsError):
            return ErrorType.CONFLICT
        elif isinstance(error, OSError):
            return ErrorType.FILE_ACCESS
        elif isinstance(error, (ValueError, TypeError, KeyError, AttributeError)):
            return ErrorType.PROCESSING
        else:
            return ErrorType.UNKNOWN

    def _determine_severity(
        self, error: Exception, error_type: ErrorType
    ) -> ErrorSeverity:
        """Determine error severity based on error type and specifics."""
        if error_type == ErrorType.CONFLICT:
            return ErrorSeverity.LOW
        elif error_type == ErrorType.FILE_ACCESS:
            if isinstance(error, PermissionError):
                return ErrorSeverity.HIGH
            else:
                return ErrorSeverity.MEDIUM
        else:
            return ErrorSeverity.HIGH

    def get_error_statistics(self) -> Dict[str, Any]:
        """Get statistics about errors encountered."""
        return {
            "total_errors": len(self.error_history),
            "error_counts_by_type": {
                error_type.value: count
                for error_type, count in self.error_counts.items()
            },
            "recent_errors": [error.to_dict() for error in self.error_history[-10:]],
        }

    def save_error_report(self, filepath: Path):
        """Save a detailed error report to file."""
        report = {
            "generated_at": datetime.now().isoformat(),
            "statistics": self.get_error_statistics(),
            "error_history": [error.to_dict() for error in self.error_history],
        }

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2)

        self.logger.info(f"Error report saved to {filepath}")
