"""
File manipulation service for applying planned operations.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..organization_logic.planner import FileOperation
from ..utils import file_utils
from ..utils.error_handler import DestinationExistsError, ErrorHandler, error_message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationFailure:
    """A failed operation and the reason it failed."""

    source_path: str
    error_message: str


@dataclass
class ExecutionResult:
    """Outcome of executing a batch of operations."""

    operations: List[FileOperation] = field(default_factory=list)
    success_count: int = 0
    failure_count: int = 0
    failures: List[OperationFailure] = field(default_factory=list)


class FileManipulator:
    """Service for moving and renaming files to their organized locations."""

    def __init__(
        self,
        dry_run: bool = False,
        logger: Optional[logging.Logger] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        """Initialize file manipulator.

        Args:
            dry_run: Whether to simulate operations without actual changes
            logger: Optional logger, defaults to the module logger
            error_handler: Handler that records failed operations
        """
        self.dry_run = dry_run
        self.logger = logger or logging.getLogger(__name__)
        self.error_handler = error_handler or ErrorHandler()

    def execute(self, operations: Sequence[FileOperation]) -> ExecutionResult:
        """Apply operations in order.

        A failing operation is recorded and the remaining operations still
        run. In dry run mode nothing touches the filesystem and every
        operation counts as a success.

        Args:
            operations: Planned operations

        Returns:
            ExecutionResult with per-operation outcomes
        """
        result = ExecutionResult(operations=list(operations))

        if self.dry_run:
            self.logger.info("DRY RUN: No files will be modified")
            for operation in result.operations:
                self.logger.info(
                    f"[DRY RUN] {operation.kind.value}: "
                    f"{operation.source_path} -> {operation.destination_path}"
                )
            result.success_count = len(result.operations)
            return result

        for operation in result.operations:
            try:
                self._apply(operation)
                result.success_count += 1
                self.logger.info(
                    f"✓ {operation.reason}",
                    extra={
                        "details": {
                            "from": operation.source_path,
                            "to": operation.destination_path,
                        }
                    },
                )
            except Exception as e:
                message = error_message(e)
                result.failure_count += 1
                result.failures.append(OperationFailure(operation.source_path, message))
                self.error_handler.handle_error(
                    e, f"{operation.kind.value} {operation.source_path}"
                )
                self.logger.error(
                    f"✗ Failed to process {operation.source_path}",
                    extra={"details": {"error": message}},
                )

        return result

    def _apply(self, operation: FileOperation):
        """Create the destination directory, check for conflicts and rename."""
        destination = operation.destination_path
        file_utils.ensure_directory(os.path.dirname(destination))

        if file_utils.path_exists(destination) and not _is_case_only_rename(
            operation.source_path, destination
        ):
            raise DestinationExistsError(destination)

        file_utils.rename_path(operation.source_path, destination)


def _is_case_only_rename(source: str, destination: str) -> bool:
    """True when destination is the source itself spelled with different case.

    Hard links share an inode but are separate names, so they still conflict.
    """
    if not file_utils.same_file(source, destination):
        return False
    source_key = os.path.normpath(os.path.abspath(source))
    destination_key = os.path.normpath(os.path.abspath(destination))
    return source_key != destination_key and source_key.lower() == destination_key.lower()


def execute(
    operations: Sequence[FileOperation],
    dry_run: bool = False,
    logger: Optional[logging.Logger] = None,
) -> ExecutionResult:
    """Execute operations with a one-off manipulator."""
    return FileManipulator(dry_run=dry_run, logger=logger).execute(operations)
