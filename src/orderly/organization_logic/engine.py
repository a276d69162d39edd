"""
Organization engine that runs the scan, plan and execute pipeline.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..file_access.local_accessor import DiscoveredFile, FileSystemAccessor
from ..file_access.manipulator import ExecutionResult, FileManipulator
from ..utils.config_manager import OrganizerConfig
from ..utils.error_handler import ErrorHandler
from .categorizer import get_category_summary
from .planner import FileOperation, OperationKind, OperationPlanner

logger = logging.getLogger(__name__)


@dataclass
class OrganizationReport:
    """Everything produced by one organizer run."""

    directory: str
    files: List[DiscoveredFile] = field(default_factory=list)
    operations: List[FileOperation] = field(default_factory=list)
    result: ExecutionResult = field(default_factory=ExecutionResult)
    manifest_paths: List[str] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return self.result.failure_count > 0


class OrganizationEngine:
    """Engine that organizes a directory according to an OrganizerConfig."""

    def __init__(
        self,
        config: OrganizerConfig,
        engine_logger: Optional[logging.Logger] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        """Initialize the organization engine.

        Args:
            config: Organizer configuration for this run
            engine_logger: Logger shared by every component
            error_handler: Handler recording failed operations
        """
        self.config = config
        self.logger = engine_logger or logger
        self.error_handler = error_handler or ErrorHandler()

    def scan(self, directory: str) -> List[DiscoveredFile]:
        accessor = FileSystemAccessor(directory, self.config, self.logger)
        return accessor.scan_directory()

    def plan(self, files: List[DiscoveredFile], base_directory: str) -> List[FileOperation]:
        planner = OperationPlanner(self.config, base_directory, self.logger)
        return planner.plan(files)

    def execute(self, operations: List[FileOperation]) -> ExecutionResult:
        manipulator = FileManipulator(
            dry_run=self.config.dry_run,
            logger=self.logger,
            error_handler=self.error_handler,
        )
        return manipulator.execute(operations)

    def category_summary(self, files: List[DiscoveredFile]) -> Dict[str, int]:
        summary = get_category_summary(files)
        self.logger.info("File categories found:")
        for category, count in summary.items():
            self.logger.info(f"  {category}: {count} files")
        return summary

    @staticmethod
    def count_by_kind(operations: List[FileOperation]) -> Dict[str, int]:
        """Count operations per kind, including kinds with no operations."""
        counts = {kind.value: 0 for kind in OperationKind}
        for operation in operations:
            counts[operation.kind.value] += 1
        return counts

    def organize(self, directory: str) -> OrganizationReport:
        """
        Scan, plan and execute for a directory.

        Args:
            directory: Directory to organize

        Returns:
            OrganizationReport for the run
        """
        directory = os.path.abspath(directory)
        report = OrganizationReport(directory=directory)

        self.logger.info(f"Target directory: {directory}")
        if self.config.dry_run:
            self.logger.warning("Running in DRY RUN mode - no files will be modified")

        report.files = self.scan(directory)
        if not report.files:
            self.logger.info("No files found to organize")
            return report

        self.category_summary(report.files)

        report.operations = self.plan(report.files, directory)
        if not report.operations:
            self.logger.info("✓ All files are already organized!")
            return report

        self.logger.info(f"Planned operations: {len(report.operations)}")
        report.result = self.execute(report.operations)

        self.logger.info(f"✓ Completed: {report.result.success_count} operations")
        if report.result.failure_count:
            self.logger.error(f"✗ Failed: {report.result.failure_count} operations")

        return report
