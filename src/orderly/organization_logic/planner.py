"""
Operation planning: turns discovered files into move and rename operations.
"""

import os
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from ..file_access.local_accessor import DiscoveredFile
from ..utils.config_manager import OrganizerConfig
from ..utils.naming import apply_convention, needs_rename

logger = logging.getLogger(__name__)


class OperationKind(Enum):
    """Kind of filesystem change an operation performs."""

    MOVE = "move"
    RENAME = "rename"
    MOVE_AND_RENAME = "move-and-rename"


@dataclass(frozen=True)
class FileOperation:
    """Represents a planned file operation."""

    kind: OperationKind
    source_path: str
    destination_path: str
    reason: str

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "sourcePath": self.source_path,
            "destinationPath": self.destination_path,
            "reason": self.reason,
        }


class OperationPlanner:
    """Plans the operations needed to organize a set of files."""

    def __init__(
        self,
        config: OrganizerConfig,
        base_directory: str,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the planner.

        Args:
            config: Organizer configuration
            base_directory: Directory category folders are created under when
                no target directory is configured
            logger: Optional logger, defaults to the module logger
        """
        self.config = config
        self.base_directory = base_directory
        self.logger = logger or logging.getLogger(__name__)

    def plan(self, files: Sequence[DiscoveredFile]) -> List[FileOperation]:
        """Plan operations for the given files, preserving their order.

        Files already in their canonical location and name produce no
        operation.
        """
        operations = []
        for discovered in files:
            operation = self.plan_file(discovered)
            if operation is not None:
                operations.append(operation)

        self.logger.debug(f"Planned {len(operations)} operations for {len(files)} files")
        return operations

    def plan_file(self, discovered: DiscoveredFile) -> Optional[FileOperation]:
        """Plan the operation for a single file, or None when nothing changes."""
        current_directory = os.path.dirname(discovered.original_path)
        target_directory = self._target_directory(discovered, current_directory)

        new_filename = discovered.filename
        if needs_rename(discovered.filename, self.config.naming_convention):
            new_filename = apply_convention(
                discovered.filename, self.config.naming_convention
            )

        destination = os.path.join(target_directory, new_filename)

        source_normalized = os.path.normpath(discovered.original_path)
        destination_normalized = os.path.normpath(destination)
        if source_normalized == destination_normalized:
            return None

        moved = os.path.normpath(target_directory) != os.path.normpath(current_directory)
        renamed = new_filename != discovered.filename

        if moved and renamed:
            kind = OperationKind.MOVE_AND_RENAME
            reason = f"Moving to {discovered.target_folder} and renaming to {new_filename}"
        elif moved:
            kind = OperationKind.MOVE
            reason = f"Moving to {discovered.target_folder}"
        else:
            kind = OperationKind.RENAME
            reason = f"Renaming to {new_filename}"

        return FileOperation(
            kind=kind,
            source_path=discovered.original_path,
            destination_path=destination_normalized,
            reason=reason,
        )

    def _target_directory(self, discovered: DiscoveredFile, current_directory: str) -> str:
        if not discovered.target_folder:
            return current_directory
        if self.config.target_directory:
            return os.path.join(self.config.target_directory, discovered.target_folder)
        return os.path.join(self.base_directory, discovered.target_folder)


def plan(
    files: Sequence[DiscoveredFile],
    config: OrganizerConfig,
    base_directory: str,
    logger: Optional[logging.Logger] = None,
) -> List[FileOperation]:
    """Plan operations for files with a one-off planner."""
    return OperationPlanner(config, base_directory, logger).plan(files)
