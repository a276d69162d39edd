import os
import stat
import logging
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, List, Optional
from dataclasses import dataclass

from ..organization_logic.categorizer import categorize
from ..utils.config_manager import OrganizerConfig
from ..utils.file_utils import stat_file


@dataclass(frozen=True)
class DiscoveredFile:
    """Data class to hold information about a scanned file."""

    original_path: str
    filename: str
    extension: str
    size: int
    category: Optional[str] = None
    target_folder: Optional[str] = None


def _raise_walk_error(error: OSError):
    raise error


class FileSystemAccessor:
    """Handles local file system access and file scanning."""

    def __init__(
        self,
        root_directory: str,
        config: OrganizerConfig,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the file system accessor.

        Args:
            root_directory: The root directory to scan
            config: Organizer configuration supplying categories and exclusions
            logger: Optional logger, defaults to the module logger
        """
        self.root_directory = Path(root_directory)
        if not self.root_directory.exists():
            raise ValueError(f"Directory does not exist: {root_directory}")
        if not self.root_directory.is_dir():
            raise ValueError(f"Path is not a directory: {root_directory}")

        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def scan_directory(self) -> List[DiscoveredFile]:
        """Scan the directory tree and return every regular file found.

        Excluded and hidden paths are skipped. A filesystem error while
        walking or reading file metadata aborts the scan.

        Returns:
            List of DiscoveredFile objects
        """
        file_list = []
        root = os.path.abspath(self.root_directory)

        self.logger.info(f"Scanning directory: {self.root_directory}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
            relative_dir = os.path.relpath(dirpath, root)
            if relative_dir == os.curdir:
                relative_dir = ""

            dirnames[:] = sorted(
                name
                for name in dirnames
                if not self._is_skipped(name, self._relative(relative_dir, name), True)
            )

            for name in sorted(filenames):
                if self._is_skipped(name, self._relative(relative_dir, name), False):
                    continue

                file_path = os.path.join(dirpath, name)
                file_stat = stat_file(file_path)
                if not stat.S_ISREG(file_stat.st_mode):
                    continue

                file_list.append(self._create_file_object(file_path, file_stat.st_size))

        self.logger.info(f"Found {len(file_list)} files")
        return file_list

    @staticmethod
    def _relative(relative_dir: str, name: str) -> str:
        """POSIX-style path relative to the scan root."""
        if not relative_dir:
            return name
        return Path(relative_dir, name).as_posix()

    def _is_skipped(self, name: str, relative_path: str, is_directory: bool) -> bool:
        if not self.config.include_hidden and name.startswith("."):
            return True
        return self.is_excluded(relative_path, is_directory)

    def is_excluded(self, relative_path: str, is_directory: bool = False) -> bool:
        """Check a root-relative path against the exclusion globs.

        A directory also matches "dir/**" style patterns so the whole
        subtree is pruned. A leading "**/" also matches zero directories.
        """
        for pattern in self.config.exclude_patterns:
            candidates = [pattern]
            if pattern.startswith("**/"):
                candidates.append(pattern[len("**/"):])

            for candidate in candidates:
                if fnmatchcase(relative_path, candidate):
                    return True
                if is_directory and candidate.endswith("/**"):
                    if fnmatchcase(relative_path, candidate[: -len("/**")]):
                        return True
        return False

    def _create_file_object(self, file_path: str, size: int) -> DiscoveredFile:
        """Create a DiscoveredFile from a path.

        Args:
            file_path: Path to the file
            size: File size in bytes

        Returns:
            DiscoveredFile with its category resolved
        """
        name = os.path.basename(file_path)
        extension = os.path.splitext(name)[1].lower()
        rule = categorize(extension, name, self.config.categories)

        return DiscoveredFile(
            original_path=file_path,
            filename=name,
            extension=extension,
            size=size,
            category=rule.name if rule else None,
            target_folder=rule.target_folder if rule else None,
        )

    def get_directory_stats(self) -> Dict:
        """Get statistics about the scanned directory.

        Returns:
            Dictionary with directory statistics
        """
        files = self.scan_directory()

        stats = {
            "total_files": len(files),
            "categorized_files": sum(1 for f in files if f.category),
            "total_size": sum(f.size for f in files),
            "by_extension": {},
        }

        for f in files:
            ext = f.extension or "(none)"
            stats["by_extension"][ext] = stats["by_extension"].get(ext, 0) + 1

        return stats


def scan(
    directory: str,
    config: OrganizerConfig,
    logger: Optional[logging.Logger] = None,
) -> List[DiscoveredFile]:
    """Scan a directory with the given configuration."""
    return FileSystemAccessor(directory, config, logger).scan_directory()
