"""
Manifest generation for the file organization process.
Records every executed operation as JSON and as a markdown report.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from . import file_utils
from ..file_access.manipulator import ExecutionResult, OperationFailure
from ..organization_logic.planner import FileOperation

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class ManifestEntry:
    """Outcome of a single operation."""

    timestamp: str
    operation: FileOperation
    status: str
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        entry = {
            "timestamp": self.timestamp,
            "operation": self.operation.to_dict(),
            "status": self.status,
        }
        if self.error is not None:
            entry["error"] = self.error
        return entry


@dataclass(frozen=True)
class Manifest:
    """Record of one organizer run."""

    generated_at: str
    total_operations: int
    successful: int
    failed: int
    entries: Tuple[ManifestEntry, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "totalOperations": self.total_operations,
            "successful": self.successful,
            "failed": self.failed,
            "entries": [entry.to_dict() for entry in self.entries],
        }


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def build_manifest(
    result: ExecutionResult, failures: Sequence[OperationFailure]
) -> Manifest:
    """
    Build a manifest from an execution result.

    All entries share one timestamp. An operation is marked failed when its
    source path appears in the failures.

    Args:
        result: Result returned by the executor
        failures: Failed operations keyed by source path

    Returns:
        Manifest describing the run
    """
    timestamp = _timestamp()
    errors: Dict[str, str] = {}
    for failure in failures:
        errors.setdefault(failure.source_path, failure.error_message)

    entries = []
    for operation in result.operations:
        error = errors.get(operation.source_path)
        entries.append(
            ManifestEntry(
                timestamp=timestamp,
                operation=operation,
                status=STATUS_FAILED if error is not None else STATUS_SUCCESS,
                error=error,
            )
        )

    return Manifest(
        generated_at=timestamp,
        total_operations=len(result.operations),
        successful=result.success_count,
        failed=result.failure_count,
        entries=tuple(entries),
    )


def format_manifest(manifest: Manifest) -> str:
    """Render a manifest as markdown."""
    lines = ["# Orderly File Organization Manifest\n"]
    lines.append(f"**Generated:** {manifest.generated_at}\n")
    lines.append(f"**Total Operations:** {manifest.total_operations}")
    lines.append(f"**Successful:** {manifest.successful}")
    lines.append(f"**Failed:** {manifest.failed}\n")

    if manifest.entries:
        lines.append("## Operations\n")
        lines.extend(_format_entries(manifest.entries))

    return "\n".join(lines)


def _format_entries(entries: Sequence[ManifestEntry]) -> List[str]:
    lines = []
    for entry in entries:
        marker = "✓" if entry.status == STATUS_SUCCESS else "✗"
        lines.append(f"### {marker} {entry.operation.kind.value.upper()}")
        lines.append(f"- **From:** `{entry.operation.source_path}`")
        lines.append(f"- **To:** `{entry.operation.destination_path}`")
        lines.append(f"- **Reason:** {entry.operation.reason}")
        if entry.error:
            lines.append(f"- **Error:** {entry.error}")
        lines.append("")
    return lines


class ManifestGenerator:
    """Generate and save manifests for organizer runs."""

    def __init__(self, manifest_logger: Optional[logging.Logger] = None):
        """
        Initialize manifest generator.

        Args:
            manifest_logger: Optional logger, defaults to the module logger
        """
        self.logger = manifest_logger or logger

    def generate(
        self,
        result: ExecutionResult,
        failures: Optional[Sequence[OperationFailure]] = None,
    ) -> Manifest:
        """Build a manifest, using the result's own failures by default."""
        if failures is None:
            failures = result.failures
        return build_manifest(result, failures)

    def save(self, manifest: Manifest, output_path: Path):
        """Save the manifest as pretty-printed JSON."""
        content = json.dumps(manifest.to_dict(), indent=2, ensure_ascii=False)
        file_utils.write_text(output_path, content)
        self.logger.info(f"Manifest saved to {output_path}")

    def save_markdown(self, manifest: Manifest, output_path: Path):
        """Save the manifest as a markdown report."""
        file_utils.write_text(output_path, format_manifest(manifest))
        self.logger.info(f"Markdown manifest saved to {output_path}")
