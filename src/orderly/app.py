"""
Main application controller for the file organization system.
Orchestrates all components and implements the command line interface.
"""

import os
import sys
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import click
from dotenv import find_dotenv, load_dotenv

from . import __version__
from .organization_logic.engine import OrganizationEngine, OrganizationReport
from .utils.config_manager import ConfigManager, OrganizerConfig
from .utils.error_handler import ErrorHandler
from .utils.logging_config import setup_logging
from .utils.report_generator import ManifestGenerator

logger = logging.getLogger(__name__)

MANIFEST_DIRECTORY = ".orderly"
RUN_LOG_FILE = "orderly.log"
LOG_LEVEL_CHOICES = ["debug", "info", "warn", "error"]


class FileOrganizerApp:
    """Main application controller that orchestrates file organization."""

    def __init__(
        self,
        config_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        manifest_dir: Optional[str] = None,
        run_log: bool = False,
    ):
        """Initialize the application with configuration.

        Args:
            config_file: Path to configuration file
            overrides: Dotted config paths set from the command line
            manifest_dir: Where manifests are written (defaults to .orderly
                under the working directory)
            run_log: Write the run log to orderly.log in the manifest
                directory when no log_file is configured
        """
        self.config_file = config_file
        self.overrides = overrides or {}
        self.manifest_dir = Path(manifest_dir or Path.cwd() / MANIFEST_DIRECTORY)
        self.run_log = run_log
        self.config_manager: Optional[ConfigManager] = None
        self.config: Optional[OrganizerConfig] = None
        self.logger = logger
        self.error_handler: Optional[ErrorHandler] = None
        self.engine: Optional[OrganizationEngine] = None
        self._is_initialized = False

    def initialize(self):
        """Load configuration, set up logging and build the engine."""
        if self._is_initialized:
            return

        load_dotenv(find_dotenv(usecwd=True))

        self.config_manager = ConfigManager(
            config_file=Path(self.config_file) if self.config_file else None,
            cli_overrides=self.overrides,
        )
        self.config = self.config_manager.to_organizer_config()

        log_file = self.config.log_file
        if not log_file and self.run_log:
            log_file = str(self.manifest_dir / RUN_LOG_FILE)
        self.logger = setup_logging(self.config.log_level, log_file)
        self.error_handler = ErrorHandler()
        self.engine = OrganizationEngine(self.config, self.logger, self.error_handler)

        self._is_initialized = True
        self.logger.debug("Application initialized successfully")

    def run(self, directory: str = ".") -> OrganizationReport:
        """Run the main application workflow.

        Args:
            directory: Directory to organize

        Returns:
            OrganizationReport describing the run
        """
        if not self._is_initialized:
            self.initialize()

        report = self.engine.organize(directory)

        if report.operations and self.config.generate_manifest and not self.config.dry_run:
            self._write_manifests(report)

        return report

    def _write_manifests(self, report: OrganizationReport):
        generator = ManifestGenerator(self.logger)
        manifest = generator.generate(report.result)

        json_path = self.manifest_dir / "manifest.json"
        markdown_path = self.manifest_dir / "manifest.md"
        generator.save(manifest, json_path)
        generator.save_markdown(manifest, markdown_path)

        report.manifest_paths = [str(json_path), str(markdown_path)]
        self.logger.info(f"Manifest files created in: {self.manifest_dir}")


@click.group()
@click.version_option(__version__, prog_name="orderly")
def cli():
    """A configurable tool for organizing files with naming conventions and full auditability."""


@cli.command()
@click.argument("directory", default=".")
@click.option("-c", "--config", "config_file", help="Path to config file")
@click.option("-d", "--dry-run", is_flag=True, help="Preview changes without applying them")
@click.option("--no-manifest", is_flag=True, help="Skip manifest generation")
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES),
    default=None,
    help="Log level",
)
@click.option("-o", "--output", help="Output directory for organized files")
def organize(
    directory: str,
    config_file: Optional[str],
    dry_run: bool,
    no_manifest: bool,
    log_level: Optional[str],
    output: Optional[str],
):
    """Organize files in a directory."""
    overrides: Dict[str, Any] = {"log_level": log_level}
    if dry_run:
        overrides["dry_run"] = True
    if no_manifest:
        overrides["generate_manifest"] = False
    if output:
        overrides["target_directory"] = os.path.abspath(output)

    click.echo("\nOrderly - File Organization Tool\n")

    try:
        app = FileOrganizerApp(
            config_file=config_file, overrides=overrides, run_log=True
        )
        app.initialize()
        report = app.run(directory)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"\nFiles scanned: {len(report.files)}")
    click.echo(f"Operations: {len(report.operations)}")
    click.echo(f"Successful: {report.result.success_count}")
    click.echo(f"Failed: {report.result.failure_count}")
    for path in report.manifest_paths:
        click.echo(f"Manifest: {path}")

    if report.has_failures:
        sys.exit(1)

    click.echo("\nOrganization complete!\n")


@cli.command()
@click.option(
    "-f",
    "--format",
    "config_format",
    type=click.Choice(["json", "yaml", "yml"], case_sensitive=False),
    default="yaml",
    help="Config file format",
)
def init(config_format: str):
    """Initialize a new configuration file."""
    filename = "orderly.config.json" if config_format.lower() == "json" else ".orderly.yml"
    config_path = Path.cwd() / filename

    if config_path.exists():
        click.echo(f"Config file already exists: {config_path}", err=True)
        sys.exit(1)

    ConfigManager.create_template(config_path)
    click.echo(f"✓ Created config file: {config_path}")


@cli.command()
@click.argument("directory", default=".")
@click.option("-c", "--config", "config_file", help="Path to config file")
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES),
    default=None,
    help="Log level",
)
def scan(directory: str, config_file: Optional[str], log_level: Optional[str]):
    """Scan a directory and show what would be organized."""
    click.echo("\nScanning directory...\n")

    try:
        app = FileOrganizerApp(
            config_file=config_file,
            overrides={"dry_run": True, "log_level": log_level},
        )
        app.initialize()
        target_dir = os.path.abspath(directory)
        files = app.engine.scan(target_dir)
        if not files:
            click.echo("No files found")
            return

        summary = app.engine.category_summary(files)
        operations = app.engine.plan(files, target_dir)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo("\nFile categories:")
    for category, count in summary.items():
        click.echo(f"  {category}: {count} files")

    counts = OrganizationEngine.count_by_kind(operations)
    click.echo(f"\nOperations needed: {len(operations)}")
    click.echo(f"  Move: {counts['move']}")
    click.echo(f"  Rename: {counts['rename']}")
    click.echo(f"  Move + Rename: {counts['move-and-rename']}")

    click.echo("\nScan complete!\n")


def main():
    """Main entry point for the application."""
    cli()


if __name__ == "__main__":
    main()
