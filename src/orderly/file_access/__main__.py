"""
Command line interface for file access module.
"""

import click
import logging
from .local_accessor import FileSystemAccessor
from ..utils.config_manager import ConfigManager
from ..utils.file_utils import human_readable_size

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


@click.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("-c", "--config", "config_file", help="Path to config file")
@click.option("--categorized-only", is_flag=True, help="Show only categorized files")
@click.option("--stats", is_flag=True, help="Show directory statistics")
def scan(directory: str, config_file: str, categorized_only: bool, stats: bool):
    """Scan a directory and list files."""
    config = ConfigManager(config_file=config_file).to_organizer_config()
    accessor = FileSystemAccessor(directory, config)

    if stats:
        dir_stats = accessor.get_directory_stats()
        click.echo(f"\nDirectory Statistics for: {directory}")
        click.echo(f"Total files: {dir_stats['total_files']}")
        click.echo(f"Categorized files: {dir_stats['categorized_files']}")
        click.echo(f"Total size: {human_readable_size(dir_stats['total_size'])}")

        click.echo("\nFiles by extension:")
        for ext, count in sorted(dir_stats["by_extension"].items()):
            click.echo(f"  {ext}: {count}")

    else:
        files = accessor.scan_directory()
        if categorized_only:
            files = [f for f in files if f.category]

        click.echo(f"\nFiles in {directory}:")
        for file in files:
            size = human_readable_size(file.size)
            category = f"[{file.category}]" if file.category else "[uncategorized]"
            click.echo(f"  {file.filename} - {size} {category}")

        click.echo(f"\nTotal: {len(files)} files")


if __name__ == "__main__":
    scan()
