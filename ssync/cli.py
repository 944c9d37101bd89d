"""CLI interface for ssync."""

import logging
from typing import Any

import click

from . import __version__
from .exceptions import SSyncConfigError, SSyncError, SyncCancelled
from .output import OutputFormatter
from .sync import DEFAULT_CONFIG_FILE, DecisionResult, SyncEngine, load_sync_context

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--file",
    "-f",
    "config_file",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Path to the sync configuration file",
)
@click.option(
    "--yes", "-y", is_flag=True, help="Apply changes without asking for confirmation"
)
@click.option(
    "--dry-run", is_flag=True, help="Show what would be done without changing anything"
)
@click.option(
    "--workers",
    "-j",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of parallel workers for copying and deleting",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(version=__version__, prog_name="ssync")
@click.pass_context
def main(
    ctx: Any,
    config_file: str,
    yes: bool,
    dry_run: bool,
    workers: int,
    quiet: bool,
    verbose: bool,
) -> None:
    """ssync - Mirror a source directory onto a destination directory.

    Files and folders missing from the destination are added, files whose
    content changed are updated, and entries no longer present in the source
    are deleted from the destination. The source is never modified.

    Configuration (YAML):

    \b
        from:
          path: /data/photos
          exclude: ["\\.tmp$"]
        to:
          path: /backup/photos
        recursive: true

    Examples:

    \b
        ssync                        # Use ./ssync.yml
        ssync -f backup.yml          # Use another configuration file
        ssync --dry-run              # Preview changes
        ssync -y -j 4                # Apply without asking, 4 workers
    """
    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("ssync").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    out = OutputFormatter(quiet=quiet)

    try:
        context = load_sync_context(config_file)
    except SSyncConfigError as e:
        out.error(f"Invalid configuration: {e}")
        ctx.exit(1)
        return  # Unreachable, but helps type checker

    def confirm(result: DecisionResult) -> bool:
        if yes:
            return True
        return click.confirm(
            f"Apply {result.total_count()} change(s) to {context.to_path.path}?",
            default=False,
        )

    engine = SyncEngine(out)

    try:
        engine.sync(context, dry_run=dry_run, confirm=confirm, max_workers=workers)
    except SyncCancelled:
        out.warning("Sync cancelled.")
        ctx.exit(0)
    except KeyboardInterrupt:
        out.warning("\nSync cancelled by user")
        ctx.exit(1)
    except SSyncError as e:
        out.error(str(e))
        ctx.exit(1)


if __name__ == "__main__":
    main()
