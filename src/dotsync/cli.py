"""Command line interface for dotsync."""

import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
from rich.console import Console

from .core.config import Config
from .core.errors import FatalError
from .core.links import LinkManager
from .core.logging import setup_logging
from .core.menu import MenuManager

console = Console()
logger = logging.getLogger(__name__)


def fail(error: FatalError) -> NoReturn:
    """Log a fatal error and terminate with status 1."""
    logger.critical("Fatal error: %s", error)
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file (defaults to ~/.config/dotsync/config.yaml)",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[Path], debug: bool) -> None:
    """Dotfiles repository manager.

    Keeps a dotfiles repository checked out, links its files into your home
    directory and wraps the common repository operations in a menu.

    Run without a command to open the interactive menu:

    \b
      1  Add files
      2  Commit and push
      3  Pull
      4  Status
      5  Reset (discard local changes)
      6  Exit

    Files whose names contain _mac or _linux are only linked on that
    platform. Anything already present at a link's location is moved to the
    backup directory first.

    Examples:

      # Open the menu
      dotsync

      # Use a specific configuration file
      dotsync --config ~/dotfiles.yaml

      # Relink without the menu, showing what would change
      dotsync link --dry-run
    """
    setup_logging(debug=debug)
    try:
        config = Config(config_file)
    except FatalError as e:
        fail(e)
    setup_logging(debug=debug, log_file=config.log_file, tag=config.log_tag)

    errors = config.validate()
    if errors:
        for error in errors:
            logger.critical("Invalid configuration: %s", error)
        sys.exit(1)

    ctx.obj = config
    if ctx.invoked_subcommand is not None:
        return

    manager = MenuManager(config, console=console)
    try:
        manager.ensure_setup()
        status = manager.run()
    except FatalError as e:
        fail(e)
    ctx.exit(status)


@cli.command()
@click.option("--dry-run", is_flag=True, help="Show what would be linked without changing anything")
@click.pass_obj
def link(config: Config, dry_run: bool) -> None:
    """Link every dotfile into the home directory.

    Existing files at the link locations are moved to the backup directory,
    replacing earlier backups with the same name.
    """
    try:
        result = LinkManager(config.link_settings()).reconcile(dry_run=dry_run)
    except FatalError as e:
        fail(e)
    console.print(f"[green]Linked: {result.applied}[/green]  [yellow]Skipped: {result.skipped}[/yellow]")


def main() -> None:
    """Entry point for the dotsync CLI."""
    cli()


if __name__ == "__main__":
    main()
