"""Interactive menu for dotsync."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from .config import Config
from .errors import ReconcileError
from .links import LinkManager, ReconcileResult
from .repository import DotfilesRepository

logger = logging.getLogger(__name__)

DEFAULT_COMMIT_MESSAGE = "Update dotfiles"
EXIT_CHOICE = "6"


def ensure_directory(path: Path) -> None:
    """Create ``path`` if it does not exist yet."""
    if path.is_dir():
        return
    logger.warning("Directory %s does not exist, creating it", path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ReconcileError(str(e), f"mkdir {path}") from e


class MenuManager:
    """Runs the interactive menu.

    Every action except status reconciles the home directory's symlinks
    before or after handing off to the repository tool. Fatal errors are not
    caught here.
    """

    def __init__(
        self,
        config: Config,
        repository: Optional[DotfilesRepository] = None,
        link_manager: Optional[LinkManager] = None,
        console: Optional[Console] = None,
    ) -> None:
        """Initialize the menu manager."""
        self.config = config
        self.repository = repository or DotfilesRepository(
            config.dotfiles_dir,
            tool=config.tool,
            remote_url=config.remote_url,
            marker=config.repo_marker,
        )
        self.link_manager = link_manager or LinkManager(config.link_settings())
        self.console = console or Console()
        self.actions: Dict[str, Tuple[str, Callable[[], None]]] = {
            "1": ("Add files", self.add),
            "2": ("Commit and push", self.commit_and_push),
            "3": ("Pull", self.pull),
            "4": ("Status", self.status),
            "5": ("Reset (discard local changes)", self.reset),
        }

    def ensure_setup(self) -> None:
        """Make sure the backup directory and the repository exist."""
        ensure_directory(self.config.backup_dir)
        if self.repository.exists():
            return
        if self.repository.remote_url:
            self.repository.clone()
            return
        logger.warning(
            "No repository found in %s and no remote_url configured", self.config.dotfiles_dir
        )
        ensure_directory(self.config.dotfiles_dir)

    def reconcile(self) -> ReconcileResult:
        return self.link_manager.reconcile()

    def render(self) -> None:
        """Print the menu."""
        table = Table(title="Dotfiles", show_header=False)
        table.add_column("Choice", style="cyan")
        table.add_column("Action")
        for key, (label, _) in self.actions.items():
            table.add_row(key, label)
        table.add_row(EXIT_CHOICE, "Exit")
        self.console.print(table)

    def run(self) -> int:
        """Read, dispatch, repeat until the operator exits.

        Returns:
            int: Exit status, 0 on a normal exit.
        """
        while True:
            self.render()
            try:
                choice = click.prompt("Choose an option", default="", show_default=False)
            except click.Abort:
                # End of input
                self.console.print()
                return 0
            choice = choice.strip()
            if choice == EXIT_CHOICE:
                logger.info("Exiting")
                return 0
            if choice not in self.actions:
                logger.warning("Invalid choice %r, pick a number from 1 to %s", choice, EXIT_CHOICE)
                continue
            label, action = self.actions[choice]
            logger.debug("Selected %s", label)
            action()

    def add(self) -> None:
        """Stage files, then relink."""
        pattern = click.prompt("Path or glob to add", default=".")
        self.repository.add(pattern)
        self.reconcile()

    def commit_and_push(self) -> None:
        """Relink, then commit everything and push."""
        message = click.prompt("Commit message", default=DEFAULT_COMMIT_MESSAGE)
        self.reconcile()
        self.repository.add(".")
        self.repository.commit(message)
        # Earlier unpushed commits still go out when there was nothing new
        self.repository.push()

    def pull(self) -> None:
        self.repository.pull()
        self.reconcile()

    def status(self) -> None:
        output = self.repository.status()
        self.console.print(output, markup=False, highlight=False)

    def reset(self) -> None:
        """Hard-reset the repository after confirmation, then relink."""
        if not click.confirm("Discard all local changes in the dotfiles repository?", default=False):
            logger.info("Reset cancelled")
            return
        self.repository.reset_hard()
        self.reconcile()
