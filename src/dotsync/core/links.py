"""Symlink reconciliation for managed dotfiles.

Every entry in the dotfiles directory is linked into the home directory.
Entries carrying a platform marker in their name (``_mac`` or ``_linux``) are
only linked on that platform; elsewhere any symlink left over at their target
is removed. Whatever already occupies a target is moved into the backup
directory before the link is created, replacing an older backup of the same
name.

Example:
    ```python
    from pathlib import Path
    from dotsync.core.links import reconcile

    result = reconcile(
        Path("~/.dotfiles").expanduser(),
        Path("~/.dotfiles_backup").expanduser(),
        Path.home(),
        "Linux",
    )
    print(result.applied, result.skipped)
    ```
"""

from __future__ import annotations

import enum
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, NamedTuple

from .config import LinkSettings
from .errors import ReconcileError

logger = logging.getLogger(__name__)


class Platform(enum.Enum):
    """Platform a managed file is restricted to."""

    ANY = "Any"
    DARWIN = "Darwin"
    LINUX = "Linux"

    def matches(self, system: str) -> bool:
        """Return True if a file with this tag belongs on ``system``."""
        return self is Platform.ANY or self.value == system


# Checked in order, first match wins
PLATFORM_MARKERS = (
    ("_mac", Platform.DARWIN),
    ("_linux", Platform.LINUX),
)


def platform_tag(name: str) -> Platform:
    """Classify a file name by its platform marker."""
    for marker, tag in PLATFORM_MARKERS:
        if marker in name:
            return tag
    return Platform.ANY


@dataclass(frozen=True)
class ManagedFile:
    """An entry of the dotfiles directory and the place it is linked to."""

    name: str
    source_path: Path
    target_path: Path

    @property
    def platform(self) -> Platform:
        return platform_tag(self.name)


class ReconcileResult(NamedTuple):
    applied: int
    skipped: int


def _is_present(path: Path) -> bool:
    # exists() is False for a dangling symlink
    return path.is_symlink() or path.exists()


def _points_to(link: Path, source: Path) -> bool:
    if not link.is_symlink():
        return False
    try:
        if Path(os.readlink(link)) == source:
            return True
        return link.resolve() == source.resolve()
    except (OSError, RuntimeError):
        # Symlink loop, older Pythons raise RuntimeError
        return False


class LinkManager:
    """Keeps the home directory's symlinks in line with the dotfiles directory.

    Attributes:
        settings (LinkSettings): Directories and platform to reconcile against.
    """

    def __init__(self, settings: LinkSettings):
        """Initialize the link manager."""
        self.settings = settings

    def managed_files(self) -> List[ManagedFile]:
        """List managed files in lexical order.

        Hidden entries such as the repository marker directory are not managed.
        """
        dotfiles_dir = Path(os.path.abspath(self.settings.dotfiles_dir))
        try:
            names = sorted(
                entry.name for entry in dotfiles_dir.iterdir() if not entry.name.startswith(".")
            )
        except OSError as e:
            raise ReconcileError(str(e), "scan") from e
        return [
            ManagedFile(
                name=name,
                source_path=dotfiles_dir / name,
                target_path=self.settings.home_dir / name,
            )
            for name in names
        ]

    def reconcile(self, dry_run: bool = False) -> ReconcileResult:
        """Link every managed file into the home directory.

        Args:
            dry_run: If True, only report what would be done.

        Returns:
            ReconcileResult: Number of files linked and number skipped by the
                platform filter.

        Raises:
            ReconcileError: On the first failing filesystem operation. Entries
                handled before the failure keep their new state.
        """
        if not self.settings.dotfiles_dir.is_dir():
            logger.warning("Dotfiles directory %s does not exist", self.settings.dotfiles_dir)
            return ReconcileResult(0, 0)

        applied = skipped = 0
        for managed in self.managed_files():
            if managed.platform.matches(self.settings.platform):
                self.apply(managed, dry_run=dry_run)
                applied += 1
            else:
                self.skip(managed, dry_run=dry_run)
                skipped += 1

        logger.info(
            "%s %d dotfiles, skipped %d for other platforms",
            "Would link" if dry_run else "Linked",
            applied,
            skipped,
        )
        return ReconcileResult(applied, skipped)

    def skip(self, managed: ManagedFile, dry_run: bool = False) -> None:
        """Remove a stale symlink left for a file meant for another platform."""
        target = managed.target_path
        if not target.is_symlink():
            logger.debug("Skipping %s (%s only)", managed.name, managed.platform.value)
            return

        if dry_run:
            logger.info("Would remove %s link %s", managed.platform.value, target)
            return
        try:
            target.unlink()
        except OSError as e:
            raise ReconcileError(str(e), f"remove {target}") from e
        logger.info("Removed %s link %s", managed.platform.value, target)

    def apply(self, managed: ManagedFile, dry_run: bool = False) -> None:
        """Back up whatever is in the way and link ``managed`` into place."""
        target = managed.target_path
        if _points_to(target, managed.source_path):
            logger.debug("%s already linked", target)
            return

        if _is_present(target):
            self.backup(managed, dry_run=dry_run)

        if dry_run:
            logger.info("Would link %s -> %s", target, managed.source_path)
            return
        try:
            target.symlink_to(managed.source_path)
        except OSError as e:
            raise ReconcileError(str(e), f"symlink {target}") from e
        logger.info("Linked %s -> %s", target, managed.source_path)

    def backup(self, managed: ManagedFile, dry_run: bool = False) -> Path:
        """Move the current occupant of a target into the backup directory.

        An earlier backup with the same name is replaced.

        Returns:
            Path: Location of the backup.
        """
        destination = self.settings.backup_dir / managed.name
        if dry_run:
            logger.warning("Would back up %s to %s", managed.target_path, destination)
            return destination
        logger.warning("Backing up %s to %s", managed.target_path, destination)

        try:
            self.settings.backup_dir.mkdir(parents=True, exist_ok=True)
            if _is_present(destination):
                if destination.is_dir() and not destination.is_symlink():
                    shutil.rmtree(destination)
                else:
                    destination.unlink()
            shutil.move(str(managed.target_path), str(destination))
        except OSError as e:
            raise ReconcileError(str(e), f"backup {managed.target_path}") from e
        return destination


def reconcile(
    dotfiles_dir: Path,
    backup_dir: Path,
    home_dir: Path,
    platform: str,
    dry_run: bool = False,
) -> ReconcileResult:
    """Reconcile symlinks for one dotfiles directory. See ``LinkManager.reconcile``."""
    settings = LinkSettings(
        dotfiles_dir=Path(dotfiles_dir),
        backup_dir=Path(backup_dir),
        home_dir=Path(home_dir),
        platform=platform,
    )
    return LinkManager(settings).reconcile(dry_run=dry_run)
