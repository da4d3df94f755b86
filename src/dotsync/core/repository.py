"""Repository functionality for dotsync."""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from .errors import RepositoryError

logger = logging.getLogger(__name__)


class DotfilesRepository:
    """The dotfiles repository, driven through an external tool.

    The tool (``git`` by default) is treated as a black box: success and
    failure are read from its exit status and its output is never parsed.

    Attributes:
        path (Path): Working tree of the repository.
        tool (str): Executable invoked for every operation.
        remote_url (Optional[str]): Remote used by ``clone``.
        marker (str): Directory whose presence means the repository exists.
    """

    def __init__(
        self,
        path: Path,
        tool: str = "git",
        remote_url: Optional[str] = None,
        marker: str = ".git",
    ):
        """Initialize repository."""
        self.path = Path(path).expanduser()
        self.tool = tool
        self.remote_url = remote_url
        self.marker = marker

    def __str__(self) -> str:
        """Return string representation."""
        return f"DotfilesRepository({self.path})"

    def __repr__(self) -> str:
        """Return string representation."""
        return self.__str__()

    def exists(self) -> bool:
        """Check if the repository marker directory is present."""
        return (self.path / self.marker).is_dir()

    def _run(self, *args: str, cwd: Optional[Path] = None) -> str:
        """Run the repository tool and return its output.

        Raises:
            RepositoryError: If the tool cannot be started or exits non-zero.
        """
        operation = f"{self.tool} {args[0]}"
        logger.debug("Running %s %s", self.tool, " ".join(args))
        try:
            result = subprocess.run(
                [self.tool, *args],
                cwd=cwd or self.path,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise RepositoryError(f"Cannot run {self.tool}: {e}", operation) from e
        except subprocess.CalledProcessError as e:
            if e.stderr:
                raise RepositoryError(e.stderr.strip(), operation) from e
            if e.stdout:
                raise RepositoryError(e.stdout.strip(), operation) from e
            raise RepositoryError(f"failed with exit status {e.returncode}", operation) from e
        return result.stdout.rstrip()

    def clone(self, remote_url: Optional[str] = None) -> None:
        """Clone the remote into the repository path.

        Args:
            remote_url: Remote to clone. Defaults to ``self.remote_url``.

        Raises:
            RepositoryError: If no remote is known or the clone fails.
        """
        url = remote_url or self.remote_url
        if not url:
            raise RepositoryError("No remote URL configured", f"{self.tool} clone")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RepositoryError(
                f"Cannot create {self.path.parent}: {e}", f"{self.tool} clone"
            ) from e
        logger.info("Cloning %s into %s", url, self.path)
        self._run("clone", url, str(self.path), cwd=self.path.parent)

    def add(self, pattern: str = ".") -> None:
        """Stage files matching ``pattern``."""
        logger.info("Adding %s", pattern)
        self._run("add", pattern)

    def commit(self, message: str) -> bool:
        """Commit staged changes.

        Args:
            message: Commit message describing the changes.

        Returns:
            bool: False if there was nothing to commit.

        Raises:
            RepositoryError: If the commit fails for any other reason.
        """
        try:
            self._run("commit", "-m", message)
        except RepositoryError as e:
            if "nothing to commit" in str(e) or "nothing added to commit" in str(e):
                logger.warning("Nothing to commit")
                return False
            raise
        logger.info("Committed: %s", message)
        return True

    def push(self) -> None:
        """Push committed changes to the remote."""
        logger.info("Pushing changes")
        self._run("push")

    def pull(self) -> None:
        """Pull changes from the remote."""
        logger.info("Pulling changes")
        self._run("pull")

    def status(self) -> str:
        """Return the tool's status output verbatim."""
        return self._run("status")

    def reset_hard(self) -> None:
        """Discard every local change to tracked files."""
        logger.warning("Resetting %s to HEAD", self.path)
        self._run("reset", "--hard")
