"""Test configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

from dotsync.core.config import Config, LinkSettings
from dotsync.core.errors import RepositoryError


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory so no real configuration is read."""
    home = tmp_path / "real_home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    return home


@pytest.fixture
def link_settings(tmp_path: Path) -> LinkSettings:
    """Create dotfiles, backup and home directories for a Linux machine."""
    dotfiles_dir = tmp_path / "dotfiles"
    home_dir = tmp_path / "home"
    dotfiles_dir.mkdir()
    home_dir.mkdir()
    return LinkSettings(
        dotfiles_dir=dotfiles_dir,
        backup_dir=tmp_path / "backup",
        home_dir=home_dir,
        platform="Linux",
    )


@pytest.fixture
def config_data(link_settings: LinkSettings) -> Dict[str, Any]:
    """Configuration values matching ``link_settings``."""
    return {
        "dotfiles_dir": str(link_settings.dotfiles_dir),
        "backup_dir": str(link_settings.backup_dir),
        "home_dir": str(link_settings.home_dir),
        "platform": link_settings.platform,
    }


@pytest.fixture
def test_config(config_data: Dict[str, Any]) -> Config:
    """Create a test configuration rooted in the temporary directory."""
    config = Config()
    config.load_from_dict(config_data)
    return config


def create_dotfiles(directory: Path, *names: str) -> None:
    """Create managed files whose content is their own name."""
    for name in names:
        (directory / name).write_text(name)


class FakeRepository:
    """Stands in for the repository tool and records every call."""

    def __init__(
        self,
        present: bool = True,
        remote_url: Optional[str] = None,
        fail_on: Optional[str] = None,
    ) -> None:
        self.present = present
        self.remote_url = remote_url
        self.fail_on = fail_on
        self.calls: List[Tuple[str, ...]] = []

    def _record(self, *call: str) -> None:
        self.calls.append(call)
        if call[0] == self.fail_on:
            raise RepositoryError("simulated failure", f"git {call[0]}")

    def exists(self) -> bool:
        return self.present

    def clone(self, remote_url: Optional[str] = None) -> None:
        self._record("clone", remote_url or self.remote_url or "")
        self.present = True

    def add(self, pattern: str = ".") -> None:
        self._record("add", pattern)

    def commit(self, message: str) -> bool:
        self._record("commit", message)
        return True

    def push(self) -> None:
        self._record("push")

    def pull(self) -> None:
        self._record("pull")

    def status(self) -> str:
        self._record("status")
        return "On branch main\nnothing to commit, working tree clean"

    def reset_hard(self) -> None:
        self._record("reset_hard")


@pytest.fixture
def fake_repo() -> FakeRepository:
    """Create a repository stand-in that already exists."""
    return FakeRepository()
