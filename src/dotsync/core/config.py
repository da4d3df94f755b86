"""Configuration management for dotsync."""

from __future__ import annotations

import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_FILE = Path("~/.config/dotsync/config.yaml")

DEFAULT_CONFIG: Dict[str, Any] = {
    "dotfiles_dir": "~/.dotfiles",
    "backup_dir": "~/.dotfiles_backup",
    "home_dir": "~",
    "remote_url": None,
    "tool": "git",
    "repo_marker": ".git",
    "log_tag": "dotsync",
    "log_file": None,
    "platform": None,
}

PATH_KEYS = ("dotfiles_dir", "backup_dir", "home_dir")
STRING_KEYS = ("tool", "repo_marker", "log_tag")
OPTIONAL_STRING_KEYS = ("remote_url", "log_file", "platform")


@dataclass(frozen=True)
class LinkSettings:
    """Everything the symlink reconciler needs to know about its environment."""

    dotfiles_dir: Path
    backup_dir: Path
    home_dir: Path
    platform: str


class Config:
    """Configuration class for dotsync.

    Values start from ``DEFAULT_CONFIG`` and are overridden by an optional
    YAML file. Path values are expanded with ``~`` support.

    Attributes:
        dotfiles_dir (Path): Directory holding the managed files (the repository).
        backup_dir (Path): Directory receiving files displaced by new symlinks.
        home_dir (Path): Directory in which symlinks are created.
        remote_url (Optional[str]): Remote cloned when the repository is missing.
        tool (str): Executable of the external repository tool.
        repo_marker (str): Directory whose presence marks an existing repository.
        log_tag (str): Identifier attached to system log messages.
        log_file (Optional[str]): Optional log file path.
        platform (str): Platform name compared against ``_mac``/``_linux`` markers.
    """

    def __init__(self, config_file: Optional[Path] = None) -> None:
        """Initialize configuration."""
        self.config: Dict[str, Any] = {}
        self.dotfiles_dir: Path = Path()
        self.backup_dir: Path = Path()
        self.home_dir: Path = Path()
        self.remote_url: Optional[str] = None
        self.tool: str = "git"
        self.repo_marker: str = ".git"
        self.log_tag: str = "dotsync"
        self.log_file: Optional[str] = None
        self.platform: str = platform.system()
        self.load_config(config_file)

    def load_config(self, config_file: Optional[Path] = None) -> None:
        """Load configuration from file.

        Args:
            config_file: YAML file to merge over the defaults. When omitted, the
                default location is used if it exists.

        Raises:
            ConfigError: If the file cannot be read or parsed, or holds invalid values.
        """
        self._merge_config(DEFAULT_CONFIG)

        if config_file is None:
            default_file = DEFAULT_CONFIG_FILE.expanduser()
            if not default_file.is_file():
                return
            config_file = default_file

        config_path = Path(config_file).expanduser()
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config file {config_path}: {e}", "config")
        if user_config:
            self._merge_config(user_config)

    def _merge_config(self, config: Dict[str, Any]) -> None:
        """Merge configuration with current configuration."""
        if not isinstance(config, dict):
            raise ConfigError("Configuration must be a dictionary", "config")

        unknown = sorted(set(config) - set(DEFAULT_CONFIG))
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}", "config")

        self.config.update(config)

        for key in PATH_KEYS:
            if key in config:
                if not isinstance(config[key], str):
                    raise ConfigError(f"{key} must be a string", "config")
                setattr(self, key, Path(config[key]).expanduser())

        for key in STRING_KEYS:
            if key in config:
                if not isinstance(config[key], str) or not config[key]:
                    raise ConfigError(f"{key} must be a non-empty string", "config")
                setattr(self, key, config[key])

        for key in OPTIONAL_STRING_KEYS:
            if key in config:
                if config[key] is not None and not isinstance(config[key], str):
                    raise ConfigError(f"{key} must be a string", "config")

        if "remote_url" in config:
            self.remote_url = config["remote_url"]
        if "log_file" in config:
            self.log_file = config["log_file"]
        if "platform" in config:
            # None means the platform we are running on
            self.platform = config["platform"] or platform.system()

    def validate(self) -> List[str]:
        """Validate configuration."""
        errors = []

        for key in PATH_KEYS:
            path = getattr(self, key)
            if not isinstance(path, Path):
                errors.append(f"{key} must be a path")

        if self.dotfiles_dir == self.home_dir:
            errors.append("dotfiles_dir must differ from home_dir")
        if self.backup_dir == self.home_dir:
            errors.append("backup_dir must differ from home_dir")
        if self.backup_dir == self.dotfiles_dir:
            errors.append("backup_dir must differ from dotfiles_dir")

        for key in STRING_KEYS:
            if not getattr(self, key):
                errors.append(f"{key} must not be empty")

        return errors

    def link_settings(self) -> LinkSettings:
        """Build the settings value handed to the symlink reconciler."""
        return LinkSettings(
            dotfiles_dir=self.dotfiles_dir,
            backup_dir=self.backup_dir,
            home_dir=self.home_dir,
            platform=self.platform,
        )

    def load_from_dict(self, config_data: Dict[str, Any]) -> None:
        """Load configuration from a dictionary.

        Args:
            config_data: Dictionary containing configuration data.

        Example:
            ```python
            config = Config()
            config.load_from_dict({
                "dotfiles_dir": "~/src/dotfiles",
                "remote_url": "git@github.com:me/dotfiles.git",
            })
            ```
        """
        self._merge_config(config_data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value.

        Args:
            key: The configuration key to get.
            default: The default value to return if the key is not found.

        Returns:
            The configuration value, or the default if not found.
        """
        return self.config.get(key, default)
