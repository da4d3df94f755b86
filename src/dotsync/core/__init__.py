"""Core functionality for dotsync."""

from .config import Config, LinkSettings
from .errors import ConfigError, FatalError, ReconcileError, RepositoryError
from .links import LinkManager, Platform, ReconcileResult, reconcile
from .menu import MenuManager
from .repository import DotfilesRepository

__all__ = [
    "Config",
    "ConfigError",
    "DotfilesRepository",
    "FatalError",
    "LinkManager",
    "LinkSettings",
    "MenuManager",
    "Platform",
    "ReconcileError",
    "ReconcileResult",
    "RepositoryError",
    "reconcile",
]
