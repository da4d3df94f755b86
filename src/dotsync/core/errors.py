"""Error types for dotsync.

Only fatal errors are represented here. Warnings are logged where they occur
and never raised. A ``FatalError`` travels up to the command line handler,
which logs it and terminates the process with status 1.
"""

from typing import Optional


class FatalError(RuntimeError):
    """An unrecoverable failure that ends the current run.

    Attributes:
        operation (Optional[str]): Short name of the operation that failed,
            e.g. ``"symlink"`` or ``"git pull"``.
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        """Initialize the error."""
        super().__init__(message)
        self.operation = operation

    def __str__(self) -> str:
        """Return the message prefixed with the failing operation."""
        message = super().__str__()
        if self.operation:
            return f"{self.operation}: {message}"
        return message


class ConfigError(FatalError):
    """Configuration could not be loaded or is invalid."""


class RepositoryError(FatalError):
    """The external repository tool failed."""


class ReconcileError(FatalError):
    """A filesystem operation failed while reconciling symlinks."""
