"""Logging configuration for dotsync.

Every action is reported to the console through rich and to the system log,
tagged with a fixed identifier so that messages can be found with
``journalctl -t dotsync`` or in ``/var/log/system.log``.

Example:
    ```python
    from dotsync.core.logging import setup_logging

    setup_logging(debug=True, log_file="~/logs/dotsync.log")

    import logging
    logger = logging.getLogger(__name__)
    logger.info("Linked %s", "bashrc")
    ```
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from types import TracebackType
from typing import Optional, Type

from rich.console import Console
from rich.logging import RichHandler

# Create console for rich output
console = Console()

SYSLOG_SOCKETS = ("/dev/log", "/var/run/syslog")


def find_syslog_socket() -> Optional[str]:
    """Return the local syslog socket path, or None when there is none."""
    for candidate in SYSLOG_SOCKETS:
        if Path(candidate).exists():
            return candidate
    return None


def setup_logging(
    debug: bool = False,
    log_file: Optional[str] = None,
    tag: str = "dotsync",
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    syslog: bool = True,
) -> None:
    """Set up logging configuration.

    Console output uses rich formatting. System log output is prefixed with
    ``tag``. The file handler, when enabled, always records debug messages.

    Args:
        debug: Whether to enable debug logging (default: False).
        log_file: Optional path to log file. The path is expanded to handle ~.
        tag: Identifier attached to every system log message.
        log_format: Format string for file log messages.
        syslog: Whether to attach the system log handler.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        handler.close()
    root_logger.handlers.clear()

    console_handler = RichHandler(
        console=console,
        show_path=debug,
        enable_link_path=debug,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=debug,
    )
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.addHandler(console_handler)

    logger = logging.getLogger(__name__)

    if syslog:
        address = find_syslog_socket()
        if address:
            syslog_handler = logging.handlers.SysLogHandler(address=address)
            syslog_handler.setLevel(logging.INFO)
            syslog_handler.setFormatter(logging.Formatter(f"{tag}: %(levelname)s %(message)s"))
            root_logger.addHandler(syslog_handler)
        else:
            logger.debug("No syslog socket found, system log disabled")

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)  # Always log debug to file
        file_handler.setFormatter(logging.Formatter(log_format))
        root_logger.addHandler(file_handler)

    logger.debug("Logging initialized (debug=%s)", debug)
    if log_file:
        logger.debug("Log file: %s", log_file)

    def handle_exception(
        exc_type: Type[BaseException],
        exc_value: BaseException,
        exc_traceback: Optional[TracebackType],
    ) -> None:
        """Handle uncaught exceptions by logging them."""
        if issubclass(exc_type, KeyboardInterrupt):
            # Don't log keyboard interrupt
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        logger.critical(
            "Uncaught exception",
            exc_info=(exc_type, exc_value, exc_traceback),
        )

    sys.excepthook = handle_exception
