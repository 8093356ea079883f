"""Application-wide logging helpers for tourbook.

Library modules call ``get_logger(__name__)``; the CLI calls
``configure_logging`` once with the level picked by ``--verbose``. Records
go to stderr through rich so they never mix with command output.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

_configured = False


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure the package logger with a rich handler.

    Args:
        level: Logging level. Calling again only updates the level.
    """
    global _configured
    logger = logging.getLogger("tourbook")
    logger.setLevel(level)
    if _configured:
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        log_time_format="[%Y-%m-%d %H:%M:%S]",
    )
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))
    logger.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a module-specific logger."""
    return logging.getLogger(name)
