# execledger/logging_config.py
"""
Logging setup for the execledger CLI and scripts.

Library modules only call logging.getLogger(__name__); handlers are installed
here, once, by whoever owns the process.
"""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from execledger.config import LedgerSettings

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logging(level: Optional[str] = None, console: Optional[Console] = None) -> None:
    """Configure the execledger logger with a rich handler (stderr by default)."""
    name = (level or LedgerSettings.from_env().log_level).upper()

    logger = logging.getLogger("execledger")
    logger.setLevel(LEVELS.get(name, logging.WARNING))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
