"""Logging configuration.

Log records go to stderr through Rich so stdout stays free for the
launcher's JSON. The background refresh has its stderr redirected to a
job log file, which makes that file its error channel.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


LOG_FORMAT = "%(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Install a Rich handler on the honeyfind logger.

    Safe to call more than once; the handler is only added the first time.

    Args:
        verbose: Log at DEBUG instead of INFO.
    """
    logger = logging.getLogger("honeyfind")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="[%X]"))
    logger.addHandler(handler)
