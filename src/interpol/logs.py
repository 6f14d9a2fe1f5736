"""Logging setup for applications embedding interpol"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the `interpol` logger.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose: INFO level
    - Debug (INTERPOL_DEBUG=1): DEBUG level - segment counts, evaluator
      creation, recovered evaluation failures
    """
    debug = bool(os.environ.get("INTERPOL_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("interpol")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False
    return logger
