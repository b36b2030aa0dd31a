"""Logging setup for the command-line interface.

Library modules only call ``logging.getLogger(__name__)``; the CLI decides
where records go by calling ``configure_logging``.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "gql_resolvergen"


def configure_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Attach a RichHandler to the package logger.

    Args:
        verbose: Log DEBUG records instead of INFO and above
        console: Console to write to (defaults to stderr)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Only configure once per process
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            rich_tracebacks=True,
            show_time=False,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
