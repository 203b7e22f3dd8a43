"""Logging setup for command-line entry points.

Library modules only create named loggers (``pipeweave.server``,
``pipeweave.pipeline``, ...). Handlers are installed here, and only by
the CLI, so embedding apps keep control of their own logging.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "info") -> None:
    """Send ``pipeweave`` and app logs to stderr at *level*."""
    numeric = logging.getLevelNamesMapping().get(level.upper())
    if numeric is None:
        msg = f"Unknown log level {level!r}"
        raise ValueError(msg)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(numeric)
