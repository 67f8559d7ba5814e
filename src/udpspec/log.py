"""structlog setup for udpspec.

Library modules only call ``structlog.get_logger(__name__)``; applications (and
the CLI) call setup_logging() once to route events through stdlib logging.
"""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(level: str = "WARNING", fmt: str = "console") -> structlog.stdlib.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        level: Log level name (``DEBUG``, ``INFO``, ...)
        fmt: ``json`` for one JSON object per line, anything else for console output

    Returns:
        A logger bound to the ``udpspec`` name
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)

    renderer: structlog.types.Processor
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger("udpspec")
