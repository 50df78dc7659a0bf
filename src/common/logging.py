"""Structured logging setup shared by every layer.

structlog is configured on top of the standard ``logging`` module so that
libraries logging through ``logging.getLogger`` and our own structlog loggers
end up in the same handler.
"""

import logging
import sys

from typing import Any

import structlog


_configured = False


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    *,
    force: bool = False,
) -> None:
    """Configure stdlib logging and structlog.

    Args:
        log_level: Root log level name (DEBUG, INFO, ...)
        json_format: Render JSON lines instead of the console renderer
        force: Reconfigure even if logging was already set up
    """
    global _configured
    if _configured and not force:
        return

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=force,
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger bound to ``name``.

    Args:
        name: Logger name, usually ``__name__``
        **initial_values: Key-value pairs bound to every event

    Returns:
        structlog BoundLogger
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger
