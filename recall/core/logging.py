"""Structured logging for the cache engine.

recall is a library, so configure_logging() only takes over the "recall"
logger hierarchy: handlers are attached there, propagation to the root logger
is switched off, and the host application's own logging is left alone.
Adapters log through loggers bound with their adapter name; callers can add
request-scoped fields with structlog.contextvars.bind_contextvars().
"""

import logging
import sys
from pathlib import Path
from typing import Any, List

import structlog

from recall.core.config import Settings

PACKAGE_LOGGER = "recall"

_SHARED_PROCESSORS: List[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.StackInfoRenderer(),
]


def _timestamper(settings: Settings) -> structlog.processors.TimeStamper:
    return structlog.processors.TimeStamper(fmt="iso" if settings.log_format == "json" else "%H:%M:%S")


def _build_formatter(settings: Settings) -> structlog.stdlib.ProcessorFormatter:
    if settings.log_format == "json":
        render = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        render = [structlog.dev.ConsoleRenderer(
            colors=False,
            pad_event=35,
            exception_formatter=structlog.dev.plain_traceback
        )]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[*_SHARED_PROCESSORS, _timestamper(settings)],
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render],
    )


def configure_logging(settings: Settings) -> logging.Logger:
    """Route recall's log events to stdout (and optionally a file).

    Safe to call again: handlers installed by a previous call are replaced.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    formatter = _build_formatter(settings)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            _timestamper(settings),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return package_logger


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_cache_operation(logger: structlog.BoundLogger, operation: str,
                        key: Any, hit: bool = None, **kwargs) -> None:
    """Emit a debug event named cache.<operation>, e.g. cache.get with outcome=miss."""
    if hit is not None:
        kwargs["outcome"] = "hit" if hit else "miss"
    logger.debug(f"cache.{operation}", cache_key=key, **kwargs)
