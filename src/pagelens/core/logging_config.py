"""Structured logging setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pagelens.core.models.config import LogConfig


def configure_logging(config: LogConfig | None = None) -> None:
    """Configure structlog for the process.

    Args:
        config: Logging configuration; defaults to INFO with JSON output
    """
    from pagelens.core.models.config import LogConfig

    config = config or LogConfig()
    level = logging.getLevelName(config.level)

    renderer: structlog.types.Processor
    if config.structured:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
