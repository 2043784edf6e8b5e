"""Structured logging routed through the secret sanitizer."""

from __future__ import annotations

import logging
from typing import Iterable

import structlog

from harness.sanitizer import Sanitizer, SanitizingFilter, install_sanitizer, sanitize_event


def configure_logging(
    sanitizer: Sanitizer,
    *,
    level: int = logging.INFO,
    logger_names: Iterable[str] = ("harness", "pivnet"),
) -> None:
    """Configure stdlib logging and structlog with JSON output into `sanitizer`."""

    handler = logging.StreamHandler(sanitizer)
    handler.addFilter(SanitizingFilter(sanitizer))
    logging.basicConfig(
        level=level,
        handlers=[handler],
        format="%(message)s",
        force=True,
    )
    for name in logger_names:
        install_sanitizer(sanitizer, name)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            sanitize_event(sanitizer),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Reconfigured per suite run; cached loggers would keep the old sink.
        cache_logger_on_first_use=False,
    )
