"""Structlog configuration for the membership service.

Console output with colors for development, JSON lines for production.
Every event carries the service name; debug mode adds the emitting module
and function.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

from infrastructure.settings import Settings, get_settings

_COLOR_FLAGS = ("1", "true", "yes")


def _use_colors() -> bool:
    # FORCE_COLOR=1 enables colors even in non-TTY environments (like Docker)
    forced = os.environ.get("FORCE_COLOR", "").lower() in _COLOR_FLAGS
    return forced or sys.stdout.isatty()


def _service_name(name: str) -> structlog.types.Processor:
    def add_service(
        logger: Any, method_name: str, event_dict: structlog.types.EventDict
    ) -> structlog.types.EventDict:
        event_dict.setdefault("service", name)
        return event_dict

    return add_service


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog from application settings.

    Args:
        settings: Application settings (defaults to the cached settings);
            ``log_level`` sets the minimum level, ``debug`` adds call sites
    """
    settings = settings or get_settings()

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        _service_name(settings.app_name),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.debug:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                {
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                }
            )
        )

    if _use_colors():
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend(
            [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
        )

    min_level = logging.getLevelNamesMapping()[settings.log_level]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
