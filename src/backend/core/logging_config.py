"""
Structured logging setup.

Every module logs through ``structlog.get_logger(__name__)`` with snake_case
event names and key/value context. This module wires the processor chain once
at process start.
"""

import logging
import sys

import structlog

from core.config import settings


def add_service_context(
    logger: structlog.typing.WrappedLogger,
    method_name: str,
    event_dict: structlog.typing.EventDict,
) -> structlog.typing.EventDict:
    """Tag every event with the service name and environment."""
    event_dict.setdefault("service", settings.APP_NAME)
    event_dict.setdefault("env", settings.APP_ENV)
    return event_dict


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Configure structlog for the process.

    Args:
        level: Minimum level name (defaults to settings.LOG_LEVEL, or DEBUG
            when settings.DEBUG is on)
        json_logs: Render JSON lines instead of the console format
            (defaults to settings.LOG_JSON; DEBUG forces the console format)
    """
    default_level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL
    level_name = (level or default_level).upper()
    if json_logs is None:
        use_json = settings.LOG_JSON and not settings.DEBUG
    else:
        use_json = json_logs

    renderer: structlog.typing.Processor
    if use_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_service_context,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level_name)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def mask_ip(ip: str | None) -> str | None:
    """Shorten an IP for log output (same prefix length used across services)."""
    if not ip:
        return ip
    return ip[:8]
