"""
Centralized logging configuration using structlog.

Every maintenance script calls configure_logging() once at start-up and then
binds a run context (run_id, script) so each event of a run can be grouped.
"""

import logging
import sys
import uuid
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor

from rentops.core.config import get_settings


def add_run_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Stringify run_id so JSON output stays stable."""
    run_id = event_dict.get("run_id")
    if run_id:
        event_dict["run_id"] = str(run_id)
    return event_dict


def configure_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure structlog for a script run.

    Sets up processors including:
    - Context variables (run_id, script)
    - Logger name and log level
    - TimeStamper with ISO format
    - Exception formatting
    - JSON or Console rendering

    Args:
        log_level: Overrides LOG_LEVEL from settings
        log_format: Overrides LOG_FORMAT from settings

    Raises:
        ConfigurationError: If settings are needed and invalid
    """
    if log_level is None or log_format is None:
        settings = get_settings()
        log_level = log_level or settings.log_level
        log_format = log_format or settings.log_format

    level = getattr(logging, log_level.upper(), logging.INFO)
    fmt = log_format.lower()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=True,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        add_run_context,
    ]

    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Configured structlog BoundLogger instance
    """
    return structlog.get_logger(name)


def bind_run_context(script: str, **kwargs: Any) -> str:
    """
    Start a fresh logging context for one script run.

    Args:
        script: Script name (e.g. "cleanup_storage")
        **kwargs: Extra key-value pairs to attach to every event

    Returns:
        The generated run_id
    """
    run_id = uuid.uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(run_id=run_id, script=script, **kwargs)
    return run_id


def clear_run_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
