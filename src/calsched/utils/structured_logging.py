"""
Structured Logging
==================
structlog event logging for solve lifecycle events. Events are rendered as
``key=value`` (or JSON) lines and handed to the standard ``calsched.*``
loggers, so they follow whatever handlers ``setup_logging`` installed.

Usage:
    from calsched.utils.structured_logging import get_structured_logger

    log = get_structured_logger("calsched.solver")
    log.info("solve_started", meetings=4, window_days=10)
"""
from typing import Any

import structlog
import structlog.contextvars


def configure_structlog(json_output: bool = False) -> None:
    """
    Configure structlog processors.

    Args:
        json_output: Render events as JSON (machine readable) instead of
                     ``key=value`` pairs.
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
    ]
    if json_output:
        processors += [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.processors.KeyValueRenderer(key_order=["event"]))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_structured_logger(name: str) -> Any:
    """structlog logger writing through the standard logger ``name``."""
    if not structlog.is_configured():
        configure_structlog()
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """Bind values (e.g. ``query_id``) to every subsequent event in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
