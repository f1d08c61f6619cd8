"""Structured logging utilities for kubeconn."""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

# Event keys whose values are credential material and must never reach a log sink
SECRET_FIELDS = frozenset(
    {
        "password",
        "token",
        "bearer_token",
        "bearerToken",
        "key",
        "key_data",
        "client-key-data",
    }
)

REDACTED = "***"


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Structlog processor masking credential values in an event.

    Args:
        logger: Wrapped logger (unused)
        method_name: Log method name (unused)
        event_dict: Event being processed

    Returns:
        Event with secret values replaced
    """
    for field in SECRET_FIELDS.intersection(event_dict):
        if event_dict[field]:
            event_dict[field] = REDACTED
    return event_dict


def setup_logging(level: str = "INFO", format: str = "json", output: str = "stdout") -> None:
    """Configure structured logging for kubeconn.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Log format (json or console)
        output: Output destination (stdout or stderr)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout if output == "stdout" else sys.stderr,
        level=log_level,
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        redact_secrets,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if format == "json":
        processors += [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


def log_operation(logger: structlog.BoundLogger, operation: str, **kwargs: Any) -> None:
    """Log a conversion step with structured context.

    Args:
        logger: Logger instance
        operation: Operation name (resolve, build, parse, ...)
        **kwargs: Additional context fields
    """
    logger.debug(f"operation_{operation}", **kwargs)


def log_error(
    logger: structlog.BoundLogger,
    error: Exception,
    operation: str | None = None,
    **kwargs: Any,
) -> None:
    """Log a failed conversion with structured context.

    Args:
        logger: Logger instance
        error: Exception instance
        operation: Operation name (optional)
        **kwargs: Additional context fields
    """
    context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        **kwargs,
    }

    if operation:
        context["operation"] = operation

    logger.error("error_occurred", **context)
