"""Logging utilities for the pricing registry.

This module provides standardized logging functionality for registry operations.
The library never installs handlers; applications (and the CLI) configure them.
"""

import logging
from enum import Enum
from typing import Any, Optional

LOGGER_NAME = "model_pricing_registry"


class LogLevel(int, Enum):
    """Log levels for the registry."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogEvent(str, Enum):
    """Event types for registry logging."""

    PRICING_DATASET = "pricing_dataset"
    PRICING_OVERRIDES = "pricing_overrides"
    PRICING_LOOKUP = "pricing_lookup"
    COST_CALCULATION = "cost_calculation"
    CLI_COMMAND = "cli_command"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger below the package logger.

    Args:
        name: Child logger name; a dotted module path is reduced to its last part

    Returns:
        The package logger, or one of its children
    """
    if not name:
        return logging.getLogger(LOGGER_NAME)
    short_name = name.rsplit(".", 1)[-1]
    return logging.getLogger(f"{LOGGER_NAME}.{short_name}")


_logger = get_logger()


def _log(
    level: LogLevel,
    event: LogEvent,
    message: str,
    logger: Optional[logging.Logger] = None,
    **data: Any,
) -> None:
    """Log an event with structured data.

    Args:
        level: Severity level
        event: Event type
        message: Human readable message
        logger: Logger to use instead of the package logger
        **data: Event data, attached to the record as ``event_data``
    """
    target = logger or _logger
    if not target.isEnabledFor(level):
        return
    if data:
        details = ", ".join(f"{key}={value}" for key, value in data.items())
        text = f"[{event.value}] {message} ({details})"
    else:
        text = f"[{event.value}] {message}"
    target.log(level, text, extra={"event": event.value, "event_data": data})


def log_debug(event: LogEvent, message: str, logger: Optional[logging.Logger] = None, **data: Any) -> None:
    """Log a debug-level event."""
    _log(LogLevel.DEBUG, event, message, logger, **data)


def log_info(event: LogEvent, message: str, logger: Optional[logging.Logger] = None, **data: Any) -> None:
    """Log an info-level event."""
    _log(LogLevel.INFO, event, message, logger, **data)


def log_warning(event: LogEvent, message: str, logger: Optional[logging.Logger] = None, **data: Any) -> None:
    """Log a warning-level event."""
    _log(LogLevel.WARNING, event, message, logger, **data)


def log_error(event: LogEvent, message: str, logger: Optional[logging.Logger] = None, **data: Any) -> None:
    """Log an error-level event."""
    _log(LogLevel.ERROR, event, message, logger, **data)
