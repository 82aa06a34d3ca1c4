"""
Module: logger.py
Description: Structured logging configuration for Sparkle Relay.

Configures structlog for JSON output on stdout. Every module in the
package logs through get_logger() so relay diagnostics share one format
regardless of which host client loads the plugin.

Key Components:
- JSON output with timestamp and level processors
- configure_logging() to apply the configured minimum level
- get_logger() helper function

Dependencies: structlog, logging, datetime
Author: Sparkle Relay Team
"""

import logging
from datetime import datetime, timezone

import structlog


def _add_timestamp(logger, method_name, event_dict):
    """
    Add ISO 8601 timestamp to log entries.

    Args:
        logger: Logger instance
        method_name: Log method name (info, error, etc.)
        event_dict: Current log event dictionary

    Returns:
        Updated event dictionary with timestamp
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _add_log_level(logger, method_name, event_dict):
    """Add log level to event dictionary."""
    event_dict["level"] = method_name.upper()
    return event_dict


def configure_logging(level: str = "INFO") -> None:
    """
    Configure structlog for JSON output filtered at the given level.

    Safe to call more than once; the plugin calls it again after
    settings are loaded.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    structlog.configure(
        processors=[
            _add_timestamp,
            _add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.WriteLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        # Loggers are bound at import time, so they must pick up reconfiguration
        cache_logger_on_first_use=False,
    )


configure_logging()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Message delivered", message_id="42", status_code=200)
        {"message_id": "42", "status_code": 200, "event": "Message delivered", "timestamp": "...", "level": "INFO"}
    """
    return structlog.get_logger(name)
