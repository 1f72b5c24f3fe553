"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across status transitions, override
updates, and other order operations.

Usage:
    from src.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    log_operation(
        logger,
        operation="update_order_status",
        outcome="success",
        order_id=123,
        status="Kompletacja zamówienia",
    )
"""

import logging
from typing import Any

LOGGER_PREFIX = "order_timeline.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger instance with the 'order_timeline.services' prefix.

    Example:
        >>> logger = get_service_logger("src.services.order_timeline_service")
        >>> logger.name
        'order_timeline.services.order_timeline_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The context is passed via the 'extra' parameter so handlers can pick
    individual fields off the log record.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "update_order_status")
        outcome: Outcome description (e.g., "success", "no_change", "not_found")
        level: Log level (default: INFO)
        **context: Additional context fields (order_id, task_id, status, ...)
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
