"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across the manufacturing engine and the
order persistence services.

Usage:
    from perfumery.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    # Log successful operation
    log_operation(
        logger,
        operation="create_order",
        outcome="success",
        order_number="MO-20240501-001",
    )

    # Log an advisory shortage
    log_operation(
        logger,
        operation="check_reservation",
        outcome="insufficient_materials",
        level=logging.WARNING,
        branch_id=2,
        missing_materials=["Rose Oil"],
    )
"""

import logging
from typing import Any


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger under the 'perfumery.services' prefix.

    Example:
        >>> logger = get_service_logger("perfumery.services.manufacturing.lifecycle")
        >>> logger.name
        'perfumery.services.lifecycle'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"perfumery.services.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The message is "<operation>: <outcome>"; the operation, outcome and any
    context fields travel in the record's ``extra`` for structured handlers.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "transition", "create_order")
        outcome: Outcome description (e.g., "success", "validation_failed")
        level: Log level (default: INFO). Use DEBUG for per-calculation detail.
        **context: Additional context fields (order numbers, branch ids,
            missing materials, error maps, ...)
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
