"""
Manufacturing order lifecycle.

State machine: DRAFT -> IN_PROGRESS -> MACERATING -> QC -> PACKAGING -> DONE -> CLOSED

Each state has exactly one legal next state; CLOSED is terminal. There are
no backward transitions and no skipping.

transition() re-validates the order itself instead of trusting a flag
computed earlier by the caller, so an order that changed between validation
and transition cannot slip through. A rejected transition is a value
(TransitionResult with accepted=False), never an exception, and leaves the
order untouched.

Side effect: on DRAFT -> IN_PROGRESS an unset manufacturing_date is stamped
with today's date. The stamp is applied before validation so that the
date rule does not block the one transition that fills it in.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Dict, Optional

from perfumery.models.enums import OrderStatus
from perfumery.services.logging_utils import get_service_logger, log_operation
from perfumery.services.manufacturing.order import ManufacturingOrder, copy_order
from perfumery.services.manufacturing.validation import validate_order
from perfumery.utils.datetime_utils import today_local

logger = get_service_logger(__name__)


NEXT_STATUS: Dict[OrderStatus, OrderStatus] = {
    OrderStatus.DRAFT: OrderStatus.IN_PROGRESS,
    OrderStatus.IN_PROGRESS: OrderStatus.MACERATING,
    OrderStatus.MACERATING: OrderStatus.QC,
    OrderStatus.QC: OrderStatus.PACKAGING,
    OrderStatus.PACKAGING: OrderStatus.DONE,
    OrderStatus.DONE: OrderStatus.CLOSED,
}

# Label of the action that moves an order out of each state
NEXT_ACTION_LABELS: Dict[OrderStatus, str] = {
    OrderStatus.DRAFT: "Start production",
    OrderStatus.IN_PROGRESS: "Start maceration",
    OrderStatus.MACERATING: "Send to QC",
    OrderStatus.QC: "Approve and start packaging",
    OrderStatus.PACKAGING: "Finish production",
    OrderStatus.DONE: "Close order",
}


class RejectionReason(str, Enum):
    """Why a transition was refused."""

    TERMINAL_STATE = "terminal_state"
    VALIDATION_FAILED = "validation_failed"
    STOCK_SHORTAGE = "stock_shortage"


@dataclass
class TransitionResult:
    """Outcome of a lifecycle transition.

    Attributes:
        accepted: True when the order advanced
        order: The advanced order when accepted, else the original order
        previous_status: Status before the attempt
        reason: Why the transition was rejected (None when accepted)
        message: Human-readable summary for a toast or log line
        errors: Validation error map when reason is VALIDATION_FAILED
    """

    accepted: bool
    order: ManufacturingOrder
    previous_status: OrderStatus
    reason: Optional[RejectionReason] = None
    message: str = ""
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def rejected(self) -> bool:
        return not self.accepted

    @property
    def status(self) -> OrderStatus:
        return self.order.status


def next_status(status: OrderStatus) -> Optional[OrderStatus]:
    """The single legal successor of ``status``, or None for CLOSED."""
    return NEXT_STATUS.get(OrderStatus(status))


def reject(
    order: ManufacturingOrder,
    reason: RejectionReason,
    message: str,
    errors: Optional[Dict[str, str]] = None,
) -> TransitionResult:
    """Build a rejected TransitionResult and log it."""
    log_operation(
        logger,
        operation="transition",
        outcome=reason.value,
        level=logging.WARNING,
        order_number=order.order_number,
        status=order.status.value,
        errors=dict(errors or {}),
    )
    return TransitionResult(
        accepted=False,
        order=order,
        previous_status=order.status,
        reason=reason,
        message=message,
        errors=dict(errors or {}),
    )


def transition(
    order: ManufacturingOrder,
    is_valid: Optional[bool] = None,
    today: Optional[date] = None,
) -> TransitionResult:
    """Advance ``order`` to its next status.

    Transaction boundary: Pure computation (no database access).

    Args:
        order: Order to advance; never modified
        is_valid: Optional caller verdict. False rejects outright; True does
            not bypass the internal validation.
        today: Date to stamp on DRAFT -> IN_PROGRESS (default: local today)

    Returns:
        TransitionResult; on rejection ``result.order is order``, on
        acceptance a deep copy that shares no lists with ``order``

    Example:
        >>> result = transition(closed_order)
        >>> result.accepted, result.reason
        (False, <RejectionReason.TERMINAL_STATE: 'terminal_state'>)
    """
    target = next_status(order.status)
    if target is None:
        return reject(
            order,
            RejectionReason.TERMINAL_STATE,
            f"Order is {order.status.value}; no further transitions are allowed.",
        )

    if is_valid is False:
        return reject(
            order,
            RejectionReason.VALIDATION_FAILED,
            "Cannot continue: fix the errors in the order first.",
            validate_order(order),
        )

    candidate = order
    if target == OrderStatus.IN_PROGRESS and order.manufacturing_date is None:
        candidate = replace(order, manufacturing_date=today or today_local())

    errors = validate_order(candidate)
    if errors:
        return reject(
            order,
            RejectionReason.VALIDATION_FAILED,
            "Cannot continue: fix the errors in the order first.",
            errors,
        )

    advanced = copy_order(candidate, status=target)
    log_operation(
        logger,
        operation="transition",
        outcome="success",
        order_number=order.order_number,
        from_status=order.status.value,
        to_status=target.value,
    )
    return TransitionResult(
        accepted=True,
        order=advanced,
        previous_status=order.status,
        message=f"Status updated to {target.value}",
    )
