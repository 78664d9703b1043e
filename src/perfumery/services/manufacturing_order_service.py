"""Manufacturing Order Service - Persistence and workflow for manufacturing orders.

This module stores ManufacturingOrder values and drives them through the
engine in perfumery.services.manufacturing:

- create/get/list/update/delete orders
- order number (MO-YYYYMMDD-NNN) and batch code (BATCH-<epoch-ms>) assignment
- advancing an order along its lifecycle
- stock checks for formula materials and packaging at the order's branch
- cost roll-up from catalog prices

Saving always re-derives the yield block and requires the order to pass
validation. Status only changes through advance_order_status(); update_order()
keeps the stored status.

All public functions accept session=None; when omitted they open their own
session_scope().
"""

import logging
import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from perfumery.models import InventoryItem, ManufacturingOrderRecord, OrderStatus, Product
from perfumery.services.manufacturing.catalog import normalize_branch_id
from perfumery.services.manufacturing.costing import calculate_costs
from perfumery.services.manufacturing.formula import ScaledLine, scale_formula
from perfumery.services.manufacturing.lifecycle import (
    RejectionReason,
    TransitionResult,
    reject,
    transition,
)
from perfumery.services.manufacturing.material_reservation import (
    ReservationRow,
    check_reservation,
    has_shortage,
)
from perfumery.services.manufacturing.order import ManufacturingOrder
from perfumery.services.manufacturing.packaging_requirements import PackagingRow, check_packaging
from perfumery.services.manufacturing.validation import validate_order
from perfumery.services.manufacturing.yield_calculation import with_recalculated_yield
from perfumery.utils.config import get_config
from perfumery.utils.constants import (
    BATCH_CODE_PREFIX,
    ORDER_NUMBER_PREFIX,
    ORDER_SEQUENCE_WIDTH,
)
from perfumery.utils.datetime_utils import epoch_millis, today_local

from .database import session_scope
from .exceptions import DatabaseError, OrderClosedError, OrderNotFound, ValidationError
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


@dataclass
class OrderPlan:
    """Everything the production sheet shows for one order.

    Attributes:
        order: The stored order with a freshly derived yield block
        scaled_lines: Formula scaled to the theoretical volume
        materials: Reservation rows for the formula materials
        packaging: Packaging rows for the packaging plan
    """

    order: ManufacturingOrder
    scaled_lines: List[ScaledLine] = field(default_factory=list)
    materials: List[ReservationRow] = field(default_factory=list)
    packaging: List[PackagingRow] = field(default_factory=list)

    @property
    def has_shortage(self) -> bool:
        return has_shortage(self.materials) or has_shortage(self.packaging)


# =============================================================================
# Identifiers
# =============================================================================


def order_number_prefix(day: date) -> str:
    """Prefix shared by every order created on ``day``: MO-YYYYMMDD-."""
    return f"{ORDER_NUMBER_PREFIX}-{day.strftime('%Y%m%d')}-"


def generate_order_number(session: Session, day: Optional[date] = None) -> str:
    """Next free order number for ``day`` (default: today).

    The sequence is one past the highest existing sequence with the same
    date prefix, zero-padded to ORDER_SEQUENCE_WIDTH digits.

    Example:
        >>> generate_order_number(session, date(2024, 5, 1))
        'MO-20240501-001'
    """
    prefix = order_number_prefix(day or today_local())
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")

    numbers = (
        session.query(ManufacturingOrderRecord.order_number)
        .filter(ManufacturingOrderRecord.order_number.like(f"{prefix}%"))
        .all()
    )
    highest = 0
    for (number,) in numbers:
        match = pattern.match(number or "")
        if match:
            highest = max(highest, int(match.group(1)))

    return f"{prefix}{str(highest + 1).zfill(ORDER_SEQUENCE_WIDTH)}"


def generate_batch_code(moment: Optional[datetime] = None) -> str:
    """Batch code from the creation instant: BATCH-<epoch milliseconds>."""
    return f"{BATCH_CODE_PREFIX}-{epoch_millis(moment)}"


# =============================================================================
# Helpers
# =============================================================================


def _get_record(order_number: str, session: Session) -> ManufacturingOrderRecord:
    record = (
        session.query(ManufacturingOrderRecord)
        .filter(ManufacturingOrderRecord.order_number == order_number)
        .first()
    )
    if record is None:
        raise OrderNotFound(order_number)
    return record


def _prepare_for_save(order: ManufacturingOrder) -> ManufacturingOrder:
    """Re-derive the yield block and reject invalid orders."""
    order = with_recalculated_yield(order)
    errors = validate_order(order)
    if errors:
        log_operation(
            logger,
            operation="save_order",
            outcome="validation_failed",
            level=logging.WARNING,
            order_number=order.order_number,
            errors=errors,
        )
        raise ValidationError(errors)
    return order


def _load_catalog(order: ManufacturingOrder, session: Session) -> Tuple[list, list]:
    """Products referenced by the order and stock rows at its branch."""
    product_ids = {line.material_id for line in order.formula if line.material_id is not None}
    product_ids.update(
        item.product_id for item in order.packaging_items if item.product_id is not None
    )
    products = []
    if product_ids:
        products = session.query(Product).filter(Product.id.in_(product_ids)).all()

    branch_id = normalize_branch_id(order.branch_id)
    inventory = []
    if branch_id is not None:
        inventory = (
            session.query(InventoryItem).filter(InventoryItem.branch_id == branch_id).all()
        )
    return products, inventory


def _build_plan(order: ManufacturingOrder, session: Session) -> Tuple[OrderPlan, list]:
    order = with_recalculated_yield(order)
    products, inventory = _load_catalog(order, session)
    scaled = scale_formula(order.formula, order.order_yield.theoretical_ml, products)
    plan = OrderPlan(
        order=order,
        scaled_lines=scaled,
        materials=check_reservation(scaled, products, inventory, order.branch_id),
        packaging=check_packaging(
            order.packaging_items, order.units_requested, inventory, order.branch_id
        ),
    )
    return plan, products


# =============================================================================
# CRUD
# =============================================================================


def create_order(
    order: ManufacturingOrder,
    session: Optional[Session] = None,
    today: Optional[date] = None,
    preserve_status: bool = False,
) -> ManufacturingOrder:
    """Save a new manufacturing order.

    Assigns an order number and batch code when the order has none, derives
    the yield block and validates before inserting. New orders are stored in
    DRAFT whatever status they carry, unless preserve_status is set.

    Args:
        order: Order to save (typically from new_order())
        session: Optional database session
        today: Date used for the order number prefix (default: local today)
        preserve_status: Keep the order's own status; used when restoring
            exported orders

    Returns:
        The saved order, with order_number and batch_code set

    Raises:
        ValidationError: If the order fails validation or its number is taken
        DatabaseError: If database operation fails
    """
    if session is not None:
        return _create_order_impl(order, session, today, preserve_status)
    try:
        with session_scope() as session:
            return _create_order_impl(order, session, today, preserve_status)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to create manufacturing order: {str(e)}", e)


def _create_order_impl(
    order: ManufacturingOrder,
    session: Session,
    today: Optional[date],
    preserve_status: bool = False,
) -> ManufacturingOrder:
    if not preserve_status:
        order = replace(order, status=OrderStatus.DRAFT)
    order = _prepare_for_save(order)

    if order.order_number:
        exists = (
            session.query(ManufacturingOrderRecord.id)
            .filter(ManufacturingOrderRecord.order_number == order.order_number)
            .first()
        )
        if exists:
            raise ValidationError([f"Order number '{order.order_number}' already exists"])
    else:
        order = replace(order, order_number=generate_order_number(session, today))

    if not order.batch_code:
        order = replace(order, batch_code=generate_batch_code())

    record = ManufacturingOrderRecord()
    record.apply_order(order)
    session.add(record)
    session.flush()

    log_operation(
        logger,
        operation="create_order",
        outcome="success",
        order_number=order.order_number,
        batch_code=order.batch_code,
    )
    return record.to_order()


def get_order(order_number: str, session: Optional[Session] = None) -> ManufacturingOrder:
    """Load an order by its order number.

    Raises:
        OrderNotFound: If no order has this number
    """
    if session is not None:
        return _get_record(order_number, session).to_order()
    with session_scope() as session:
        return _get_record(order_number, session).to_order()


def list_orders(
    status: Optional[OrderStatus] = None, session: Optional[Session] = None
) -> List[ManufacturingOrder]:
    """List orders by order number, optionally filtered to one status."""
    if session is not None:
        return _list_orders_impl(status, session)
    with session_scope() as session:
        return _list_orders_impl(status, session)


def _list_orders_impl(status: Optional[OrderStatus], session: Session) -> List[ManufacturingOrder]:
    query = session.query(ManufacturingOrderRecord)
    if status is not None:
        query = query.filter(ManufacturingOrderRecord.status == OrderStatus(status).value)
    records = query.order_by(ManufacturingOrderRecord.order_number).all()
    return [record.to_order() for record in records]


def update_order(
    order: ManufacturingOrder, session: Optional[Session] = None
) -> ManufacturingOrder:
    """Save changes to an existing order.

    The stored status wins over the status carried by ``order``; use
    advance_order_status() to move an order along its lifecycle.

    Raises:
        OrderNotFound: If the order number is unknown
        OrderClosedError: If the stored order is CLOSED
        ValidationError: If the changed order fails validation
        DatabaseError: If database operation fails
    """
    if session is not None:
        return _update_order_impl(order, session)
    try:
        with session_scope() as session:
            return _update_order_impl(order, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to update manufacturing order: {str(e)}", e)


def _update_order_impl(order: ManufacturingOrder, session: Session) -> ManufacturingOrder:
    record = _get_record(order.order_number, session)
    if record.status == OrderStatus.CLOSED.value:
        raise OrderClosedError(order.order_number)

    order = replace(
        order,
        status=OrderStatus(record.status),
        batch_code=order.batch_code or record.batch_code,
    )
    order = _prepare_for_save(order)
    record.apply_order(order)
    session.flush()

    log_operation(
        logger, operation="update_order", outcome="success", order_number=order.order_number
    )
    return record.to_order()


def delete_order(order_number: str, session: Optional[Session] = None) -> None:
    """Delete an order.

    Raises:
        OrderNotFound: If the order number is unknown
        OrderClosedError: If the order is CLOSED
    """
    if session is not None:
        return _delete_order_impl(order_number, session)
    try:
        with session_scope() as session:
            return _delete_order_impl(order_number, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to delete manufacturing order: {str(e)}", e)


def _delete_order_impl(order_number: str, session: Session) -> None:
    record = _get_record(order_number, session)
    if record.status == OrderStatus.CLOSED.value:
        raise OrderClosedError(order_number)
    session.delete(record)
    session.flush()
    log_operation(logger, operation="delete_order", outcome="success", order_number=order_number)


# =============================================================================
# Lifecycle
# =============================================================================


def advance_order_status(
    order_number: str,
    session: Optional[Session] = None,
    today: Optional[date] = None,
) -> TransitionResult:
    """Move a stored order to its next status.

    Rejections (terminal state, validation errors, and stock shortage when
    Config.block_on_shortage is on) come back as a TransitionResult with
    accepted=False and nothing is written.

    Args:
        order_number: Order to advance
        session: Optional database session
        today: Date stamped on DRAFT -> IN_PROGRESS (default: local today)

    Returns:
        TransitionResult from the lifecycle

    Raises:
        OrderNotFound: If the order number is unknown
    """
    if session is not None:
        return _advance_order_status_impl(order_number, session, today)
    try:
        with session_scope() as session:
            return _advance_order_status_impl(order_number, session, today)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to advance manufacturing order: {str(e)}", e)


def _advance_order_status_impl(
    order_number: str, session: Session, today: Optional[date]
) -> TransitionResult:
    record = _get_record(order_number, session)
    order = record.to_order()

    if order.status == OrderStatus.DRAFT and get_config().block_on_shortage:
        plan, _ = _build_plan(order, session)
        if plan.has_shortage:
            return reject(
                order,
                RejectionReason.STOCK_SHORTAGE,
                "Cannot start production: insufficient stock at the branch.",
            )

    result = transition(order, today=today)
    if result.accepted:
        record.apply_order(result.order)
        session.flush()
    return result


# =============================================================================
# Stock checks and costing
# =============================================================================


def get_order_plan(order_number: str, session: Optional[Session] = None) -> OrderPlan:
    """Scaled formula and stock checks for a stored order."""
    if session is not None:
        return _build_plan(_get_record(order_number, session).to_order(), session)[0]
    with session_scope() as session:
        return _build_plan(_get_record(order_number, session).to_order(), session)[0]


def check_order_materials(
    order_number: str, session: Optional[Session] = None
) -> List[ReservationRow]:
    """Reservation rows for the order's formula at its branch."""
    return get_order_plan(order_number, session=session).materials


def check_order_packaging(
    order_number: str, session: Optional[Session] = None
) -> List[PackagingRow]:
    """Packaging rows for the order's packaging plan at its branch."""
    return get_order_plan(order_number, session=session).packaging


def recalculate_order_costs(
    order_number: str,
    labor=None,
    overhead=None,
    other=None,
    session: Optional[Session] = None,
) -> ManufacturingOrder:
    """Re-price a stored order from the catalog and save the cost roll-up.

    Labour, overhead and other keep their stored values unless given.
    The suggested retail price uses Config.retail_markup.

    Raises:
        OrderNotFound: If the order number is unknown
        OrderClosedError: If the order is CLOSED
    """
    if session is not None:
        return _recalculate_order_costs_impl(order_number, labor, overhead, other, session)
    try:
        with session_scope() as session:
            return _recalculate_order_costs_impl(order_number, labor, overhead, other, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to recalculate order costs: {str(e)}", e)


def _recalculate_order_costs_impl(
    order_number: str, labor, overhead, other, session: Session
) -> ManufacturingOrder:
    record = _get_record(order_number, session)
    if record.status == OrderStatus.CLOSED.value:
        raise OrderClosedError(order_number)

    plan, products = _build_plan(record.to_order(), session)
    costs = calculate_costs(
        plan.order,
        plan.scaled_lines,
        products,
        labor=labor,
        overhead=overhead,
        other=other,
        retail_markup=get_config().retail_markup,
    )
    order = replace(plan.order, costs=costs)
    record.apply_order(order)
    session.flush()

    log_operation(
        logger,
        operation="recalculate_order_costs",
        outcome="success",
        order_number=order_number,
        total=str(costs.total),
    )
    return record.to_order()
