"""Inventory Item Service - On-hand stock per product and branch.

Stock is one row per (product, branch) pair holding a quantity in the
product's base unit. The manufacturing engine only reads it; this module
is where quantities are recorded and where branches are created.

All functions are stateless and use session_scope() for transaction
management, or share the caller's session when one is passed.

Example Usage:
    >>> from perfumery.services.inventory_item_service import create_branch, set_quantity
    >>> branch = create_branch("Main Workshop")
    >>> item = set_quantity(product_id=1, branch_id=branch.id, quantity=250.0)
    >>> get_quantity(1, branch.id)
    250.0
"""

from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from perfumery.models import Branch, InventoryItem, Product
from perfumery.services.manufacturing.catalog import normalize_branch_id
from perfumery.utils.validators import validate_non_negative_number, validate_required_string

from .database import session_scope
from .exceptions import BranchNotFound, DatabaseError, ProductNotFound, ValidationError
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


# =============================================================================
# Branches
# =============================================================================


def create_branch(
    name: str, location: Optional[str] = None, session: Optional[Session] = None
) -> Branch:
    """Create a branch that can hold stock.

    Raises:
        ValidationError: If the name is blank or already used
        DatabaseError: If database operation fails
    """
    is_valid, error = validate_required_string(name, "Name")
    if not is_valid:
        raise ValidationError([error])

    if session is not None:
        return _create_branch_impl(name, location, session)
    try:
        with session_scope() as session:
            return _create_branch_impl(name, location, session)
    except IntegrityError:
        raise ValidationError([f"Name: Branch '{name.strip()}' already exists"])
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to create branch: {str(e)}", e)


def _create_branch_impl(name: str, location: Optional[str], session: Session) -> Branch:
    branch = Branch(name=name.strip(), location=location)
    session.add(branch)
    session.flush()
    log_operation(logger, operation="create_branch", outcome="success", branch_id=branch.id)
    return branch


def get_branch(branch_id: int, session: Optional[Session] = None) -> Branch:
    """Retrieve a branch by id.

    Raises:
        BranchNotFound: If no branch has this id
    """
    if session is not None:
        return _get_branch_impl(branch_id, session)
    with session_scope() as session:
        return _get_branch_impl(branch_id, session)


def _get_branch_impl(branch_id: int, session: Session) -> Branch:
    branch = session.query(Branch).filter_by(id=branch_id).first()
    if branch is None:
        raise BranchNotFound(branch_id)
    return branch


# =============================================================================
# Stock levels
# =============================================================================


def set_quantity(
    product_id: int,
    branch_id: int,
    quantity: float,
    session: Optional[Session] = None,
) -> InventoryItem:
    """Record the on-hand quantity of a product at a branch.

    Creates the stock row on first use and overwrites the quantity afterwards.

    Args:
        product_id: Product being counted
        branch_id: Branch holding the stock
        quantity: Quantity in the product's base unit (>= 0)
        session: Optional database session

    Returns:
        InventoryItem: The created or updated stock row

    Raises:
        ValidationError: If quantity is negative or not a number
        ProductNotFound: If the product does not exist
        BranchNotFound: If the branch does not exist
    """
    is_valid, error = validate_non_negative_number(quantity, "Quantity")
    if not is_valid:
        raise ValidationError([error])

    if session is not None:
        return _set_quantity_impl(product_id, branch_id, float(quantity), session)
    try:
        with session_scope() as session:
            return _set_quantity_impl(product_id, branch_id, float(quantity), session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to set inventory quantity: {str(e)}", e)


def _set_quantity_impl(
    product_id: int, branch_id: int, quantity: float, session: Session
) -> InventoryItem:
    if session.query(Product).filter_by(id=product_id).first() is None:
        raise ProductNotFound(product_id)
    if session.query(Branch).filter_by(id=branch_id).first() is None:
        raise BranchNotFound(branch_id)

    item = (
        session.query(InventoryItem)
        .filter_by(product_id=product_id, branch_id=branch_id)
        .first()
    )
    if item is None:
        item = InventoryItem(product_id=product_id, branch_id=branch_id, quantity=quantity)
        session.add(item)
    else:
        item.quantity = quantity
    session.flush()

    log_operation(
        logger,
        operation="set_quantity",
        outcome="success",
        product_id=product_id,
        branch_id=branch_id,
        quantity=quantity,
    )
    return item


def get_quantity(product_id: int, branch_id, session: Optional[Session] = None) -> float:
    """On-hand quantity of a product at a branch; 0 when unset or unknown."""
    branch_id = normalize_branch_id(branch_id)
    if branch_id is None:
        return 0.0
    if session is not None:
        return _get_quantity_impl(product_id, branch_id, session)
    with session_scope() as session:
        return _get_quantity_impl(product_id, branch_id, session)


def _get_quantity_impl(product_id: int, branch_id: int, session: Session) -> float:
    item = (
        session.query(InventoryItem)
        .filter_by(product_id=product_id, branch_id=branch_id)
        .first()
    )
    return float(item.quantity) if item is not None else 0.0


def list_inventory(branch_id=None, session: Optional[Session] = None) -> List[InventoryItem]:
    """List stock rows, optionally for a single branch."""
    if session is not None:
        return _list_inventory_impl(branch_id, session)
    with session_scope() as session:
        return _list_inventory_impl(branch_id, session)


def _list_inventory_impl(branch_id, session: Session) -> List[InventoryItem]:
    query = session.query(InventoryItem)
    if branch_id is not None:
        query = query.filter(InventoryItem.branch_id == branch_id)
    return query.order_by(InventoryItem.branch_id, InventoryItem.product_id).all()
