"""
Packaging requirement check for manufacturing orders.

Same shape as the material reservation check, but the required quantity is
a flat per-bottle ratio (qty_per_unit * units_requested) and the materials
come from the packaging plan instead of the formula.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from perfumery.services.logging_utils import get_service_logger, log_operation
from perfumery.services.manufacturing.catalog import normalize_branch_id
from perfumery.services.manufacturing.material_reservation import find_available_quantity
from perfumery.services.manufacturing.order import PackagingItem

logger = get_service_logger(__name__)


@dataclass
class PackagingRow:
    """Availability of one packaging material at the order's branch."""

    product_id: Optional[int]
    name: str
    qty_per_unit: float
    required: float
    available: float
    is_sufficient: bool

    @property
    def shortfall(self) -> float:
        return max(0.0, self.required - self.available)


def check_packaging(
    packaging_items: Iterable[PackagingItem],
    units_requested,
    inventory: Optional[Iterable],
    branch_id,
) -> List[PackagingRow]:
    """Check packaging stock for an order.

    Transaction boundary: Pure computation (no database access).

    required = qty_per_unit * units_requested. Availability is looked up
    exactly as for formula materials, including the fail-closed behaviour
    when the branch is unset.

    Args:
        packaging_items: The order's packaging plan
        units_requested: Bottles ordered
        inventory: Inventory records (product_id, branch_id, quantity)
        branch_id: The order's branch; None/0 means unassigned

    Returns:
        One PackagingRow per packaging item, in the same order

    Example:
        >>> items = [PackagingItem(product_id=7, qty_per_unit=1, name="50ml bottle")]
        >>> check_packaging(items, 100, [], None)[0].available
        0.0
    """
    branch = normalize_branch_id(branch_id)
    units = float(units_requested or 0)
    rows = []

    for item in packaging_items:
        required = float(item.qty_per_unit or 0) * units
        available = find_available_quantity(inventory, item.product_id, branch)
        rows.append(
            PackagingRow(
                product_id=item.product_id,
                name=item.name,
                qty_per_unit=float(item.qty_per_unit or 0),
                required=required,
                available=available,
                is_sufficient=available >= required,
            )
        )

    short = [row.name or str(row.product_id) for row in rows if not row.is_sufficient]
    if short:
        log_operation(
            logger,
            operation="check_packaging",
            outcome="insufficient_packaging",
            level=logging.WARNING,
            branch_id=branch,
            missing_packaging=short,
        )
    return rows
