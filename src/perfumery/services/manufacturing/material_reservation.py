"""
Material reservation check for manufacturing orders.

Cross-references a scaled formula against on-hand inventory at the order's
branch and reports, per material, how much is required, how much is
available and whether that is enough.

The check is read-only and advisory: a shortage is reported, never raised.
An order with no branch assigned is fail-closed: no inventory is looked up
and every line reports 0 available.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from perfumery.services.logging_utils import get_service_logger, log_operation
from perfumery.services.manufacturing.catalog import index_products, normalize_branch_id
from perfumery.services.manufacturing.formula import ScaledLine
from perfumery.utils.constants import DEFAULT_MATERIAL_UNIT, UNIT_ML

logger = get_service_logger(__name__)


@dataclass
class ReservationRow:
    """Availability of one formula material at the order's branch.

    Attributes:
        material_id: Product id of the material
        material_name: Display name
        required: Quantity needed, in ``unit``
        available: Quantity on hand at the branch, in ``unit``
        unit: "ml" when the product is stocked by volume, else "g"
        is_sufficient: available >= required
    """

    material_id: Optional[int]
    material_name: str
    required: float
    available: float
    unit: str
    is_sufficient: bool

    @property
    def shortfall(self) -> float:
        return max(0.0, self.required - self.available)


def find_available_quantity(inventory: Optional[Iterable], product_id, branch_id) -> float:
    """On-hand quantity of ``product_id`` at ``branch_id``.

    Returns 0 when the branch is unset/invalid, when the product id is
    missing, or when no inventory row matches.
    """
    branch = normalize_branch_id(branch_id)
    if branch is None or product_id is None or not inventory:
        return 0.0
    for item in inventory:
        if item.product_id == product_id and normalize_branch_id(item.branch_id) == branch:
            return float(item.quantity or 0.0)
    return 0.0


def check_reservation(
    scaled_lines: Iterable[ScaledLine],
    products: Optional[Iterable],
    inventory: Optional[Iterable],
    branch_id,
) -> List[ReservationRow]:
    """Check whether the branch holds enough of every formula material.

    Transaction boundary: Pure computation (no database access).

    The required quantity follows the product's base unit: required_ml when
    the product is stocked in ml, otherwise required_g (unknown products and
    products without a base unit count in grams).

    Args:
        scaled_lines: Output of scale_formula()
        products: Product records (id, base_unit, ...)
        inventory: Inventory records (product_id, branch_id, quantity)
        branch_id: The order's branch; None/0 means unassigned

    Returns:
        One ReservationRow per scaled line, in the same order
    """
    by_id = index_products(products)
    branch = normalize_branch_id(branch_id)
    rows = []

    for scaled in scaled_lines:
        product = by_id.get(scaled.material_id)
        base_unit = getattr(product, "base_unit", None) if product is not None else None
        if base_unit == UNIT_ML:
            unit, required = UNIT_ML, scaled.required_ml
        else:
            unit, required = DEFAULT_MATERIAL_UNIT, scaled.required_g
        available = find_available_quantity(inventory, scaled.material_id, branch)
        name = scaled.material_name or (getattr(product, "name", "") if product is not None else "")
        rows.append(
            ReservationRow(
                material_id=scaled.material_id,
                material_name=name,
                required=required,
                available=available,
                unit=unit,
                is_sufficient=available >= required,
            )
        )

    short = [row.material_name or str(row.material_id) for row in rows if not row.is_sufficient]
    if short:
        log_operation(
            logger,
            operation="check_reservation",
            outcome="insufficient_materials",
            level=logging.WARNING,
            branch_id=branch,
            missing_materials=short,
        )
    return rows


def has_shortage(rows: Iterable) -> bool:
    """True when any reservation or packaging row is insufficient."""
    return any(not row.is_sufficient for row in rows)
