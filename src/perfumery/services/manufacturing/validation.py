"""
Manufacturing order validation.

validate_order() returns an error map (field name -> message). An empty map
means the order is valid. All rules run on every call; none short-circuits
the others, so callers can show every problem at once. Validation has no
side effects and is safe on a fresh DRAFT order with an empty formula.
"""

import math
from typing import Dict

from perfumery.services.manufacturing.formula import formula_total_percentage
from perfumery.services.manufacturing.order import ManufacturingOrder
from perfumery.utils.constants import FORMULA_TOTAL_TARGET, FORMULA_TOTAL_TOLERANCE

ErrorMap = Dict[str, str]

FIELD_PRODUCT_NAME = "product_name"
FIELD_UNITS_REQUESTED = "units_requested"
FIELD_BOTTLE_SIZE = "bottle_size_ml"
FIELD_MANUFACTURING_DATE = "manufacturing_date"
FIELD_FORMULA = "formula"
FIELD_DISTRIBUTION = "distribution"


def _is_positive(value) -> bool:
    try:
        return value is not None and float(value) > 0
    except (TypeError, ValueError):
        return False


def _finite_units(value) -> float:
    # Missing, non-numeric and non-finite units count as 0
    try:
        units = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    return units if math.isfinite(units) else 0.0


def validate_order(order: ManufacturingOrder) -> ErrorMap:
    """Validate a manufacturing order.

    Rules:
        1. product_name is not blank
        2. units_requested > 0
        3. bottle_size_ml > 0
        4. manufacturing_date is set
        5. formula percentages sum to 100 within FORMULA_TOTAL_TOLERANCE
        6. CONTRACT orders: distribution units sum exactly to units_requested

    Args:
        order: Order to check

    Returns:
        Dict mapping field name to a human-readable message; empty when valid

    Example:
        >>> sorted(validate_order(ManufacturingOrder()))
        ['bottle_size_ml', 'formula', 'manufacturing_date', 'product_name', 'units_requested']
    """
    errors: ErrorMap = {}

    if not order.product_name or not order.product_name.strip():
        errors[FIELD_PRODUCT_NAME] = "Product name is required."

    if not _is_positive(order.units_requested):
        errors[FIELD_UNITS_REQUESTED] = "Units requested must be greater than 0."

    if not _is_positive(order.bottle_size_ml):
        errors[FIELD_BOTTLE_SIZE] = "Bottle size must be greater than 0."

    if order.manufacturing_date is None:
        errors[FIELD_MANUFACTURING_DATE] = "Manufacturing date is required."

    formula_total = formula_total_percentage(order.formula)
    if abs(formula_total - FORMULA_TOTAL_TARGET) > FORMULA_TOTAL_TOLERANCE:
        errors[FIELD_FORMULA] = (
            f"Formula percentages must total 100% (currently {formula_total:.2f}%)."
        )

    if order.is_contract:
        distributed = sum(_finite_units(line.units) for line in order.distribution)
        if distributed != order.units_requested:
            errors[FIELD_DISTRIBUTION] = (
                f"Distribution total ({distributed:g}) does not match "
                f"units requested ({order.units_requested})."
            )

    return errors


def is_order_valid(order: ManufacturingOrder) -> bool:
    """True when validate_order() reports no errors."""
    return not validate_order(order)
