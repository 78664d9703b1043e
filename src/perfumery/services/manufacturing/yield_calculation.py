"""
Yield calculation for manufacturing orders.

This module provides functions for:
- Theoretical batch volume (units x bottle size)
- Expected volume after sequential process losses
- Expected bottle count
- Actual yield percentage once production is recorded
- Re-deriving an order's yield block

Losses are applied multiplicatively: each stage's surviving fraction
multiplies the previous one. Every result is finite; degenerate inputs
(zero bottle size, NaN) produce 0 rather than NaN or Infinity so that
persisted numeric fields are never corrupted.
"""

import logging
import math
from dataclasses import replace

from perfumery.services.logging_utils import get_service_logger, log_operation
from perfumery.services.manufacturing.order import (
    ManufacturingOrder,
    OrderYield,
    ProcessLoss,
    copy_order,
)

logger = get_service_logger(__name__)


def _finite(value: float) -> float:
    """Replace NaN/Infinity with 0."""
    if value is None or math.isnan(value) or math.isinf(value):
        return 0.0
    return value


def theoretical_volume(units: float, bottle_size_ml: float) -> float:
    """Batch volume before any loss: units * bottle_size_ml.

    Missing values count as 0. Zero or negative inputs propagate without
    error; guarding them is the validator's job.

    Examples:
        >>> theoretical_volume(100, 50)
        5000.0
    """
    return _finite(float(units or 0) * float(bottle_size_ml or 0))


def expected_yield(theoretical_ml: float, loss: ProcessLoss) -> float:
    """Volume expected after mixing, filtration and filling losses.

    expected = theoretical * (1 - mixing/100) * (1 - filtration/100) * (1 - filling/100)

    Negative loss inputs are not rejected here.

    Examples:
        >>> round(expected_yield(5000, ProcessLoss(2, 1, 1)), 2)
        4802.49
    """
    surviving = (
        (1 - float(loss.mixing_loss_pct or 0) / 100)
        * (1 - float(loss.filtration_loss_pct or 0) / 100)
        * (1 - float(loss.filling_loss_pct or 0) / 100)
    )
    return _finite(float(theoretical_ml or 0) * surviving)


def expected_units(expected_ml: float, bottle_size_ml: float) -> int:
    """Whole bottles that can be filled from ``expected_ml``.

    Returns 0 when the bottle size is zero or negative.
    """
    if not bottle_size_ml or bottle_size_ml <= 0:
        return 0
    units = _finite(float(expected_ml or 0) / float(bottle_size_ml))
    return int(math.floor(units))


def yield_percentage(actual_ml, theoretical_ml) -> float:
    """Actual volume as a percentage of theoretical volume.

    Returns 0 when either operand is missing or zero, so there is never a
    division by zero or NaN.

    Examples:
        >>> yield_percentage(4500, 5000)
        90.0
        >>> yield_percentage(4500, 0)
        0
        >>> yield_percentage(None, 5000)
        0
    """
    if not actual_ml or not theoretical_ml:
        return 0
    return _finite(float(actual_ml) / float(theoretical_ml) * 100)


def recalculate_yield(order: ManufacturingOrder) -> OrderYield:
    """Re-derive the yield block of ``order``.

    Transaction boundary: Pure computation (no database access).

    theoretical_ml, expected_ml and expected_units are recomputed from the
    units requested, bottle size and process loss; yield_percentage from the
    recorded actual volume. Recorded actual_ml / actual_units pass through.

    When units_requested or bottle_size_ml is not positive the derived
    volumes are left as they were (an incomplete form is not recomputed);
    yield_percentage is still refreshed against the stored theoretical
    volume.

    The result depends only on the inputs, so recomputing an unchanged order
    yields an identical block.

    Args:
        order: Order to recompute

    Returns:
        New OrderYield; the order itself is not modified
    """
    current = order.order_yield

    if (order.units_requested or 0) <= 0 or (order.bottle_size_ml or 0) <= 0:
        return replace(
            current,
            yield_percentage=yield_percentage(current.actual_ml, current.theoretical_ml),
        )

    theoretical_ml = theoretical_volume(order.units_requested, order.bottle_size_ml)
    expected_ml = expected_yield(theoretical_ml, order.process_loss)
    result = OrderYield(
        theoretical_ml=theoretical_ml,
        expected_ml=expected_ml,
        expected_units=expected_units(expected_ml, order.bottle_size_ml),
        actual_ml=current.actual_ml,
        actual_units=current.actual_units,
        yield_percentage=yield_percentage(current.actual_ml, theoretical_ml),
    )

    log_operation(
        logger,
        operation="recalculate_yield",
        outcome="success",
        level=logging.DEBUG,
        order_number=order.order_number,
        theoretical_ml=result.theoretical_ml,
        expected_ml=result.expected_ml,
        expected_units=result.expected_units,
    )
    return result


def with_recalculated_yield(order: ManufacturingOrder) -> ManufacturingOrder:
    """Return a copy of ``order`` carrying a freshly derived yield block."""
    return copy_order(order, order_yield=recalculate_yield(order))
