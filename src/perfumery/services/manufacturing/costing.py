"""
Cost roll-up for manufacturing orders.

Costs are a simple additive roll-up: materials and packaging are priced from
the product catalog, labour/overhead/other are entered by the user, and the
per-ml, per-bottle and suggested retail figures divide the total by the
best-known output (recorded actuals when present, otherwise expectations).
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from perfumery.services.manufacturing.catalog import index_products
from perfumery.services.manufacturing.formula import ScaledLine
from perfumery.services.manufacturing.order import ManufacturingOrder, OrderCosts
from perfumery.utils.constants import COST_DECIMAL_PLACES, DEFAULT_RETAIL_MARKUP, UNIT_ML

_QUANTUM = Decimal(1).scaleb(-COST_DECIMAL_PLACES)


def _money(value: Decimal) -> Decimal:
    return value.quantize(_QUANTUM, rounding=ROUND_HALF_UP)


def _dec(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def _unit_price(product) -> Decimal:
    if product is None:
        return Decimal("0")
    return _dec(getattr(product, "unit_price", None))


def _safe_divide(numerator: Decimal, denominator) -> Decimal:
    denominator = _dec(denominator)
    if denominator <= 0:
        return Decimal("0")
    return numerator / denominator


def material_cost(scaled_lines: Iterable[ScaledLine], products: Optional[Iterable]) -> Decimal:
    """Price the formula: required quantity (in the product's base unit) x unit price."""
    by_id = index_products(products)
    total = Decimal("0")
    for scaled in scaled_lines:
        product = by_id.get(scaled.material_id)
        quantity = scaled.required_ml if getattr(product, "base_unit", None) == UNIT_ML else scaled.required_g
        total += _dec(quantity) * _unit_price(product)
    return total


def packaging_cost(order: ManufacturingOrder, products: Optional[Iterable]) -> Decimal:
    """Price the packaging plan: qty_per_unit x units_requested x unit price."""
    by_id = index_products(products)
    units = _dec(order.units_requested or 0)
    total = Decimal("0")
    for item in order.packaging_items:
        total += _dec(item.qty_per_unit or 0) * units * _unit_price(by_id.get(item.product_id))
    return total


def calculate_costs(
    order: ManufacturingOrder,
    scaled_lines: Iterable[ScaledLine],
    products: Optional[Iterable],
    labor=None,
    overhead=None,
    other=None,
    retail_markup: float = DEFAULT_RETAIL_MARKUP,
) -> OrderCosts:
    """Roll up the order's costs.

    Transaction boundary: Pure computation (no database access).

    Labour, overhead and other default to the values already on the order.

    Args:
        order: Order being costed (its yield block should be current)
        scaled_lines: Formula scaled to the batch volume
        products: Product records carrying unit_price and base_unit
        labor, overhead, other: Optional overrides for the manual cost fields
        retail_markup: Multiplier applied to the per-bottle cost

    Returns:
        OrderCosts with every figure quantized to COST_DECIMAL_PLACES
    """
    labor = _dec(labor) if labor is not None else order.costs.labor
    overhead = _dec(overhead) if overhead is not None else order.costs.overhead
    other = _dec(other) if other is not None else order.costs.other

    materials = material_cost(scaled_lines, products)
    packaging = packaging_cost(order, products)
    total = materials + labor + overhead + packaging + other

    order_yield = order.order_yield
    output_ml = order_yield.actual_ml if order_yield.actual_ml else order_yield.expected_ml
    output_units = order_yield.actual_units if order_yield.actual_units else order_yield.expected_units

    per_ml = _safe_divide(total, output_ml)
    per_bottle = _safe_divide(total, output_units)

    return OrderCosts(
        materials=_money(materials),
        labor=_money(labor),
        overhead=_money(overhead),
        packaging=_money(packaging),
        other=_money(other),
        total=_money(total),
        per_ml=_money(per_ml),
        per_bottle=_money(per_bottle),
        suggested_retail=_money(per_bottle * _dec(retail_markup)),
    )
