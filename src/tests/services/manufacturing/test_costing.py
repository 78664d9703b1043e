"""
Tests for the cost roll-up.

Reference order: 100 x 50 ml, no process loss, so 5000 ml / 100 bottles.
- rose oil: 900 g x 2.000 = 1800.000
- alcohol: 4000 ml x 0.010 = 40.000
- bottles: 100 x 0.500 = 50.000
- labour 100, overhead 10 -> total 2000.000
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from perfumery.services.manufacturing.costing import calculate_costs
from perfumery.services.manufacturing.formula import scale_formula
from perfumery.services.manufacturing.order import OrderCosts, OrderYield
from perfumery.services.manufacturing.yield_calculation import with_recalculated_yield


@pytest.fixture
def priced_order(make_order):
    return with_recalculated_yield(make_order())


def _costs(order, products, **kwargs):
    scaled = scale_formula(order.formula, order.order_yield.theoretical_ml, products)
    return calculate_costs(order, scaled, products, **kwargs)


class TestCalculateCosts:
    """Tests for calculate_costs()."""

    def test_full_roll_up(self, priced_order, products):
        costs = _costs(
            priced_order, products, labor=Decimal("100"), overhead=Decimal("10")
        )

        assert costs.materials == Decimal("1840.000")
        assert costs.packaging == Decimal("50.000")
        assert costs.labor == Decimal("100.000")
        assert costs.overhead == Decimal("10.000")
        assert costs.other == Decimal("0.000")
        assert costs.total == Decimal("2000.000")
        assert costs.per_ml == Decimal("0.400")
        assert costs.per_bottle == Decimal("20.000")
        assert costs.suggested_retail == Decimal("60.000")

    def test_values_quantized_to_three_places(self, priced_order, products):
        costs = _costs(priced_order, products, labor=Decimal("0.12345"))

        assert costs.labor == Decimal("0.123")
        assert costs.labor.as_tuple().exponent == -3

    def test_actuals_take_precedence(self, priced_order, products):
        """Recorded output replaces the expectation in per-unit figures."""
        order = replace(
            priced_order,
            order_yield=replace(priced_order.order_yield, actual_ml=4000.0, actual_units=80),
        )

        costs = _costs(order, products, labor=Decimal("100"), overhead=Decimal("10"))

        assert costs.per_ml == Decimal("0.500")
        assert costs.per_bottle == Decimal("25.000")

    def test_stored_manual_costs_used_by_default(self, priced_order, products):
        order = replace(priced_order, costs=OrderCosts(labor=Decimal("60"), other=Decimal("5")))

        costs = _costs(order, products)

        assert costs.labor == Decimal("60.000")
        assert costs.other == Decimal("5.000")
        assert costs.total == Decimal("1955.000")

    def test_zero_output_gives_zero_unit_costs(self, make_order, products):
        order = make_order(order_yield=OrderYield())

        costs = calculate_costs(order, [], products, labor=Decimal("10"))

        assert costs.total == Decimal("60.000")
        assert costs.per_ml == Decimal("0")
        assert costs.per_bottle == Decimal("0")

    def test_custom_markup(self, priced_order, products):
        costs = _costs(priced_order, products, retail_markup=2.5)

        assert costs.per_bottle == Decimal("18.900")
        assert costs.suggested_retail == Decimal("47.250")
