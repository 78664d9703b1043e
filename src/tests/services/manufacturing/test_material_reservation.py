"""
Tests for material reservation and packaging requirement checks.

The order used here is 100 x 50 ml (5000 ml) of 20% rose oil and 80%
perfumer's alcohol, packed one bottle per unit:
- rose oil is stocked in grams: 1000 ml x 0.9 g/ml = 900 g required
- alcohol is stocked in ml: 4000 ml required
- bottles: 100 required
"""

import logging

import pytest

from perfumery.services.manufacturing.formula import scale_formula
from perfumery.services.manufacturing.material_reservation import (
    check_reservation,
    find_available_quantity,
    has_shortage,
)
from perfumery.services.manufacturing.order import PackagingItem
from perfumery.services.manufacturing.packaging_requirements import check_packaging


@pytest.fixture
def scaled(make_order, products):
    order = make_order()
    return scale_formula(order.formula, 5000, products)


class TestFindAvailableQuantity:
    """Tests for find_available_quantity()."""

    def test_matching_row(self, branch_stock):
        assert find_available_quantity(branch_stock, 1, 2) == 5000.0

    def test_no_matching_row(self, branch_stock):
        assert find_available_quantity(branch_stock, 2, 2) == 0.0

    @pytest.mark.parametrize("branch_id", [None, 0, -1, "", "abc"])
    def test_unset_branch_is_fail_closed(self, branch_stock, branch_id):
        """No branch means nothing is available."""
        assert find_available_quantity(branch_stock, 1, branch_id) == 0.0


class TestCheckReservation:
    """Tests for check_reservation()."""

    def test_units_follow_product_base_unit(self, scaled, products, branch_stock):
        rows = check_reservation(scaled, products, branch_stock, 1)

        assert [row.unit for row in rows] == ["g", "ml"]
        assert rows[0].required == pytest.approx(900.0)
        assert rows[1].required == pytest.approx(4000.0)

    def test_sufficient_stock(self, scaled, products, branch_stock):
        rows = check_reservation(scaled, products, branch_stock, 1)

        assert all(row.is_sufficient for row in rows)
        assert not has_shortage(rows)

    def test_shortage_at_other_branch(self, scaled, products, branch_stock):
        """Branch 2 has rose oil but no alcohol."""
        rows = check_reservation(scaled, products, branch_stock, 2)

        assert rows[0].is_sufficient
        assert not rows[1].is_sufficient
        assert rows[1].shortfall == pytest.approx(4000.0)
        assert has_shortage(rows)

    def test_unassigned_branch_reports_zero_available(self, scaled, products, branch_stock):
        rows = check_reservation(scaled, products, branch_stock, None)

        assert [row.available for row in rows] == [0.0, 0.0]
        assert not any(row.is_sufficient for row in rows)

    def test_unknown_product_counts_in_grams(self, make_order, branch_stock):
        """Without a product record the requirement is reported in grams."""
        order = make_order()
        scaled = scale_formula(order.formula, 1000)

        rows = check_reservation(scaled, [], branch_stock, 1)

        assert [row.unit for row in rows] == ["g", "g"]

    def test_shortage_is_logged(self, scaled, products, branch_stock, caplog):
        """Shortages are advisory and logged at WARNING."""
        with caplog.at_level(logging.WARNING):
            check_reservation(scaled, products, branch_stock, 2)

        assert "check_reservation: insufficient_materials" in caplog.text


class TestCheckPackaging:
    """Tests for check_packaging()."""

    def test_required_is_ratio_times_units(self, branch_stock):
        items = [PackagingItem(product_id=3, qty_per_unit=2, name="Cap")]

        rows = check_packaging(items, 100, branch_stock, 1)

        assert rows[0].required == 200.0
        assert rows[0].available == 500.0
        assert rows[0].is_sufficient

    def test_shortage(self, branch_stock):
        items = [PackagingItem(product_id=3, qty_per_unit=1, name="50ml Bottle")]

        rows = check_packaging(items, 600, branch_stock, 1)

        assert not rows[0].is_sufficient
        assert rows[0].shortfall == 100.0

    def test_unassigned_branch_is_fail_closed(self, branch_stock):
        items = [PackagingItem(product_id=3, qty_per_unit=1, name="50ml Bottle")]

        rows = check_packaging(items, 100, branch_stock, 0)

        assert rows[0].available == 0.0
        assert not rows[0].is_sufficient

    def test_empty_plan(self, branch_stock):
        assert check_packaging([], 100, branch_stock, 1) == []
