"""
Tests for the manufacturing order lifecycle.

Tests cover:
- The fixed DRAFT -> ... -> CLOSED sequence
- CLOSED as a terminal state
- Rejections returning the original order
- Re-validation inside transition()
- Manufacturing date stamping on DRAFT -> IN_PROGRESS
"""

import logging
from dataclasses import replace
from datetime import date

from perfumery.models.enums import OrderStatus
from perfumery.services.manufacturing.order import FormulaLine
from perfumery.services.manufacturing.lifecycle import (
    NEXT_ACTION_LABELS,
    RejectionReason,
    next_status,
    transition,
)


class TestNextStatus:
    """Tests for next_status()."""

    def test_closed_has_no_successor(self):
        assert next_status(OrderStatus.CLOSED) is None

    def test_every_open_state_has_an_action_label(self):
        for status in OrderStatus:
            if status != OrderStatus.CLOSED:
                assert NEXT_ACTION_LABELS[status]


class TestTransition:
    """Tests for transition()."""

    def test_visits_every_state_once(self, make_order):
        """Repeated transitions walk the whole lifecycle without skips."""
        order = make_order()
        visited = [order.status]

        for _ in range(6):
            result = transition(order, is_valid=True)
            assert result.accepted
            order = result.order
            visited.append(order.status)

        assert visited == [
            OrderStatus.DRAFT,
            OrderStatus.IN_PROGRESS,
            OrderStatus.MACERATING,
            OrderStatus.QC,
            OrderStatus.PACKAGING,
            OrderStatus.DONE,
            OrderStatus.CLOSED,
        ]

    def test_done_to_closed_then_terminal(self, make_order):
        """Closing a DONE order works once; the next attempt is rejected."""
        done = replace(make_order(), status=OrderStatus.DONE)

        closed = transition(done, is_valid=True)
        again = transition(closed.order, is_valid=True)

        assert closed.accepted
        assert closed.order.status == OrderStatus.CLOSED
        assert again.rejected
        assert again.reason == RejectionReason.TERMINAL_STATE
        assert again.order is closed.order
        assert again.status == OrderStatus.CLOSED

    def test_caller_invalid_flag_rejects(self, make_order):
        order = make_order()

        result = transition(order, is_valid=False)

        assert result.rejected
        assert result.reason == RejectionReason.VALIDATION_FAILED
        assert result.order is order
        assert order.status == OrderStatus.DRAFT

    def test_caller_valid_flag_does_not_bypass_validation(self, make_order):
        """An invalid order is rejected even when the caller says it is valid."""
        order = make_order(product_name="")

        result = transition(order, is_valid=True)

        assert result.rejected
        assert result.reason == RejectionReason.VALIDATION_FAILED
        assert "product_name" in result.errors
        assert result.order is order

    def test_start_stamps_missing_manufacturing_date(self, make_order):
        order = make_order(manufacturing_date=None)

        result = transition(order, today=date(2024, 6, 1))

        assert result.accepted
        assert result.order.status == OrderStatus.IN_PROGRESS
        assert result.order.manufacturing_date == date(2024, 6, 1)
        assert order.manufacturing_date is None

    def test_start_keeps_existing_manufacturing_date(self, make_order):
        order = make_order(manufacturing_date=date(2024, 5, 1))

        result = transition(order, today=date(2024, 6, 1))

        assert result.order.manufacturing_date == date(2024, 5, 1)

    def test_later_transitions_do_not_stamp(self, make_order):
        """Only DRAFT -> IN_PROGRESS fills in the date."""
        order = replace(make_order(manufacturing_date=None), status=OrderStatus.IN_PROGRESS)

        result = transition(order, today=date(2024, 6, 1))

        assert result.rejected
        assert "manufacturing_date" in result.errors

    def test_previous_status_reported(self, make_order):
        result = transition(replace(make_order(), status=OrderStatus.QC))

        assert result.previous_status == OrderStatus.QC
        assert result.status == OrderStatus.PACKAGING

    def test_rejection_is_logged(self, make_order, caplog):
        closed = replace(make_order(), status=OrderStatus.CLOSED)

        with caplog.at_level(logging.WARNING):
            transition(closed)

        assert "transition: terminal_state" in caplog.text

    def test_nan_formula_cannot_start(self, make_order):
        order = make_order(formula=[FormulaLine(id="a", percentage=float("nan"))])

        result = transition(order)

        assert result.rejected
        assert result.reason == RejectionReason.VALIDATION_FAILED
        assert "formula" in result.errors

    def test_advanced_order_shares_no_lists_with_input(self, make_order):
        order = make_order()

        advanced = transition(order).order
        advanced.formula.append(FormulaLine(id="extra", percentage=5.0))
        advanced.packaging_items[0].qty_per_unit = 2

        assert [line.id for line in order.formula] == ["l1", "l2"]
        assert order.packaging_items[0].qty_per_unit == 1
