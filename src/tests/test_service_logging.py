"""Tests for service layer structured logging.

These tests verify that lifecycle transitions and order persistence emit
structured log entries with the order context attached.
"""

import logging
from datetime import date

from perfumery.models.enums import OrderStatus
from perfumery.services import manufacturing_order_service
from perfumery.services.logging_utils import get_service_logger, log_operation
from perfumery.services.manufacturing.lifecycle import transition


class TestLoggingUtilities:
    """Tests for logging utility functions."""

    def test_get_service_logger_returns_logger(self):
        """get_service_logger returns a configured Logger instance."""
        logger = get_service_logger("test_module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "perfumery.services.test_module"

    def test_get_service_logger_extracts_module_name(self):
        """get_service_logger extracts module name from full path."""
        logger = get_service_logger("perfumery.services.manufacturing.lifecycle")
        assert logger.name == "perfumery.services.lifecycle"

    def test_log_operation_logs_at_info_level(self, caplog):
        """log_operation logs at INFO level by default."""
        logger = get_service_logger("test")

        with caplog.at_level(logging.INFO):
            log_operation(logger, operation="test_op", outcome="success", order_number="MO-1")

        assert "test_op: success" in caplog.text
        assert caplog.records[0].levelno == logging.INFO

    def test_log_operation_logs_at_custom_level(self, caplog):
        """log_operation respects custom log level."""
        logger = get_service_logger("test")

        with caplog.at_level(logging.DEBUG):
            log_operation(
                logger, operation="debug_op", outcome="debug_outcome", level=logging.DEBUG
            )

        assert "debug_op: debug_outcome" in caplog.text

    def test_log_operation_includes_extra_context(self, caplog):
        """log_operation includes extra context in log records."""
        logger = get_service_logger("test")

        with caplog.at_level(logging.INFO):
            log_operation(
                logger,
                operation="context_test",
                outcome="success",
                branch_id=2,
                missing_materials=["Rose Oil"],
            )

        assert len(caplog.records) == 1
        record = caplog.records[0]
        assert record.operation == "context_test"
        assert record.outcome == "success"
        assert record.branch_id == 2
        assert record.missing_materials == ["Rose Oil"]


class TestLifecycleLogging:
    """Tests for transition logging."""

    def test_accepted_transition_logged(self, make_order, caplog):
        order = make_order(order_number="MO-20240501-001")

        with caplog.at_level(logging.INFO, logger="perfumery.services.lifecycle"):
            transition(order, today=date(2024, 5, 1))

        record = caplog.records[-1]
        assert record.getMessage() == "transition: success"
        assert record.from_status == "DRAFT"
        assert record.to_status == "IN_PROGRESS"

    def test_rejection_logged_as_warning(self, make_order, caplog):
        order = make_order(order_number="MO-20240501-001")
        order.status = OrderStatus.CLOSED

        with caplog.at_level(logging.INFO, logger="perfumery.services.lifecycle"):
            transition(order)

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.outcome == "terminal_state"
        assert record.order_number == "MO-20240501-001"


class TestOrderServiceLogging:
    """Tests for persistence logging in the order service."""

    def test_create_order_logged(self, db_catalog, make_order, caplog):
        with caplog.at_level(logging.INFO):
            saved = manufacturing_order_service.create_order(make_order(), today=date(2024, 5, 1))

        messages = [r for r in caplog.records if r.getMessage() == "create_order: success"]
        assert len(messages) == 1
        assert messages[0].order_number == saved.order_number
        assert messages[0].batch_code == saved.batch_code
