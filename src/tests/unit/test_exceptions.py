"""Unit tests for the service exception hierarchy."""

import inspect

import pytest

from perfumery.services import exceptions as exc_module
from perfumery.services.exceptions import (
    DatabaseError,
    OrderClosedError,
    OrderNotFound,
    ServiceError,
    ValidationError,
)


def _exception_classes():
    return [
        obj
        for _, obj in inspect.getmembers(exc_module, inspect.isclass)
        if issubclass(obj, Exception) and obj.__module__ == exc_module.__name__
    ]


@pytest.mark.parametrize("exc_class", _exception_classes())
def test_all_exceptions_inherit_from_service_error(exc_class):
    assert issubclass(exc_class, ServiceError)


class TestValidationError:
    """Tests for ValidationError message forms."""

    def test_from_list(self):
        error = ValidationError(["Name: This field is required"])

        assert error.errors == ["Name: This field is required"]
        assert error.field_errors == {}
        assert str(error) == "Validation failed: Name: This field is required"

    def test_from_error_map(self):
        error = ValidationError({"bottle_size_ml": "Bottle size must be greater than 0"})

        assert error.field_errors == {"bottle_size_ml": "Bottle size must be greater than 0"}
        assert error.errors == ["bottle_size_ml: Bottle size must be greater than 0"]


class TestOrderErrors:
    """Tests for order lookup and protection errors."""

    def test_messages_name_the_order(self):
        assert "MO-20240501-001" in str(OrderNotFound("MO-20240501-001"))
        assert "closed" in str(OrderClosedError("MO-20240501-001"))

    def test_database_error_keeps_original(self):
        original = RuntimeError("disk full")
        error = DatabaseError("Failed to save order", original)

        assert error.original_error is original
        assert str(error) == "Database error: Failed to save order"
