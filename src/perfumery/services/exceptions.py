"""Service layer exception classes for the perfumery manufacturing tracker.

The pure manufacturing engine reports problems as values (error maps,
TransitionResult, zeroed metrics). These exceptions belong to the
persistence services, where a missing record or a failed write cannot be
expressed as a value.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    ├── OrderNotFound
    ├── ProductNotFound
    ├── BranchNotFound
    ├── OrderClosedError
    └── DatabaseError
"""

from typing import Dict, List, Union


class ServiceError(Exception):
    """Base exception for all service layer errors."""

    pass


class ValidationError(ServiceError):
    """Raised when data validation fails.

    Accepts either a list of messages or an error map (field -> message).
    """

    def __init__(self, errors: Union[List[str], Dict[str, str]]):
        if isinstance(errors, dict):
            self.field_errors = dict(errors)
            self.errors = [f"{field}: {message}" for field, message in errors.items()]
        else:
            self.field_errors = {}
            self.errors = list(errors)
        error_msg = "; ".join(self.errors)
        super().__init__(f"Validation failed: {error_msg}")


class OrderNotFound(ServiceError):
    """Raised when a manufacturing order cannot be found by order number.

    Example:
        >>> raise OrderNotFound("MO-20240501-001")
        OrderNotFound: Manufacturing order 'MO-20240501-001' not found
    """

    def __init__(self, order_number: str):
        self.order_number = order_number
        super().__init__(f"Manufacturing order '{order_number}' not found")


class ProductNotFound(ServiceError):
    """Raised when product cannot be found by ID."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")


class BranchNotFound(ServiceError):
    """Raised when branch cannot be found by ID."""

    def __init__(self, branch_id: int):
        self.branch_id = branch_id
        super().__init__(f"Branch with ID {branch_id} not found")


class OrderClosedError(ServiceError):
    """Raised when attempting to edit or delete a CLOSED order."""

    def __init__(self, order_number: str):
        self.order_number = order_number
        super().__init__(f"Manufacturing order '{order_number}' is closed and cannot be modified")


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
