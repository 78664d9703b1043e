"""Services package - Business logic layer for the perfumery tracker.

Architecture:
- manufacturing: Pure engine (formula, yield, stock checks, validation,
  lifecycle, costing). No database access.
- Services: Stateless functions that load and store records and call the engine
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy

Service Modules:
- product_service: Raw material and packaging catalog
- inventory_item_service: Branches and on-hand stock per branch
- manufacturing_order_service: Order persistence, lifecycle and stock checks
- order_export_service: JSON export/import of manufacturing orders

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- logging_utils: Structured operation logging
"""

from . import (
    database,
    product_service,
    inventory_item_service,
    manufacturing_order_service,
    order_export_service,
)

from .exceptions import (
    BranchNotFound,
    DatabaseError,
    OrderClosedError,
    OrderNotFound,
    ProductNotFound,
    ServiceError,
    ValidationError,
)

__all__ = [
    "database",
    "product_service",
    "inventory_item_service",
    "manufacturing_order_service",
    "order_export_service",
    "BranchNotFound",
    "DatabaseError",
    "OrderClosedError",
    "OrderNotFound",
    "ProductNotFound",
    "ServiceError",
    "ValidationError",
]
