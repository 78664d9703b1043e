"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .branch import Branch
from .product import Product
from .inventory_item import InventoryItem
from .manufacturing_order import ManufacturingOrderRecord
from .enums import (
    Clarity,
    Concentration,
    FormulaKind,
    ManufacturingType,
    OdorMatch,
    OrderStatus,
    QCResult,
)

__all__ = [
    "Base",
    "BaseModel",
    # Catalog and stock
    "Branch",
    "Product",
    "InventoryItem",
    # Manufacturing
    "ManufacturingOrderRecord",
    # Enums
    "Clarity",
    "Concentration",
    "FormulaKind",
    "ManufacturingType",
    "OdorMatch",
    "OrderStatus",
    "QCResult",
]
