"""
Catalog and inventory records consumed by the manufacturing engine.

The engine reads products and per-branch stock owned by other parts of the
system. These dataclasses document the minimum fields it needs; any object
with the same attribute names (ORM rows included) works in their place.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Optional

from perfumery.utils.constants import UNIT_PIECES


@dataclass
class ProductRecord:
    """Minimum product fields read by the engine."""

    id: int
    name: str
    sku: str = ""
    category: str = ""
    base_unit: str = UNIT_PIECES
    density: Optional[float] = None
    unit_price: Decimal = Decimal("0")


@dataclass
class InventoryRecord:
    """On-hand quantity of one product at one branch, in the product's base unit."""

    product_id: int
    branch_id: int
    quantity: float = 0.0


def index_products(products: Optional[Iterable]) -> Dict[int, object]:
    """Map product id -> product for repeated lookups.

    Later duplicates win, matching a plain dict build.
    """
    if not products:
        return {}
    return {product.id: product for product in products}


def normalize_branch_id(branch_id) -> Optional[int]:
    """Return the branch id as an int, or None when unset or invalid.

    None, 0, negative numbers and non-numeric values all count as unset.
    """
    if branch_id is None or isinstance(branch_id, bool):
        return None
    try:
        value = int(branch_id)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None
