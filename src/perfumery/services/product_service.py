"""Product Service - Catalog of raw materials and packaging.

This module provides the catalog lookups the manufacturing order form needs:
raw materials to pick formula lines from and packaging materials to build
the packaging plan from.

All functions are stateless and use session_scope() for transaction management,
or share the caller's session when one is passed.

Example Usage:
  >>> from perfumery.services.product_service import create_product, list_raw_materials
  >>> from decimal import Decimal
  >>>
  >>> product = create_product({
  ...     "name": "Rose Oil",
  ...     "sku": "RM-ROSE",
  ...     "category": "Raw Material",
  ...     "base_unit": "g",
  ...     "density": 0.92,
  ...     "unit_price": Decimal("1.250"),
  ... })
  >>> [p.name for p in list_raw_materials()]
  ['Rose Oil']
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from perfumery.models import Product
from perfumery.utils.constants import CATEGORY_PACKAGING, CATEGORY_RAW_MATERIAL, UNIT_PIECES
from perfumery.utils.validators import validate_product_data

from .database import session_scope
from .exceptions import DatabaseError, ProductNotFound, ValidationError
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


def create_product(product_data: Dict[str, Any], session: Optional[Session] = None) -> Product:
    """Create a catalog product.

    Args:
        product_data: Dictionary containing:
            - name (str, required): Display name
            - category (str, required): "Raw Material", "Packaging" or "Finished Good"
            - base_unit (str, required): "ml", "g" or "pcs"
            - sku (str, optional): Stock keeping unit code
            - density (float, optional): g/ml
            - unit_price (Decimal, optional): Cost of one base unit (default 0)
            - description (str, optional)
        session: Optional database session (uses session_scope if not provided)

    Returns:
        Product: The created product with its id assigned

    Raises:
        ValidationError: If required fields are missing or invalid
        DatabaseError: If database operation fails
    """
    data = dict(product_data)
    data.setdefault("base_unit", UNIT_PIECES)
    is_valid, errors = validate_product_data(data)
    if not is_valid:
        raise ValidationError(errors)

    if session is not None:
        return _create_product_impl(data, session)
    try:
        with session_scope() as session:
            return _create_product_impl(data, session)
    except SQLAlchemyError as e:
        raise DatabaseError(f"Failed to create product: {str(e)}", e)


def _create_product_impl(data: Dict[str, Any], session: Session) -> Product:
    unit_price = data.get("unit_price")
    product = Product(
        name=data["name"].strip(),
        sku=data.get("sku"),
        category=data["category"],
        base_unit=data["base_unit"].lower(),
        density=float(data["density"]) if data.get("density") is not None else None,
        unit_price=Decimal(str(unit_price)) if unit_price is not None else Decimal("0"),
        description=data.get("description"),
    )
    session.add(product)
    session.flush()

    log_operation(
        logger,
        operation="create_product",
        outcome="success",
        product_id=product.id,
        category=product.category,
    )
    return product


def get_product(product_id: int, session: Optional[Session] = None) -> Product:
    """Retrieve a product by id.

    Raises:
        ProductNotFound: If no product has this id
    """
    if session is not None:
        return _get_product_impl(product_id, session)
    with session_scope() as session:
        return _get_product_impl(product_id, session)


def _get_product_impl(product_id: int, session: Session) -> Product:
    product = session.query(Product).filter_by(id=product_id).first()
    if product is None:
        raise ProductNotFound(product_id)
    return product


def list_products(
    category: Optional[str] = None, session: Optional[Session] = None
) -> List[Product]:
    """List products ordered by name, optionally restricted to one category."""
    if session is not None:
        return _list_products_impl(category, session)
    with session_scope() as session:
        return _list_products_impl(category, session)


def _list_products_impl(category: Optional[str], session: Session) -> List[Product]:
    query = session.query(Product)
    if category:
        query = query.filter(Product.category == category)
    return query.order_by(Product.name).all()


def list_raw_materials(session: Optional[Session] = None) -> List[Product]:
    """Products selectable as formula materials."""
    return list_products(CATEGORY_RAW_MATERIAL, session=session)


def list_packaging_materials(session: Optional[Session] = None) -> List[Product]:
    """Products selectable for the packaging plan."""
    return list_products(CATEGORY_PACKAGING, session=session)
