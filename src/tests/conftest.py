"""Pytest configuration and fixtures for the perfumery tracker tests."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

from perfumery.models.base import Base
from perfumery.models.enums import FormulaKind
from perfumery.services.manufacturing.catalog import InventoryRecord, ProductRecord
from perfumery.services.manufacturing.order import FormulaLine, PackagingItem, new_order
from perfumery.utils.config import reset_config


@pytest.fixture(autouse=True)
def fresh_config():
    """Each test reads configuration from its own environment."""
    reset_config()
    yield
    reset_config()


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    engine = create_engine("sqlite:///:memory:", echo=False)

    import perfumery.models  # noqa: F401

    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import perfumery.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    yield Session

    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()

    db_module.get_session_factory = original_get_session


# =============================================================================
# Plain records for the pure engine
# =============================================================================


@pytest.fixture
def rose_oil():
    return ProductRecord(
        id=1,
        name="Rose Oil",
        sku="RM-ROSE",
        category="Raw Material",
        base_unit="g",
        density=0.9,
        unit_price=Decimal("2.000"),
    )


@pytest.fixture
def perfumers_alcohol():
    return ProductRecord(
        id=2,
        name="Perfumer's Alcohol",
        sku="RM-ETOH",
        category="Raw Material",
        base_unit="ml",
        density=0.789,
        unit_price=Decimal("0.010"),
    )


@pytest.fixture
def bottle_50ml():
    return ProductRecord(
        id=3,
        name="50ml Bottle",
        sku="PK-B50",
        category="Packaging",
        base_unit="pcs",
        unit_price=Decimal("0.500"),
    )


@pytest.fixture
def products(rose_oil, perfumers_alcohol, bottle_50ml):
    return [rose_oil, perfumers_alcohol, bottle_50ml]


@pytest.fixture
def branch_stock():
    """Stock at branch 1; branch 2 holds rose oil only."""
    return [
        InventoryRecord(product_id=1, branch_id=1, quantity=1000.0),
        InventoryRecord(product_id=2, branch_id=1, quantity=10000.0),
        InventoryRecord(product_id=3, branch_id=1, quantity=500.0),
        InventoryRecord(product_id=1, branch_id=2, quantity=5000.0),
    ]


@pytest.fixture
def make_order():
    """Build a valid INTERNAL order; keyword arguments override fields."""

    def _make(**overrides):
        fields = dict(
            product_name="Oud Noir",
            bottle_size_ml=50,
            units_requested=100,
            branch_id=1,
            manufacturing_date=date(2024, 5, 1),
            formula=[
                FormulaLine(
                    id="l1",
                    material_id=1,
                    percentage=20.0,
                    material_name="Rose Oil",
                    kind=FormulaKind.AROMA_OIL,
                ),
                FormulaLine(
                    id="l2",
                    material_id=2,
                    percentage=80.0,
                    material_name="Perfumer's Alcohol",
                    kind=FormulaKind.ETHANOL,
                ),
            ],
            packaging_items=[PackagingItem(product_id=3, qty_per_unit=1, name="50ml Bottle")],
        )
        fields.update(overrides)
        return new_order(**fields)

    return _make


# =============================================================================
# Database-backed catalog
# =============================================================================


@pytest.fixture
def db_catalog(test_db):
    """Branch "Main Workshop" (id 1) with the three catalog products stocked.

    Product ids match the plain records above: 1 rose oil, 2 alcohol,
    3 bottle.
    """
    from perfumery.services import inventory_item_service, product_service

    branch = inventory_item_service.create_branch("Main Workshop")
    rose = product_service.create_product(
        {
            "name": "Rose Oil",
            "sku": "RM-ROSE",
            "category": "Raw Material",
            "base_unit": "g",
            "density": 0.9,
            "unit_price": Decimal("2.000"),
        }
    )
    alcohol = product_service.create_product(
        {
            "name": "Perfumer's Alcohol",
            "sku": "RM-ETOH",
            "category": "Raw Material",
            "base_unit": "ml",
            "density": 0.789,
            "unit_price": Decimal("0.010"),
        }
    )
    bottle = product_service.create_product(
        {
            "name": "50ml Bottle",
            "sku": "PK-B50",
            "category": "Packaging",
            "base_unit": "pcs",
            "unit_price": Decimal("0.500"),
        }
    )
    inventory_item_service.set_quantity(rose.id, branch.id, 1000.0)
    inventory_item_service.set_quantity(alcohol.id, branch.id, 10000.0)
    inventory_item_service.set_quantity(bottle.id, branch.id, 500.0)

    return {"branch": branch, "rose": rose, "alcohol": alcohol, "bottle": bottle}
