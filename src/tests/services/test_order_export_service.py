"""Tests for JSON export and import of manufacturing orders."""

import json
from datetime import date

import pytest

from perfumery.models.enums import OrderStatus
from perfumery.services import manufacturing_order_service as mos
from perfumery.services.order_export_service import (
    ImportVersionError,
    export_orders_to_json,
    import_orders_from_json,
)

MAY_1 = date(2024, 5, 1)


@pytest.fixture
def exported(db_catalog, make_order, tmp_path):
    """Two stored orders, the first advanced to IN_PROGRESS, exported to a file."""
    first = mos.create_order(make_order(), today=MAY_1)
    mos.create_order(make_order(product_name="Amber Dusk"), today=MAY_1)
    mos.advance_order_status(first.order_number)

    file_path = tmp_path / "orders.json"
    result = export_orders_to_json(str(file_path))
    assert result.success
    return file_path


class TestExport:
    """Tests for export_orders_to_json()."""

    def test_file_layout(self, exported):
        data = json.loads(exported.read_text(encoding="utf-8"))

        assert data["version"] == "1.0"
        assert "exported_at" in data
        assert [o["order_number"] for o in data["manufacturing_orders"]] == [
            "MO-20240501-001",
            "MO-20240501-002",
        ]
        assert data["manufacturing_orders"][0]["status"] == "IN_PROGRESS"

    def test_summary_counts_orders(self, db_catalog, make_order, tmp_path):
        mos.create_order(make_order(), today=MAY_1)

        result = export_orders_to_json(str(tmp_path / "one.json"))

        assert result.record_count == 1
        assert "Exported 1 manufacturing orders" in result.get_summary()

    def test_unwritable_path_reports_failure(self, test_db, tmp_path):
        result = export_orders_to_json(str(tmp_path / "missing" / "orders.json"))

        assert not result.success
        assert result.error


class TestImport:
    """Tests for import_orders_from_json()."""

    def test_merge_skips_existing(self, exported):
        result = import_orders_from_json(str(exported))

        assert result.successful == 0
        assert result.skipped == 2

    def test_replace_restores_orders(self, exported, make_order):
        """Orders created after the export are gone after a replace."""
        mos.create_order(make_order(product_name="Scratch"), today=MAY_1)

        result = import_orders_from_json(str(exported), mode="replace")

        assert result.successful == 2
        orders = mos.list_orders()
        assert [o.order_number for o in orders] == ["MO-20240501-001", "MO-20240501-002"]
        assert orders[0].status == OrderStatus.IN_PROGRESS

    def test_imported_status_kept(self, db_catalog, tmp_path, make_order):
        order = make_order(order_number="MO-20240501-001", batch_code="BATCH-1")
        order.status = OrderStatus.CLOSED
        file_path = tmp_path / "closed.json"
        file_path.write_text(
            json.dumps({"version": "1.0", "manufacturing_orders": [order.to_dict()]}),
            encoding="utf-8",
        )

        result = import_orders_from_json(str(file_path))

        assert result.successful == 1
        assert mos.get_order("MO-20240501-001").status == OrderStatus.CLOSED

    def test_invalid_order_reported_and_others_imported(self, db_catalog, tmp_path, make_order):
        good = make_order(order_number="MO-20240501-001", batch_code="BATCH-1").to_dict()
        bad = make_order(order_number="MO-20240501-002", units_requested=0).to_dict()
        file_path = tmp_path / "mixed.json"
        file_path.write_text(
            json.dumps({"version": "1.0", "manufacturing_orders": [good, bad]}),
            encoding="utf-8",
        )

        result = import_orders_from_json(str(file_path))

        assert result.successful == 1
        assert result.failed == 1
        assert result.errors[0]["record_name"] == "MO-20240501-002"
        assert mos.get_order("MO-20240501-001").batch_code == "BATCH-1"

    def test_unknown_branch_reported(self, db_catalog, tmp_path, make_order):
        order = make_order(order_number="MO-20240501-001", branch_id=77).to_dict()
        file_path = tmp_path / "branch.json"
        file_path.write_text(
            json.dumps({"version": "1.0", "manufacturing_orders": [order]}), encoding="utf-8"
        )

        result = import_orders_from_json(str(file_path))

        assert result.failed == 1
        assert "Branch with ID 77 not found" in result.get_summary()

    def test_wrong_version(self, test_db, tmp_path):
        file_path = tmp_path / "old.json"
        file_path.write_text(json.dumps({"version": "0.9"}), encoding="utf-8")

        with pytest.raises(ImportVersionError):
            import_orders_from_json(str(file_path))

    def test_invalid_mode(self, test_db, tmp_path):
        with pytest.raises(ValueError):
            import_orders_from_json(str(tmp_path / "x.json"), mode="append")
