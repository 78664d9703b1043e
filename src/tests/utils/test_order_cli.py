"""
Tests for the manufacturing order CLI.

Tests cover:
- export / import commands
- list, plan and advance output
- Exit codes
"""

import json
from datetime import date

import pytest

from perfumery.services import manufacturing_order_service
from perfumery.utils.order_cli import (
    advance_order,
    export_orders,
    import_orders,
    list_orders,
    print_plan,
)


@pytest.fixture
def stored_order(db_catalog, make_order):
    return manufacturing_order_service.create_order(make_order(), today=date(2024, 5, 1))


class TestExportImportCommands:
    """Tests for the export and import commands."""

    def test_export_writes_file(self, stored_order, tmp_path, capsys):
        output = tmp_path / "orders.json"

        assert export_orders(str(output)) == 0

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["manufacturing_orders"][0]["order_number"] == stored_order.order_number
        assert "Exported 1 manufacturing orders" in capsys.readouterr().out

    def test_import_missing_file_fails(self, test_db, tmp_path, capsys):
        assert import_orders(str(tmp_path / "absent.json")) == 1
        assert "ERROR" in capsys.readouterr().out

    def test_import_merge_skips_existing(self, stored_order, tmp_path):
        output = tmp_path / "orders.json"
        export_orders(str(output))

        assert import_orders(str(output)) == 0


class TestInspectionCommands:
    """Tests for list, plan and advance."""

    def test_list_empty(self, test_db, capsys):
        assert list_orders() == 0
        assert "No manufacturing orders found." in capsys.readouterr().out

    def test_list_shows_orders(self, stored_order, capsys):
        list_orders()

        out = capsys.readouterr().out
        assert stored_order.order_number in out
        assert "Oud Noir" in out

    def test_plan_output(self, stored_order, capsys):
        assert print_plan(stored_order.order_number) == 0

        out = capsys.readouterr().out
        assert "Rose Oil" in out
        assert "50ml Bottle" in out
        assert "Next step: Start production" in out

    def test_plan_unknown_order(self, test_db, capsys):
        assert print_plan("MO-20240501-404") == 1
        assert "not found" in capsys.readouterr().out

    def test_advance(self, stored_order, capsys):
        assert advance_order(stored_order.order_number) == 0
        assert "Status updated to IN_PROGRESS" in capsys.readouterr().out
