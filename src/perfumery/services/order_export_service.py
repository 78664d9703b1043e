"""
Order Export Service - JSON export and import of manufacturing orders.

Export writes every stored order in its dictionary form:

    {
        "version": "1.0",
        "exported_at": "2024-05-01T09:30:00+00:00",
        "source": "Perfumery Manufacturing Tracker v0.1.0",
        "manufacturing_orders": [ {...}, ... ]
    }

Import reads the same shape back. Each order goes through the normal
create path, so it is re-validated and its yield block re-derived.
"""

import json
from typing import Dict, List

from perfumery.models import Branch, ManufacturingOrderRecord
from perfumery.services import manufacturing_order_service
from perfumery.services.manufacturing.catalog import normalize_branch_id
from perfumery.services.manufacturing.order import ManufacturingOrder
from perfumery.utils.constants import APP_NAME, APP_VERSION
from perfumery.utils.datetime_utils import utc_now

from .database import session_scope
from .exceptions import ServiceError
from .logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)

EXPORT_VERSION = "1.0"
ORDERS_KEY = "manufacturing_orders"
IMPORT_MODES = ("merge", "replace")


# ============================================================================
# Result Classes
# ============================================================================


class ExportResult:
    """Result of an export operation."""

    def __init__(self, file_path: str, record_count: int):
        self.file_path = file_path
        self.record_count = record_count
        self.success = True
        self.error = None

    def get_summary(self) -> str:
        """Get a summary string of the export results."""
        if not self.success:
            return f"Export failed: {self.error}"
        return f"Exported {self.record_count} manufacturing orders to {self.file_path}"


class ImportResult:
    """Result of an import operation."""

    def __init__(self):
        self.total_records = 0
        self.successful = 0
        self.skipped = 0
        self.failed = 0
        self.errors: List[Dict[str, str]] = []
        self.warnings: List[Dict[str, str]] = []

    def add_success(self):
        """Record a successful import."""
        self.successful += 1
        self.total_records += 1

    def add_skip(self, record_name: str, reason: str):
        """Record a skipped record."""
        self.skipped += 1
        self.total_records += 1
        self.warnings.append(
            {"record_name": record_name, "warning_type": "skipped", "message": reason}
        )

    def add_error(self, record_name: str, error: str):
        """Record a failed import."""
        self.failed += 1
        self.total_records += 1
        self.errors.append(
            {"record_name": record_name, "error_type": "import_error", "message": error}
        )

    def get_summary(self) -> str:
        """Get a user-friendly summary string of the import results."""
        lines = [
            "=" * 60,
            "Import Summary",
            "=" * 60,
            f"Total Records: {self.total_records}",
            f"Successful:    {self.successful}",
            f"Skipped:       {self.skipped}",
            f"Failed:        {self.failed}",
        ]

        if self.errors:
            lines.append("\nErrors:")
            for error in self.errors:
                lines.append(f"  - {error['record_name']}")
                lines.append(f"    {error['message']}")

        if self.warnings and len(self.warnings) <= 10:
            lines.append("\nWarnings:")
            for warning in self.warnings:
                lines.append(f"  - {warning['record_name']}")
                lines.append(f"    {warning['message']}")

        lines.append("=" * 60)
        return "\n".join(lines)


class ImportVersionError(Exception):
    """Raised when import file has incompatible version."""

    pass


# ============================================================================
# Export
# ============================================================================


def export_orders_to_json(file_path: str) -> ExportResult:
    """
    Export all manufacturing orders to a JSON file.

    Args:
        file_path: Path to output JSON file

    Returns:
        ExportResult with the number of orders written
    """
    try:
        orders = manufacturing_order_service.list_orders()

        export_data = {
            "version": EXPORT_VERSION,
            "exported_at": utc_now().isoformat(),
            "source": f"{APP_NAME} v{APP_VERSION}",
            ORDERS_KEY: [order.to_dict() for order in orders],
        }

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(export_data, f, indent=2, ensure_ascii=False)

        log_operation(
            logger, operation="export_orders", outcome="success", record_count=len(orders)
        )
        return ExportResult(file_path, len(orders))

    except (OSError, ServiceError) as e:
        log_operation(logger, operation="export_orders", outcome="failed", error=str(e))
        result = ExportResult(file_path, 0)
        result.success = False
        result.error = str(e)
        return result


# ============================================================================
# Import
# ============================================================================


def import_orders_from_json(file_path: str, mode: str = "merge") -> ImportResult:
    """
    Import manufacturing orders from a JSON export.

    Supports two import modes:
    - "merge": Add new orders, skip order numbers that already exist (default)
    - "replace": Delete every stored order first, then import

    Orders that fail validation or reference an unknown branch are reported
    as errors; the rest of the file still imports.

    Args:
        file_path: Path to a JSON file produced by export_orders_to_json()
        mode: Import mode - "merge" (default) or "replace"

    Returns:
        ImportResult with per-record outcomes

    Raises:
        ImportVersionError: If the file version is not supported
        ValueError: If mode is not "merge" or "replace"
    """
    if mode not in IMPORT_MODES:
        raise ValueError(f"Invalid import mode: {mode}. Must be 'merge' or 'replace'.")

    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    version = data.get("version", "unknown")
    if version != EXPORT_VERSION:
        raise ImportVersionError(
            f"Unsupported file version: {version}. Expected {EXPORT_VERSION}."
        )

    result = ImportResult()

    with session_scope() as session:
        if mode == "replace":
            session.query(ManufacturingOrderRecord).delete()
            session.flush()

        for raw in data.get(ORDERS_KEY, []):
            record_name = raw.get("order_number") or raw.get("product_name") or "<unnamed>"

            try:
                order = ManufacturingOrder.from_dict(raw)
            except (TypeError, ValueError) as e:
                result.add_error(record_name, f"Malformed order: {e}")
                continue

            if order.order_number:
                existing = (
                    session.query(ManufacturingOrderRecord.id)
                    .filter(ManufacturingOrderRecord.order_number == order.order_number)
                    .first()
                )
                if existing:
                    result.add_skip(record_name, "Already exists")
                    continue

            branch_id = normalize_branch_id(order.branch_id)
            if branch_id is not None and session.get(Branch, branch_id) is None:
                result.add_error(record_name, f"Branch with ID {branch_id} not found")
                continue

            try:
                manufacturing_order_service.create_order(
                    order, session=session, preserve_status=True
                )
            except ServiceError as e:
                result.add_error(record_name, str(e))
                continue

            result.add_success()

    log_operation(
        logger,
        operation="import_orders",
        outcome="success",
        mode=mode,
        successful=result.successful,
        skipped=result.skipped,
        failed=result.failed,
    )
    return result
