"""
Input validation functions for catalog and stock records.

This module provides validation functions for:
- Numeric validation (positive, non-negative)
- String validation (length, required fields)
- Base unit and product category validation

Each validator returns (is_valid, error_message). Order validation lives in
perfumery.services.manufacturing.validation because it reports an error
map keyed by field rather than a flat list.
"""

from typing import Any, Optional, Tuple

from .constants import (
    BASE_UNITS,
    ERROR_INVALID_CATEGORY,
    ERROR_INVALID_NON_NEGATIVE,
    ERROR_INVALID_NUMBER,
    ERROR_INVALID_POSITIVE,
    ERROR_INVALID_UNIT,
    ERROR_REQUIRED_FIELD,
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_SKU_LENGTH,
    PRODUCT_CATEGORIES,
)


def validate_required_string(value: Optional[str], field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a string field is not empty.

    Args:
        value: The string value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    return True, ""


def validate_string_length(
    value: str, max_length: int, field_name: str = "Field"
) -> Tuple[bool, str]:
    """Validate that a string doesn't exceed maximum length."""
    if value and len(value) > max_length:
        return False, f"{field_name}: Must be {max_length} characters or less"
    return True, ""


def validate_positive_number(value: Any, field_name: str = "Field") -> Tuple[bool, str]:
    """Validate that a value is a positive number (> 0)."""
    try:
        num_value = float(value)
        if num_value <= 0:
            return False, f"{field_name}: {ERROR_INVALID_POSITIVE}"
        return True, ""
    except (ValueError, TypeError):
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"


def validate_non_negative_number(value: Any, field_name: str = "Field") -> Tuple[bool, str]:
    """Validate that a value is a non-negative number (>= 0)."""
    try:
        num_value = float(value)
        if num_value < 0:
            return False, f"{field_name}: {ERROR_INVALID_NON_NEGATIVE}"
        return True, ""
    except (ValueError, TypeError):
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"


def validate_unit(unit: str, field_name: str = "Unit") -> Tuple[bool, str]:
    """Validate that a unit is one of the stock base units."""
    if not unit:
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"

    if unit.lower() not in BASE_UNITS:
        return False, f"{field_name}: {ERROR_INVALID_UNIT}"

    return True, ""


def validate_product_category(category: str, field_name: str = "Category") -> Tuple[bool, str]:
    """Validate that a category is one of PRODUCT_CATEGORIES."""
    if not category:
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"

    if category not in PRODUCT_CATEGORIES:
        return False, f"{field_name}: {ERROR_INVALID_CATEGORY}"

    return True, ""


def validate_product_data(data: dict) -> Tuple[bool, list]:
    """
    Validate all fields for a catalog product.

    Args:
        data: Dictionary containing product fields

    Returns:
        Tuple of (is_valid, list_of_errors)

    Required fields:
        - name (str): Display name
        - category (str): One of PRODUCT_CATEGORIES
        - base_unit (str): One of BASE_UNITS

    Optional fields:
        - sku (str): Stock keeping unit code
        - density (float): g/ml, must be > 0 if provided
        - unit_price (Decimal/float): Cost per base unit, must be >= 0
        - description (str): Notes
    """
    errors = []

    # Required: Name
    is_valid, error = validate_required_string(data.get("name"), "Name")
    if not is_valid:
        errors.append(error)
    else:
        is_valid, error = validate_string_length(data.get("name"), MAX_NAME_LENGTH, "Name")
        if not is_valid:
            errors.append(error)

    is_valid, error = validate_product_category(data.get("category", ""))
    if not is_valid:
        errors.append(error)

    is_valid, error = validate_unit(data.get("base_unit", ""), "Base Unit")
    if not is_valid:
        errors.append(error)

    if data.get("sku"):
        is_valid, error = validate_string_length(data.get("sku"), MAX_SKU_LENGTH, "SKU")
        if not is_valid:
            errors.append(error)

    if data.get("density") is not None:
        is_valid, error = validate_positive_number(data.get("density"), "Density")
        if not is_valid:
            errors.append(error)

    if data.get("unit_price") is not None:
        is_valid, error = validate_non_negative_number(data.get("unit_price"), "Unit Price")
        if not is_valid:
            errors.append(error)

    if data.get("description"):
        is_valid, error = validate_string_length(
            data.get("description"), MAX_DESCRIPTION_LENGTH, "Description"
        )
        if not is_valid:
            errors.append(error)

    return len(errors) == 0, errors
