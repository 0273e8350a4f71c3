"""
Business-rule validation for part records.

Provides checks beyond schema validation. Each function returns a tuple of
(is_valid, field, error_message) so callers can report the offending field.
"""
from typing import Optional, Tuple
from . import schemas

ValidationResult = Tuple[bool, Optional[str], str]

REQUIRED_TEXT_FIELDS = ("name", "sku", "description")


def validate_part(part: schemas.PartBase) -> ValidationResult:
    """
    Validate the editable fields of a draft or stored part.

    Args:
        part: Part payload to check

    Returns:
        Tuple of (is_valid, field, error_message)
    """
    for field in REQUIRED_TEXT_FIELDS:
        value = getattr(part, field, None)
        if value is None or not str(value).strip():
            return False, field, "must not be empty"

    if part.stock is None or part.stock < 0:
        return False, "stock", "cannot be negative"

    if part.price is None or part.price < 0:
        return False, "price", "cannot be negative"

    return True, None, ""


def validate_sale_quantity(quantity: int) -> ValidationResult:
    if quantity <= 0:
        return False, "quantity", "must be positive"
    return True, None, ""
