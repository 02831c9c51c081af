"""
Form-level validation helpers shared by the Pydantic schemas and routes.

These mirror the checks the counter app runs before submitting a form:
required fields, phone/email shape, 4-digit PINs and numeric prices.
"""
import re
from typing import Any, Optional

EMAIL_PATTERN = re.compile(r".+@.+\..+")
PIN_PATTERN = re.compile(r"[0-9]{4}")
MIN_PHONE_DIGITS = 10


def normalize_phone_number(phone_number: Optional[str]) -> str:
    """Strip everything but digits: '(555) 123-4567' -> '5551234567'"""
    if not phone_number:
        return ""
    return re.sub(r"\D", "", phone_number)


def format_phone_for_display(phone_number: Optional[str]) -> str:
    """Format a phone number as (XXX) XXX-XXXX; shorter inputs are returned normalized"""
    normalized = normalize_phone_number(phone_number)
    if len(normalized) < MIN_PHONE_DIGITS:
        return normalized
    return f"({normalized[:3]}) {normalized[3:6]}-{normalized[6:10]}"


def validate_phone_number(phone_number: Optional[str]) -> str:
    normalized = normalize_phone_number(phone_number)
    if not normalized:
        raise ValueError("Phone number is required")
    if len(normalized) < MIN_PHONE_DIGITS:
        raise ValueError(f"Phone number must have at least {MIN_PHONE_DIGITS} digits")
    return normalized


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.fullmatch(email) is not None


def validate_email(email: Optional[str]) -> Optional[str]:
    """Empty emails are allowed (the field is optional); anything else must look like an address"""
    if email is None or not email.strip():
        return None
    email = email.strip()
    if not is_valid_email(email):
        raise ValueError("Please enter a valid email address")
    return email


def is_valid_pin(pin_code: Optional[str]) -> bool:
    return bool(pin_code) and PIN_PATTERN.fullmatch(pin_code) is not None


def validate_pin(pin_code: Optional[str]) -> str:
    if not is_valid_pin(pin_code):
        raise ValueError("PIN must be exactly 4 digits")
    return pin_code


def parse_price(value: Any) -> float:
    """
    Accept numbers or numeric strings ('12.50', '$12.50') and return a float rounded to cents.

    Raises:
        ValueError: value is blank, non-numeric or negative
    """
    if isinstance(value, bool):
        raise ValueError("Price must be a valid number")
    if isinstance(value, str):
        value = value.strip().lstrip("$").replace(",", "")
        if not value:
            raise ValueError("Price is required")
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValueError("Price must be a valid number")
    if price != price or price in (float("inf"), float("-inf")):
        raise ValueError("Price must be a valid number")
    if price < 0:
        raise ValueError("Price cannot be negative")
    return round(price, 2)


def require_text(value: Optional[str], field_label: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field_label} is required")
    return value.strip()


def field_label(field_name: str) -> str:
    return field_name.replace("_", " ").capitalize()


def reject_null(value: Any, field_name: str) -> Any:
    """Partial updates may omit a required field but never set it to null"""
    if value is None:
        raise ValueError(f"{field_label(field_name)} is required")
    return value
