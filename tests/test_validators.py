import pytest

from app.utils.validators import (
    normalize_phone_number,
    format_phone_for_display,
    validate_phone_number,
    validate_email,
    validate_pin,
    is_valid_pin,
    parse_price,
    require_text,
    reject_null,
)


def test_phone_numbers_are_stored_as_digits():
    assert normalize_phone_number("(555) 123-4567") == "5551234567"
    assert validate_phone_number("555.123.4567") == "5551234567"


def test_short_phone_number_rejected():
    with pytest.raises(ValueError, match="at least 10 digits"):
        validate_phone_number("555-1234")


def test_format_phone_for_display():
    assert format_phone_for_display("5551234567") == "(555) 123-4567"
    assert format_phone_for_display("12345") == "12345"


def test_email_is_optional_but_checked():
    assert validate_email("") is None
    assert validate_email(" jamie@example.com ") == "jamie@example.com"
    with pytest.raises(ValueError):
        validate_email("not-an-email")


def test_pin_must_be_four_digits():
    assert validate_pin("0042") == "0042"
    assert not is_valid_pin("123")
    assert not is_valid_pin("12a4")
    assert not is_valid_pin("9876\n")
    assert not is_valid_pin("\u0661\u0662\u0663\u0664")
    with pytest.raises(ValueError):
        validate_pin("12345")


@pytest.mark.parametrize("raw,expected", [("12.50", 12.5), ("$4.999", 5.0), (7, 7.0), ("1,200", 1200.0)])
def test_parse_price(raw, expected):
    assert parse_price(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", -1, True, float("nan")])
def test_parse_price_rejects_bad_values(raw):
    with pytest.raises(ValueError):
        parse_price(raw)


def test_require_text_strips():
    assert require_text("  Laundry ", "Name") == "Laundry"
    with pytest.raises(ValueError, match="Name is required"):
        require_text("   ", "Name")


def test_reject_null_names_the_field():
    assert reject_null("Sam", "first_name") == "Sam"
    assert reject_null(False, "is_active") is False
    with pytest.raises(ValueError, match="Phone number is required"):
        reject_null(None, "phone_number")
