"""Phone normalisation and validation."""

import pytest

from app.telephony.phone import is_valid_phone, normalize_phone


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("5551234567", "+15551234567"),
        ("(555) 123-4567", "+15551234567"),
        ("555.123.4567", "+15551234567"),
        ("15551234567", "+15551234567"),
        ("+1 555 123 4567", "+15551234567"),
        ("1-555-123-4567", "+15551234567"),
        ("+44 20 7946 0958", "+442079460958"),
    ],
)
def test_normalize_common_formats(raw, expected):
    assert normalize_phone(raw) == expected


def test_ten_digits_get_country_code():
    for digits in ["0000000000", "2125550100", "9999999999"]:
        assert normalize_phone(digits) == "+1" + digits


def test_eleven_digits_starting_with_one_get_plus():
    for digits in ["10000000000", "12125550100", "19999999999"]:
        assert normalize_phone(digits) == "+" + digits


@pytest.mark.parametrize(
    "raw",
    ["5551234567", "(555) 123-4567", "+44 20 7946 0958", "123", "", "call me", "+1-800-FLOWERS"],
)
def test_normalize_is_idempotent(raw):
    once = normalize_phone(raw)
    assert normalize_phone(once) == once


def test_normalize_never_raises_on_garbage():
    assert normalize_phone("no digits here") == "+"
    assert normalize_phone("12-34") == "+1234"
    assert normalize_phone(None) == "+"


@pytest.mark.parametrize(
    "raw,valid",
    [
        ("(555) 123-4567", True),
        ("+1 555 123 4567", True),
        ("+44 20 7946 0958", True),
        ("555-1234", False),
        ("", False),
        ("not a phone", False),
    ],
)
def test_is_valid_phone(raw, valid):
    assert is_valid_phone(raw) is valid
