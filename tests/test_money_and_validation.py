import pytest

from app.core.validation import (
    abn_is_valid,
    is_valid_phone,
    normalize_abn,
    validate_name,
    validate_password,
)
from app.services.money import format_cents, round_half_away, to_cents


@pytest.mark.parametrize("value, expected", [
    ("$12.50", 1250),
    ("1,234.56", 123456),
    ("1234.56", 123456),
    ("AUD 7", 700),
    (12.5, 1250),
    (3, 300),
    ("-4.00", 0),
    ("0.005", 1),
    ("abc", None),
    ("", None),
    (None, None),
    (float("nan"), None),
])
def test_to_cents(value, expected):
    assert to_cents(value) == expected


def test_round_half_away():
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3
    assert round_half_away(2.4) == 2


def test_format_cents():
    assert format_cents(123450) == "$1,234.50"
    assert format_cents(5) == "$0.05"
    assert format_cents(None) == ""


def test_abn_checksum():
    assert abn_is_valid("51 824 753 556")
    assert abn_is_valid("53004085616")
    assert not abn_is_valid("51 824 753 557")
    assert not abn_is_valid("1234")
    assert not abn_is_valid(None)


def test_normalize_abn():
    assert normalize_abn("51 824 753 556 99") == "51824753556"
    assert normalize_abn(None) == ""


def test_phone():
    assert is_valid_phone("(02) 9999 0000")
    assert is_valid_phone("+61 400 000 000")
    assert is_valid_phone(None)
    assert not is_valid_phone("12345")
    assert not is_valid_phone("call me")


def test_password_rules():
    assert validate_password("Secret123") is None
    assert validate_password("Short1A") == "Must be at least 8 characters."
    assert validate_password("alllower1") == "Must include an uppercase letter."
    assert validate_password("NoDigitsHere") == "Must include a number."
    assert validate_password("") == "Password is required."


def test_name_rules():
    assert validate_name("Jo") is None
    assert validate_name(" J ") is not None
    assert validate_name("") == "Name is required."
