"""Tests for price formatting."""
from src.utils.pricing import calculate_discount_percentage, format_price


def test_usd_with_thousands_separator():
    assert format_price(1234.5) == "$1,234.50"


def test_without_decimals():
    assert format_price(24.99, show_decimals=False) == "$25"


def test_other_known_currencies():
    assert format_price(10, "EUR") == "€10.00"
    assert format_price(10, "gbp") == "£10.00"


def test_unknown_currency_uses_code():
    assert format_price(12, "CAD") == "CAD 12.00"


def test_negative_amount_keeps_sign_before_symbol():
    assert format_price(-5) == "-$5.00"


def test_discount_percentage():
    assert calculate_discount_percentage(100, 75) == 25
    assert calculate_discount_percentage(30, 20) == 33


def test_no_discount():
    assert calculate_discount_percentage(20, 20) == 0
    assert calculate_discount_percentage(20, 25) == 0
