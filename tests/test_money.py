"""Tests for money helpers"""
from decimal import Decimal

import pytest

from skinhub.services.money import format_money, multiply, parse_price, round_money, to_decimal, to_float


def test_to_decimal_from_float_keeps_literal():
    assert to_decimal(0.1) == Decimal("0.1")


def test_to_decimal_invalid_is_zero():
    assert to_decimal("abc") == Decimal("0")
    assert to_decimal(None) == Decimal("0")


@pytest.mark.parametrize("value, expected", [
    ("12.50", Decimal("12.50")),
    (0, Decimal("0")),
    (3.3, Decimal("3.3")),
])
def test_parse_price_valid(value, expected):
    assert parse_price(value) == expected


@pytest.mark.parametrize("value", [-0.01, "x", None, True, "Infinity", [1]])
def test_parse_price_invalid(value):
    assert parse_price(value) is None


def test_round_money_half_up():
    assert round_money("2.345") == Decimal("2.35")


def test_multiply():
    assert multiply("19.99", 3) == Decimal("59.97")


def test_format_money():
    assert format_money(Decimal("10")) == "Rs. 10"
    assert format_money("1234.5") == "Rs. 1,234.50"
    assert format_money(5, label="") == "5"


def test_to_float():
    assert to_float(Decimal("9.99")) == 9.99
