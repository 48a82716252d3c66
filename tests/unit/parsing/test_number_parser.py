"""
Unit-тесты для NumberParser.

ЦКП: Decimal по разделителю формата, без потери точности и без NaN.
"""

from decimal import Decimal

import pytest

from delivery_parser.s4_extraction.number_parser import MalformedNumericError, NumberParser


@pytest.fixture
def comma_parser():
    return NumberParser(decimal_separator=",", currency_symbols=["€", "EUR"])


@pytest.fixture
def dot_parser():
    return NumberParser(decimal_separator=".", currency_symbols=["$"])


@pytest.mark.parametrize("token, expected", [
    ("65,40", Decimal("65.40")),
    ("65.40", Decimal("65.40")),
    ("1.234,56", Decimal("1234.56")),
    ("1.234", Decimal("1234")),
    ("12.345.678,90", Decimal("12345678.90")),
    ("60,00€", Decimal("60.00")),
    ("49,20 EUR", Decimal("49.20")),
    ("7", Decimal("7")),
    ("-3,5", Decimal("-3.5")),
])
def test_comma_decimal_format(comma_parser, token, expected):
    """Формат с запятой: точка - тысячи только при группах по 3 цифры."""
    assert comma_parser.parse(token) == expected


@pytest.mark.parametrize("token, expected", [
    ("12.3900", Decimal("12.3900")),
    ("1,234.56", Decimal("1234.56")),
    ("1,234", Decimal("1234")),
    ("27,60", Decimal("27.60")),
    ("$74.34", Decimal("74.34")),
])
def test_dot_decimal_format(dot_parser, token, expected):
    """Формат с точкой: правила зеркальны."""
    assert dot_parser.parse(token) == expected


@pytest.mark.parametrize("token", ["", "abc", "NaN", "Infinity", "1e5", "1,2,3.4.5", "--"])
def test_invalid_tokens_return_none(comma_parser, token):
    assert comma_parser.parse(token) is None


def test_parse_required_raises_on_malformed(comma_parser):
    with pytest.raises(MalformedNumericError) as exc_info:
        comma_parser.parse_required("1,2,3.4.5")
    assert exc_info.value.token == "1,2,3.4.5"


def test_result_is_decimal_not_float(comma_parser):
    value = comma_parser.parse("16,40")
    assert isinstance(value, Decimal)
    assert value * 3 == Decimal("49.20")
