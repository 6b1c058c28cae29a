# tests/test_incentives.py
from decimal import Decimal

from core.incentives import EURO, PERCENT, combine_incentive, format_amount, parse_amount
from core.types import Product


def test_parse_amount():
    assert parse_amount("10%", PERCENT) == Decimal("10")
    assert parse_amount(" 12,5 % ", PERCENT) == Decimal("12.5")
    assert parse_amount("50€", EURO) == Decimal("50")
    assert parse_amount("—", EURO) == 0
    assert parse_amount(None, PERCENT) == 0


def test_format_amount_drops_trailing_zeros():
    assert format_amount(Decimal("20.0"), PERCENT) == "20%"
    assert format_amount(Decimal("12.50"), PERCENT) == "12.5%"
    assert format_amount(Decimal("100"), EURO) == "100€"


def test_single_role_keeps_product_values():
    product = Product(id="p1", name="Alpha", commission="10%", bonus="50€")

    combined = combine_incentive(product, [2])

    assert combined.role_combination == (2,)
    assert combined.combined_commission == "10%"
    assert combined.combined_bonus == "50€"


def test_values_add_up_per_contributing_role():
    product = Product(id="p1", name="Alpha", commission="7.5%", bonus="25€")

    combined = combine_incentive(product, [1, 3])

    assert combined.combined_commission == "15%"
    assert combined.combined_bonus == "50€"


def test_non_finite_amounts_count_as_zero():
    assert parse_amount("NaN%", PERCENT) == 0
    assert parse_amount("Infinity€", EURO) == 0
    assert parse_amount("sNaN%", PERCENT) == 0


def test_amounts_beyond_context_precision_still_format():
    huge = "1000000000000000000000000000000%"
    product = Product(id="p1", name="Alpha", commission=huge, bonus="0€")

    assert format_amount(parse_amount(huge, PERCENT), PERCENT) == huge
    combined = combine_incentive(product, [1, 2])
    assert combined.combined_commission == "2000000000000000000000000000000%"
    assert combined.combined_bonus == "0€"
