"""Unit tests for currency rounding"""

from household_budget.utils.money import ceil_currency, round_currency


def test_round_currency_half_up():
    # Built-in round() gives 2.67 here because of binary representation
    assert round_currency(2.675) == 2.68
    assert round_currency(1.005) == 1.01
    assert round_currency(1.004) == 1.0


def test_round_currency_negative_amounts():
    assert round_currency(-2.675) == -2.68


def test_ceil_currency():
    assert ceil_currency(88.8412) == 88.85
    assert ceil_currency(100.0) == 100.0
