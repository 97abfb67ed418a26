"""Unit tests for income variance detection"""

import pytest
from household_budget.domain.exceptions import UnknownIncomeSourceError
from household_budget.domain.models import (
    Envelope,
    IncomeSource,
    IncomeTransaction,
    VarianceThresholds,
)
from household_budget.domain.income_variance import (
    detect_income_variance,
    find_income_source,
    format_variance_for_display,
    get_suggested_actions,
    group_envelopes_by_priority,
)


@pytest.fixture
def salary() -> IncomeSource:
    """Fortnightly salary: $3000 per pay, normalized to a monthly figure"""
    return IncomeSource(id="salary", name="Salary", amount=6500.0, raw_amount=3000.0)


def paycheck(amount: float, source_id: str = "salary") -> IncomeTransaction:
    return IncomeTransaction(id="txn-1", amount=amount, income_source_id=source_id)


def test_bonus_detected(salary):
    variance = detect_income_variance(paycheck(3200), salary)

    assert variance is not None
    assert variance.variance_type == "bonus"
    assert variance.expected_amount == 3000
    assert variance.difference == 200
    assert variance.percentage_change == pytest.approx(6.6667, abs=1e-3)
    assert variance.transaction_id == "txn-1"


def test_shortfall_detected(salary):
    variance = detect_income_variance(paycheck(2800), salary)

    assert variance.variance_type == "shortfall"
    assert variance.difference == -200


def test_small_change_ignored(salary):
    assert detect_income_variance(paycheck(3000.50), salary) is None
    assert detect_income_variance(paycheck(3000), salary) is None


def test_percentage_threshold_must_also_be_met():
    """Test $500 on a $100k paycheck clears the dollar threshold but not 1%"""
    source = IncomeSource(id="contract", name="Contract", amount=100000.0)

    assert detect_income_variance(paycheck(100500, "contract"), source) is None


def test_absolute_threshold_must_also_be_met():
    """Test 25% on a $2 payment is still under a dollar"""
    source = IncomeSource(id="interest", name="Savings Interest", amount=2.0)

    assert detect_income_variance(paycheck(2.5, "interest"), source) is None


def test_thresholds_are_inclusive():
    source = IncomeSource(id="pay", name="Pay", amount=100.0)

    variance = detect_income_variance(paycheck(101, "pay"), source)

    assert variance is not None
    assert variance.difference == 1


def test_custom_thresholds(salary):
    strict = VarianceThresholds(percentage_threshold=0.1, absolute_threshold=50)

    assert detect_income_variance(paycheck(3200), salary, strict) is None
    assert detect_income_variance(paycheck(3400), salary, strict) is not None


@pytest.mark.parametrize("amount", [0.0, -100.0])
def test_no_expected_income(amount):
    source = IncomeSource(id="gig", name="Gig", amount=amount)

    assert detect_income_variance(paycheck(500, "gig"), source) is None


def test_amount_used_when_no_raw_amount():
    source = IncomeSource(id="pay", name="Pay", amount=2000.0)

    assert detect_income_variance(paycheck(2100, "pay"), source).expected_amount == 2000


def test_find_income_source(salary):
    assert find_income_source(paycheck(100), [salary]) is salary

    with pytest.raises(UnknownIncomeSourceError):
        find_income_source(paycheck(100, "unknown"), [salary])


def test_bonus_display(salary):
    display = format_variance_for_display(detect_income_variance(paycheck(3200), salary))

    assert display.title == "Extra Income: Salary"
    assert display.expected == "$3000.00"
    assert display.actual == "$3200.00"
    assert display.difference == "+$200.00"
    assert display.percentage == "+6.7%"
    assert display.description == "You received $200.00 more than expected."


def test_shortfall_display(salary):
    display = format_variance_for_display(detect_income_variance(paycheck(2800), salary))

    assert display.title == "Income Shortfall: Salary"
    assert display.difference == "-$200.00"
    assert display.percentage == "-6.7%"
    assert display.description == "You received $200.00 less than expected."


def test_unchanged_pay_display_has_no_sign(salary):
    """Test zero thresholds report an exact match without a stray minus"""
    zero = VarianceThresholds(percentage_threshold=0, absolute_threshold=0)

    display = format_variance_for_display(detect_income_variance(paycheck(3000), salary, zero))

    assert display.difference == "$0.00"
    assert display.percentage == "0.0%"


def test_bonus_actions(salary):
    actions = get_suggested_actions(detect_income_variance(paycheck(3200), salary))

    assert [a.id for a in actions] == ["one_time_bonus", "permanent_increase"]
    assert [a.action for a in actions] == ["one_time", "permanent_change"]
    assert "$200.00" in actions[0].description
    assert "$3200.00" in actions[1].description


def test_shortfall_actions(salary):
    actions = get_suggested_actions(detect_income_variance(paycheck(2800), salary))

    assert [a.id for a in actions] == ["one_time_reduction", "permanent_decrease"]


def test_group_envelopes_by_priority():
    envelopes = [
        Envelope(id="rent", name="Rent", priority="essential", income_allocations={"salary": 900}),
        Envelope(id="dining", name="Dining Out", priority="discretionary", income_allocations={"salary": 80}),
        Envelope(id="hobbies", name="Hobbies", priority="discretionary", income_allocations={"salary": 120}),
        Envelope(id="phone", name="Phone", income_allocations={"salary": 60}),
        Envelope(id="gifts", name="Gifts", priority="discretionary", income_allocations={"bonus": 50}),
    ]

    groups = group_envelopes_by_priority(envelopes, "salary")

    assert [g.priority for g in groups] == ["discretionary", "important", "essential"]
    assert [g.label for g in groups] == ["Flexible", "Important", "Essential (last resort)"]
    assert [c.envelope.id for c in groups[0].candidates] == ["hobbies", "dining"]
    assert groups[1].candidates[0].allocation_from_source == 60


def test_group_envelopes_skips_empty_groups():
    envelopes = [Envelope(id="rent", name="Rent", priority="essential", income_allocations={"salary": 900})]

    groups = group_envelopes_by_priority(envelopes, "salary")

    assert len(groups) == 1
    assert groups[0].priority == "essential"
