"""Unit tests for envelope cashflow prediction"""

import pytest
from datetime import date, timedelta
from freezegun import freeze_time
from household_budget.domain.models import (
    Envelope,
    EnvelopeStatus,
    IncomeAllocation,
    PayFrequency,
    RecurringIncome,
)
from household_budget.domain.cashflow import (
    calculate_all_predictions,
    calculate_envelope_prediction,
    calculate_pay_dates,
    calculate_pay_periods_remaining,
    calculate_per_pay_amount,
    classify_envelope_status,
    generate_suggestions,
    resolve_target_amount,
)

TODAY = date(2026, 10, 19)
DUE = date(2026, 11, 16)  # four weeks out


def weekly_pay(envelope_id: str, amount: float, next_date: date = TODAY) -> RecurringIncome:
    """Weekly salary sending `amount` to one envelope each payday"""
    return RecurringIncome(
        id="salary",
        name="Salary",
        amount=1500.0,
        frequency=PayFrequency.WEEKLY,
        next_date=next_date,
        allocation=[IncomeAllocation(envelope_id=envelope_id, amount=amount)],
    )


def test_weekly_pay_dates_include_end_date():
    dates = calculate_pay_dates(PayFrequency.WEEKLY, TODAY, date(2026, 11, 9))
    assert dates == [date(2026, 10, 19), date(2026, 10, 26), date(2026, 11, 2), date(2026, 11, 9)]


def test_monthly_pay_dates_clamp_to_month_end():
    dates = calculate_pay_dates(PayFrequency.MONTHLY, date(2026, 1, 31), date(2026, 4, 30))
    assert dates == [date(2026, 1, 31), date(2026, 2, 28), date(2026, 3, 31), date(2026, 4, 30)]


def test_pay_dates_respect_limit():
    dates = calculate_pay_dates(PayFrequency.WEEKLY, TODAY, date(2030, 1, 1), max_dates=10)
    assert len(dates) == 10


def test_pay_dates_after_end_date():
    assert calculate_pay_dates(PayFrequency.FORTNIGHTLY, DUE, TODAY) == []


def test_pay_periods_remaining():
    assert calculate_pay_periods_remaining(PayFrequency.FORTNIGHTLY, 30) == 2
    assert calculate_pay_periods_remaining(PayFrequency.MONTHLY, 29) == 0
    assert calculate_pay_periods_remaining(PayFrequency.WEEKLY, -3) == 0


def test_per_pay_amount_ongoing_bill():
    assert calculate_per_pay_amount(433, PayFrequency.MONTHLY, PayFrequency.WEEKLY) == pytest.approx(100)
    assert calculate_per_pay_amount(52, PayFrequency.ANNUALLY, PayFrequency.FORTNIGHTLY) == pytest.approx(2)


def test_per_pay_amount_dated_bill():
    assert calculate_per_pay_amount(600, PayFrequency.ANNUALLY, PayFrequency.FORTNIGHTLY, 60) == 150
    # Nothing left to save over: the whole bill is needed now
    assert calculate_per_pay_amount(600, PayFrequency.ANNUALLY, PayFrequency.MONTHLY, 0) == 600


def test_target_falls_back_to_bill_amount():
    envelope = Envelope(id="power", name="Power", bill_amount=250.0, frequency=PayFrequency.MONTHLY)
    assert resolve_target_amount(envelope) == 250.0

    no_frequency = Envelope(id="power", name="Power", bill_amount=250.0)
    assert resolve_target_amount(no_frequency) == 0.0


def test_prediction_on_track(rent_envelope):
    prediction = calculate_envelope_prediction(rent_envelope, [weekly_pay("rent", 200)], today=TODAY)

    # Paydays Oct 19, 26, Nov 2, 9, 16 all land on or before the due date
    assert len(prediction.future_income) == 5
    assert prediction.projected_balance == 1200
    assert prediction.gap == -200
    assert prediction.gap == prediction.target_amount - prediction.projected_balance
    assert prediction.status == EnvelopeStatus.ON_TRACK
    assert prediction.days_until_due == 28
    assert prediction.suggestions == []


def test_prediction_critical_when_scheduled_income_falls_short(rent_envelope):
    prediction = calculate_envelope_prediction(rent_envelope, [weekly_pay("rent", 100)], today=TODAY)

    assert prediction.projected_balance == 700
    assert prediction.gap == 300
    assert prediction.status == EnvelopeStatus.CRITICAL


def test_prediction_behind_when_later_income_can_close_gap(rent_envelope):
    """Test gap at an early horizon is recoverable from paydays before the due date"""
    prediction = calculate_envelope_prediction(
        rent_envelope, [weekly_pay("rent", 200)], end_date=date(2026, 10, 26), today=TODAY
    )

    assert prediction.projected_balance == 600
    assert prediction.gap == 400
    # Nov 2, 9, 16 still bring $600
    assert prediction.status == EnvelopeStatus.BEHIND


def test_prediction_critical_when_later_income_cannot_close_gap(rent_envelope):
    prediction = calculate_envelope_prediction(
        rent_envelope, [weekly_pay("rent", 100)], end_date=date(2026, 10, 26), today=TODAY
    )

    assert prediction.gap == 600
    # Only $300 still to come
    assert prediction.status == EnvelopeStatus.CRITICAL


def test_prediction_critical_when_due_date_passed():
    envelope = Envelope(id="rego", name="Car Rego", target_amount=500, due_date=TODAY - timedelta(days=1), current_balance=100)

    prediction = calculate_envelope_prediction(envelope, [weekly_pay("rego", 100)], today=TODAY)

    assert prediction.days_until_due == -1
    assert prediction.future_income == []
    assert prediction.status == EnvelopeStatus.CRITICAL


def test_prediction_without_due_date_is_behind():
    envelope = Envelope(id="holiday", name="Holiday", target_amount=500, current_balance=100)

    prediction = calculate_envelope_prediction(envelope, [], today=TODAY)

    assert prediction.days_until_due is None
    assert prediction.gap == 400
    assert prediction.status == EnvelopeStatus.BEHIND


def test_prediction_without_due_date_uses_thirty_day_horizon():
    envelope = Envelope(id="groceries", name="Groceries", target_amount=1000)

    prediction = calculate_envelope_prediction(envelope, [weekly_pay("groceries", 50)], today=TODAY)

    # Oct 19 through Nov 18: five weekly paydays
    assert [fi.date for fi in prediction.future_income][-1] == date(2026, 11, 16)
    assert prediction.projected_balance == 250


def test_overfunded_boundary_is_exclusive():
    over = Envelope(id="gifts", name="Gifts", target_amount=1000, current_balance=1000 * 1.06)
    at_boundary = Envelope(id="gifts", name="Gifts", target_amount=1000, current_balance=1000 * 1.05)

    assert calculate_envelope_prediction(over, [], today=TODAY).status == EnvelopeStatus.OVERFUNDED
    assert calculate_envelope_prediction(at_boundary, [], today=TODAY).status == EnvelopeStatus.ON_TRACK


def test_classify_status_boundaries():
    assert classify_envelope_status(0, 1000, 1000, 10) == EnvelopeStatus.ON_TRACK
    assert classify_envelope_status(50, 950, 1000, 0) == EnvelopeStatus.CRITICAL
    assert classify_envelope_status(50, 950, 1000, 10, income_before_deadline=50) == EnvelopeStatus.BEHIND
    assert classify_envelope_status(50, 950, 1000, 10, income_before_deadline=49.99) == EnvelopeStatus.CRITICAL
    assert classify_envelope_status(50, 950, 1000, None) == EnvelopeStatus.BEHIND


def test_income_for_other_envelopes_is_ignored(rent_envelope):
    prediction = calculate_envelope_prediction(rent_envelope, [weekly_pay("groceries", 200)], today=TODAY)

    assert prediction.future_income == []
    assert prediction.projected_balance == 200


def test_paydays_before_today_are_not_future_income(rent_envelope):
    income = weekly_pay("rent", 200, next_date=TODAY - timedelta(days=14))

    prediction = calculate_envelope_prediction(rent_envelope, [income], today=TODAY)

    assert prediction.future_income[0].date == TODAY
    assert len(prediction.future_income) == 5


def test_years_old_next_date_still_schedules_income(rent_envelope):
    """Test a next_date far enough back to exceed the pay-date limit is fast-forwarded"""
    income = weekly_pay("rent", 50, next_date=date(2018, 1, 1))

    prediction = calculate_envelope_prediction(rent_envelope, [income], today=TODAY)

    assert [fi.date for fi in prediction.future_income] == [
        date(2026, 10, 19),
        date(2026, 10, 26),
        date(2026, 11, 2),
        date(2026, 11, 9),
        date(2026, 11, 16),
    ]
    assert prediction.projected_balance == 450


def test_pay_dates_fast_forward_keeps_month_end_anchor():
    dates = calculate_pay_dates(
        PayFrequency.MONTHLY, date(2020, 1, 31), date(2027, 1, 31), from_date=TODAY
    )
    assert dates == [date(2026, 10, 31), date(2026, 11, 30), date(2026, 12, 31), date(2027, 1, 31)]


def test_pay_dates_fast_forward_lands_on_from_date():
    dates = calculate_pay_dates(PayFrequency.FORTNIGHTLY, date(2026, 9, 21), date(2026, 11, 2), from_date=TODAY)
    assert dates == [date(2026, 10, 19), date(2026, 11, 2)]


def test_future_income_sorted_across_incomes(rent_envelope):
    side_gig = RecurringIncome(
        id="gig",
        name="Side Gig",
        amount=300.0,
        frequency=PayFrequency.FORTNIGHTLY,
        next_date=date(2026, 10, 22),
        allocation=[IncomeAllocation(envelope_id="rent", amount=50)],
    )

    prediction = calculate_envelope_prediction(rent_envelope, [weekly_pay("rent", 100), side_gig], today=TODAY)

    dates = [fi.date for fi in prediction.future_income]
    assert dates == sorted(dates)
    assert {fi.income_id for fi in prediction.future_income} == {"salary", "gig"}


def test_suggestions_for_gap(rent_envelope):
    suggestions = generate_suggestions(300, rent_envelope, [weekly_pay("rent", 100)], 28)

    assert [s.type for s in suggestions] == [
        "increase_allocation",
        "one_time_income",
        "reduce_bill",
        "extend_due_date",
        "lifestyle_change",
    ]
    # Four weekly paydays left
    assert suggestions[0].action_amount == 75
    assert suggestions[1].action_amount == 300


def test_suggestions_close_to_due_date(rent_envelope):
    suggestions = generate_suggestions(120.4, rent_envelope, [], 5)

    assert [s.type for s in suggestions] == ["one_time_income", "reduce_bill", "lifestyle_change"]
    assert suggestions[0].action_amount == 121


def test_no_suggestions_without_gap(rent_envelope):
    assert generate_suggestions(0, rent_envelope, [weekly_pay("rent", 100)], 28) == []


def test_all_predictions_with_balance_overrides(rent_envelope):
    holiday = Envelope(id="holiday", name="Holiday", target_amount=500, current_balance=100)

    predictions = calculate_all_predictions(
        [rent_envelope, holiday], [weekly_pay("rent", 200)], balances={"holiday": 600}, today=TODAY
    )

    assert [p.envelope_id for p in predictions] == ["rent", "holiday"]
    assert predictions[0].current_balance == 200
    assert predictions[1].current_balance == 600
    assert predictions[1].status == EnvelopeStatus.OVERFUNDED


@freeze_time("2026-10-19")
def test_prediction_defaults_to_today(rent_envelope):
    prediction = calculate_envelope_prediction(rent_envelope, [weekly_pay("rent", 200)])

    assert prediction.days_until_due == 28
    assert prediction.future_income[0].date == TODAY
