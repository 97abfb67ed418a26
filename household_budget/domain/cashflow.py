"""Envelope cashflow prediction - projecting envelope balances against scheduled income"""

import logging
import math
from datetime import date
from typing import Dict, List, Mapping, Optional

from household_budget.domain.models import (
    Envelope,
    EnvelopePrediction,
    EnvelopeStatus,
    FutureIncome,
    PayFrequency,
    RecurringIncome,
    Suggestion,
)
from household_budget.utils.date_utils import add_days, add_months, days_between, months_between

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_DAYS = 30
MAX_PAY_DATES = 365
OVERFUNDED_HEADROOM = 1.05  # balance must exceed target by more than 5%
EXTEND_DUE_DATE_MIN_DAYS = 7

# Step between pay dates: (days, months)
_FREQUENCY_STEPS: Dict[PayFrequency, tuple] = {
    PayFrequency.WEEKLY: (7, 0),
    PayFrequency.FORTNIGHTLY: (14, 0),
    PayFrequency.MONTHLY: (0, 1),
    PayFrequency.QUARTERLY: (0, 3),
    PayFrequency.ANNUALLY: (0, 12),
}

# Approximate period length used when counting whole pay periods
_PERIOD_DAYS: Dict[PayFrequency, int] = {
    PayFrequency.WEEKLY: 7,
    PayFrequency.FORTNIGHTLY: 14,
    PayFrequency.MONTHLY: 30,
    PayFrequency.QUARTERLY: 90,
    PayFrequency.ANNUALLY: 365,
}

_WEEKS_PER_PERIOD: Dict[PayFrequency, float] = {
    PayFrequency.WEEKLY: 1,
    PayFrequency.FORTNIGHTLY: 2,
    PayFrequency.MONTHLY: 4.33,
    PayFrequency.QUARTERLY: 13,
    PayFrequency.ANNUALLY: 52,
}


def _first_step_on_or_after(start_date: date, from_date: date, step_days: int, step_months: int) -> int:
    """Index of the first pay date on or after from_date in a schedule anchored at start_date"""
    if from_date <= start_date:
        return 0

    if step_months:
        n = months_between(start_date, from_date) // step_months
        while add_months(start_date, n * step_months) < from_date:
            n += 1
        return n

    return -(-days_between(start_date, from_date) // step_days)


def calculate_pay_dates(
    frequency: PayFrequency,
    start_date: date,
    end_date: date,
    max_dates: int = MAX_PAY_DATES,
    from_date: Optional[date] = None,
) -> List[date]:
    """
    Pay dates from start_date through end_date (inclusive).

    Monthly steps are counted from start_date itself so a 31st payday
    lands on the last day of short months without drifting. With from_date,
    the schedule is fast-forwarded to the first pay date on or after it, so a
    stale start_date still yields the dates in the window.
    """
    step_days, step_months = _FREQUENCY_STEPS[PayFrequency(frequency)]
    pay_dates: List[date] = []

    first = _first_step_on_or_after(start_date, from_date, step_days, step_months) if from_date else 0

    for n in range(first, first + max_dates):
        if step_months:
            pay_date = add_months(start_date, n * step_months)
        else:
            pay_date = add_days(start_date, n * step_days)

        if pay_date > end_date:
            return pay_dates
        pay_dates.append(pay_date)

    logger.debug("Pay date limit reached", extra={"frequency": str(frequency), "max_dates": max_dates})
    return pay_dates


def calculate_pay_periods_remaining(frequency: PayFrequency, days_until_due: int) -> int:
    """Whole pay periods left before the due date"""
    if days_until_due <= 0:
        return 0
    return days_until_due // _PERIOD_DAYS[PayFrequency(frequency)]


def calculate_per_pay_amount(
    bill_amount: float,
    bill_frequency: PayFrequency,
    income_frequency: PayFrequency,
    days_until_due: Optional[int] = None,
) -> float:
    """
    Amount to set aside each pay to cover a bill.

    Ongoing bills (no due date, or more than a year out) are converted through
    a weekly equivalent. Dated bills are split over the pay periods left; when
    none remain the whole bill is needed now.
    """
    if days_until_due is None or days_until_due > 365:
        per_week = bill_amount / _WEEKS_PER_PERIOD[PayFrequency(bill_frequency)]
        return per_week * _WEEKS_PER_PERIOD[PayFrequency(income_frequency)]

    periods = calculate_pay_periods_remaining(income_frequency, days_until_due)
    if periods <= 0:
        return bill_amount

    return bill_amount / periods


def resolve_target_amount(envelope: Envelope) -> float:
    """Explicit target, else the bill amount for recurring bills, else nothing"""
    if envelope.target_amount:
        return envelope.target_amount
    if envelope.bill_amount and envelope.frequency:
        return envelope.bill_amount
    return 0.0


def _allocated_amount(income: RecurringIncome, envelope_id: str) -> float:
    for allocation in income.allocation:
        if allocation.envelope_id == envelope_id:
            return allocation.amount
    return 0.0


def _scheduled_income(
    envelope_id: str,
    incomes: List[RecurringIncome],
    start: date,
    end: date,
) -> List[FutureIncome]:
    """Allocations to the envelope landing between start and end (inclusive)"""
    scheduled: List[FutureIncome] = []

    if end < start:
        return scheduled

    for income in incomes:
        amount = _allocated_amount(income, envelope_id)
        if amount <= 0:
            continue

        for pay_date in calculate_pay_dates(income.frequency, income.next_date, end, from_date=start):
            scheduled.append(
                FutureIncome(date=pay_date, source=income.name, income_id=income.id, amount=amount)
            )

    return sorted(scheduled, key=lambda fi: fi.date)


def classify_envelope_status(
    gap: float,
    current_balance: float,
    target_amount: float,
    days_until_due: Optional[int],
    income_before_deadline: float = 0.0,
) -> EnvelopeStatus:
    """
    Funding status, first match wins:

    - critical: short and the due date is today or past, or the income still
      scheduled before the deadline cannot close the gap
    - behind: short, but the remaining scheduled income (or the lack of any
      deadline) leaves room to catch up
    - overfunded: balance already above the target by more than 5%
    - on_track: everything else
    """
    if gap > 0:
        if days_until_due is None:
            return EnvelopeStatus.BEHIND
        if days_until_due <= 0:
            return EnvelopeStatus.CRITICAL
        if income_before_deadline < gap:
            return EnvelopeStatus.CRITICAL
        return EnvelopeStatus.BEHIND

    if current_balance > target_amount * OVERFUNDED_HEADROOM:
        return EnvelopeStatus.OVERFUNDED

    return EnvelopeStatus.ON_TRACK


def generate_suggestions(
    gap: float,
    envelope: Envelope,
    incomes: List[RecurringIncome],
    days_until_due: Optional[int],
) -> List[Suggestion]:
    """Ways to close a funding gap, most actionable first"""
    if gap <= 0:
        return []

    suggestions: List[Suggestion] = []

    funding = [i for i in incomes if _allocated_amount(i, envelope.id) > 0]
    primary = funding[0] if funding else (incomes[0] if incomes else None)

    if primary is not None and days_until_due is not None and days_until_due > 0:
        periods = calculate_pay_periods_remaining(primary.frequency, days_until_due)
        if periods > 0:
            increase = math.ceil(gap / periods)
            suggestions.append(
                Suggestion(
                    type="increase_allocation",
                    message=f"Increase allocation by ${increase} per pay to close the gap",
                    action_amount=float(increase),
                )
            )

    one_time = math.ceil(gap)
    suggestions.append(
        Suggestion(
            type="one_time_income",
            message=f"Find one-time income of ${one_time} (sell items, extra shifts, etc.)",
            action_amount=float(one_time),
        )
    )
    suggestions.append(Suggestion(type="reduce_bill", message="Reduce the bill amount or find a cheaper alternative"))

    if days_until_due is not None and days_until_due > EXTEND_DUE_DATE_MIN_DAYS:
        suggestions.append(
            Suggestion(type="extend_due_date", message="Contact the provider about a payment plan or later due date")
        )

    suggestions.append(Suggestion(type="lifestyle_change", message="Consider lifestyle changes to reduce this expense"))

    return suggestions


def calculate_envelope_prediction(
    envelope: Envelope,
    recurring_incomes: List[RecurringIncome],
    end_date: Optional[date] = None,
    today: Optional[date] = None,
    current_balance: Optional[float] = None,
) -> EnvelopePrediction:
    """
    Project an envelope's balance to a horizon and classify its funding.

    The horizon is end_date, else the envelope due date, else 30 days out.
    Every allocation scheduled from today through the horizon counts toward
    the projected balance. Income scheduled after the horizon but on or
    before the due date only decides whether a shortfall is still
    recoverable (behind) or not (critical).
    """
    today = today or date.today()
    balance = envelope.current_balance if current_balance is None else current_balance

    horizon = end_date or envelope.due_date or add_days(today, DEFAULT_HORIZON_DAYS)
    target = resolve_target_amount(envelope)

    future_income = _scheduled_income(envelope.id, recurring_incomes, today, horizon)
    projected = balance + sum(fi.amount for fi in future_income)
    gap = target - projected

    days_until_due = days_between(today, envelope.due_date) if envelope.due_date else None

    income_before_deadline = 0.0
    if envelope.due_date and envelope.due_date > horizon:
        later = _scheduled_income(envelope.id, recurring_incomes, add_days(horizon, 1), envelope.due_date)
        income_before_deadline = sum(fi.amount for fi in later)

    status = classify_envelope_status(gap, balance, target, days_until_due, income_before_deadline)

    return EnvelopePrediction(
        envelope_id=envelope.id,
        current_balance=balance,
        projected_balance=projected,
        target_amount=target,
        gap=gap,
        status=status,
        days_until_due=days_until_due,
        future_income=future_income,
        suggestions=generate_suggestions(gap, envelope, recurring_incomes, days_until_due),
    )


def calculate_all_predictions(
    envelopes: List[Envelope],
    recurring_incomes: List[RecurringIncome],
    balances: Optional[Mapping[str, float]] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> List[EnvelopePrediction]:
    """Predictions for every envelope; balances override envelope balances by id"""
    balances = balances or {}
    return [
        calculate_envelope_prediction(
            envelope,
            recurring_incomes,
            end_date=end_date,
            today=today,
            current_balance=balances.get(envelope.id),
        )
        for envelope in envelopes
    ]
