"""Credit card interest accrual and amortization math"""

from datetime import date
from typing import List, Optional

from household_budget.domain.models import (
    AccountInterest,
    BalanceProjection,
    DebtAccount,
    InterestCalculationResult,
    InterestChargeRecord,
    PaymentComparison,
)
from household_budget.utils.date_utils import days_between, months_between
from household_budget.utils.money import ceil_currency, round_currency

DEFAULT_DAYS_IN_PERIOD = 30
DEFAULT_MAX_PAYOFF_MONTHS = 360  # 30 years


def calculate_daily_rate(apr: float) -> float:
    """APR (18.99 for 18.99%) as a daily decimal rate"""
    return apr / 100 / 365


def _monthly_rate(apr: float) -> float:
    return apr / 100 / 12


def calculate_monthly_interest(
    account: DebtAccount,
    average_daily_balance: float,
    days_in_period: int = DEFAULT_DAYS_IN_PERIOD,
) -> InterestCalculationResult:
    """
    Interest for one billing period using the Average Daily Balance method.

    interest = average daily balance x daily rate x days in period

    Accounts without a positive APR accrue nothing and keep their balance.
    Balances are reported as absolute values since card balances are stored
    negative.
    """
    balance_before = abs(account.current_balance)

    if not account.apr or account.apr <= 0:
        return InterestCalculationResult(
            interest_amount=0.0,
            daily_rate=0.0,
            days_in_period=days_in_period,
            average_daily_balance=average_daily_balance,
            balance_before=balance_before,
            balance_after=balance_before,
        )

    daily_rate = calculate_daily_rate(account.apr)
    interest = average_daily_balance * daily_rate * days_in_period

    return InterestCalculationResult(
        interest_amount=round_currency(interest),
        daily_rate=daily_rate,
        days_in_period=days_in_period,
        average_daily_balance=average_daily_balance,
        balance_before=balance_before,
        balance_after=balance_before + interest,
    )


def calculate_simple_interest(
    account: DebtAccount, days_in_period: int = DEFAULT_DAYS_IN_PERIOD
) -> InterestCalculationResult:
    """Quick estimate that treats the current balance as the average daily balance"""
    return calculate_monthly_interest(account, abs(account.current_balance), days_in_period)


def days_since_last_charge(last_charge_date: Optional[date], today: Optional[date] = None) -> int:
    """Days elapsed since the last interest charge (30 if never charged)"""
    if last_charge_date is None:
        return DEFAULT_DAYS_IN_PERIOD

    today = today or date.today()
    return max(0, days_between(last_charge_date, today))


def should_charge_interest(
    last_charge_date: Optional[date],
    statement_day: int = 1,
    today: Optional[date] = None,
) -> bool:
    """
    Whether a statement has closed since the last interest charge.

    Never-charged accounts are charged once the statement day is reached;
    otherwise a full calendar month must have passed as well.
    """
    today = today or date.today()

    if last_charge_date is None:
        return today.day >= statement_day

    return months_between(last_charge_date, today) >= 1 and today.day >= statement_day


def calculate_interest_for_accounts(
    accounts: List[DebtAccount], days_in_period: int = DEFAULT_DAYS_IN_PERIOD
) -> List[AccountInterest]:
    """Simple interest for every account carrying a positive APR"""
    return [
        AccountInterest(
            account_id=account.id,
            account_name=account.name,
            result=calculate_simple_interest(account, days_in_period),
        )
        for account in accounts
        if account.apr and account.apr > 0
    ]


def get_total_interest(accounts: List[DebtAccount], days_in_period: int = DEFAULT_DAYS_IN_PERIOD) -> float:
    results = calculate_interest_for_accounts(accounts, days_in_period)
    return round_currency(sum(r.result.interest_amount for r in results))


def build_interest_charge(
    account: DebtAccount, result: InterestCalculationResult, charge_date: date
) -> InterestChargeRecord:
    """Snapshot of a calculated charge, ready to be stored by the caller"""
    return InterestChargeRecord(
        account_id=account.id,
        charge_date=charge_date,
        interest_amount=result.interest_amount,
        daily_rate=result.daily_rate,
        days_in_period=result.days_in_period,
        average_daily_balance=result.average_daily_balance,
        balance_before=result.balance_before,
        balance_after=result.balance_after,
        apr_used=account.apr or 0.0,
    )


def project_balance_with_interest(
    balance: float, apr: float, monthly_payment: float, months: int
) -> List[BalanceProjection]:
    """
    Month-by-month amortization ledger.

    Interest is charged on the opening balance, then the payment is applied
    (never more than what is owed). Once the balance reaches zero every
    following month is an all-zero row.
    """
    projections: List[BalanceProjection] = []
    monthly_rate = _monthly_rate(apr)

    for month in range(1, months + 1):
        if balance <= 0:
            projections.append(
                BalanceProjection(
                    month=month,
                    balance=0.0,
                    interest_charged=0.0,
                    principal_paid=0.0,
                    payment_amount=0.0,
                )
            )
            continue

        interest_charged = balance * monthly_rate
        new_balance = balance + interest_charged

        payment = min(monthly_payment, new_balance)
        principal_paid = payment - interest_charged
        balance = max(0.0, new_balance - payment)

        projections.append(
            BalanceProjection(
                month=month,
                balance=round_currency(balance),
                interest_charged=round_currency(interest_charged),
                principal_paid=round_currency(principal_paid),
                payment_amount=round_currency(payment),
            )
        )

    return projections


def calculate_months_to_payoff(
    balance: float,
    apr: float,
    monthly_payment: float,
    max_months: int = DEFAULT_MAX_PAYOFF_MONTHS,
) -> Optional[int]:
    """
    Months until the balance is cleared at a fixed payment.

    Returns None when the payment never covers the monthly interest or when
    the debt is still outstanding after max_months.
    """
    if balance <= 0:
        return 0

    monthly_rate = _monthly_rate(apr)

    if monthly_payment <= balance * monthly_rate:
        return None

    months = 0
    while balance > 0 and months < max_months:
        balance = balance + balance * monthly_rate - monthly_payment
        months += 1

    return months if balance <= 0 else None


def calculate_total_interest_paid(
    balance: float,
    apr: float,
    monthly_payment: float,
    max_months: int = DEFAULT_MAX_PAYOFF_MONTHS,
) -> Optional[float]:
    """Interest paid over the whole payoff period, None if it never pays off"""
    months = calculate_months_to_payoff(balance, apr, monthly_payment, max_months)

    if months is None:
        return None

    projections = project_balance_with_interest(balance, apr, monthly_payment, months)
    return round_currency(sum(p.interest_charged for p in projections))


def calculate_payment_for_payoff_in_months(balance: float, apr: float, target_months: int) -> float:
    """
    Fixed monthly payment that clears the balance in target_months.

    Annuity formula P = r * PV / (1 - (1 + r)^-n), straight-line at 0% APR.
    Rounded up to the cent so the final month is never short.
    """
    if balance <= 0 or target_months <= 0:
        return 0.0

    if apr <= 0:
        return ceil_currency(balance / target_months)

    monthly_rate = _monthly_rate(apr)
    payment = (monthly_rate * balance) / (1 - (1 + monthly_rate) ** -target_months)

    return ceil_currency(payment)


def compare_payment_amounts(
    balance: float,
    apr: float,
    current_payment: float,
    alternative_payment: float,
    max_months: int = DEFAULT_MAX_PAYOFF_MONTHS,
) -> PaymentComparison:
    """Months and interest saved by switching to alternative_payment"""
    current_months = calculate_months_to_payoff(balance, apr, current_payment, max_months)
    alternative_months = calculate_months_to_payoff(balance, apr, alternative_payment, max_months)
    current_interest = calculate_total_interest_paid(balance, apr, current_payment, max_months)
    alternative_interest = calculate_total_interest_paid(balance, apr, alternative_payment, max_months)

    months_saved = 0
    interest_saved = 0.0
    if current_months is not None and alternative_months is not None:
        months_saved = current_months - alternative_months
        interest_saved = round_currency(current_interest - alternative_interest)

    return PaymentComparison(
        current_months=current_months,
        alternative_months=alternative_months,
        current_interest=current_interest,
        alternative_interest=alternative_interest,
        months_saved=months_saved,
        interest_saved=interest_saved,
        additional_monthly_payment=round_currency(alternative_payment - current_payment),
    )
