"""Debt payoff strategies - spreading surplus cash across debt accounts"""

import logging
from typing import Dict, List

from household_budget.domain.exceptions import DuplicateAccountError
from household_budget.domain.interest import calculate_months_to_payoff, calculate_total_interest_paid
from household_budget.domain.models import (
    DebtAccount,
    PaymentAllocation,
    PaymentStrategy,
    PaymentStrategyResult,
    StrategyRecommendation,
)

logger = logging.getLogger(__name__)

MINIMUM_PAYMENT_RATE = 0.02
MINIMUM_PAYMENT_FLOOR = 25.0
UNSET_PRIORITY = 999

# Recommendation thresholds
MIN_SURPLUS_SHARE_OF_MINIMUMS = 0.10
APR_SPREAD_FOR_AVALANCHE = 5.0  # percentage points
SMALL_AVERAGE_BALANCE = 2000.0

STRATEGY_NAMES: Dict[PaymentStrategy, str] = {
    PaymentStrategy.PAY_OFF: "Pay Off Completely",
    PaymentStrategy.MINIMUM_ONLY: "Minimum Payments Only",
    PaymentStrategy.AVALANCHE: "Avalanche (Highest APR First)",
    PaymentStrategy.SNOWBALL: "Snowball (Lowest Balance First)",
    PaymentStrategy.CUSTOM: "Custom Priority",
}

STRATEGY_DESCRIPTIONS: Dict[PaymentStrategy, str] = {
    PaymentStrategy.PAY_OFF: "Pay the full balance on every card each month so no interest is charged.",
    PaymentStrategy.MINIMUM_ONLY: "Pay only the required minimum on each card to preserve cash flow.",
    PaymentStrategy.AVALANCHE: "Pay minimums everywhere, then put extra toward the highest APR card. Saves the most interest.",
    PaymentStrategy.SNOWBALL: "Pay minimums everywhere, then put extra toward the smallest balance. Builds momentum with quick wins.",
    PaymentStrategy.CUSTOM: "Pay cards in your own order using priority settings.",
}


def _balance(account: DebtAccount) -> float:
    return abs(account.current_balance)


def _apr(account: DebtAccount) -> float:
    return account.apr or 0.0


def ensure_unique_account_ids(accounts: List[DebtAccount]) -> None:
    """Allocations are matched back to accounts by id, so ids must be unique"""
    seen = set()
    for account in accounts:
        if account.id in seen:
            raise DuplicateAccountError(f"Duplicate debt account id: {account.id}")
        seen.add(account.id)


def calculate_minimum_payment(account: DebtAccount) -> float:
    """
    Configured minimum when set, otherwise 2% of the balance with a $25 floor.
    """
    if account.minimum_payment and account.minimum_payment > 0:
        return account.minimum_payment

    return max(_balance(account) * MINIMUM_PAYMENT_RATE, MINIMUM_PAYMENT_FLOOR)


def calculate_total_minimum_payment(accounts: List[DebtAccount]) -> float:
    return sum(calculate_minimum_payment(account) for account in accounts)


def sort_by_avalanche(accounts: List[DebtAccount]) -> List[DebtAccount]:
    """Highest APR first"""
    return sorted(accounts, key=_apr, reverse=True)


def sort_by_snowball(accounts: List[DebtAccount]) -> List[DebtAccount]:
    """Lowest balance first"""
    return sorted(accounts, key=_balance)


def sort_by_custom_priority(accounts: List[DebtAccount]) -> List[DebtAccount]:
    """Lowest priority number first, unset priorities last"""
    return sorted(
        accounts,
        key=lambda a: a.payoff_priority if a.payoff_priority is not None else UNSET_PRIORITY,
    )


_SORTERS = {
    PaymentStrategy.AVALANCHE: sort_by_avalanche,
    PaymentStrategy.SNOWBALL: sort_by_snowball,
    PaymentStrategy.CUSTOM: sort_by_custom_priority,
}


def distribute_payments(
    accounts: List[DebtAccount],
    strategy: PaymentStrategy,
    surplus_available: float,
) -> List[PaymentAllocation]:
    """
    Allocate minimum and extra payments for each account.

    - pay_off: every balance is paid in full; the surplus is not consulted.
    - minimum_only: minimums only.
    - avalanche / snowball / custom: accounts are walked in strategy order and
      each receives min(remaining surplus, balance - minimum) as extra. The
      first funded account is the target card. The walk ends as soon as the
      surplus runs out or an account is only partly covered, so extra cash is
      focused on one card at a time.

    Allocations come back in the same order as the input accounts.
    """
    strategy = PaymentStrategy(strategy)

    if not accounts:
        return []

    if strategy == PaymentStrategy.PAY_OFF:
        return [
            PaymentAllocation(
                account_id=account.id,
                account_name=account.name,
                minimum_payment=0.0,
                extra_payment=_balance(account),
                total_payment=_balance(account),
                is_target_card=False,
            )
            for account in accounts
        ]

    allocations = [
        PaymentAllocation(
            account_id=account.id,
            account_name=account.name,
            minimum_payment=calculate_minimum_payment(account),
            extra_payment=0.0,
            total_payment=calculate_minimum_payment(account),
        )
        for account in accounts
    ]

    if strategy == PaymentStrategy.MINIMUM_ONLY:
        return allocations

    by_id = {allocation.account_id: allocation for allocation in allocations}
    sorter = _SORTERS.get(strategy)
    ordered = sorter(accounts) if sorter else list(accounts)

    remaining = surplus_available
    target_assigned = False

    for account in ordered:
        if remaining <= 0:
            break

        allocation = by_id[account.id]
        max_extra = _balance(account) - allocation.minimum_payment
        extra = min(max_extra, remaining)

        if extra <= 0:
            continue

        allocation.extra_payment = extra
        allocation.total_payment = allocation.minimum_payment + extra
        if not target_assigned:
            allocation.is_target_card = True
            target_assigned = True
        remaining -= extra

        if extra < max_extra:
            logger.debug(
                "Surplus exhausted on partially funded account",
                extra={"account_id": account.id, "strategy": strategy.value},
            )
            break

    return allocations


def calculate_payment_strategy(
    accounts: List[DebtAccount],
    strategy: PaymentStrategy,
    surplus_available: float,
) -> PaymentStrategyResult:
    """
    Allocations plus a payoff projection for the target card.

    Only the target card is projected, using its total monthly payment.
    pay_off is immediate (0 months, 0 interest). With no target card the
    projection fields stay None. A negative surplus counts as none.
    """
    strategy = PaymentStrategy(strategy)
    surplus_available = max(0.0, surplus_available)

    if not accounts:
        return PaymentStrategyResult(
            strategy=strategy,
            total_minimum_payment=0.0,
            surplus_available=0.0,
            surplus_allocated=0.0,
            allocations=[],
            projected_payoff_months=0,
            projected_total_interest=0.0,
            target_card_id=None,
        )

    total_minimum = calculate_total_minimum_payment(accounts)
    allocations = distribute_payments(accounts, strategy, surplus_available)
    surplus_allocated = sum(a.extra_payment for a in allocations)

    target = next((a for a in allocations if a.is_target_card), None)
    target_card_id = target.account_id if target else None

    projected_months = None
    projected_interest = None

    if strategy == PaymentStrategy.PAY_OFF:
        projected_months = 0
        projected_interest = 0.0
    elif target is not None:
        account = next(a for a in accounts if a.id == target.account_id)
        projected_months = calculate_months_to_payoff(_balance(account), _apr(account), target.total_payment)
        projected_interest = calculate_total_interest_paid(_balance(account), _apr(account), target.total_payment)

    return PaymentStrategyResult(
        strategy=strategy,
        total_minimum_payment=total_minimum,
        surplus_available=surplus_available,
        surplus_allocated=surplus_allocated,
        allocations=allocations,
        projected_payoff_months=projected_months,
        projected_total_interest=projected_interest,
        target_card_id=target_card_id,
    )


def compare_strategies(accounts: List[DebtAccount], surplus_available: float) -> Dict[PaymentStrategy, PaymentStrategyResult]:
    """Run every strategy against the same accounts and surplus"""
    return {
        strategy: calculate_payment_strategy(accounts, strategy, surplus_available)
        for strategy in PaymentStrategy
    }


def calculate_surplus_for_debt_paydown(
    total_income: float,
    total_budgeted: float,
    total_minimum_payments: float,
) -> float:
    """Income left after budgeted expenses and minimum payments, never negative"""
    return max(0.0, total_income - total_budgeted - total_minimum_payments)


def get_recommended_strategy(accounts: List[DebtAccount], surplus_available: float) -> StrategyRecommendation:
    """
    Recommend a strategy. Rules are checked in order, first match wins:

    1. No accounts: nothing to manage (pay_off)
    2. Surplus covers every balance: pay_off
    3. Surplus under 10% of total minimums: minimum_only
    4. APR spread wider than 5 points: avalanche
    5. Average balance under $2000: snowball
    6. Otherwise: avalanche
    """
    if not accounts:
        return StrategyRecommendation(PaymentStrategy.PAY_OFF, "No credit cards to manage")

    total_balance = sum(_balance(a) for a in accounts)
    total_minimum = calculate_total_minimum_payment(accounts)

    if surplus_available >= total_balance:
        return StrategyRecommendation(
            PaymentStrategy.PAY_OFF,
            "You have enough funds to pay off all cards completely this month",
        )

    if surplus_available < total_minimum * MIN_SURPLUS_SHARE_OF_MINIMUMS:
        return StrategyRecommendation(
            PaymentStrategy.MINIMUM_ONLY,
            "Focus on building emergency savings before attacking debt aggressively",
        )

    aprs = [_apr(a) for a in accounts]
    if max(aprs) - min(aprs) > APR_SPREAD_FOR_AVALANCHE:
        return StrategyRecommendation(
            PaymentStrategy.AVALANCHE,
            "Avalanche method will save you the most money on interest",
        )

    if total_balance / len(accounts) < SMALL_AVERAGE_BALANCE:
        return StrategyRecommendation(
            PaymentStrategy.SNOWBALL,
            "Snowball method will help you see progress quickly with small balances",
        )

    return StrategyRecommendation(
        PaymentStrategy.AVALANCHE,
        "Avalanche method will minimize total interest paid",
    )


def format_strategy_name(strategy: PaymentStrategy) -> str:
    return STRATEGY_NAMES.get(strategy, str(strategy))


def get_strategy_description(strategy: PaymentStrategy) -> str:
    return STRATEGY_DESCRIPTIONS.get(strategy, "")
