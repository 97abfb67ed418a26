"""POST /v1/debt/* - interest, payoff and payment strategy endpoints"""

import time
import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from household_budget.api.dependencies import get_request_id, get_settings
from household_budget.api.v1.schemas import (
    AccountInterestSchema,
    BalanceProjectionSchema,
    ComparisonRequest,
    ComparisonResponse,
    DebtAccountSchema,
    InterestChargeSchema,
    InterestRequest,
    InterestResponse,
    PaymentComparisonSchema,
    PaymentStrategyResultSchema,
    PayoffRequest,
    PayoffResponse,
    RecommendationSchema,
    StrategyRequest,
    StrategyResponse,
    SurplusRequest,
    SurplusResponse,
)
from household_budget.config import Settings
from household_budget.domain.exceptions import DuplicateAccountError
from household_budget.domain.interest import (
    build_interest_charge,
    calculate_interest_for_accounts,
    calculate_months_to_payoff,
    calculate_payment_for_payoff_in_months,
    calculate_total_interest_paid,
    compare_payment_amounts,
    get_total_interest,
    project_balance_with_interest,
    should_charge_interest,
)
from household_budget.domain.models import DebtAccount
from household_budget.domain.payment_strategy import (
    calculate_payment_strategy,
    calculate_surplus_for_debt_paydown,
    calculate_total_minimum_payment,
    compare_strategies,
    ensure_unique_account_ids,
    format_strategy_name,
    get_recommended_strategy,
    get_strategy_description,
)
from household_budget.infrastructure.observability.logging import log_calculation
from household_budget.infrastructure.observability.metrics import record_strategy

router = APIRouter()

# Schedule length shown when a payment never clears the balance
UNPAYABLE_SCHEDULE_MONTHS = 12


def _to_accounts(accounts: List[DebtAccountSchema], request_id: str) -> List[DebtAccount]:
    domain_accounts = [a.to_domain() for a in accounts]
    try:
        ensure_unique_account_ids(domain_accounts)
    except DuplicateAccountError as e:
        logging.warning(f"Rejected accounts: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    return domain_accounts


@router.post("/debt/interest", response_model=InterestResponse)
def calculate_interest(request_body: InterestRequest, request_id: str = Depends(get_request_id)):
    """
    Interest for the current billing period on every account with an APR.

    charges_due lists the accounts whose statement has closed since their
    last interest charge, ready to be recorded by the caller.
    """
    start_time = time.time()
    today = request_body.today or date.today()
    accounts = _to_accounts(request_body.accounts, request_id)
    by_id = {a.id: a for a in accounts}

    results = calculate_interest_for_accounts(accounts, request_body.days_in_period)
    charges = [
        build_interest_charge(by_id[r.account_id], r.result, today)
        for r in results
        if should_charge_interest(by_id[r.account_id].last_interest_charge_date, request_body.statement_day, today)
    ]
    total = get_total_interest(accounts, request_body.days_in_period)

    log_calculation(
        request_id,
        "debt_interest",
        (time.time() - start_time) * 1000,
        account_count=len(accounts),
        charges_due=len(charges),
    )

    return InterestResponse(
        accounts=[AccountInterestSchema.model_validate(r) for r in results],
        total_interest=total,
        charges_due=[InterestChargeSchema.model_validate(c) for c in charges],
    )


@router.post("/debt/payoff", response_model=PayoffResponse)
def project_payoff(
    request_body: PayoffRequest,
    request_id: str = Depends(get_request_id),
    settings: Settings = Depends(get_settings),
):
    """
    Payoff timeline for a single balance at a fixed monthly payment.

    months_to_payoff and total_interest are null when the payment never
    clears the balance; the schedule then shows the first year.
    """
    start_time = time.time()
    balance, apr, payment = request_body.balance, request_body.apr, request_body.monthly_payment

    months = calculate_months_to_payoff(balance, apr, payment, settings.max_payoff_months)
    total_interest = calculate_total_interest_paid(balance, apr, payment, settings.max_payoff_months)

    schedule_months = months if months is not None else UNPAYABLE_SCHEDULE_MONTHS
    schedule = project_balance_with_interest(
        balance, apr, payment, min(schedule_months, settings.projection_months_limit)
    )

    comparison = None
    if request_body.alternative_payment is not None:
        comparison = PaymentComparisonSchema.model_validate(
            compare_payment_amounts(
                balance, apr, payment, request_body.alternative_payment, settings.max_payoff_months
            )
        )

    payment_for_target = None
    if request_body.target_months is not None:
        payment_for_target = calculate_payment_for_payoff_in_months(balance, apr, request_body.target_months)

    log_calculation(
        request_id,
        "debt_payoff",
        (time.time() - start_time) * 1000,
        months_to_payoff=months,
    )

    return PayoffResponse(
        months_to_payoff=months,
        total_interest=total_interest,
        schedule=[BalanceProjectionSchema.model_validate(p) for p in schedule],
        comparison=comparison,
        payment_for_target_months=payment_for_target,
    )


@router.post("/debt/strategy", response_model=StrategyResponse)
def calculate_strategy(request_body: StrategyRequest, request_id: str = Depends(get_request_id)):
    """Allocate minimum and extra payments across accounts for one strategy"""
    start_time = time.time()
    accounts = _to_accounts(request_body.accounts, request_id)

    result = calculate_payment_strategy(accounts, request_body.strategy, request_body.surplus_available)

    record_strategy(result)
    log_calculation(
        request_id,
        "debt_strategy",
        (time.time() - start_time) * 1000,
        strategy=result.strategy.value,
        target_card_id=result.target_card_id,
    )

    return StrategyResponse(
        name=format_strategy_name(result.strategy),
        description=get_strategy_description(result.strategy),
        result=PaymentStrategyResultSchema.model_validate(result),
    )


@router.post("/debt/strategies/compare", response_model=ComparisonResponse)
def compare_all_strategies(request_body: ComparisonRequest, request_id: str = Depends(get_request_id)):
    """Every strategy side by side, plus the recommended one"""
    start_time = time.time()
    accounts = _to_accounts(request_body.accounts, request_id)

    results = compare_strategies(accounts, request_body.surplus_available)
    recommendation = get_recommended_strategy(accounts, request_body.surplus_available)

    for result in results.values():
        record_strategy(result)
    log_calculation(
        request_id,
        "debt_compare",
        (time.time() - start_time) * 1000,
        recommended=recommendation.strategy.value,
    )

    return ComparisonResponse(
        results={s: PaymentStrategyResultSchema.model_validate(r) for s, r in results.items()},
        recommendation=RecommendationSchema.model_validate(recommendation),
    )


@router.post("/debt/recommendation", response_model=RecommendationSchema)
def recommend_strategy(request_body: ComparisonRequest, request_id: str = Depends(get_request_id)):
    accounts = _to_accounts(request_body.accounts, request_id)
    recommendation = get_recommended_strategy(accounts, request_body.surplus_available)
    return RecommendationSchema.model_validate(recommendation)


@router.post("/debt/surplus", response_model=SurplusResponse)
def calculate_surplus(request_body: SurplusRequest, request_id: str = Depends(get_request_id)):
    """
    Cash left for extra debt payments after the budget and minimums.

    Minimums are derived from the accounts when not sent explicitly.
    """
    minimums = request_body.total_minimum_payments
    if minimums is None:
        minimums = calculate_total_minimum_payment(_to_accounts(request_body.accounts, request_id))

    surplus = calculate_surplus_for_debt_paydown(request_body.total_income, request_body.total_budgeted, minimums)
    return SurplusResponse(total_minimum_payments=minimums, surplus_available=surplus)
