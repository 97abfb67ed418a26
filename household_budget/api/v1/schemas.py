"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from household_budget.domain.models import (
    DebtAccount,
    Envelope,
    EnvelopeStatus,
    IncomeAllocation,
    IncomeSource,
    IncomeTransaction,
    PayFrequency,
    PaymentStrategy,
    RecurringIncome,
    VarianceThresholds,
)


class ResponseModel(BaseModel):
    """Responses are built straight from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------------------
# Debt
# ---------------------------------------------------------------------------


class DebtAccountSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    current_balance: float = Field(..., description="Debt balance; negative card balances are read as absolute values")
    apr: Optional[float] = Field(0.0, ge=0, description="Annual percentage rate, e.g. 18.99")
    minimum_payment: float = Field(0.0, ge=0)
    credit_limit: Optional[float] = Field(None, ge=0)
    payoff_priority: Optional[int] = None
    last_interest_charge_date: Optional[date] = None

    def to_domain(self) -> DebtAccount:
        return DebtAccount(**self.model_dump())


class InterestRequest(BaseModel):
    """Request body for POST /v1/debt/interest"""

    accounts: List[DebtAccountSchema]
    days_in_period: int = Field(30, gt=0)
    statement_day: int = Field(1, ge=1, le=31)
    today: Optional[date] = None


class InterestResultSchema(ResponseModel):
    interest_amount: float
    daily_rate: float
    days_in_period: int
    average_daily_balance: float
    balance_before: float
    balance_after: float


class AccountInterestSchema(ResponseModel):
    account_id: str
    account_name: str
    result: InterestResultSchema


class InterestChargeSchema(ResponseModel):
    account_id: str
    charge_date: date
    interest_amount: float
    daily_rate: float
    days_in_period: int
    average_daily_balance: float
    balance_before: float
    balance_after: float
    apr_used: float


class InterestResponse(BaseModel):
    """Response for POST /v1/debt/interest"""

    accounts: List[AccountInterestSchema]
    total_interest: float
    charges_due: List[InterestChargeSchema]


class PayoffRequest(BaseModel):
    """Request body for POST /v1/debt/payoff"""

    balance: float = Field(..., ge=0)
    apr: float = Field(..., ge=0)
    monthly_payment: float = Field(..., ge=0)
    alternative_payment: Optional[float] = Field(None, ge=0)
    target_months: Optional[int] = Field(None, gt=0)


class BalanceProjectionSchema(ResponseModel):
    month: int
    balance: float
    interest_charged: float
    principal_paid: float
    payment_amount: float


class PaymentComparisonSchema(ResponseModel):
    current_months: Optional[int]
    alternative_months: Optional[int]
    current_interest: Optional[float]
    alternative_interest: Optional[float]
    months_saved: int
    interest_saved: float
    additional_monthly_payment: float


class PayoffResponse(BaseModel):
    """Response for POST /v1/debt/payoff"""

    months_to_payoff: Optional[int]
    total_interest: Optional[float]
    schedule: List[BalanceProjectionSchema]
    comparison: Optional[PaymentComparisonSchema] = None
    payment_for_target_months: Optional[float] = None


class StrategyRequest(BaseModel):
    """Request body for POST /v1/debt/strategy"""

    accounts: List[DebtAccountSchema]
    strategy: PaymentStrategy
    surplus_available: float = Field(0.0, ge=0)


class SurplusRequest(BaseModel):
    """Request body for POST /v1/debt/surplus"""

    total_income: float = Field(..., ge=0)
    total_budgeted: float = Field(..., ge=0)
    total_minimum_payments: Optional[float] = Field(None, ge=0)
    accounts: List[DebtAccountSchema] = Field(default_factory=list)


class SurplusResponse(BaseModel):
    total_minimum_payments: float
    surplus_available: float


class ComparisonRequest(BaseModel):
    """Request body for POST /v1/debt/strategies/compare and /v1/debt/recommendation"""

    accounts: List[DebtAccountSchema]
    surplus_available: float = Field(0.0, ge=0)


class PaymentAllocationSchema(ResponseModel):
    account_id: str
    account_name: str
    minimum_payment: float
    extra_payment: float
    total_payment: float
    is_target_card: bool


class PaymentStrategyResultSchema(ResponseModel):
    strategy: PaymentStrategy
    total_minimum_payment: float
    surplus_available: float
    surplus_allocated: float
    allocations: List[PaymentAllocationSchema]
    projected_payoff_months: Optional[int]
    projected_total_interest: Optional[float]
    target_card_id: Optional[str]


class StrategyResponse(BaseModel):
    """Response for POST /v1/debt/strategy"""

    name: str
    description: str
    result: PaymentStrategyResultSchema


class RecommendationSchema(ResponseModel):
    strategy: PaymentStrategy
    reason: str


class ComparisonResponse(BaseModel):
    results: Dict[PaymentStrategy, PaymentStrategyResultSchema]
    recommendation: RecommendationSchema


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


class EnvelopeSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    target_amount: float = Field(0.0, ge=0)
    bill_amount: Optional[float] = Field(None, ge=0)
    frequency: Optional[PayFrequency] = None
    due_date: Optional[date] = None
    current_balance: float = 0.0
    priority: Literal["essential", "important", "discretionary"] = "important"
    income_allocations: Dict[str, float] = Field(default_factory=dict)

    def to_domain(self) -> Envelope:
        return Envelope(**self.model_dump())


class IncomeAllocationSchema(BaseModel):
    envelope_id: str
    amount: float = Field(..., ge=0)


class RecurringIncomeSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    amount: float = Field(..., ge=0)
    frequency: PayFrequency
    next_date: date
    allocation: List[IncomeAllocationSchema] = Field(default_factory=list)

    def to_domain(self) -> RecurringIncome:
        return RecurringIncome(
            id=self.id,
            name=self.name,
            amount=self.amount,
            frequency=self.frequency,
            next_date=self.next_date,
            allocation=[IncomeAllocation(envelope_id=a.envelope_id, amount=a.amount) for a in self.allocation],
        )


class PredictionRequest(BaseModel):
    """Request body for POST /v1/envelopes/predictions"""

    envelopes: List[EnvelopeSchema]
    incomes: List[RecurringIncomeSchema] = Field(default_factory=list)
    end_date: Optional[date] = None
    today: Optional[date] = None


class FutureIncomeSchema(ResponseModel):
    date: date
    source: str
    income_id: str
    amount: float


class SuggestionSchema(ResponseModel):
    type: str
    message: str
    action_amount: Optional[float] = None


class EnvelopePredictionSchema(ResponseModel):
    envelope_id: str
    current_balance: float
    projected_balance: float
    target_amount: float
    gap: float
    status: EnvelopeStatus
    days_until_due: Optional[int]
    future_income: List[FutureIncomeSchema]
    suggestions: List[SuggestionSchema]


class PredictionResponse(BaseModel):
    """Response for POST /v1/envelopes/predictions"""

    predictions: List[EnvelopePredictionSchema]


# ---------------------------------------------------------------------------
# Income
# ---------------------------------------------------------------------------


class IncomeSourceSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    amount: float
    raw_amount: Optional[float] = None

    def to_domain(self) -> IncomeSource:
        return IncomeSource(**self.model_dump())


class IncomeTransactionSchema(BaseModel):
    id: str = Field(..., min_length=1)
    amount: float
    income_source_id: str

    def to_domain(self) -> IncomeTransaction:
        return IncomeTransaction(**self.model_dump())


class ThresholdsSchema(BaseModel):
    percentage_threshold: float = Field(0.01, ge=0, description="Fraction, 0.01 == 1%")
    absolute_threshold: float = Field(1.0, ge=0)

    def to_domain(self) -> VarianceThresholds:
        return VarianceThresholds(**self.model_dump())


class VarianceRequest(BaseModel):
    """Request body for POST /v1/income/variance"""

    transaction: IncomeTransactionSchema
    income_sources: List[IncomeSourceSchema]
    thresholds: Optional[ThresholdsSchema] = None
    envelopes: List[EnvelopeSchema] = Field(default_factory=list)


class IncomeVarianceSchema(ResponseModel):
    income_source_id: str
    income_source_name: str
    expected_amount: float
    actual_amount: float
    difference: float
    percentage_change: float
    transaction_id: str
    variance_type: Literal["bonus", "shortfall"]


class VarianceDisplaySchema(ResponseModel):
    title: str
    expected: str
    actual: str
    difference: str
    percentage: str
    description: str


class SuggestedActionSchema(ResponseModel):
    id: str
    label: str
    description: str
    action: Literal["one_time", "permanent_change"]


class ShortfallCandidateSchema(BaseModel):
    envelope_id: str
    envelope_name: str
    allocation_from_source: float


class EnvelopePriorityGroupSchema(BaseModel):
    priority: str
    label: str
    envelopes: List[ShortfallCandidateSchema]


class VarianceResponse(BaseModel):
    """Response for POST /v1/income/variance"""

    variance: Optional[IncomeVarianceSchema] = None
    display: Optional[VarianceDisplaySchema] = None
    actions: List[SuggestedActionSchema] = Field(default_factory=list)
    reduction_groups: List[EnvelopePriorityGroupSchema] = Field(default_factory=list)
