"""Domain models - pure Python dataclasses representing budgeting entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional


class PaymentStrategy(str, Enum):
    """How surplus cash is spread across debt accounts"""

    PAY_OFF = "pay_off"
    MINIMUM_ONLY = "minimum_only"
    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"
    CUSTOM = "custom"


class PayFrequency(str, Enum):
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"


class EnvelopeStatus(str, Enum):
    ON_TRACK = "on_track"
    BEHIND = "behind"
    CRITICAL = "critical"
    OVERFUNDED = "overfunded"


# ---------------------------------------------------------------------------
# Debt
# ---------------------------------------------------------------------------


@dataclass
class DebtAccount:
    """Credit card or loan balance owned by a household member"""

    id: str
    name: str
    current_balance: float  # may be stored negative for credit cards
    apr: Optional[float] = 0.0  # annual %, e.g. 18.99
    minimum_payment: float = 0.0
    credit_limit: Optional[float] = None
    payoff_priority: Optional[int] = None  # custom strategy, lower pays first
    last_interest_charge_date: Optional[date] = None


@dataclass
class InterestCalculationResult:
    """Interest accrued over one billing period"""

    interest_amount: float
    daily_rate: float
    days_in_period: int
    average_daily_balance: float
    balance_before: float
    balance_after: float


@dataclass
class AccountInterest:
    account_id: str
    account_name: str
    result: InterestCalculationResult


@dataclass
class InterestChargeRecord:
    """Interest charge row handed to the persistence layer"""

    account_id: str
    charge_date: date
    interest_amount: float
    daily_rate: float
    days_in_period: int
    average_daily_balance: float
    balance_before: float
    balance_after: float
    apr_used: float


@dataclass
class BalanceProjection:
    """Single month in an amortization ledger"""

    month: int
    balance: float
    interest_charged: float
    principal_paid: float
    payment_amount: float


@dataclass
class PaymentComparison:
    """Current vs. alternative monthly payment on one balance"""

    current_months: Optional[int]
    alternative_months: Optional[int]
    current_interest: Optional[float]
    alternative_interest: Optional[float]
    months_saved: int
    interest_saved: float
    additional_monthly_payment: float


@dataclass
class PaymentAllocation:
    account_id: str
    account_name: str
    minimum_payment: float
    extra_payment: float
    total_payment: float
    is_target_card: bool = False


@dataclass
class PaymentStrategyResult:
    strategy: PaymentStrategy
    total_minimum_payment: float
    surplus_available: float
    surplus_allocated: float
    allocations: List[PaymentAllocation]
    projected_payoff_months: Optional[int]
    projected_total_interest: Optional[float]
    target_card_id: Optional[str]


@dataclass
class StrategyRecommendation:
    strategy: PaymentStrategy
    reason: str


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------


@dataclass
class Envelope:
    """Cashflow-relevant view of a budgeting envelope"""

    id: str
    name: str
    target_amount: float = 0.0
    bill_amount: Optional[float] = None
    frequency: Optional[PayFrequency] = None
    due_date: Optional[date] = None
    current_balance: float = 0.0
    priority: str = "important"  # essential | important | discretionary
    income_allocations: Dict[str, float] = field(default_factory=dict)


@dataclass
class IncomeAllocation:
    envelope_id: str
    amount: float


@dataclass
class RecurringIncome:
    """Forecast input: a pay cycle and how it is split across envelopes"""

    id: str
    name: str
    amount: float
    frequency: PayFrequency
    next_date: date
    allocation: List[IncomeAllocation] = field(default_factory=list)


@dataclass
class FutureIncome:
    date: date
    source: str
    income_id: str
    amount: float


@dataclass
class Suggestion:
    type: str  # increase_allocation | one_time_income | reduce_bill | extend_due_date | lifestyle_change
    message: str
    action_amount: Optional[float] = None


@dataclass
class EnvelopePrediction:
    envelope_id: str
    current_balance: float
    projected_balance: float
    target_amount: float
    gap: float  # positive = shortfall, negative = surplus
    status: EnvelopeStatus
    days_until_due: Optional[int]
    future_income: List[FutureIncome]
    suggestions: List[Suggestion]


# ---------------------------------------------------------------------------
# Income
# ---------------------------------------------------------------------------


@dataclass
class IncomeSource:
    id: str
    name: str
    amount: float
    raw_amount: Optional[float] = None  # amount per the source's own frequency

    @property
    def expected_amount(self) -> float:
        return self.raw_amount if self.raw_amount is not None else self.amount


@dataclass
class IncomeTransaction:
    id: str
    amount: float
    income_source_id: str


@dataclass(frozen=True)
class VarianceThresholds:
    percentage_threshold: float = 0.01  # fraction, 0.01 == 1%
    absolute_threshold: float = 1.00


@dataclass
class IncomeVariance:
    income_source_id: str
    income_source_name: str
    expected_amount: float
    actual_amount: float
    difference: float  # positive = extra, negative = shortfall
    percentage_change: float
    transaction_id: str
    variance_type: str  # "bonus" or "shortfall"


@dataclass
class VarianceDisplay:
    title: str
    expected: str
    actual: str
    difference: str
    percentage: str
    description: str


@dataclass
class SuggestedAction:
    id: str
    label: str
    description: str
    action: str  # "one_time" or "permanent_change"


@dataclass
class ShortfallCandidate:
    envelope: Envelope
    allocation_from_source: float


@dataclass
class EnvelopePriorityGroup:
    priority: str
    label: str
    candidates: List[ShortfallCandidate]
