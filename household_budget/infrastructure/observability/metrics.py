"""Prometheus metrics for strategy usage, envelope health and income variance"""

from typing import Iterable, Optional
from prometheus_client import Counter, Histogram

from household_budget.domain.models import EnvelopePrediction, IncomeVariance, PaymentStrategyResult

# Debt metrics
strategy_calculation_counter = Counter(
    "budget_strategy_calculations_total",
    "Payment strategy calculations performed",
    ["strategy"],
)

unpayable_debt_counter = Counter(
    "budget_unpayable_debt_total",
    "Target card projections where the payment never clears the balance",
)

# Envelope metrics
envelope_status_counter = Counter(
    "budget_envelope_status_total",
    "Envelope predictions by funding status",
    ["status"],  # on_track | behind | critical | overfunded
)

# Income metrics
income_variance_counter = Counter(
    "budget_income_variance_total",
    "Income variance checks by outcome",
    ["outcome"],  # none | bonus | shortfall
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)

rejected_request_counter = Counter(
    "budget_rejected_requests_total",
    "Requests refused before any calculation ran",
    ["endpoint", "status"],  # 404 unknown income source, 422 invalid input
)


def record_request(method: str, endpoint: str, status: int, duration: float) -> None:
    request_duration_histogram.labels(method=method, endpoint=endpoint, status=status).observe(duration)

    if 400 <= status < 500:
        rejected_request_counter.labels(endpoint=endpoint, status=status).inc()


def record_strategy(result: PaymentStrategyResult) -> None:
    """Count a strategy run and flag target cards that never pay off"""
    strategy_calculation_counter.labels(strategy=result.strategy.value).inc()

    if result.target_card_id is not None and result.projected_payoff_months is None:
        unpayable_debt_counter.inc()


def record_predictions(predictions: Iterable[EnvelopePrediction]) -> None:
    for prediction in predictions:
        envelope_status_counter.labels(status=prediction.status.value).inc()


def record_variance(variance: Optional[IncomeVariance]) -> None:
    outcome = variance.variance_type if variance else "none"
    income_variance_counter.labels(outcome=outcome).inc()
