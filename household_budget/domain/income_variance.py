"""Income variance detection - actual paychecks vs. expected income"""

from typing import Dict, List, Optional

from household_budget.domain.exceptions import UnknownIncomeSourceError
from household_budget.domain.models import (
    Envelope,
    EnvelopePriorityGroup,
    IncomeSource,
    IncomeTransaction,
    IncomeVariance,
    ShortfallCandidate,
    SuggestedAction,
    VarianceDisplay,
    VarianceThresholds,
)

DEFAULT_THRESHOLDS = VarianceThresholds()

BONUS = "bonus"
SHORTFALL = "shortfall"

# Discretionary envelopes are offered for reduction first
PRIORITY_ORDER = ("discretionary", "important", "essential")
PRIORITY_LABELS: Dict[str, str] = {
    "discretionary": "Flexible",
    "important": "Important",
    "essential": "Essential (last resort)",
}
DEFAULT_PRIORITY = "important"


def find_income_source(transaction: IncomeTransaction, sources: List[IncomeSource]) -> IncomeSource:
    """Income source the transaction was matched to"""
    for source in sources:
        if source.id == transaction.income_source_id:
            return source
    raise UnknownIncomeSourceError(f"Income source not found: {transaction.income_source_id}")


def detect_income_variance(
    transaction: IncomeTransaction,
    income_source: IncomeSource,
    thresholds: VarianceThresholds = DEFAULT_THRESHOLDS,
) -> Optional[IncomeVariance]:
    """
    Compare a received paycheck with the income source's expected amount.

    A variance is reported only when BOTH the percentage and the absolute
    threshold are met. Returns None below either threshold, or when the
    source has no positive expected amount to compare against.

    Example:
        expected $3000, received $3200 -> difference 200, +6.67%, bonus
        expected $3000, received $3000.50 -> None (under $1)
    """
    expected = income_source.expected_amount

    if expected <= 0:
        return None

    difference = transaction.amount - expected
    percentage_change = difference / expected * 100

    exceeds_percentage = abs(percentage_change) >= thresholds.percentage_threshold * 100
    exceeds_absolute = abs(difference) >= thresholds.absolute_threshold

    if not (exceeds_percentage and exceeds_absolute):
        return None

    return IncomeVariance(
        income_source_id=income_source.id,
        income_source_name=income_source.name,
        expected_amount=expected,
        actual_amount=transaction.amount,
        difference=difference,
        percentage_change=percentage_change,
        transaction_id=transaction.id,
        variance_type=BONUS if difference > 0 else SHORTFALL,
    )


def format_variance_for_display(variance: IncomeVariance) -> VarianceDisplay:
    if variance.difference > 0:
        sign = "+"
    elif variance.difference < 0:
        sign = "-"
    else:
        sign = ""

    if variance.variance_type == BONUS:
        title = f"Extra Income: {variance.income_source_name}"
        description = f"You received ${variance.difference:.2f} more than expected."
    else:
        title = f"Income Shortfall: {variance.income_source_name}"
        description = f"You received ${abs(variance.difference):.2f} less than expected."

    return VarianceDisplay(
        title=title,
        expected=f"${variance.expected_amount:.2f}",
        actual=f"${variance.actual_amount:.2f}",
        difference=f"{sign}${abs(variance.difference):.2f}",
        percentage=f"{sign}{abs(variance.percentage_change):.1f}%",
        description=description,
    )


def get_suggested_actions(variance: IncomeVariance) -> List[SuggestedAction]:
    """One-time handling vs. updating the expected income for good"""
    permanent = SuggestedAction(
        id="permanent_increase" if variance.variance_type == BONUS else "permanent_decrease",
        label="My pay has permanently changed",
        description=f"Update income to ${variance.actual_amount:.2f} and rebalance the budget",
        action="permanent_change",
    )

    if variance.variance_type == BONUS:
        one_time = SuggestedAction(
            id="one_time_bonus",
            label="One-time bonus",
            description=f"Add ${variance.difference:.2f} to the Surplus envelope for later allocation",
            action="one_time",
        )
    else:
        one_time = SuggestedAction(
            id="one_time_reduction",
            label="One-time reduction",
            description="Choose which envelopes to reduce this cycle",
            action="one_time",
        )

    return [one_time, permanent]


def group_envelopes_by_priority(envelopes: List[Envelope], income_source_id: str) -> List[EnvelopePriorityGroup]:
    """
    Envelopes funded by an income source, grouped for shortfall reduction.

    Groups run discretionary -> important -> essential, each sorted by the
    amount the source contributes (largest first). Envelopes the source does
    not fund and empty groups are left out.
    """
    groups: List[EnvelopePriorityGroup] = []

    for priority in PRIORITY_ORDER:
        candidates = [
            ShortfallCandidate(envelope=env, allocation_from_source=env.income_allocations.get(income_source_id, 0.0))
            for env in envelopes
            if (env.priority or DEFAULT_PRIORITY) == priority
        ]
        candidates = [c for c in candidates if c.allocation_from_source > 0]
        candidates.sort(key=lambda c: c.allocation_from_source, reverse=True)

        if candidates:
            groups.append(EnvelopePriorityGroup(priority=priority, label=PRIORITY_LABELS[priority], candidates=candidates))

    return groups
