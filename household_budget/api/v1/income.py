"""POST /v1/income/variance - Compare a received paycheck with expected income"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException

from household_budget.api.dependencies import get_default_thresholds, get_request_id
from household_budget.api.v1.schemas import (
    EnvelopePriorityGroupSchema,
    IncomeVarianceSchema,
    ShortfallCandidateSchema,
    SuggestedActionSchema,
    VarianceDisplaySchema,
    VarianceRequest,
    VarianceResponse,
)
from household_budget.domain.exceptions import UnknownIncomeSourceError
from household_budget.domain.income_variance import (
    SHORTFALL,
    detect_income_variance,
    find_income_source,
    format_variance_for_display,
    get_suggested_actions,
    group_envelopes_by_priority,
)
from household_budget.domain.models import VarianceThresholds
from household_budget.infrastructure.observability.logging import log_calculation
from household_budget.infrastructure.observability.metrics import record_variance

router = APIRouter()


@router.post("/income/variance", response_model=VarianceResponse)
def check_income_variance(
    request_body: VarianceRequest,
    request_id: str = Depends(get_request_id),
    default_thresholds: VarianceThresholds = Depends(get_default_thresholds),
):
    """
    Detect a bonus or shortfall on an income transaction.

    Flow:
    1. Match the transaction to its income source
    2. Detect variance (both thresholds must be met)
    3. Attach display copy and suggested actions
    4. For shortfalls, list funded envelopes grouped by priority
    """
    start_time = time.time()
    transaction = request_body.transaction.to_domain()

    try:
        source = find_income_source(transaction, [s.to_domain() for s in request_body.income_sources])
    except UnknownIncomeSourceError as e:
        logging.warning(f"Unknown income source: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))

    thresholds = request_body.thresholds.to_domain() if request_body.thresholds else default_thresholds
    variance = detect_income_variance(transaction, source, thresholds)

    record_variance(variance)
    log_calculation(
        request_id,
        "income_variance",
        (time.time() - start_time) * 1000,
        income_source_id=source.id,
        variance_type=variance.variance_type if variance else None,
    )

    if variance is None:
        return VarianceResponse()

    groups = []
    if variance.variance_type == SHORTFALL:
        envelopes = [e.to_domain() for e in request_body.envelopes]
        groups = [
            EnvelopePriorityGroupSchema(
                priority=group.priority,
                label=group.label,
                envelopes=[
                    ShortfallCandidateSchema(
                        envelope_id=c.envelope.id,
                        envelope_name=c.envelope.name,
                        allocation_from_source=c.allocation_from_source,
                    )
                    for c in group.candidates
                ],
            )
            for group in group_envelopes_by_priority(envelopes, source.id)
        ]

    return VarianceResponse(
        variance=IncomeVarianceSchema.model_validate(variance),
        display=VarianceDisplaySchema.model_validate(format_variance_for_display(variance)),
        actions=[SuggestedActionSchema.model_validate(a) for a in get_suggested_actions(variance)],
        reduction_groups=groups,
    )
