"""POST /v1/envelopes/predictions - Envelope cashflow predictions"""

import time
from fastapi import APIRouter, Depends

from household_budget.api.dependencies import get_request_id
from household_budget.api.v1.schemas import EnvelopePredictionSchema, PredictionRequest, PredictionResponse
from household_budget.domain.cashflow import calculate_all_predictions
from household_budget.infrastructure.observability.logging import log_calculation
from household_budget.infrastructure.observability.metrics import record_predictions

router = APIRouter()


@router.post("/envelopes/predictions", response_model=PredictionResponse)
def predict_envelopes(request_body: PredictionRequest, request_id: str = Depends(get_request_id)):
    """
    Project each envelope's balance from its scheduled income allocations.

    Returns:
        One prediction per envelope with gap, status and suggestions
    """
    start_time = time.time()

    predictions = calculate_all_predictions(
        [e.to_domain() for e in request_body.envelopes],
        [i.to_domain() for i in request_body.incomes],
        end_date=request_body.end_date,
        today=request_body.today,
    )

    record_predictions(predictions)
    log_calculation(
        request_id,
        "envelope_predictions",
        (time.time() - start_time) * 1000,
        envelope_count=len(predictions),
        critical_count=sum(1 for p in predictions if p.status.value == "critical"),
    )

    return PredictionResponse(predictions=[EnvelopePredictionSchema.model_validate(p) for p in predictions])
