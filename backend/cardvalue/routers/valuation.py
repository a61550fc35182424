from fastapi import APIRouter, Request

from cardvalue.config import settings
from cardvalue.rate_limit import limiter
from cardvalue.schemas.valuation import (
    BreakevenRequest,
    BreakevenResult,
    CardValuationOut,
    ValuationRequest,
)
from cardvalue.services.breakeven import solve_breakeven
from cardvalue.services.valuation_service import evaluate_card

router = APIRouter(prefix="/api/valuation", tags=["valuation"])


@router.post("", response_model=CardValuationOut)
@limiter.limit(settings.valuation_rate_limit)
def evaluate_card_endpoint(request: Request, data: ValuationRequest):
    return evaluate_card(
        data.card,
        target_rates=data.target_rates,
        include_net_value=data.include_net_value,
    )


@router.post("/breakeven", response_model=BreakevenResult)
@limiter.limit(settings.valuation_rate_limit)
def breakeven_endpoint(request: Request, data: BreakevenRequest):
    return solve_breakeven(
        data.spending,
        data.cents_per_point,
        data.net_annual_value_cents,
        target_rates=data.target_rates,
        include_net_value=data.include_net_value,
    )
