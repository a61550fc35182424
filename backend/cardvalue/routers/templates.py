from fastapi import APIRouter, HTTPException, Request

from cardvalue.config import settings
from cardvalue.rate_limit import limiter
from cardvalue.schemas.profile import CardRankingOut, RankingRequest, TemplateValuationRequest
from cardvalue.schemas.template import CardTemplateOut
from cardvalue.schemas.valuation import CardValuationOut
from cardvalue.services.ranking import rank_templates
from cardvalue.services.snapshot_builder import build_snapshot
from cardvalue.services.template_loader import (
    get_all_templates,
    get_template,
    get_templates_by_issuer,
)
from cardvalue.services.valuation_service import evaluate_card

router = APIRouter(prefix="/api/templates", tags=["templates"])


def _get_template(issuer: str, card_name: str) -> CardTemplateOut:
    template = get_template(f"{issuer}/{card_name}")
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.get("", response_model=list[CardTemplateOut])
def list_templates(issuer: str | None = None):
    if issuer:
        return get_templates_by_issuer(issuer)
    return get_all_templates()


@router.post("/ranking", response_model=list[CardRankingOut])
@limiter.limit(settings.valuation_rate_limit)
def rank_templates_endpoint(request: Request, data: RankingRequest):
    templates = get_templates_by_issuer(data.issuer) if data.issuer else get_all_templates()
    return rank_templates(templates, data.valuations, data.point_valuations, data.order)


@router.get("/{issuer}/{card_name}", response_model=CardTemplateOut)
def get_template_endpoint(issuer: str, card_name: str):
    return _get_template(issuer, card_name)


@router.post("/{issuer}/{card_name}/valuation", response_model=CardValuationOut)
@limiter.limit(settings.valuation_rate_limit)
def evaluate_template_endpoint(
    request: Request, issuer: str, card_name: str, data: TemplateValuationRequest
):
    template = _get_template(issuer, card_name)
    snapshot = build_snapshot(template, data.valuation, data.point_valuations)
    return evaluate_card(
        snapshot,
        target_rates=data.target_rates,
        include_net_value=data.include_net_value,
    )
