from cardvalue.schemas.valuation import (
    AdjustmentValuationOut,
    BenefitItem,
    BenefitValuationOut,
    CardSnapshot,
    CardValuationOut,
    UserOverride,
)
from cardvalue.services.breakeven import solve_breakeven
from cardvalue.services.reward_rate import compute_reward_rates
from cardvalue.services.valuation import (
    annual_adjustment_cents,
    default_effective_cents,
    effective_annual_cents,
    net_annual_value_cents,
    raw_annual_cents,
    realization_level,
)


def _benefit_to_out(item: BenefitItem, override: UserOverride | None) -> BenefitValuationOut:
    raw = raw_annual_cents(item)
    effective = effective_annual_cents(item, override)
    user_overridden = override is not None and override.is_set
    explanation = item.default_explanation
    if override is not None and override.explanation and override.explanation.strip():
        explanation = override.explanation.strip()
    return BenefitValuationOut(
        id=item.id,
        name=item.name,
        kind=item.kind,
        frequency=item.frequency,
        raw_annual_cents=raw,
        default_effective_cents=default_effective_cents(item),
        effective_annual_cents=effective,
        user_overridden=user_overridden,
        realization=realization_level(effective, raw),
        explanation=explanation,
    )


def evaluate_card(
    card: CardSnapshot,
    target_rates: list[float] | None = None,
    include_net_value: bool = True,
) -> CardValuationOut:
    """Value a card snapshot: per-benefit values, net value, reward rates and breakeven analysis."""
    benefits = [_benefit_to_out(b, card.override_for(b.id)) for b in card.benefits]
    adjustments = [
        AdjustmentValuationOut(
            id=adj.id,
            description=adj.description,
            annual_value_cents=annual_adjustment_cents(adj),
        )
        for adj in card.custom_adjustments
    ]
    net_value = net_annual_value_cents(card)
    cents_per_point = card.point_valuation.cents_per_point

    return CardValuationOut(
        card_id=card.card_id,
        name=card.name,
        annual_fee_cents=card.annual_fee_cents,
        benefits=benefits,
        adjustments=adjustments,
        total_benefit_cents=sum(b.effective_annual_cents for b in benefits),
        total_adjustment_cents=sum(a.annual_value_cents for a in adjustments),
        net_annual_value_cents=net_value,
        cents_per_point=cents_per_point,
        rates=compute_reward_rates(card.planned_spending, cents_per_point, net_value),
        breakeven=solve_breakeven(
            card.planned_spending,
            cents_per_point,
            net_value,
            target_rates=target_rates,
            include_net_value=include_net_value,
        ),
    )
