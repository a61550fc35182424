from cardvalue.schemas.profile import UserCardValuation
from cardvalue.schemas.template import CardTemplateOut
from cardvalue.schemas.valuation import (
    BenefitItem,
    CardSnapshot,
    Frequency,
    PlannedSpendingItem,
    PointValuation,
    UserOverride,
)


def _template_benefits(template: CardTemplateOut) -> list[BenefitItem]:
    items = [
        BenefitItem(
            id=credit.id,
            name=credit.name,
            kind="credit",
            frequency=credit.frequency,
            default_period_value_cents=credit.default_period_value_cents,
            overrides=tuple(credit.overrides),
            default_effective_cents=credit.default_effective_cents,
            default_effective_proportion=credit.default_effective_proportion,
            default_explanation=credit.explanation,
        )
        for credit in template.credits
    ]
    items.extend(
        BenefitItem(
            id=benefit.id,
            name=benefit.name,
            kind="benefit",
            frequency=Frequency.UNSPECIFIED,
            default_effective_cents=benefit.default_effective_cents,
            default_explanation=benefit.explanation,
        )
        for benefit in template.benefits
    )
    return items


def _user_overrides(template: CardTemplateOut, valuation: UserCardValuation) -> dict[str, UserOverride]:
    """Collect overrides for ids the template actually defines."""
    overrides: dict[str, UserOverride] = {}
    for credit in template.credits:
        if credit.id in valuation.credit_valuations:
            overrides[credit.id] = valuation.credit_valuations[credit.id]
    for benefit in template.benefits:
        if benefit.id in valuation.benefit_valuations:
            overrides[benefit.id] = valuation.benefit_valuations[benefit.id]
    return overrides


def _planned_spending(template: CardTemplateOut, valuation: UserCardValuation) -> list[PlannedSpendingItem]:
    """Official earning rates, highest multiplier first, followed by the user's custom categories."""
    items = []
    for rate in sorted(template.earning_rates, key=lambda r: r.multiplier, reverse=True):
        saved = valuation.planned_spending.get(rate.id)
        items.append(PlannedSpendingItem(
            id=rate.id,
            description=rate.description,
            multiplier=rate.multiplier,
            amount_cents=saved.amount_cents if saved else 0,
            frequency=saved.frequency if saved else Frequency.ANNUAL,
            mode=saved.mode if saved else "linear",
            notes=saved.notes if saved else None,
        ))
    for custom in valuation.custom_planned_spending:
        # Unnamed custom categories are never kept by the client
        if not custom.description:
            continue
        items.append(PlannedSpendingItem(
            id=custom.id,
            description=custom.description,
            multiplier=custom.multiplier,
            amount_cents=custom.amount_cents,
            frequency=custom.frequency,
            mode=custom.mode,
            is_custom=True,
            notes=custom.notes,
        ))
    return items


def resolve_cents_per_point(template: CardTemplateOut, point_valuations: dict[str, float]) -> PointValuation:
    if template.point_system is None:
        return PointValuation()
    system_id = template.point_system.system_id
    cents_per_point = point_valuations.get(system_id, template.point_system.default_cents_per_point)
    return PointValuation(system_id=system_id, cents_per_point=cents_per_point)


def build_snapshot(
    template: CardTemplateOut,
    valuation: UserCardValuation,
    point_valuations: dict[str, float] | None = None,
) -> CardSnapshot:
    """Combine an issuer template with a user's valuation into a card snapshot."""
    return CardSnapshot(
        card_id=template.id,
        name=template.name,
        annual_fee_cents=template.annual_fee_cents,
        benefits=tuple(_template_benefits(template)),
        user_overrides=_user_overrides(template, valuation),
        custom_adjustments=tuple(valuation.custom_adjustments),
        planned_spending=tuple(_planned_spending(template, valuation)),
        point_valuation=resolve_cents_per_point(template, point_valuations or {}),
    )
