from cardvalue.schemas.profile import CardRankingOut, RankingOrder, UserCardValuation
from cardvalue.schemas.template import CardTemplateOut
from cardvalue.services.snapshot_builder import build_snapshot
from cardvalue.services.valuation import net_annual_value_cents


def rank_templates(
    templates: list[CardTemplateOut],
    valuations: dict[str, UserCardValuation] | None = None,
    point_valuations: dict[str, float] | None = None,
    order: RankingOrder = "net_high_to_low",
) -> list[CardRankingOut]:
    """Order cards by net annual value or by number of credits.

    Cards without a saved valuation are valued with issuer defaults. Ties keep
    the order the templates were given in.
    """
    valuations = valuations or {}
    ranked = []
    for template in templates:
        snapshot = build_snapshot(
            template, valuations.get(template.id, UserCardValuation()), point_valuations
        )
        ranked.append(CardRankingOut(
            id=template.id,
            name=template.name,
            issuer=template.issuer,
            annual_fee_cents=template.annual_fee_cents,
            credit_count=len(template.credits),
            net_annual_value_cents=net_annual_value_cents(snapshot),
        ))

    match order:
        case "net_high_to_low":
            ranked.sort(key=lambda card: card.net_annual_value_cents, reverse=True)
        case "net_low_to_high":
            ranked.sort(key=lambda card: card.net_annual_value_cents)
        case "credits_high_to_low":
            ranked.sort(key=lambda card: card.credit_count, reverse=True)
        case "credits_low_to_high":
            ranked.sort(key=lambda card: card.credit_count)
    return ranked
