import math

from cardvalue.schemas.valuation import (
    BenefitItem,
    CardSnapshot,
    CentsOverride,
    CustomAdjustment,
    ProportionOverride,
    RealizationLevel,
    RecurringValue,
    UserOverride,
)
from cardvalue.utils.period_utils import annualize, periods_per_year


def round_cents(value: float) -> int:
    """Round to whole cents, halves up."""
    return math.floor(value + 0.5)


def raw_annual_cents(item: RecurringValue) -> int:
    """Face value of a recurring item over one year, honoring per-period overrides."""
    periods = periods_per_year(item.frequency)
    if not periods:
        return 0
    if not item.overrides:
        return item.default_period_value_cents * periods

    by_period = {ov.period: ov.value_cents for ov in item.overrides}
    return sum(
        by_period.get(period, item.default_period_value_cents)
        for period in range(1, periods + 1)
    )


def default_effective_cents(item: BenefitItem) -> int:
    """The issuer's estimate of how much of the item is actually realized."""
    if item.default_effective_cents is not None:
        return item.default_effective_cents
    if item.default_effective_proportion is not None:
        return round_cents(raw_annual_cents(item) * item.default_effective_proportion)
    return 0


def effective_annual_cents(item: BenefitItem, override: UserOverride | None = None) -> int:
    """Annual value counted toward the card's net value.

    A user override wins over the issuer default. Proportions are applied to the
    raw annual value as given, without clamping.
    """
    match override.value if override is not None else None:
        case CentsOverride(cents=cents):
            return cents
        case ProportionOverride(proportion=proportion):
            return round_cents(raw_annual_cents(item) * proportion)
        case None:
            return default_effective_cents(item)


def annual_adjustment_cents(adjustment: CustomAdjustment) -> int:
    return annualize(adjustment.value_cents, adjustment.frequency)


def net_annual_value_cents(card: CardSnapshot) -> int:
    """Effective benefits plus custom adjustments, minus the annual fee. May be negative."""
    benefits_total = sum(effective_annual_cents(b, card.override_for(b.id)) for b in card.benefits)
    adjustments_total = sum(annual_adjustment_cents(adj) for adj in card.custom_adjustments)
    return benefits_total + adjustments_total - card.annual_fee_cents


def realization_level(effective_cents: int, raw_cents: int) -> RealizationLevel:
    """Bucket how much of an item's face value is expected to be realized."""
    if effective_cents == 0:
        return "none"
    if raw_cents == 0:
        return "full" if effective_cents > 0 else "none"
    proportion = effective_cents / raw_cents
    if proportion >= 0.8:
        return "full"
    if proportion >= 0.2:
        return "partial"
    return "low"
