from typing import Iterable

from cardvalue.schemas.valuation import PlannedSpendingItem, RewardRates
from cardvalue.utils.period_utils import annualize


def annual_spend_cents(item: PlannedSpendingItem) -> int:
    return annualize(item.amount_cents, item.frequency)


def reward_cents(spend_cents: float, multiplier: float, cents_per_point: float) -> float:
    """Value of the rewards earned on a spend.

    The multiplier is points earned per dollar, so cents of spend are divided
    by 100 before being priced at cents_per_point.
    """
    return spend_cents * multiplier * cents_per_point / 100


def annual_reward_cents(item: PlannedSpendingItem, cents_per_point: float) -> float:
    return reward_cents(annual_spend_cents(item), item.multiplier, cents_per_point)


def compute_reward_rates(
    items: Iterable[PlannedSpendingItem],
    cents_per_point: float,
    net_annual_value_cents: int,
) -> RewardRates:
    total_spend = 0
    total_rewards = 0.0
    for item in items:
        total_spend += annual_spend_cents(item)
        total_rewards += annual_reward_cents(item, cents_per_point)

    rates = RewardRates(
        total_annual_spend_cents=total_spend,
        total_rewards_cents=total_rewards,
        total_return_cents=total_rewards + net_annual_value_cents,
    )
    if total_spend > 0:
        rates.spend_return_rate = total_rewards / total_spend * 100
        rates.net_worth_effect_rate = net_annual_value_cents / total_spend * 100
        rates.effective_return_rate = rates.spend_return_rate + rates.net_worth_effect_rate
    elif net_annual_value_cents != 0:
        # No spend to divide by: report the net value itself as the rate
        rates.net_worth_effect_rate = float(net_annual_value_cents)
        rates.effective_return_rate = float(net_annual_value_cents)
        rates.no_spend = True
    return rates
