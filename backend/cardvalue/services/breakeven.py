"""Breakeven analysis: how much total spend is needed to reach a target return rate.

Spending categories are split into fixed ones, whose annual spend stays as
planned, and linear ones, which scale together while keeping their relative
shares. With linear rate r, fixed spend F, fixed rewards R and net value N, the
return rate at linear spend L is

    t = (L * r + R + N) / (L + F)

which inverts to L = (R + N - t * F) / (t - r).
"""
import logging
import math
from typing import Iterable

from cardvalue.config import BREAKEVEN_EPSILON, settings
from cardvalue.schemas.valuation import (
    BreakevenAllocation,
    BreakevenResult,
    BreakevenRow,
    ChartPoint,
    PlannedSpendingItem,
)
from cardvalue.services.reward_rate import annual_reward_cents, annual_spend_cents

logger = logging.getLogger(__name__)


def active_items(items: Iterable[PlannedSpendingItem]) -> list[PlannedSpendingItem]:
    """Items with a positive planned annual spend."""
    return [item for item in items if annual_spend_cents(item) > 0]


def default_target_rates(current_rate: float | None) -> list[float]:
    """Target rates to tabulate when the caller does not ask for specific ones.

    Cards already returning more than the threshold get the next five whole
    percentages above their current rate; everything else gets 0% to 5%.
    """
    threshold = settings.default_target_rate_threshold
    if current_rate is not None and math.isfinite(current_rate) and current_rate > threshold:
        start = math.ceil(current_rate)
        return [float(start + i) for i in range(5)]
    return [float(i) for i in range(6)]


def required_linear_spend(
    target_rate: float,
    linear_rate: float,
    fixed_spend: float,
    fixed_rewards: float,
    net_value: float,
) -> float | None:
    """Linear spend (cents) needed to reach target_rate percent, or None if unreachable."""
    t = target_rate / 100
    numerator = fixed_rewards + net_value - t * fixed_spend
    denominator = t - linear_rate
    if abs(denominator) < BREAKEVEN_EPSILON:
        # The rate no longer moves with linear spend
        return 0.0 if abs(numerator) < BREAKEVEN_EPSILON else None
    linear_spend = numerator / denominator
    if not math.isfinite(linear_spend) or linear_spend < 0:
        return None
    return linear_spend


def _allocate(
    items: list[PlannedSpendingItem],
    linear_spend: float | None,
    base_linear_spend: int,
) -> list[BreakevenAllocation]:
    allocations = []
    for item in items:
        if linear_spend is None:
            amount = None
        elif item.mode == "fixed":
            amount = float(annual_spend_cents(item))
        else:
            share = annual_spend_cents(item) / base_linear_spend if base_linear_spend > 0 else 0
            amount = linear_spend * share
        allocations.append(BreakevenAllocation(
            item_id=item.id,
            description=item.description,
            mode=item.mode,
            annual_spend_cents=amount,
        ))
    return allocations


def return_rate_at(
    total_spend: float,
    linear_rate: float,
    fixed_spend: float,
    fixed_rewards: float,
    net_value: float,
) -> float:
    """Effective return rate (percent) when total annual spend is total_spend cents."""
    linear_spend = total_spend - fixed_spend
    return (linear_spend * linear_rate + fixed_rewards + net_value) / total_spend * 100


def solve_breakeven(
    items: Iterable[PlannedSpendingItem],
    cents_per_point: float,
    net_annual_value_cents: int,
    target_rates: list[float] | None = None,
    include_net_value: bool = True,
) -> BreakevenResult:
    spending = active_items(items)
    net_value = net_annual_value_cents if include_net_value else 0
    if not spending:
        return BreakevenResult(status="empty", net_value_cents=net_value)

    fixed_items = [s for s in spending if s.mode == "fixed"]
    linear_items = [s for s in spending if s.mode == "linear"]

    total_fixed_spend = sum(annual_spend_cents(s) for s in fixed_items)
    total_fixed_rewards = sum(annual_reward_cents(s, cents_per_point) for s in fixed_items)
    base_linear_spend = sum(annual_spend_cents(s) for s in linear_items)
    base_linear_rewards = sum(annual_reward_cents(s, cents_per_point) for s in linear_items)
    linear_rate = base_linear_rewards / base_linear_spend if base_linear_spend > 0 else 0

    result = BreakevenResult(
        status="ok",
        linear_rate=linear_rate,
        net_value_cents=net_value,
        total_fixed_spend_cents=total_fixed_spend,
        total_fixed_rewards_cents=total_fixed_rewards,
        base_linear_spend_cents=base_linear_spend,
        base_linear_rewards_cents=base_linear_rewards,
    )

    if net_value == 0 and total_fixed_spend == 0:
        logger.debug("Purely linear spending without net value, constant rate %.4f%%", linear_rate * 100)
        result.status = "constant_rate"
        result.constant_rate = linear_rate * 100
        return result

    total_spend = total_fixed_spend + base_linear_spend
    if target_rates is None:
        current_rate = return_rate_at(
            total_spend, linear_rate, total_fixed_spend, total_fixed_rewards, net_value
        )
        target_rates = default_target_rates(current_rate)

    for target in target_rates:
        linear_spend = required_linear_spend(
            target, linear_rate, total_fixed_spend, total_fixed_rewards, net_value
        )
        if linear_spend is None:
            logger.debug("Target rate %.2f%% is unreachable", target)
        result.rows.append(BreakevenRow(
            target_rate=target,
            required_linear_spend_cents=linear_spend,
            required_total_spend_cents=linear_spend + total_fixed_spend if linear_spend is not None else None,
            breakdown=_allocate(spending, linear_spend, base_linear_spend),
        ))

    if base_linear_spend > 0:
        result.curve = sample_curve(
            spending, result.rows, total_spend, linear_rate,
            total_fixed_spend, total_fixed_rewards, net_value, base_linear_spend,
        )
    return result


def sample_curve(
    spending: list[PlannedSpendingItem],
    rows: list[BreakevenRow],
    current_total_spend: int,
    linear_rate: float,
    fixed_spend: int,
    fixed_rewards: float,
    net_value: int,
    base_linear_spend: int,
) -> list[ChartPoint]:
    """Sample the return rate from the first breakeven point out to a few multiples of current spend."""
    first_total = next((r.required_total_spend_cents for r in rows if r.reachable), None)
    start = first_total if first_total is not None else float(current_total_spend)
    if start <= 0:
        return []

    end = max(start * 3, current_total_spend * 3, settings.breakeven_chart_min_max_spend_cents)
    steps = settings.breakeven_chart_steps
    points = []
    for i in range(steps + 1):
        spend = start + (end - start) * (i / steps)
        if spend < fixed_spend:
            continue
        points.append(ChartPoint(
            spend_cents=spend,
            return_rate=return_rate_at(spend, linear_rate, fixed_spend, fixed_rewards, net_value),
            breakdown=_allocate(spending, spend - fixed_spend, base_linear_spend),
        ))
    return points
