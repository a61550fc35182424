import pytest

from cardvalue.config import settings
from cardvalue.schemas.valuation import Frequency
from cardvalue.services.breakeven import (
    default_target_rates,
    required_linear_spend,
    return_rate_at,
    solve_breakeven,
)
from cardvalue.services.reward_rate import compute_reward_rates
from tests.conftest import make_spending


# --- Degenerate cases ---

def test_no_active_spending():
    result = solve_breakeven([make_spending("dining", 0, 3)], 1.0, -10_000)
    assert result.status == "empty"
    assert result.rows == []
    assert result.curve == []


def test_constant_rate_without_fixed_spend_or_net_value():
    items = [make_spending("dining", 500_000, 3), make_spending("other", 500_000, 1)]
    result = solve_breakeven(items, 1.0, 0, target_rates=[2.0])
    assert result.status == "constant_rate"
    assert result.constant_rate == pytest.approx(2.0)
    assert result.rows == []
    assert result.curve == []


def test_constant_rate_when_net_value_excluded():
    items = [make_spending("dining", 1_000_000, 2)]
    result = solve_breakeven(items, 1.5, -69_500, include_net_value=False)
    assert result.status == "constant_rate"
    assert result.constant_rate == pytest.approx(3.0)


def test_required_linear_spend_flat_rate_reachable():
    # Target equals the marginal rate and nothing else contributes
    assert required_linear_spend(2.0, 0.02, 0, 0, 0) == 0.0


def test_required_linear_spend_flat_rate_unreachable():
    assert required_linear_spend(2.0, 0.02, 0, 0, -10_000) is None


def test_required_linear_spend_negative_is_unreachable():
    # Net value alone keeps the rate above target at any spend
    assert required_linear_spend(0.1, 0.02, 0, 0, 10_000) is None


def test_required_linear_spend_non_finite_target_is_unreachable():
    assert required_linear_spend(float("inf"), 0.02, 100_000, 1_000, -10_000) is None
    assert required_linear_spend(float("nan"), 0.02, 0, 0, -10_000) is None


def test_infinite_target_row_is_unreachable():
    items = [
        make_spending("dining", 500_000, 4),
        make_spending("rent", 100_000, 1, mode="fixed"),
    ]
    result = solve_breakeven(items, 1.0, -20_000, target_rates=[float("inf")])
    row = result.rows[0]
    assert not row.reachable
    assert row.required_linear_spend_cents is None


# --- Reachable breakeven ---

def test_breakeven_reproduces_target_rate():
    item = make_spending("dining", 1_000_000, 4)
    net_value = -35_500
    result = solve_breakeven([item], 1.5, net_value, target_rates=[4.0])

    assert result.status == "ok"
    row = result.rows[0]
    assert row.reachable
    # 6% marginal rate: L * 0.06 - 35,500 = 0.04 * L
    assert row.required_total_spend_cents == pytest.approx(1_775_000)

    scaled = make_spending("dining", round(row.breakdown[0].annual_spend_cents), 4)
    rates = compute_reward_rates([scaled], 1.5, net_value)
    assert rates.effective_return_rate == pytest.approx(4.0, abs=1e-3)


def test_breakeven_with_fixed_item():
    items = [
        make_spending("dining", 500_000, 4),
        make_spending("rent", 100_000, 1, frequency=Frequency.MONTHLY, mode="fixed"),
    ]
    net_value = -20_000
    result = solve_breakeven(items, 1.0, net_value, target_rates=[2.0])
    row = result.rows[0]

    assert result.total_fixed_spend_cents == 1_200_000
    assert result.total_fixed_rewards_cents == pytest.approx(12_000)
    assert result.linear_rate == pytest.approx(0.04)
    # (12,000 - 20,000 - 0.02 * 1,200,000) / (0.02 - 0.04) = 1,600,000
    assert row.required_linear_spend_cents == pytest.approx(1_600_000)
    assert row.required_total_spend_cents == pytest.approx(2_800_000)

    by_id = {a.item_id: a for a in row.breakdown}
    assert by_id["rent"].annual_spend_cents == 1_200_000
    assert by_id["dining"].annual_spend_cents == pytest.approx(1_600_000)
    assert return_rate_at(2_800_000, 0.04, 1_200_000, 12_000, net_value) == pytest.approx(2.0)


def test_linear_breakdown_follows_base_shares():
    items = [make_spending("dining", 300_000, 3), make_spending("other", 100_000, 1)]
    result = solve_breakeven(items, 1.0, -10_000, target_rates=[2.0])
    row = result.rows[0]
    dining, other = row.breakdown
    assert dining.annual_spend_cents == pytest.approx(row.required_linear_spend_cents * 0.75)
    assert other.annual_spend_cents == pytest.approx(row.required_linear_spend_cents * 0.25)


def test_unreachable_target_above_marginal_rate():
    items = [make_spending("dining", 1_000_000, 2)]
    result = solve_breakeven(items, 1.0, -10_000, target_rates=[5.0])
    row = result.rows[0]
    assert not row.reachable
    assert row.required_total_spend_cents is None
    assert all(a.annual_spend_cents is None for a in row.breakdown)


def test_inactive_items_are_excluded():
    items = [make_spending("dining", 1_000_000, 4), make_spending("gas", 0, 3)]
    result = solve_breakeven(items, 1.0, -10_000, target_rates=[1.0])
    assert [a.item_id for a in result.rows[0].breakdown] == ["dining"]


# --- Default targets ---

def test_default_targets_low_rate():
    assert default_target_rates(1.2) == [0, 1, 2, 3, 4, 5]


def test_default_targets_high_rate():
    assert default_target_rates(6.3) == [7, 8, 9, 10, 11]


def test_default_targets_non_finite_rate():
    assert default_target_rates(float("inf")) == [0, 1, 2, 3, 4, 5]
    assert default_target_rates(None) == [0, 1, 2, 3, 4, 5]


def test_solver_picks_default_targets():
    items = [make_spending("dining", 1_000_000, 4)]
    result = solve_breakeven(items, 1.5, 15_000)
    # 6% on spend plus 1.5% from net value
    assert [r.target_rate for r in result.rows] == [8, 9, 10, 11, 12]


# --- Curve ---

def test_curve_starts_at_first_breakeven_and_is_monotonic():
    items = [make_spending("dining", 1_000_000, 4)]
    result = solve_breakeven(items, 1.5, -35_500, target_rates=[0.0, 1.0])
    curve = result.curve

    assert len(curve) == settings.breakeven_chart_steps + 1
    assert curve[0].spend_cents == pytest.approx(result.rows[0].required_total_spend_cents)
    assert curve[0].return_rate == pytest.approx(0.0, abs=1e-9)
    spends = [p.spend_cents for p in curve]
    assert spends == sorted(spends)
    assert curve[-1].spend_cents == pytest.approx(
        max(3 * curve[0].spend_cents, 3 * 1_000_000, settings.breakeven_chart_min_max_spend_cents)
    )


def test_curve_falls_back_to_current_spend_when_unreachable():
    items = [make_spending("dining", 1_000_000, 1)]
    result = solve_breakeven(items, 1.0, -50_000, target_rates=[5.0])
    assert not result.rows[0].reachable
    assert result.curve[0].spend_cents == pytest.approx(1_000_000)


def test_no_curve_when_everything_is_fixed():
    items = [make_spending("rent", 1_000_000, 1, mode="fixed")]
    result = solve_breakeven(items, 1.0, -10_000, target_rates=[1.0])
    assert result.status == "ok"
    assert result.curve == []
    assert result.rows[0].required_total_spend_cents is None


def test_curve_breakdown_sums_to_spend():
    items = [
        make_spending("dining", 500_000, 3),
        make_spending("rent", 200_000, 1, mode="fixed"),
    ]
    result = solve_breakeven(items, 1.0, -5_000, target_rates=[1.0])
    for point in result.curve:
        total = sum(a.annual_spend_cents for a in point.breakdown)
        assert total == pytest.approx(point.spend_cents)
