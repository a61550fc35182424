import os
from pathlib import Path

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["TEMPLATE_RELOAD_INTERVAL"] = "0"
os.environ["CARD_TEMPLATES_DIR"] = str(Path(__file__).resolve().parent.parent / "card_templates")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from cardvalue.main import app  # noqa: E402
from cardvalue.schemas.valuation import (  # noqa: E402
    BenefitItem,
    CardSnapshot,
    CustomAdjustment,
    Frequency,
    PlannedSpendingItem,
    PointValuation,
)
from cardvalue.services.template_loader import load_templates  # noqa: E402

load_templates()


@pytest.fixture
def client():
    return TestClient(app)


def make_spending(
    item_id: str,
    amount_cents: int,
    multiplier: float,
    frequency: Frequency = Frequency.ANNUAL,
    mode: str = "linear",
) -> PlannedSpendingItem:
    return PlannedSpendingItem(
        id=item_id,
        description=item_id.title(),
        amount_cents=amount_cents,
        frequency=frequency,
        multiplier=multiplier,
        mode=mode,
    )


@pytest.fixture
def premium_card() -> CardSnapshot:
    """$595 fee, a $300 travel credit and a $5/month subscription cost."""
    return CardSnapshot(
        card_id="test/premium",
        name="Premium",
        annual_fee_cents=59500,
        benefits=(
            BenefitItem(
                id="travel",
                name="Travel Credit",
                frequency=Frequency.ANNUAL,
                default_period_value_cents=30000,
                default_effective_proportion=1.0,
            ),
        ),
        custom_adjustments=(
            CustomAdjustment(id="sub", description="Subscription", frequency=Frequency.MONTHLY, value_cents=-500),
        ),
        planned_spending=(make_spending("dining", 1_000_000, 4),),
        point_valuation=PointValuation(system_id="pts", cents_per_point=1.5),
    )
