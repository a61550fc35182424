from typing import Literal

from pydantic import BaseModel, Field

from cardvalue.schemas.valuation import CalculationMode, CustomAdjustment, Frequency, UserOverride

RankingOrder = Literal["net_high_to_low", "net_low_to_high", "credits_high_to_low", "credits_low_to_high"]


class PlannedSpendingEntry(BaseModel):
    """Saved spend for one of the card's official earning rates."""
    amount_cents: int = Field(default=0, ge=0)
    frequency: Frequency = Frequency.ANNUAL
    mode: CalculationMode = "linear"
    notes: str | None = Field(default=None, max_length=1000)


class CustomPlannedSpending(BaseModel):
    id: str
    description: str = Field(default="", max_length=200)
    multiplier: float = 1
    amount_cents: int = Field(default=0, ge=0)
    frequency: Frequency = Frequency.ANNUAL
    mode: CalculationMode = "linear"
    notes: str | None = Field(default=None, max_length=1000)


class UserCardValuation(BaseModel):
    """A user's valuation of one card, keyed by the template's credit/benefit/earning-rate ids."""
    credit_valuations: dict[str, UserOverride] = {}
    benefit_valuations: dict[str, UserOverride] = {}
    custom_adjustments: list[CustomAdjustment] = Field(default_factory=list, max_length=100)
    planned_spending: dict[str, PlannedSpendingEntry] = {}
    custom_planned_spending: list[CustomPlannedSpending] = Field(default_factory=list, max_length=100)


class TemplateValuationRequest(BaseModel):
    valuation: UserCardValuation = UserCardValuation()
    # point system id -> cents per point
    point_valuations: dict[str, float] = {}
    target_rates: list[float] | None = Field(default=None, max_length=50)
    include_net_value: bool = True


class RankingRequest(BaseModel):
    # template id -> the user's valuation of that card
    valuations: dict[str, UserCardValuation] = {}
    point_valuations: dict[str, float] = {}
    order: RankingOrder = "net_high_to_low"
    issuer: str | None = None


class CardRankingOut(BaseModel):
    id: str
    name: str
    issuer: str
    annual_fee_cents: int
    credit_count: int
    net_annual_value_cents: int
