from collections.abc import Mapping
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

CalculationMode = Literal["linear", "fixed"]
BenefitKind = Literal["credit", "benefit"]
RealizationLevel = Literal["full", "partial", "low", "none"]


class Frequency(str, Enum):
    UNSPECIFIED = "unspecified"
    ANNUAL = "annual"
    SEMI_ANNUAL = "semi_annual"
    QUARTERLY = "quarterly"
    MONTHLY = "monthly"


class PeriodOverride(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: int  # 1-based index within the year
    value_cents: int = 0


class RecurringValue(BaseModel):
    """A value that recurs every period of the year, with optional per-period overrides."""
    model_config = ConfigDict(frozen=True)

    frequency: Frequency = Frequency.UNSPECIFIED
    default_period_value_cents: int = 0
    overrides: tuple[PeriodOverride, ...] = ()


class BenefitItem(RecurringValue):
    """A card credit or perk together with the issuer's estimate of its realized value."""
    id: str
    name: str = ""
    kind: BenefitKind = "credit"
    default_effective_cents: int | None = None
    default_effective_proportion: float | None = None
    default_explanation: str | None = None

    @model_validator(mode="after")
    def validate_single_default(self) -> "BenefitItem":
        if self.default_effective_cents is not None and self.default_effective_proportion is not None:
            raise ValueError("default_effective_cents and default_effective_proportion are mutually exclusive")
        return self


class CentsOverride(BaseModel):
    model_config = ConfigDict(frozen=True)

    cents: int


class ProportionOverride(BaseModel):
    model_config = ConfigDict(frozen=True)

    proportion: float


ValueOverride = CentsOverride | ProportionOverride | None


class UserOverride(BaseModel):
    """A user's own valuation of one benefit: cents or proportion, never both."""
    model_config = ConfigDict(frozen=True)

    cents: int | None = None
    proportion: float | None = None
    explanation: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def validate_oneof(self) -> "UserOverride":
        if self.cents is not None and self.proportion is not None:
            raise ValueError("cents and proportion are mutually exclusive")
        return self

    @property
    def value(self) -> ValueOverride:
        if self.cents is not None:
            return CentsOverride(cents=self.cents)
        if self.proportion is not None:
            return ProportionOverride(proportion=self.proportion)
        return None

    @property
    def is_set(self) -> bool:
        return self.value is not None


class CustomAdjustment(BaseModel):
    """A user-defined signed value; negative values are costs."""
    model_config = ConfigDict(frozen=True)

    id: str
    description: str = ""
    frequency: Frequency = Frequency.UNSPECIFIED
    value_cents: int = 0
    notes: str | None = Field(default=None, max_length=1000)


class PlannedSpendingItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str  # earning rate id or custom spending id
    description: str = ""
    amount_cents: int = 0  # per period
    frequency: Frequency = Frequency.ANNUAL
    multiplier: float = 0
    mode: CalculationMode = "linear"
    is_custom: bool = False
    notes: str | None = Field(default=None, max_length=1000)


class PointValuation(BaseModel):
    model_config = ConfigDict(frozen=True)

    system_id: str | None = None
    cents_per_point: float = 0


class CardSnapshot(BaseModel):
    """Everything needed to value one card, assembled fresh for each computation.

    Snapshots are hashable. User overrides are kept as (benefit id, override)
    pairs sorted by id; a mapping is accepted on input and emitted on output.
    """
    model_config = ConfigDict(frozen=True)

    card_id: str = ""
    name: str = ""
    annual_fee_cents: int = 0
    benefits: tuple[BenefitItem, ...] = ()
    user_overrides: tuple[tuple[str, UserOverride], ...] = ()
    custom_adjustments: tuple[CustomAdjustment, ...] = ()
    planned_spending: tuple[PlannedSpendingItem, ...] = ()
    point_valuation: PointValuation = PointValuation()

    @field_validator("user_overrides", mode="before")
    @classmethod
    def overrides_from_mapping(cls, value):
        if isinstance(value, Mapping):
            return tuple(value.items())
        return value

    @field_validator("user_overrides")
    @classmethod
    def sort_overrides(cls, value: tuple[tuple[str, UserOverride], ...]) -> tuple[tuple[str, UserOverride], ...]:
        # A later entry for the same benefit id wins
        return tuple(sorted(dict(value).items(), key=lambda pair: pair[0]))

    @field_serializer("user_overrides")
    def overrides_to_mapping(self, value: tuple[tuple[str, UserOverride], ...]) -> dict[str, UserOverride]:
        return dict(value)

    def override_for(self, benefit_id: str) -> UserOverride | None:
        for item_id, override in self.user_overrides:
            if item_id == benefit_id:
                return override
        return None


# --- Results ---


class BenefitValuationOut(BaseModel):
    id: str
    name: str
    kind: BenefitKind
    frequency: Frequency
    raw_annual_cents: int
    default_effective_cents: int
    effective_annual_cents: int
    user_overridden: bool = False
    realization: RealizationLevel
    explanation: str | None = None


class AdjustmentValuationOut(BaseModel):
    id: str
    description: str
    annual_value_cents: int


class RewardRates(BaseModel):
    total_annual_spend_cents: int = 0
    total_rewards_cents: float = 0
    total_return_cents: float = 0
    spend_return_rate: float = 0  # percent
    net_worth_effect_rate: float = 0  # percent
    effective_return_rate: float = 0  # percent
    # True when there is no spend but a non-zero net value; the rates are then
    # proportional to the net value and are not true percentages.
    no_spend: bool = False


class BreakevenAllocation(BaseModel):
    item_id: str
    description: str
    mode: CalculationMode
    annual_spend_cents: float | None = None


class BreakevenRow(BaseModel):
    target_rate: float  # percent
    required_linear_spend_cents: float | None = None
    required_total_spend_cents: float | None = None
    breakdown: list[BreakevenAllocation] = []

    @property
    def reachable(self) -> bool:
        return self.required_total_spend_cents is not None


class ChartPoint(BaseModel):
    spend_cents: float
    return_rate: float  # percent
    breakdown: list[BreakevenAllocation] = []


class BreakevenResult(BaseModel):
    status: Literal["empty", "constant_rate", "ok"]
    constant_rate: float | None = None  # percent, only for constant_rate
    linear_rate: float = 0  # rewards per cent of linear spend
    net_value_cents: int = 0  # net value taken into account
    total_fixed_spend_cents: int = 0
    total_fixed_rewards_cents: float = 0
    base_linear_spend_cents: int = 0
    base_linear_rewards_cents: float = 0
    rows: list[BreakevenRow] = []
    curve: list[ChartPoint] = []


class CardValuationOut(BaseModel):
    card_id: str
    name: str
    annual_fee_cents: int
    benefits: list[BenefitValuationOut] = []
    adjustments: list[AdjustmentValuationOut] = []
    total_benefit_cents: int = 0
    total_adjustment_cents: int = 0
    net_annual_value_cents: int = 0
    cents_per_point: float = 0
    rates: RewardRates
    breakeven: BreakevenResult


# --- Requests ---


class ValuationRequest(BaseModel):
    card: CardSnapshot
    target_rates: list[float] | None = Field(default=None, max_length=50)
    include_net_value: bool = True


class BreakevenRequest(BaseModel):
    spending: list[PlannedSpendingItem] = Field(default_factory=list, max_length=200)
    cents_per_point: float = 0
    net_annual_value_cents: int = 0
    target_rates: list[float] | None = Field(default=None, max_length=50)
    include_net_value: bool = True
