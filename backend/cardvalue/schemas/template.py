from pydantic import BaseModel, model_validator

from cardvalue.schemas.valuation import Frequency, PeriodOverride


class TemplateCreditOut(BaseModel):
    id: str
    name: str
    frequency: Frequency = Frequency.ANNUAL
    default_period_value_cents: int = 0
    overrides: list[PeriodOverride] = []
    default_effective_cents: int | None = None
    default_effective_proportion: float | None = None
    explanation: str | None = None

    @model_validator(mode="after")
    def validate_single_default(self) -> "TemplateCreditOut":
        if self.default_effective_cents is not None and self.default_effective_proportion is not None:
            raise ValueError(f"credit '{self.id}' sets both a default value and a default proportion")
        return self


class TemplateBenefitOut(BaseModel):
    id: str
    name: str
    default_effective_cents: int | None = None
    explanation: str | None = None


class TemplateEarningRateOut(BaseModel):
    id: str
    description: str
    multiplier: float


class TemplatePointSystemOut(BaseModel):
    system_id: str
    name: str | None = None
    default_cents_per_point: float = 1.0


class CardTemplateOut(BaseModel):
    id: str  # e.g. "amex/platinum"
    name: str
    issuer: str
    network: str | None = None
    annual_fee_cents: int = 0
    currency: str | None = None
    credits: list[TemplateCreditOut] = []
    benefits: list[TemplateBenefitOut] = []
    earning_rates: list[TemplateEarningRateOut] = []
    point_system: TemplatePointSystemOut | None = None
    notes: str | None = None
    tags: list[str] | None = None
    version_id: str | None = None
