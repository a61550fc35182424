from cardvalue.schemas.valuation import (
    Frequency, BenefitItem, UserOverride, CustomAdjustment, PlannedSpendingItem,
    PointValuation, CardSnapshot, CardValuationOut, RewardRates, BreakevenResult,
)
from cardvalue.schemas.template import CardTemplateOut
from cardvalue.schemas.profile import UserCardValuation, TemplateValuationRequest, RankingRequest, CardRankingOut

__all__ = [
    "Frequency", "BenefitItem", "UserOverride", "CustomAdjustment", "PlannedSpendingItem",
    "PointValuation", "CardSnapshot", "CardValuationOut", "RewardRates", "BreakevenResult",
    "CardTemplateOut",
    "UserCardValuation", "TemplateValuationRequest", "RankingRequest", "CardRankingOut",
]
