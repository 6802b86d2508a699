"""
Recommendation Advisor.

Picks a tier for a fan and explains whether cover is worth buying.
Outputs are advisory UI copy, not actuarial quantities.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from pitchcover.catalog.tiers import BASIC, PREMIUM, STANDARD, InsuranceTier
from pitchcover.engine.money import format_inr
from pitchcover.engine.pricing import PricingEngine

# Expected payout ≈ expected loss / this share (heuristic inversion)
PAYOUT_SHARE_OF_TICKET: float = 0.04


class Recommendation(StrEnum):
    STRONGLY_RECOMMENDED = "strongly-recommended"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"
    NOT_RECOMMENDED = "not-recommended"


@dataclass(frozen=True)
class ValueProposition:
    protection_ratio: float             # premium as % of total investment
    expected_roi: float
    break_even_risk: float
    recommendation: Recommendation
    reasoning: str


@dataclass(frozen=True)
class ExpectedValue:
    expected_payout: float
    expected_profit: float
    worth_it: bool
    confidence: str


class RecommendationAdvisor:
    def __init__(self, pricing: Optional[PricingEngine] = None):
        self.pricing = pricing or PricingEngine()

    def recommend(self, ticket_value: float, rain_risk: float, is_outstation: bool) -> InsuranceTier:
        # High value, high risk or travelling → Premium
        if ticket_value >= 5000 or rain_risk >= 60 or is_outstation:
            return PREMIUM
        if rain_risk >= 30 or ticket_value >= 2000:
            return STANDARD
        return BASIC

    def value_proposition(
        self,
        premium: float,
        ticket_value: float,
        total_investment: float,
        rain_risk: float,
    ) -> ValueProposition:
        protection_ratio = premium / total_investment * 100 if total_investment else 0.0
        expected_payout = (
            self.pricing.expected_loss(rain_risk, ticket_value) / PAYOUT_SHARE_OF_TICKET
        )
        # Ceiling can round a cheap ticket's premium down to zero
        expected_roi = (expected_payout - premium) / premium * 100 if premium else 0.0
        break_even_risk = (
            premium / (ticket_value * PAYOUT_SHARE_OF_TICKET) * 100 if ticket_value else 0.0
        )

        if rain_risk >= 60:
            recommendation = Recommendation.STRONGLY_RECOMMENDED
            reasoning = (
                f"High rain risk ({rain_risk:g}%) makes insurance essential. "
                f"Protecting {format_inr(total_investment)} investment for just "
                f"{format_inr(premium)} ({protection_ratio:.1f}%)"
            )
        elif rain_risk >= 35 or total_investment >= 8000:
            recommendation = Recommendation.RECOMMENDED
            reasoning = (
                f"Moderate risk ({rain_risk:g}%) and significant investment "
                f"make insurance worthwhile"
            )
        elif rain_risk >= 15:
            recommendation = Recommendation.OPTIONAL
            reasoning = (
                f"Lower risk ({rain_risk:g}%), but insurance provides peace of mind "
                f"for {protection_ratio:.1f}% of your investment"
            )
        else:
            recommendation = Recommendation.NOT_RECOMMENDED
            reasoning = f"Very low rain risk ({rain_risk:g}%). You may choose to self-insure."

        return ValueProposition(
            protection_ratio=protection_ratio,
            expected_roi=expected_roi,
            break_even_risk=break_even_risk,
            recommendation=recommendation,
            reasoning=reasoning,
        )

    def expected_value(self, premium: float, coverage: float, rain_risk: float) -> ExpectedValue:
        """Rough expected value of buying cover on `coverage` rupees."""
        effective_risk = rain_risk / 100
        p_abandonment = effective_risk * 0.01
        p_significant = effective_risk * 0.02
        p_minor = effective_risk * 0.03

        expected_payout = (
            p_abandonment * coverage
            + p_significant * coverage * 0.50
            + p_minor * coverage * 0.25
        )
        expected_profit = expected_payout - premium

        if rain_risk > 70:
            confidence = "High confidence - Strong recommendation"
        elif rain_risk > 40:
            confidence = "Moderate confidence - Worth considering"
        elif rain_risk > 20:
            confidence = "Low-moderate confidence - Optional protection"
        else:
            confidence = "Low confidence"

        return ExpectedValue(
            expected_payout=expected_payout,
            expected_profit=expected_profit,
            worth_it=expected_profit > -premium * 0.5,
            confidence=confidence,
        )
