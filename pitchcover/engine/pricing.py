"""
Actuarial Pricing Engine for Match Day Protection.

Historical IPL data (2008-2024):
- Complete abandonments: ~0.9% of matches
- DLS-affected matches: ~2-3% additional
- Total rain-affected: ~3-5% of matches

Pricing pipeline (per ticket):
1. Tier-independent expected loss from four disjoint DLS buckets, each
   probability linear in rain_risk / 100
2. × venue multiplier × drainage factor × covered-stand discount
3. Tier layers add their own expected costs on top (basic → standard → premium)
4. premium = (expected_loss × loading + admin_cost) × margin
5. Clamp: max(floor, ·) first, then min(ceiling, ·). For very cheap
   tickets the ceiling wins over the floor.

Group cover prices the premium model on group_size × ticket value and then
applies the group discount.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

import structlog

from pitchcover.catalog.stadiums import Drainage, Stadium, venue_multiplier
from pitchcover.catalog.tiers import INSURANCE_TIERS, get_tier
from pitchcover.engine.money import round_half_up

logger = structlog.get_logger(__name__)


# ── Configuration ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LossBucket:
    """A DLS outcome bucket: probability at 100% rain risk and payout share."""
    name: str
    probability_weight: float
    payout_share: float


@dataclass(frozen=True)
class RiskAddition:
    """An extra expected cost a tier layers on top of the tier below."""
    name: str
    probability_weight: float
    amount: float
    outstation_only: bool = False


@dataclass(frozen=True)
class TierPricingRule:
    admin_cost: float
    floor: float
    ceiling_fraction: float
    additions: tuple[RiskAddition, ...] = ()


DEFAULT_LOSS_BUCKETS: tuple[LossBucket, ...] = (
    LossBucket("abandoned", 0.01, 1.0),
    LossBucket("severe", 0.01, 1.0),
    LossBucket("significant", 0.02, 0.5),
    LossBucket("minor", 0.02, 0.25),
)

DEFAULT_DRAINAGE_FACTORS: dict[Drainage, float] = {
    Drainage.EXCELLENT: 0.7,
    Drainage.GOOD: 0.85,
    Drainage.AVERAGE: 1.0,
    Drainage.POOR: 1.2,
}

DEFAULT_TIER_RULES: dict[str, TierPricingRule] = {
    "basic": TierPricingRule(admin_cost=15, floor=99, ceiling_fraction=0.20),
    "standard": TierPricingRule(
        admin_cost=20,
        floor=199,
        ceiling_fraction=0.25,
        additions=(
            RiskAddition("travel_allowance", 0.01, 750),
            RiskAddition("inconvenience", 0.04, 250),
        ),
    ),
    "premium": TierPricingRule(
        admin_cost=30,
        floor=499,
        ceiling_fraction=0.35,
        additions=(
            RiskAddition("accommodation", 0.01, 3000, outstation_only=True),
            RiskAddition("stadium_stranded", 0.05, 300),
            RiskAddition("rain_check_bonus", 0.01, 500),
        ),
    ),
}


@dataclass(frozen=True)
class PricingConfig:
    """All pricing constants. Pass an instance to PricingEngine to override."""
    loss_buckets: tuple[LossBucket, ...] = DEFAULT_LOSS_BUCKETS
    drainage_factors: dict[Drainage, float] = field(
        default_factory=lambda: dict(DEFAULT_DRAINAGE_FACTORS)
    )
    coverage_divisor: float = 200.0     # 100% covered → 0.5× expected loss
    loading_factor: float = 1.5
    profit_margin: float = 1.2
    tier_rules: dict[str, TierPricingRule] = field(
        default_factory=lambda: dict(DEFAULT_TIER_RULES)
    )
    layer_order: tuple[str, ...] = ("basic", "standard", "premium")
    group_tier: str = "group"
    group_base_tier: str = "premium"
    group_size: int = 5
    group_discount: float = 0.15


# ── Inputs / Outputs ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class PricingFactors:
    base_rain_risk: float               # 0-100
    stadium_drainage: Drainage
    stadium_coverage: float             # % covered stands (0-100)
    seasonal_factor: float = 1.0        # reserved, not applied
    venue_risk_multiplier: float = 1.0


@dataclass(frozen=True)
class PremiumBreakdown:
    """
    How a premium was computed, adjustment by adjustment.

    Adjustments are sequential deltas: venue applies to the base loss,
    drainage to the venue-adjusted loss, coverage to the drained loss.
    """
    tier_id: str
    ticket_value: float
    base_expected_loss: float           # before venue/drainage/coverage
    venue_adjustment: float
    drainage_adjustment: float
    coverage_adjustment: float
    adjusted_expected_loss: float       # tier-independent, after adjustments
    tier_additions: float               # layered tier costs
    expected_loss: float                # adjusted + additions
    loading_factor: float
    admin_cost: float
    raw_premium: float                  # before clamp
    floor: float
    ceiling: float
    total_premium: int
    group_discount: float = 0.0


def pricing_factors_for(
    stadium: Stadium,
    rain_risk: float,
    seasonal_factor: float = 1.0,
) -> PricingFactors:
    """Build pricing factors for a catalog stadium."""
    return PricingFactors(
        base_rain_risk=rain_risk,
        stadium_drainage=stadium.drainage,
        stadium_coverage=stadium.covered,
        seasonal_factor=seasonal_factor,
        venue_risk_multiplier=venue_multiplier(stadium.id),
    )


# ── Engine ────────────────────────────────────────────────────────────────


class PricingEngine:
    """
    Tier-layered expected-loss pricing.

    Each tier's expected loss is the tier below's plus its own additions,
    so for identical inputs premium(premium) ≥ premium(standard) ≥ premium(basic).
    """

    def __init__(self, config: Optional[PricingConfig] = None):
        self.config = config or PricingConfig()

    def expected_loss(self, rain_risk: float, ticket_value: float) -> float:
        """Tier-independent expected payout per ticket before venue adjustments."""
        effective_risk = rain_risk / 100
        return sum(
            effective_risk * b.probability_weight * ticket_value * b.payout_share
            for b in self.config.loss_buckets
        )

    def tier_additions(
        self,
        tier_model: str,
        rain_risk: float,
        is_outstation: bool,
    ) -> float:
        """Sum of layered additions for every tier up to and including tier_model."""
        effective_risk = rain_risk / 100
        total = 0.0
        for layer in self.config.layer_order:
            for addition in self.config.tier_rules[layer].additions:
                if addition.outstation_only and not is_outstation:
                    continue
                total += effective_risk * addition.probability_weight * addition.amount
            if layer == tier_model:
                break
        return total

    def breakdown(
        self,
        tier_id: str,
        ticket_value: float,
        factors: PricingFactors,
        is_outstation: bool = False,
    ) -> PremiumBreakdown:
        """Full premium computation for a catalog tier."""
        model = get_tier(tier_id).pricing_model

        if model == self.config.group_tier:
            base = self._layered_breakdown(
                self.config.group_base_tier,
                ticket_value * self.config.group_size,
                factors,
                is_outstation,
            )
            discounted = round_half_up(base.total_premium * (1 - self.config.group_discount))
            result = replace(
                base,
                tier_id=tier_id,
                total_premium=discounted,
                group_discount=self.config.group_discount,
            )
        else:
            result = self._layered_breakdown(model, ticket_value, factors, is_outstation)
            if result.tier_id != tier_id:
                result = replace(result, tier_id=tier_id)

        logger.debug(
            "premium_computed",
            tier=tier_id,
            ticket_value=ticket_value,
            rain_risk=factors.base_rain_risk,
            expected_loss=round(result.expected_loss, 2),
            premium=result.total_premium,
        )
        return result

    def price(
        self,
        tier_id: str,
        ticket_value: float,
        factors: PricingFactors,
        is_outstation: bool = False,
    ) -> int:
        """Premium in whole rupees."""
        return self.breakdown(tier_id, ticket_value, factors, is_outstation).total_premium

    def quote_all(
        self,
        ticket_value: float,
        factors: PricingFactors,
        is_outstation: bool = False,
    ) -> dict[str, int]:
        """Premium for every catalog tier."""
        return {
            tier.id: self.price(tier.id, ticket_value, factors, is_outstation)
            for tier in INSURANCE_TIERS
        }

    # ── Internals ─────────────────────────────────────────────────────

    def _layered_breakdown(
        self,
        tier_model: str,
        ticket_value: float,
        factors: PricingFactors,
        is_outstation: bool,
    ) -> PremiumBreakdown:
        cfg = self.config
        rule = cfg.tier_rules[tier_model]

        base = self.expected_loss(factors.base_rain_risk, ticket_value)

        after_venue = base * factors.venue_risk_multiplier
        drainage_factor = cfg.drainage_factors[factors.stadium_drainage]
        after_drainage = after_venue * drainage_factor
        coverage_discount = 1 - factors.stadium_coverage / cfg.coverage_divisor
        adjusted = after_drainage * coverage_discount

        additions = self.tier_additions(tier_model, factors.base_rain_risk, is_outstation)
        expected = adjusted + additions

        raw = (expected * cfg.loading_factor + rule.admin_cost) * cfg.profit_margin
        ceiling = ticket_value * rule.ceiling_fraction
        # Rounded after the clamp so the charged premium is always whole rupees
        clamped = min(max(rule.floor, raw), ceiling)

        return PremiumBreakdown(
            tier_id=tier_model,
            ticket_value=ticket_value,
            base_expected_loss=base,
            venue_adjustment=after_venue - base,
            drainage_adjustment=after_drainage - after_venue,
            coverage_adjustment=adjusted - after_drainage,
            adjusted_expected_loss=adjusted,
            tier_additions=additions,
            expected_loss=expected,
            loading_factor=cfg.loading_factor,
            admin_cost=rule.admin_cost,
            raw_premium=raw,
            floor=rule.floor,
            ceiling=ceiling,
            total_premium=round_half_up(clamped),
        )
