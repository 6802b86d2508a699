"""
DLS (Duckworth-Lewis-Stern) Payout Engine.

Classifies a finished match into a payout tier by share of overs lost:

    Tier 1 - Minor:       10-25% overs lost  → 25% payout
    Tier 2 - Significant: 26-50% overs lost  → 50% payout
    Tier 3 - Severe:      >50% overs lost, abandoned, or fewer than
                          25% of overs bowled → 100% payout

then settles the purchased tier against the resulting scenario.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional

import structlog

from pitchcover.catalog.tiers import InsuranceTier, ScenarioTag, SettlementMode
from pitchcover.engine.money import round_half_up
from pitchcover.engine.simulator import MatchStatus

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

MIN_PLAYED_SHARE: float = 0.25          # below this share of overs → severe
MINOR_FROM_PCT: float = 10.0
MINOR_TO_PCT: float = 25.0
SIGNIFICANT_TO_PCT: float = 50.0


class PayoutTier(StrEnum):
    NONE = "none"
    MINOR = "minor"
    SIGNIFICANT = "significant"
    SEVERE = "severe"


PAYOUT_MULTIPLIERS: dict[PayoutTier, float] = {
    PayoutTier.NONE: 0.0,
    PayoutTier.MINOR: 0.25,
    PayoutTier.SIGNIFICANT: 0.50,
    PayoutTier.SEVERE: 1.0,
}

_SCENARIO_BY_TIER: dict[PayoutTier, Optional[ScenarioTag]] = {
    PayoutTier.NONE: None,
    PayoutTier.MINOR: ScenarioTag.MINOR,
    PayoutTier.SIGNIFICANT: ScenarioTag.SIGNIFICANT,
    PayoutTier.SEVERE: ScenarioTag.SEVERE,
}


@dataclass(frozen=True)
class DLSResult:
    overs_lost_percentage: float
    payout_tier: PayoutTier
    payout_multiplier: float
    description: str


@dataclass(frozen=True)
class SettlementResult:
    overs_played: int
    dls_applied: bool
    abandoned: bool
    payout: int
    scenario: Optional[ScenarioTag] = None
    payout_tier: PayoutTier = PayoutTier.NONE
    overs_lost_percentage: float = 0.0
    paid_components: tuple[str, ...] = field(default_factory=tuple)


class PayoutEngine:
    """DLS classification and per-tier settlement."""

    def classify(self, status: MatchStatus) -> DLSResult:
        """Map a match outcome to a DLS payout tier."""
        total = status.total_overs

        if status.match_abandoned or status.overs_played < total * MIN_PLAYED_SHARE:
            return DLSResult(
                overs_lost_percentage=100.0,
                payout_tier=PayoutTier.SEVERE,
                payout_multiplier=PAYOUT_MULTIPLIERS[PayoutTier.SEVERE],
                description="Match abandoned - Full refund",
            )

        lost_pct = (total - status.overs_played) / total * 100

        if not status.dls_applied or lost_pct < MINOR_FROM_PCT:
            tier, description = PayoutTier.NONE, "Match played as scheduled"
        elif lost_pct <= MINOR_TO_PCT:
            tier, description = PayoutTier.MINOR, "DLS applied - Minor disruption (10-25% overs lost)"
        elif lost_pct <= SIGNIFICANT_TO_PCT:
            tier, description = PayoutTier.SIGNIFICANT, "DLS applied - Significant disruption (26-50% overs lost)"
        else:
            tier, description = PayoutTier.SEVERE, "DLS applied - Severe disruption (>50% overs lost)"

        return DLSResult(
            overs_lost_percentage=lost_pct,
            payout_tier=tier,
            payout_multiplier=PAYOUT_MULTIPLIERS[tier],
            description=description,
        )

    def scenario_for(
        self,
        status: MatchStatus,
        result: Optional[DLSResult] = None,
    ) -> Optional[ScenarioTag]:
        """Settlement scenario for a match; None when nothing pays."""
        if status.match_abandoned:
            return ScenarioTag.ABANDONED
        result = result or self.classify(status)
        return _SCENARIO_BY_TIER[result.payout_tier]

    def paying_components(
        self,
        tier: InsuranceTier,
        scenario: Optional[ScenarioTag],
        is_outstation: bool = False,
    ) -> list[str]:
        if tier.settlement_mode != SettlementMode.COMPONENT_SUM:
            return []
        return [c.name for c in tier.components if c.applies(scenario, is_outstation)]

    def settle(
        self,
        tier: InsuranceTier,
        ticket_value: float,
        scenario: Optional[ScenarioTag],
        is_outstation: bool = False,
    ) -> int:
        """Payout in whole rupees for a tier under a scenario."""
        if scenario is None:
            return 0

        if tier.settlement_mode == SettlementMode.FLAT_MULTIPLIER:
            if scenario == ScenarioTag.ABANDONED:
                return round_half_up(ticket_value * tier.flat_factor)
            return round_half_up(ticket_value * PAYOUT_MULTIPLIERS[PayoutTier(scenario.value)])

        total = sum(
            c.amount(ticket_value)
            for c in tier.components
            if c.applies(scenario, is_outstation)
        )
        return round_half_up(total)

    def coverage_table(
        self,
        tier: InsuranceTier,
        ticket_value: float,
        is_outstation: bool = False,
    ) -> dict[ScenarioTag, int]:
        """Maximum payout for each scenario, as shown on the tier card."""
        return {
            scenario: self.settle(tier, ticket_value, scenario, is_outstation)
            for scenario in ScenarioTag
        }

    def settle_match(
        self,
        tier: InsuranceTier,
        ticket_value: float,
        status: MatchStatus,
        is_outstation: bool = False,
    ) -> SettlementResult:
        """Classify a simulated match and settle the tier against it."""
        result = self.classify(status)
        scenario = self.scenario_for(status, result)
        payout = self.settle(tier, ticket_value, scenario, is_outstation)

        logger.debug(
            "match_settled",
            tier=tier.id,
            scenario=scenario.value if scenario else None,
            payout=payout,
        )
        return SettlementResult(
            overs_played=status.overs_played,
            dls_applied=status.dls_applied,
            abandoned=status.match_abandoned,
            payout=payout,
            scenario=scenario,
            payout_tier=result.payout_tier,
            overs_lost_percentage=result.overs_lost_percentage,
            paid_components=tuple(self.paying_components(tier, scenario, is_outstation)),
        )
