"""
Insurance Tier Definitions for Match Day Protection.

Each tier is a bundle of coverage components. A component pays when the
settled scenario is in its trigger set; "any DLS" components pay for every
DLS-reduced scenario but not for an abandonment. Components with an empty
trigger set (stranded cover, rain-check bonus) are honoured out of band and
never pay automatically.

Settlement mode is declared per tier:
- COMPONENT_SUM: sum the matching components
- FLAT_MULTIPLIER: ticket × factor on abandonment, ticket × DLS multiplier otherwise
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Optional

from pitchcover.exceptions import UnknownTierError


class ScenarioTag(StrEnum):
    ABANDONED = "abandoned"
    MINOR = "minor"                 # 10-25% overs lost
    SIGNIFICANT = "significant"     # 26-50% overs lost
    SEVERE = "severe"               # >50% overs lost


class SettlementMode(StrEnum):
    COMPONENT_SUM = "component_sum"
    FLAT_MULTIPLIER = "flat_multiplier"


def ticket_share(fraction: float) -> Callable[[float], float]:
    """Amount proportional to ticket value."""
    return lambda ticket_value: ticket_value * fraction


def fixed(amount: float) -> Callable[[float], float]:
    """Flat amount regardless of ticket value."""
    return lambda ticket_value: amount


@dataclass(frozen=True)
class CoverageComponent:
    """One independently triggered payout contribution."""
    name: str
    amount: Callable[[float], float]
    description: str
    triggers: frozenset[ScenarioTag] = frozenset()
    applies_when_any: bool = False      # any DLS-reduced scenario
    requires_outstation: bool = False

    def applies(self, scenario: Optional[ScenarioTag], is_outstation: bool) -> bool:
        if scenario is None:
            return False
        if self.requires_outstation and not is_outstation:
            return False
        if scenario in self.triggers:
            return True
        return self.applies_when_any and scenario != ScenarioTag.ABANDONED


@dataclass(frozen=True)
class InsuranceTier:
    id: str
    name: str
    price: int                          # display default before dynamic pricing
    tagline: str
    components: tuple[CoverageComponent, ...]
    features: tuple[str, ...]
    recommended: bool = False
    settlement_mode: SettlementMode = SettlementMode.COMPONENT_SUM
    flat_factor: float = 1.0
    priced_as: Optional[str] = None     # reuse another tier's pricing model
    group_size: int = 1

    @property
    def pricing_model(self) -> str:
        return self.priced_as or self.id


_ABANDONED = frozenset({ScenarioTag.ABANDONED})

_TICKET_REFUND = CoverageComponent(
    name="Ticket Value Refund",
    amount=ticket_share(1.0),
    description="100% ticket refund if match is abandoned",
    triggers=_ABANDONED,
)


BASIC = InsuranceTier(
    id="basic",
    name="Basic Cover",
    price=99,
    tagline="Simple ticket refund protection",
    components=(
        _TICKET_REFUND,
        CoverageComponent(
            name="Partial Refund",
            amount=ticket_share(0.5),
            description="50% refund for severe interruptions",
            triggers=frozenset({ScenarioTag.SEVERE}),
        ),
    ),
    features=(
        "100% ticket refund if match abandoned",
        "50% refund if DLS reduces match by >50%",
        "Same-day claims processing",
        "Automatic payout verification",
    ),
)

STANDARD = InsuranceTier(
    id="standard",
    name="Standard Cover",
    price=199,
    tagline="Comprehensive match day protection",
    recommended=True,
    components=(
        _TICKET_REFUND,
        CoverageComponent(
            name="Travel Allowance",
            amount=fixed(750),
            description="Fixed ₹750 for wasted travel costs",
            triggers=_ABANDONED,
        ),
        CoverageComponent(
            name="Inconvenience Benefit",
            amount=fixed(250),
            description="Compensation even when match completes",
            applies_when_any=True,
        ),
        CoverageComponent(
            name="Significant Disruption",
            amount=ticket_share(0.5),
            description="50% refund + ₹250 inconvenience",
            triggers=frozenset({ScenarioTag.SIGNIFICANT}),
        ),
        CoverageComponent(
            name="Minor Disruption",
            amount=ticket_share(0.25),
            description="25% refund + ₹250 inconvenience",
            triggers=frozenset({ScenarioTag.MINOR}),
        ),
    ),
    features=(
        "Everything in Basic Cover",
        "Travel allowance (₹750) if match abandoned",
        "Inconvenience benefit (₹250) for ANY DLS application",
        "25% refund if DLS reduces match by 10-25%",
        "50% refund if DLS reduces match by 26-50%",
        "Priority claims processing",
    ),
)

PREMIUM = InsuranceTier(
    id="premium",
    name="Premium Cover",
    price=499,
    tagline="Ultimate protection for travelling supporters",
    components=(
        _TICKET_REFUND,
        CoverageComponent(
            name="Travel Allowance",
            amount=fixed(1000),
            description="Enhanced ₹1000 travel reimbursement",
            triggers=_ABANDONED,
        ),
        CoverageComponent(
            name="Accommodation Cover",
            amount=fixed(3000),
            description="Up to ₹3000 for hotel bookings",
            triggers=_ABANDONED,
            requires_outstation=True,
        ),
        CoverageComponent(
            name="Stadium Stranded Cover",
            amount=fixed(300),
            description="F&B voucher for rain delays over 90 minutes",
        ),
        CoverageComponent(
            name="Inconvenience Benefit",
            amount=fixed(250),
            description="Compensation for shortened matches",
            applies_when_any=True,
        ),
        CoverageComponent(
            name="Rain Check Bonus",
            amount=fixed(500),
            description="Loyalty reward for attending makeup match",
        ),
    ),
    features=(
        "Everything in Standard Cover",
        "Accommodation cover (up to ₹3,000) for outstation fans",
        "Stadium stranded F&B voucher (₹300) for long delays",
        "Rain check rebooking bonus (₹500) if attending rescheduled match",
        "Enhanced travel allowance (₹1,000)",
        "VIP claims processing",
        "Dedicated support hotline",
    ),
)

GROUP = InsuranceTier(
    id="group",
    name="Group Cover",
    price=1499,
    tagline="One policy for up to 5 people",
    group_size=5,
    components=(
        CoverageComponent(
            name="Group Ticket Refund",
            amount=ticket_share(5.0),
            description="100% refund for all group tickets",
            triggers=_ABANDONED,
        ),
        CoverageComponent(
            name="Group Travel Allowance",
            amount=fixed(2000),
            description="Shared travel reimbursement",
            triggers=_ABANDONED,
        ),
        CoverageComponent(
            name="Group Accommodation",
            amount=fixed(5000),
            description="Enhanced accommodation cover for groups",
            triggers=_ABANDONED,
            requires_outstation=True,
        ),
        CoverageComponent(
            name="Stadium Merchandise Voucher",
            amount=fixed(500),
            description="Group shopping voucher",
            applies_when_any=True,
        ),
    ),
    features=(
        "All Premium benefits for up to 5 people",
        "Shared travel allowance (₹2,000)",
        "Group accommodation cover (₹5,000)",
        "Group F&B vouchers",
        "Single policy for easy management",
    ),
)

PLATINUM = InsuranceTier(
    id="platinum",
    name="Platinum Protection",
    price=499,
    tagline="120% refund if washed out",
    settlement_mode=SettlementMode.FLAT_MULTIPLIER,
    flat_factor=1.2,
    priced_as="premium",
    components=(),
    features=(
        "120% refund if washed out",
        "Priority instant claims",
        "Proportional refund for DLS-shortened matches",
    ),
)


INSURANCE_TIERS: tuple[InsuranceTier, ...] = (BASIC, STANDARD, PREMIUM, GROUP, PLATINUM)

_BY_ID = {t.id: t for t in INSURANCE_TIERS}


def get_tier(tier_id: str) -> InsuranceTier:
    """Look up a tier by id."""
    try:
        return _BY_ID[tier_id]
    except KeyError:
        raise UnknownTierError(tier_id) from None
