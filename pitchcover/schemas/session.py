"""
Match-day session schemas — policy lifecycle and API bodies.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from pitchcover.catalog.tiers import ScenarioTag
from pitchcover.engine.advisor import Recommendation
from pitchcover.engine.payout import PayoutTier
from pitchcover.schemas.forecast import Forecast


class StadiumOut(BaseModel):
    id: str
    name: str
    city: str
    lat: float
    lon: float
    capacity: int
    drainage: str
    covered: float


class CoverageComponentOut(BaseModel):
    name: str
    description: str
    triggers: list[ScenarioTag]
    applies_when_any: bool
    requires_outstation: bool


class TierOut(BaseModel):
    id: str
    name: str
    price: int
    tagline: str
    recommended: bool
    settlement_mode: str
    features: list[str]
    components: list[CoverageComponentOut]


class Policy(BaseModel):
    """Frozen at purchase; cleared on settlement or reset."""
    model_config = ConfigDict(frozen=True)

    tier_id: str
    ticket_value: int
    premium: int
    stadium: StadiumOut
    rain_risk: int
    purchase_time: datetime
    is_outstation: bool
    total_investment: int


class Settlement(BaseModel):
    overs_played: int
    total_overs: int
    dls_applied: bool
    abandoned: bool
    payout: int
    scenario: Optional[ScenarioTag] = None
    payout_tier: PayoutTier
    overs_lost_percentage: float
    paid_components: list[str] = Field(default_factory=list)
    profit_loss: int


class SessionState(BaseModel):
    wallet: int
    total_profit_loss: int
    stadium: Optional[StadiumOut] = None
    forecast: Optional[Forecast] = None
    policy: Optional[Policy] = None
    last_settlement: Optional[Settlement] = None
    achievements: list[str] = Field(default_factory=list)
    last_tier: Optional[str] = None


# ── Requests ───────────────────────────────────────────────────────────


class SelectStadiumRequest(BaseModel):
    stadium_id: str


class QuoteRequest(BaseModel):
    ticket_value: int = Field(gt=0)
    is_outstation: bool = False


class QuoteOut(BaseModel):
    tier_id: str
    premium: int
    can_afford: bool
    coverage: dict[ScenarioTag, int]


class QuoteResponse(BaseModel):
    rain_risk: int
    ticket_value: int
    quotes: list[QuoteOut]


class RecommendationRequest(BaseModel):
    ticket_value: int = Field(gt=0)
    is_outstation: bool = False
    total_investment: Optional[int] = Field(default=None, gt=0)


class RecommendationResponse(BaseModel):
    tier_id: str
    premium: int
    protection_ratio: float
    expected_roi: float
    break_even_risk: float
    recommendation: Recommendation
    reasoning: str


class PurchaseRequest(BaseModel):
    tier_id: str
    ticket_value: int = Field(gt=0)
    is_outstation: bool = False
    total_investment: Optional[int] = Field(default=None, gt=0)
