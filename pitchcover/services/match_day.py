"""
Match-Day Session — the single-user demo flow around the engine.

    select stadium → forecast → quotes → purchase → simulate → settle

Holds the virtual wallet and at most one active policy. A policy exists
only between a purchase and the next settlement or reset.

Overlapping stadium selections: only the latest selection's forecast is
applied; a forecast that arrives for a superseded selection is dropped.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import structlog

from pitchcover.catalog.stadiums import Stadium, get_stadium
from pitchcover.catalog.tiers import INSURANCE_TIERS, InsuranceTier, get_tier
from pitchcover.engine.advisor import RecommendationAdvisor, ValueProposition
from pitchcover.engine.payout import PayoutEngine
from pitchcover.engine.pricing import PricingEngine, PricingFactors, pricing_factors_for
from pitchcover.engine.simulator import MatchSimulator
from pitchcover.exceptions import InsufficientFundsError, PolicyStateError
from pitchcover.schemas.forecast import Forecast
from pitchcover.schemas.session import (
    Policy,
    QuoteOut,
    SessionState,
    Settlement,
    StadiumOut,
)
from pitchcover.services.forecast_client import ForecastClient
from pitchcover.services.preferences import (
    LAST_STADIUM,
    LAST_TIER,
    InMemoryPreferenceStore,
    PreferenceStore,
    load_achievements,
    save_achievements,
)
from pitchcover.services.resilience import Backoff, retry_with_backoff

logger = structlog.get_logger(__name__)

HIGH_ROLLER_TICKET: int = 10000
BIG_CLAIM_PAYOUT: int = 10000
RISK_TAKER_BELOW: int = 20


@dataclass
class Wallet:
    balance: int

    def can_afford(self, amount: int) -> bool:
        return self.balance >= amount

    def debit(self, amount: int) -> None:
        self.balance -= amount

    def credit(self, amount: int) -> None:
        self.balance += amount


def stadium_out(stadium: Stadium) -> StadiumOut:
    return StadiumOut(
        id=stadium.id,
        name=stadium.name,
        city=stadium.city,
        lat=stadium.lat,
        lon=stadium.lon,
        capacity=stadium.capacity,
        drainage=stadium.drainage.value,
        covered=stadium.covered,
    )


class MatchDaySession:
    """
    In-process session for one fan.

    Not shared between users; the engine components it holds are stateless.
    """

    def __init__(
        self,
        forecast_client: ForecastClient,
        preferences: Optional[PreferenceStore] = None,
        starting_wallet: int = 25000,
        pricing: Optional[PricingEngine] = None,
        payout: Optional[PayoutEngine] = None,
        simulator: Optional[MatchSimulator] = None,
        advisor: Optional[RecommendationAdvisor] = None,
        retry_attempts: int = 2,
        backoff: Optional[Backoff] = None,
    ):
        self.forecast_client = forecast_client
        self.preferences = preferences or InMemoryPreferenceStore()
        self.pricing = pricing or PricingEngine()
        self.payout = payout or PayoutEngine()
        self.simulator = simulator or MatchSimulator()
        self.advisor = advisor or RecommendationAdvisor(self.pricing)
        self.retry_attempts = retry_attempts
        self.backoff = backoff or Backoff()

        self.wallet = Wallet(starting_wallet)
        self.total_profit_loss = 0
        self.stadium: Optional[Stadium] = None
        self.forecast: Optional[Forecast] = None
        self.policy: Optional[Policy] = None
        self.last_settlement: Optional[Settlement] = None
        self.achievements = load_achievements(self.preferences)
        self._selection = 0

    # ── Stadium & forecast ────────────────────────────────────────────

    @property
    def last_stadium_id(self) -> Optional[str]:
        return self.preferences.get(LAST_STADIUM)

    async def select_stadium(self, stadium_id: str) -> Forecast:
        """Select a venue and load its forecast. Latest selection wins."""
        stadium = get_stadium(stadium_id)
        self._selection += 1
        selection = self._selection
        self.stadium = stadium
        self.forecast = None
        self.preferences.set(LAST_STADIUM, stadium.id)

        forecast = await retry_with_backoff(
            lambda: self.forecast_client.fetch_forecast(stadium),
            max_retries=self.retry_attempts,
            backoff=self.backoff,
        )

        if selection != self._selection:
            logger.info("stale_forecast_dropped", stadium_id=stadium.id)
            return forecast

        self.forecast = forecast
        return forecast

    def _require_forecast(self) -> Forecast:
        if self.forecast is None or self.stadium is None:
            raise PolicyStateError("Select a stadium and load its forecast first")
        return self.forecast

    def pricing_factors(self) -> PricingFactors:
        forecast = self._require_forecast()
        return pricing_factors_for(self.stadium, forecast.rain_risk)

    # ── Quotes & advice ───────────────────────────────────────────────

    def quote(self, ticket_value: int, is_outstation: bool = False) -> list[QuoteOut]:
        factors = self.pricing_factors()
        quotes = []
        for tier in INSURANCE_TIERS:
            premium = self.pricing.price(tier.id, ticket_value, factors, is_outstation)
            quotes.append(QuoteOut(
                tier_id=tier.id,
                premium=premium,
                can_afford=self.wallet.can_afford(premium),
                coverage=self.payout.coverage_table(tier, ticket_value, is_outstation),
            ))
        return quotes

    def recommend(
        self,
        ticket_value: int,
        is_outstation: bool = False,
        total_investment: Optional[int] = None,
    ) -> tuple[InsuranceTier, int, ValueProposition]:
        factors = self.pricing_factors()
        tier = self.advisor.recommend(ticket_value, factors.base_rain_risk, is_outstation)
        premium = self.pricing.price(tier.id, ticket_value, factors, is_outstation)
        proposition = self.advisor.value_proposition(
            premium,
            ticket_value,
            total_investment or ticket_value,
            factors.base_rain_risk,
        )
        return tier, premium, proposition

    # ── Policy lifecycle ──────────────────────────────────────────────

    def purchase(
        self,
        tier_id: str,
        ticket_value: int,
        is_outstation: bool = False,
        total_investment: Optional[int] = None,
    ) -> Policy:
        if self.policy is not None:
            raise PolicyStateError("A policy is already active; settle or reset first")

        forecast = self._require_forecast()
        tier = get_tier(tier_id)
        premium = self.pricing.price(tier.id, ticket_value, self.pricing_factors(), is_outstation)

        if not self.wallet.can_afford(premium):
            raise InsufficientFundsError(self.wallet.balance, premium)

        self.wallet.debit(premium)
        self.policy = Policy(
            tier_id=tier.id,
            ticket_value=ticket_value,
            premium=premium,
            stadium=stadium_out(self.stadium),
            rain_risk=forecast.rain_risk,
            purchase_time=datetime.now(timezone.utc),
            is_outstation=is_outstation,
            total_investment=total_investment or ticket_value,
        )
        self.last_settlement = None
        self.preferences.set(LAST_TIER, tier.id)

        self._award("first_policy")
        if ticket_value >= HIGH_ROLLER_TICKET:
            self._award("high_roller")

        logger.info(
            "policy_purchased",
            tier=tier.id,
            stadium_id=self.stadium.id,
            ticket_value=ticket_value,
            premium=premium,
            rain_risk=forecast.rain_risk,
            wallet=self.wallet.balance,
        )
        return self.policy

    def simulate_and_settle(self) -> Settlement:
        """Simulate the match for the active policy and pay out."""
        policy = self.policy
        if policy is None:
            raise PolicyStateError("No active policy to settle")

        tier = get_tier(policy.tier_id)
        status = self.simulator.simulate(policy.rain_risk)
        result = self.payout.settle_match(
            tier, policy.ticket_value, status, policy.is_outstation
        )

        self.wallet.credit(result.payout)
        profit_loss = result.payout - policy.premium
        self.total_profit_loss += profit_loss

        if result.payout >= BIG_CLAIM_PAYOUT:
            self._award("big_claim")
        if policy.rain_risk < RISK_TAKER_BELOW:
            self._award("risk_taker")

        settlement = Settlement(
            overs_played=result.overs_played,
            total_overs=status.total_overs,
            dls_applied=result.dls_applied,
            abandoned=result.abandoned,
            payout=result.payout,
            scenario=result.scenario,
            payout_tier=result.payout_tier,
            overs_lost_percentage=result.overs_lost_percentage,
            paid_components=list(result.paid_components),
            profit_loss=profit_loss,
        )
        self.policy = None
        self.last_settlement = settlement

        logger.info(
            "policy_settled",
            tier=tier.id,
            overs_played=settlement.overs_played,
            abandoned=settlement.abandoned,
            payout=settlement.payout,
            profit_loss=profit_loss,
            wallet=self.wallet.balance,
        )
        return settlement

    def reset(self) -> None:
        """Clear the active policy and the last result. The premium is not refunded."""
        if self.policy is not None:
            logger.info("policy_cleared", tier=self.policy.tier_id)
        self.policy = None
        self.last_settlement = None

    # ── State ─────────────────────────────────────────────────────────

    def _award(self, achievement: str) -> None:
        if achievement in self.achievements:
            return
        self.achievements.append(achievement)
        save_achievements(self.preferences, self.achievements)
        logger.info("achievement_unlocked", achievement=achievement)

    def state(self) -> SessionState:
        return SessionState(
            wallet=self.wallet.balance,
            total_profit_loss=self.total_profit_loss,
            stadium=stadium_out(self.stadium) if self.stadium else None,
            forecast=self.forecast,
            policy=self.policy,
            last_settlement=self.last_settlement,
            achievements=list(self.achievements),
            last_tier=self.preferences.get(LAST_TIER),
        )
