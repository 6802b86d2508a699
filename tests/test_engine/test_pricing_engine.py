"""
Pricing Engine Tests.
"""

import pytest

from pitchcover.catalog.stadiums import Drainage, get_stadium
from pitchcover.engine.pricing import (
    DEFAULT_DRAINAGE_FACTORS,
    PricingConfig,
    PricingEngine,
    PricingFactors,
    pricing_factors_for,
)
from pitchcover.exceptions import UnknownTierError


def _factors(
    rain_risk: float = 50,
    drainage: Drainage = Drainage.AVERAGE,
    coverage: float = 0,
    venue: float = 1.0,
) -> PricingFactors:
    return PricingFactors(
        base_rain_risk=rain_risk,
        stadium_drainage=drainage,
        stadium_coverage=coverage,
        venue_risk_multiplier=venue,
    )


class TestExpectedLoss:
    def setup_method(self):
        self.engine = PricingEngine()

    def test_zero_risk_zero_loss(self):
        assert self.engine.expected_loss(0, 2500) == 0

    def test_full_risk_buckets(self):
        """0.01·T + 0.01·T + 0.02·T·0.5 + 0.02·T·0.25 at 100% risk."""
        assert self.engine.expected_loss(100, 2500) == pytest.approx(87.5)

    def test_linear_in_rain_risk(self):
        assert self.engine.expected_loss(40, 2500) == pytest.approx(0.4 * 87.5)


class TestBasicPremium:
    def setup_method(self):
        self.engine = PricingEngine()

    def test_zero_risk_charges_floor(self):
        """Good drainage, 20% covered, no rain → ₹99 floor."""
        factors = _factors(rain_risk=0, drainage=Drainage.GOOD, coverage=20)
        assert self.engine.price("basic", 2500, factors) == 99

    def test_full_risk_poor_venue(self):
        """
        Expected loss 87.5 × 1.5 venue × 1.2 poor drainage × 1.0 coverage = 157.5
        Premium round((157.5 × 1.5 + 15) × 1.2) = round(301.5) = 302, under the ₹500 cap.
        """
        factors = _factors(rain_risk=100, drainage=Drainage.POOR, coverage=0, venue=1.5)
        breakdown = self.engine.breakdown("basic", 2500, factors)
        assert breakdown.adjusted_expected_loss == pytest.approx(157.5)
        assert breakdown.ceiling == pytest.approx(500)
        assert breakdown.total_premium == 302

    def test_ceiling_overrides_floor_for_cheap_tickets(self):
        """₹400 ticket: ceiling 20% = ₹80 is below the ₹99 floor, ceiling wins."""
        factors = _factors(rain_risk=0)
        assert self.engine.price("basic", 400, factors) == 80

    def test_fractional_ceiling_rounded_to_whole_rupees(self):
        """₹401 ticket: ceiling ₹80.20 binds and is charged as ₹80."""
        b = self.engine.breakdown("basic", 401, _factors(rain_risk=0))
        assert b.ceiling == pytest.approx(80.2)
        assert b.total_premium == 80

    def test_coverage_discount_halves_loss_when_fully_covered(self):
        breakdown = self.engine.breakdown("basic", 2500, _factors(rain_risk=100, coverage=100))
        assert breakdown.adjusted_expected_loss == pytest.approx(87.5 * 0.5)

    def test_adjustments_are_sequential_deltas(self):
        factors = _factors(rain_risk=100, drainage=Drainage.EXCELLENT, coverage=50, venue=1.3)
        b = self.engine.breakdown("basic", 2500, factors)
        assert b.base_expected_loss == pytest.approx(87.5)
        assert b.venue_adjustment == pytest.approx(87.5 * 0.3)
        assert b.drainage_adjustment == pytest.approx(87.5 * 1.3 * -0.3)
        assert b.coverage_adjustment == pytest.approx(87.5 * 1.3 * 0.7 * -0.25)
        total = b.base_expected_loss + b.venue_adjustment + b.drainage_adjustment + b.coverage_adjustment
        assert total == pytest.approx(b.adjusted_expected_loss)


class TestLayeredTiers:
    def setup_method(self):
        self.engine = PricingEngine()
        self.factors = _factors(rain_risk=80)

    def test_standard_adds_travel_and_inconvenience(self):
        b = self.engine.breakdown("standard", 2500, _factors(rain_risk=100, drainage=Drainage.POOR, venue=1.5))
        # 157.5 + 0.01·750 + 0.04·250
        assert b.expected_loss == pytest.approx(175.0)
        assert b.total_premium == 339

    def test_premium_tier_local_fan(self):
        """Ticket ₹10,000, 80% risk: 280 + 0.8·37.5 = 310 → (465 + 30) × 1.2 = 594."""
        b = self.engine.breakdown("premium", 10000, self.factors)
        assert b.base_expected_loss == pytest.approx(280)
        assert b.tier_additions == pytest.approx(30)
        assert b.total_premium == 594

    def test_premium_tier_outstation_adds_accommodation(self):
        """Accommodation adds 0.8 × 0.01 × 3000 = 24 → (501 + 30) × 1.2 = 637.2."""
        assert self.engine.price("premium", 10000, self.factors, is_outstation=True) == 637

    def test_outstation_does_not_affect_lower_tiers(self):
        for tier in ("basic", "standard"):
            assert self.engine.price(tier, 10000, self.factors, True) == self.engine.price(
                tier, 10000, self.factors, False
            )

    def test_premium_floor(self):
        assert self.engine.price("premium", 2500, _factors(rain_risk=10)) == 499

    def test_group_prices_five_tickets_with_discount(self):
        """Premium model on ₹12,500 → 720, less 15% → 612."""
        assert self.engine.price("group", 2500, self.factors) == 612
        b = self.engine.breakdown("group", 2500, self.factors)
        assert b.group_discount == pytest.approx(0.15)
        assert b.ticket_value == 12500

    def test_platinum_priced_as_premium(self):
        assert self.engine.price("platinum", 4000, self.factors) == self.engine.price(
            "premium", 4000, self.factors
        )
        assert self.engine.breakdown("platinum", 4000, self.factors).tier_id == "platinum"

    def test_tier_ordering(self):
        basic = self.engine.price("basic", 2500, self.factors)
        standard = self.engine.price("standard", 2500, self.factors)
        premium = self.engine.price("premium", 2500, self.factors)
        assert basic <= standard <= premium

    @pytest.mark.parametrize("tier,ceiling", [("standard", 100), ("premium", 140)])
    def test_ceiling_precedence_on_upper_tiers(self, tier, ceiling):
        assert self.engine.price(tier, 400, _factors(rain_risk=0)) == ceiling


class TestPricingEngineApi:
    def test_quote_all_covers_every_tier(self):
        quotes = PricingEngine().quote_all(2500, _factors())
        assert set(quotes) == {"basic", "standard", "premium", "group", "platinum"}
        assert all(isinstance(v, int) for v in quotes.values())

    def test_unknown_tier_raises(self):
        with pytest.raises(UnknownTierError):
            PricingEngine().price("diamond", 2500, _factors())

    def test_config_overrides_drainage(self):
        harsh = dict(DEFAULT_DRAINAGE_FACTORS)
        harsh[Drainage.POOR] = 3.0
        factors = _factors(rain_risk=100, drainage=Drainage.POOR)
        default_price = PricingEngine().price("basic", 10000, factors)
        harsh_price = PricingEngine(PricingConfig(drainage_factors=harsh)).price("basic", 10000, factors)
        assert harsh_price > default_price

    def test_default_config_not_shared(self):
        a, b = PricingConfig(), PricingConfig()
        assert a.drainage_factors is not b.drainage_factors

    def test_factors_from_catalog_stadium(self):
        factors = pricing_factors_for(get_stadium("mum"), 65)
        assert factors.base_rain_risk == 65
        assert factors.stadium_drainage == Drainage.GOOD
        assert factors.stadium_coverage == 20
        assert factors.venue_risk_multiplier == 1.5
        assert factors.seasonal_factor == 1.0
