"""
Rain Risk Assessor.

Collapses the hourly precipitation forecast for the match window into a
single 0-100 rain risk. Hours further from the start of the match carry
less weight: hour i (0-based) has weight 1 - 0.1·i, so the first hour
counts 1.0 and the sixth 0.5.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Iterable, Optional, Sequence

import structlog

from pitchcover.engine.money import round_half_up

logger = structlog.get_logger(__name__)

# ── Configuration ─────────────────────────────────────────────────────────

MATCH_WINDOW_HOURS: int = 6
WEIGHT_DECAY_PER_HOUR: float = 0.1

# Suitability bands: rain risk strictly above the threshold
POOR_ABOVE: int = 70
RISKY_ABOVE: int = 40
GOOD_ABOVE: int = 15


class MatchSuitability(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    RISKY = "risky"
    POOR = "poor"


@dataclass(frozen=True)
class RainRiskAssessment:
    rain_risk: int                      # 0-100
    match_suitability: MatchSuitability
    hours_considered: int


def classify_suitability(rain_risk: float) -> MatchSuitability:
    if rain_risk > POOR_ABOVE:
        return MatchSuitability.POOR
    if rain_risk > RISKY_ABOVE:
        return MatchSuitability.RISKY
    if rain_risk > GOOD_ABOVE:
        return MatchSuitability.GOOD
    return MatchSuitability.EXCELLENT


class RiskAssessor:
    """
    Weighted precipitation-probability average over the match window.

    rain_risk = round(Σ(p_i × w_i) / Σ(w_i)),  w_i = 1 - decay × i
    """

    def __init__(
        self,
        window_hours: int = MATCH_WINDOW_HOURS,
        decay_per_hour: float = WEIGHT_DECAY_PER_HOUR,
    ):
        self.window_hours = window_hours
        self.decay_per_hour = decay_per_hour

    def weights(self, n: Optional[int] = None) -> list[float]:
        n = self.window_hours if n is None else min(n, self.window_hours)
        return [1 - i * self.decay_per_hour for i in range(n)]

    def assess(self, probabilities: Sequence[float]) -> RainRiskAssessment:
        """Assess from hourly precipitation probabilities starting at the current hour."""
        critical = list(probabilities[: self.window_hours])
        weights = self.weights(len(critical))
        total_weight = sum(weights)

        if total_weight > 0:
            weighted = sum(p * w for p, w in zip(critical, weights))
            rain_risk = round_half_up(weighted / total_weight)
        else:
            rain_risk = 0

        suitability = classify_suitability(rain_risk)
        logger.debug(
            "rain_risk_assessed",
            rain_risk=rain_risk,
            suitability=suitability.value,
            hours=len(critical),
        )
        return RainRiskAssessment(
            rain_risk=rain_risk,
            match_suitability=suitability,
            hours_considered=len(critical),
        )

    def assess_forecast(self, hourly: Iterable) -> RainRiskAssessment:
        """Assess from hourly entries exposing ``precipitation_probability``."""
        return self.assess([h.precipitation_probability for h in hourly])
