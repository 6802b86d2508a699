"""
Match Outcome Simulator.

Draws a random T20 outcome biased by rain risk. Two independent rolls in
[0, 100) are drawn per call:
- abandon_roll < rain_risk × 0.3       → abandoned, 0 overs
- else dls_roll < rain_risk            → DLS-reduced, overs lost drawn
                                          uniformly in [0, ⌊overs × risk⌋)
- else                                 → completed in full

At least MIN_OVERS must be bowled for a result, so a DLS-reduced match
never drops below it.
"""

import math
import random
from dataclasses import dataclass
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)

TOTAL_OVERS: int = 20
MIN_OVERS: int = 5                      # IPL minimum per side for a result
ABANDON_RISK_SHARE: float = 0.3


@dataclass(frozen=True)
class MatchStatus:
    total_overs: int
    overs_played: int
    dls_applied: bool
    match_abandoned: bool


class MatchSimulator:
    """
    Stateless stochastic match simulator.

    The random source is injectable: any callable returning uniform floats
    in [0, 1). Defaults to random.random.
    """

    def __init__(self, rng: Optional[Callable[[], float]] = None):
        self.rng = rng or random.random

    def simulate(self, rain_risk: float, total_overs: int = TOTAL_OVERS) -> MatchStatus:
        abandon_roll = self.rng() * 100
        dls_roll = self.rng() * 100

        if abandon_roll < rain_risk * ABANDON_RISK_SHARE:
            status = MatchStatus(
                total_overs=total_overs,
                overs_played=0,
                dls_applied=False,
                match_abandoned=True,
            )
        elif dls_roll < rain_risk:
            max_overs_lost = math.floor(total_overs * (rain_risk / 100))
            overs_lost = math.floor(self.rng() * max_overs_lost)
            status = MatchStatus(
                total_overs=total_overs,
                overs_played=max(MIN_OVERS, total_overs - overs_lost),
                dls_applied=True,
                match_abandoned=False,
            )
        else:
            status = MatchStatus(
                total_overs=total_overs,
                overs_played=total_overs,
                dls_applied=False,
                match_abandoned=False,
            )

        logger.debug(
            "match_simulated",
            rain_risk=rain_risk,
            overs_played=status.overs_played,
            dls_applied=status.dls_applied,
            abandoned=status.match_abandoned,
        )
        return status
