"""
Stadium catalog.

Drainage quality and covered seating both lower the effective rain risk
used by the pricing engine. Venue multipliers come from historical IPL
washout rates per city; venues without history price at 1.0.
"""

from dataclasses import dataclass
from enum import StrEnum

from pitchcover.exceptions import UnknownStadiumError


class Drainage(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"


@dataclass(frozen=True)
class Stadium:
    """A cricket venue."""
    id: str
    name: str
    city: str
    lat: float
    lon: float
    capacity: int
    drainage: Drainage
    covered: float              # % of seating under roof (0-100)


STADIUMS: tuple[Stadium, ...] = (
    Stadium("blr", "M. Chinnaswamy Stadium", "Bengaluru", 12.9788, 77.5996, 40000, Drainage.EXCELLENT, 15),
    Stadium("mum", "Wankhede Stadium", "Mumbai", 18.9389, 72.8258, 33000, Drainage.GOOD, 20),
    Stadium("kol", "Eden Gardens", "Kolkata", 22.5646, 88.3433, 66000, Drainage.AVERAGE, 25),
    Stadium("ahm", "Narendra Modi Stadium", "Ahmedabad", 23.0904, 72.5975, 132000, Drainage.EXCELLENT, 30),
    Stadium("che", "M. A. Chidambaram Stadium", "Chennai", 13.0628, 80.2793, 50000, Drainage.GOOD, 10),
    Stadium("del", "Arun Jaitley Stadium", "Delhi", 28.6379, 77.2432, 41000, Drainage.GOOD, 18),
    Stadium("dha", "HPCA Stadium", "Dharamshala", 32.1976, 76.3259, 23000, Drainage.EXCELLENT, 5),
)

# Historical venue multipliers (1.0 = league baseline)
VENUE_RISK_MULTIPLIERS: dict[str, float] = {
    "mum": 1.5,   # monsoon exposure
    "blr": 1.3,
    "kol": 1.3,
    "che": 1.0,
    "del": 0.9,
    "ahm": 0.8,
    "dha": 1.2,   # mountain weather
    "pun": 1.1,
    "jai": 0.8,
    "lko": 1.0,
}

DEFAULT_VENUE_MULTIPLIER: float = 1.0

_BY_ID = {s.id: s for s in STADIUMS}


def get_stadium(stadium_id: str) -> Stadium:
    """Look up a stadium by id."""
    try:
        return _BY_ID[stadium_id]
    except KeyError:
        raise UnknownStadiumError(stadium_id) from None


def venue_multiplier(stadium_id: str) -> float:
    return VENUE_RISK_MULTIPLIERS.get(stadium_id, DEFAULT_VENUE_MULTIPLIER)
