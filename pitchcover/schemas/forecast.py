"""
Forecast Schemas — the slice of the weather source the app consumes.
"""

from pydantic import BaseModel, Field

from pitchcover.engine.risk import MatchSuitability


class CurrentConditions(BaseModel):
    temp: int
    humidity: int
    wind_speed: int
    pressure: int
    weather_code: int


class HourlyForecast(BaseModel):
    time: str
    temp: int
    precipitation_probability: float = Field(ge=0, le=100)
    precipitation: float = 0.0
    weather_code: int


class Forecast(BaseModel):
    """Forecast for a stadium plus the rain risk derived from it."""
    stadium_id: str
    current: CurrentConditions
    hourly: list[HourlyForecast]
    rain_risk: int = Field(ge=0, le=100)
    match_suitability: MatchSuitability
