"""
Test fixtures for PitchCover tests.

Provides:
- Open-Meteo payload factory (flat precipitation probability by default)
- httpx.MockTransport-backed forecast client
- Scripted random source for deterministic match simulation
- Match-day session wired to the above
"""

from typing import Callable, Optional

import httpx
import pytest

from pitchcover.engine.simulator import MatchSimulator
from pitchcover.services.forecast_client import ForecastClient
from pitchcover.services.match_day import MatchDaySession
from pitchcover.services.preferences import InMemoryPreferenceStore
from pitchcover.services.resilience import Backoff

FORECAST_URL = "https://forecast.test/v1/forecast"


def make_open_meteo_payload(
    probabilities: Optional[list[Optional[float]]] = None,
    rain_prob: float = 50.0,
    hours: int = 48,
    utc_offset_seconds: int = 0,
) -> dict:
    """Build an Open-Meteo style body with `hours` hourly entries."""
    if probabilities is None:
        probabilities = [rain_prob] * hours
    n = len(probabilities)
    return {
        "latitude": 12.98,
        "longitude": 77.6,
        "utc_offset_seconds": utc_offset_seconds,
        "current": {
            "temperature_2m": 27.6,
            "relative_humidity_2m": 71.2,
            "weather_code": 61,
            "wind_speed_10m": 12.4,
            "surface_pressure": 1008.5,
        },
        "hourly": {
            "time": [f"2026-10-{19 + i // 24:02d}T{i % 24:02d}:00" for i in range(n)],
            "temperature_2m": [24.5 + (i % 5) for i in range(n)],
            "precipitation_probability": probabilities,
            "precipitation": [0.2] * n,
            "weather_code": [61] * n,
        },
    }


class ScriptedRandom:
    """Callable random source returning scripted values in order."""

    def __init__(self, values: list[float]):
        self.values = list(values)
        self.calls = 0

    def __call__(self) -> float:
        value = self.values[self.calls]
        self.calls += 1
        return value


def mock_transport(
    body: Optional[dict] = None,
    status_code: int = 200,
    handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
) -> httpx.MockTransport:
    if handler is None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=body if body is not None else {})
    return httpx.MockTransport(handler)


@pytest.fixture
def payload_factory():
    return make_open_meteo_payload


@pytest.fixture
def scripted_random():
    return ScriptedRandom


@pytest.fixture
def forecast_client_factory():
    def _make(body: Optional[dict] = None, status_code: int = 200, handler=None) -> ForecastClient:
        return ForecastClient(
            base_url=FORECAST_URL,
            transport=mock_transport(body, status_code, handler),
        )
    return _make


@pytest.fixture
def session_factory(forecast_client_factory):
    """Match-day session with a mocked forecast and a scripted simulator."""

    def _make(
        rain_prob: float = 50.0,
        rolls: Optional[list[float]] = None,
        starting_wallet: int = 25000,
        preferences: Optional[InMemoryPreferenceStore] = None,
        status_code: int = 200,
    ) -> MatchDaySession:
        client = forecast_client_factory(
            make_open_meteo_payload(rain_prob=rain_prob), status_code=status_code
        )
        simulator = MatchSimulator(rng=ScriptedRandom(rolls)) if rolls is not None else None
        return MatchDaySession(
            forecast_client=client,
            preferences=preferences or InMemoryPreferenceStore(),
            starting_wallet=starting_wallet,
            simulator=simulator,
            retry_attempts=0,
            backoff=Backoff(base_delay=0.0, jitter=0.0),
        )

    return _make
