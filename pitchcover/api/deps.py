"""
FastAPI dependencies.

One in-process match-day session per server. Tests override get_session.
"""

from typing import Optional

from pitchcover.config import settings
from pitchcover.services.forecast_client import ForecastClient
from pitchcover.services.match_day import MatchDaySession
from pitchcover.services.preferences import JsonFilePreferenceStore

_session: Optional[MatchDaySession] = None


def build_session() -> MatchDaySession:
    return MatchDaySession(
        forecast_client=ForecastClient(
            base_url=settings.forecast_url,
            timeout=settings.forecast_timeout_seconds,
            forecast_days=settings.forecast_days,
        ),
        preferences=JsonFilePreferenceStore(settings.preferences_path),
        starting_wallet=settings.starting_wallet,
        retry_attempts=settings.forecast_retry_attempts,
    )


def get_session() -> MatchDaySession:
    global _session
    if _session is None:
        _session = build_session()
    return _session
