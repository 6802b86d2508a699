"""
Forecast Client — HTTP client for the Open-Meteo forecast API.

The forecast source is external. Any failure surfaces as a retryable
DataFetchFailure (or MalformedDataFailure for unreadable payloads); no
rain risk is produced without a valid forecast.

Open-Meteo returns hourly series as parallel arrays starting at local
midnight of the venue's timezone (timezone=auto), so the slice starts at
the venue's current local hour.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx
import structlog
from pydantic import ValidationError

from pitchcover.catalog.stadiums import Stadium
from pitchcover.engine.money import round_half_up
from pitchcover.engine.risk import MATCH_WINDOW_HOURS, RiskAssessor
from pitchcover.exceptions import DataFetchFailure, MalformedDataFailure
from pitchcover.schemas.forecast import CurrentConditions, Forecast, HourlyForecast

logger = structlog.get_logger(__name__)

FORECAST_HOURS: int = 12

CURRENT_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "weather_code",
    "wind_speed_10m",
    "surface_pressure",
)
HOURLY_FIELDS = (
    "temperature_2m",
    "precipitation_probability",
    "precipitation",
    "weather_code",
)


def venue_local_hour(body: dict, now: Optional[datetime] = None) -> int:
    """Current hour at the venue, from the payload's UTC offset."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    offset = int(body.get("utc_offset_seconds") or 0)
    return (now.astimezone(timezone.utc) + timedelta(seconds=offset)).hour


def parse_open_meteo(
    body: dict,
    stadium_id: str,
    current_hour: int,
    assessor: Optional[RiskAssessor] = None,
    hours: int = FORECAST_HOURS,
) -> Forecast:
    """Map a raw Open-Meteo payload to a Forecast with its rain risk."""
    assessor = assessor or RiskAssessor()
    try:
        current = body["current"]
        hourly = body["hourly"]
        times = hourly["time"][current_hour:current_hour + hours]

        entries = []
        for i, ts in enumerate(times):
            idx = current_hour + i
            entries.append(HourlyForecast(
                time=ts,
                temp=round_half_up(hourly["temperature_2m"][idx]),
                precipitation_probability=hourly["precipitation_probability"][idx] or 0,
                precipitation=hourly["precipitation"][idx] or 0,
                weather_code=hourly["weather_code"][idx],
            ))

        conditions = CurrentConditions(
            temp=round_half_up(current["temperature_2m"]),
            humidity=round_half_up(current["relative_humidity_2m"]),
            wind_speed=round_half_up(current["wind_speed_10m"]),
            pressure=round_half_up(current["surface_pressure"]),
            weather_code=current["weather_code"],
        )
    except (KeyError, IndexError, TypeError, ValueError, ArithmeticError, ValidationError) as exc:
        raise MalformedDataFailure(details={"stadium_id": stadium_id, "reason": str(exc)}) from exc

    if len(entries) < MATCH_WINDOW_HOURS:
        raise MalformedDataFailure(details={
            "stadium_id": stadium_id,
            "reason": f"only {len(entries)} hourly entries from hour {current_hour}",
        })

    assessment = assessor.assess_forecast(entries)
    return Forecast(
        stadium_id=stadium_id,
        current=conditions,
        hourly=entries,
        rain_risk=assessment.rain_risk,
        match_suitability=assessment.match_suitability,
    )


class ForecastClient:
    """
    HTTP client for the forecast API.

    Raises DataFetchFailure / MalformedDataFailure; retry policy belongs
    to the caller.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        forecast_days: int = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        assessor: Optional[RiskAssessor] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.forecast_days = forecast_days
        self.transport = transport
        self.assessor = assessor or RiskAssessor()

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        )

    def _params(self, stadium: Stadium) -> dict:
        return {
            "latitude": stadium.lat,
            "longitude": stadium.lon,
            "current": ",".join(CURRENT_FIELDS),
            "hourly": ",".join(HOURLY_FIELDS),
            "timezone": "auto",
            "forecast_days": self.forecast_days,
        }

    async def fetch_forecast(
        self,
        stadium: Stadium,
        now: Optional[datetime] = None,
    ) -> Forecast:
        """Fetch and assess the forecast for a stadium."""
        try:
            async with self._client() as client:
                resp = await client.get(self.base_url, params=self._params(stadium))
                resp.raise_for_status()
                body = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "forecast_bad_status",
                stadium_id=stadium.id,
                status=exc.response.status_code,
            )
            raise DataFetchFailure(details={
                "stadium_id": stadium.id,
                "status": exc.response.status_code,
            }) from exc
        except httpx.HTTPError as exc:
            logger.warning("forecast_unavailable", stadium_id=stadium.id, error=str(exc))
            raise DataFetchFailure(details={"stadium_id": stadium.id}) from exc
        except ValueError as exc:
            logger.warning("forecast_not_json", stadium_id=stadium.id, error=str(exc))
            raise MalformedDataFailure(details={"stadium_id": stadium.id}) from exc

        if not isinstance(body, dict):
            raise MalformedDataFailure(details={"stadium_id": stadium.id})

        forecast = parse_open_meteo(
            body,
            stadium_id=stadium.id,
            current_hour=venue_local_hour(body, now),
            assessor=self.assessor,
        )
        logger.info(
            "forecast_fetched",
            stadium_id=stadium.id,
            rain_risk=forecast.rain_risk,
            suitability=forecast.match_suitability.value,
        )
        return forecast
