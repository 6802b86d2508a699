"""
Match-Day Session Endpoints.

GET  /api/v1/session               — wallet, forecast, policy, achievements
POST /api/v1/session/stadium       — select a stadium and load its forecast
POST /api/v1/session/reset         — clear the active policy and last result
POST /api/v1/quotes                — premium per tier for a ticket
POST /api/v1/recommendation        — recommended tier + value proposition
"""

from fastapi import APIRouter, Depends

from pitchcover.api.deps import get_session
from pitchcover.schemas.forecast import Forecast
from pitchcover.schemas.session import (
    QuoteRequest,
    QuoteResponse,
    RecommendationRequest,
    RecommendationResponse,
    SelectStadiumRequest,
    SessionState,
)
from pitchcover.services.match_day import MatchDaySession

router = APIRouter(prefix="/api/v1", tags=["session"])


@router.get("/session", response_model=SessionState)
async def get_state(session: MatchDaySession = Depends(get_session)):
    return session.state()


@router.post("/session/stadium", response_model=Forecast)
async def select_stadium(
    body: SelectStadiumRequest,
    session: MatchDaySession = Depends(get_session),
):
    """Fetch the forecast; a failed fetch returns a retryable error."""
    return await session.select_stadium(body.stadium_id)


@router.post("/session/reset", response_model=SessionState)
async def reset(session: MatchDaySession = Depends(get_session)):
    session.reset()
    return session.state()


@router.post("/quotes", response_model=QuoteResponse)
async def quote(body: QuoteRequest, session: MatchDaySession = Depends(get_session)):
    quotes = session.quote(body.ticket_value, body.is_outstation)
    return QuoteResponse(
        rain_risk=session.forecast.rain_risk,
        ticket_value=body.ticket_value,
        quotes=quotes,
    )


@router.post("/recommendation", response_model=RecommendationResponse)
async def recommend(
    body: RecommendationRequest,
    session: MatchDaySession = Depends(get_session),
):
    tier, premium, proposition = session.recommend(
        body.ticket_value, body.is_outstation, body.total_investment
    )
    return RecommendationResponse(
        tier_id=tier.id,
        premium=premium,
        protection_ratio=round(proposition.protection_ratio, 2),
        expected_roi=round(proposition.expected_roi, 2),
        break_even_risk=round(proposition.break_even_risk, 2),
        recommendation=proposition.recommendation,
        reasoning=proposition.reasoning,
    )
