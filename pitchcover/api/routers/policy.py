"""
Policy Endpoints.

POST /api/v1/policy          — buy cover (debits the premium)
POST /api/v1/policy/settle   — simulate the match and pay out
"""

from fastapi import APIRouter, Depends

from pitchcover.api.deps import get_session
from pitchcover.schemas.session import Policy, PurchaseRequest, Settlement
from pitchcover.services.match_day import MatchDaySession

router = APIRouter(prefix="/api/v1/policy", tags=["policy"])


@router.post("", response_model=Policy)
async def purchase(body: PurchaseRequest, session: MatchDaySession = Depends(get_session)):
    return session.purchase(
        body.tier_id,
        body.ticket_value,
        is_outstation=body.is_outstation,
        total_investment=body.total_investment,
    )


@router.post("/settle", response_model=Settlement)
async def settle(session: MatchDaySession = Depends(get_session)):
    return session.simulate_and_settle()
