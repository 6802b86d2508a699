"""
Catalog Endpoints.

GET /api/v1/stadiums   — venue catalog
GET /api/v1/tiers      — insurance tiers and their coverage components
"""

from fastapi import APIRouter

from pitchcover.catalog.stadiums import STADIUMS
from pitchcover.catalog.tiers import INSURANCE_TIERS
from pitchcover.schemas.session import CoverageComponentOut, StadiumOut, TierOut
from pitchcover.services.match_day import stadium_out

router = APIRouter(prefix="/api/v1", tags=["catalog"])


@router.get("/stadiums", response_model=list[StadiumOut])
async def list_stadiums():
    return [stadium_out(s) for s in STADIUMS]


@router.get("/tiers", response_model=list[TierOut])
async def list_tiers():
    return [
        TierOut(
            id=t.id,
            name=t.name,
            price=t.price,
            tagline=t.tagline,
            recommended=t.recommended,
            settlement_mode=t.settlement_mode.value,
            features=list(t.features),
            components=[
                CoverageComponentOut(
                    name=c.name,
                    description=c.description,
                    triggers=sorted(c.triggers),
                    applies_when_any=c.applies_when_any,
                    requires_outstation=c.requires_outstation,
                )
                for c in t.components
            ],
        )
        for t in INSURANCE_TIERS
    ]
