"""
PitchCover — Parametric weather insurance for T20 cricket matches.

Architecture:
    pitchcover/
    ├── catalog/         # Stadiums, venue multipliers, insurance tiers
    ├── engine/          # Risk, pricing, match simulation, payout, advice
    ├── schemas/         # Pydantic models (forecast, policy, API bodies)
    ├── services/        # Forecast client, preference store, match-day session
    ├── middleware/      # Request context, error handling
    └── api/             # FastAPI routers (HTTP layer)

Module Boundaries:
    - The forecast source is EXTERNAL: it only supplies precipitation data
    - The engine is PURE: no I/O, no wallet, no shared mutable state
    - Every payout is traceable to a declared coverage component

Data Flow:
    Forecast → RiskAssessor → PricingEngine → Policy
    → MatchSimulator → PayoutEngine → Settlement

Version: 1.0.0
"""

__version__ = "1.0.0"
