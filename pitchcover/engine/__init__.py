"""
PitchCover Calculation Engine.

Pure and synchronous. No I/O, no clocks, randomness only through an injected source.

Components:
- risk: hourly precipitation forecast → rain risk (0-100) + suitability
- pricing: rain risk + venue + tier → premium (tier-layered expected loss)
- simulator: rain risk → random match outcome (abandoned / DLS / complete)
- payout: match outcome → DLS payout tier → settlement amount
- advisor: tier recommendation and value-proposition copy
"""
