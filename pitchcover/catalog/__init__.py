"""
Immutable reference data.

- stadiums: venue catalog and historical venue risk multipliers
- tiers: insurance tiers and their coverage components
"""
