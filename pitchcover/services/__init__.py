"""
Services around the pure engine: forecast fetching, retry, preferences,
and the single-user match-day session.
"""
