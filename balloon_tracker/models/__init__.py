"""
Database models for Balloon Tracker.

Only the weather cache is persisted; balloon positions are recomputed
from the feed on every cycle.
"""

from balloon_tracker.models.base import Base, engine, SessionLocal, init_db, get_session
from balloon_tracker.models.weather_cache import WeatherCacheRecord

__all__ = [
    'Base',
    'engine',
    'SessionLocal',
    'init_db',
    'get_session',
    'WeatherCacheRecord',
]
