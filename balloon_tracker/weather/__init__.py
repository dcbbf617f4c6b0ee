"""
Weather module.

OpenWeatherMap lookups with a TTL cache keyed by balloon position.
"""

from balloon_tracker.weather.cache import (
    InMemoryWeatherStore,
    SqlWeatherStore,
    WeatherCacheEntry,
    WeatherCacheStore,
    storage_key,
)
from balloon_tracker.weather.client import OpenWeatherClient, WeatherUnavailableError, summarize_reading
from balloon_tracker.weather.fetcher import WeatherFetcher, format_coordinate, now_ms, position_key

__all__ = [
    'InMemoryWeatherStore',
    'SqlWeatherStore',
    'WeatherCacheEntry',
    'WeatherCacheStore',
    'storage_key',
    'OpenWeatherClient',
    'WeatherUnavailableError',
    'summarize_reading',
    'WeatherFetcher',
    'format_coordinate',
    'now_ms',
    'position_key',
]
