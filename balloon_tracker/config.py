"""
Configuration management for Balloon Tracker.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

_REPO_ROOT = Path(__file__).resolve().parent.parent


def _env_flag(name: str, default: str = '0') -> bool:
    """Interpret '1', 'true', 'yes' (any case) as enabled."""
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes')


@dataclass(frozen=True)
class FeedConfig:
    """WindBorne treasure feed settings."""
    base_url: str = os.getenv('FEED_BASE_URL', 'https://a.windbornesystems.com/treasure')
    hours: int = int(os.getenv('FEED_HOURS', '24'))
    max_workers: int = int(os.getenv('FEED_MAX_WORKERS', '24'))
    timeout_seconds: float = float(os.getenv('FEED_TIMEOUT_SECONDS', '30'))


@dataclass(frozen=True)
class WeatherConfig:
    """OpenWeatherMap settings and the weather feature flag."""
    enabled_flag: bool = _env_flag('WEATHER_ENABLED')
    api_key: Optional[str] = os.getenv('OPENWEATHER_API_KEY') or None
    base_url: str = os.getenv('WEATHER_BASE_URL', 'https://api.openweathermap.org/data/2.5')
    units: str = 'metric'
    cache_ttl_seconds: int = int(os.getenv('WEATHER_CACHE_TTL_SECONDS', '1800'))
    max_workers: int = int(os.getenv('WEATHER_MAX_WORKERS', '8'))
    timeout_seconds: float = float(os.getenv('WEATHER_TIMEOUT_SECONDS', '30'))

    @property
    def is_enabled(self) -> bool:
        # The flag alone is not enough, the provider rejects keyless requests
        return self.enabled_flag and bool(self.api_key)

    @property
    def cache_ttl_ms(self) -> int:
        return self.cache_ttl_seconds * 1000


@dataclass(frozen=True)
class DatabaseConfig:
    """Database configuration for the persisted weather cache."""
    url: str = os.getenv('DATABASE_URL', 'sqlite:///balloon_tracker.db')

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith('sqlite')

    @property
    def is_memory(self) -> bool:
        return self.is_sqlite and ':memory:' in self.url


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    feed: FeedConfig
    weather: WeatherConfig
    database: DatabaseConfig

    # Directory holding the built front-end (index.html + assets)
    static_dir: str

    # Flask settings
    port: int
    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        feed=FeedConfig(),
        weather=WeatherConfig(),
        database=DatabaseConfig(),
        static_dir=os.getenv('STATIC_DIR', str(_REPO_ROOT / 'frontend')),
        port=int(os.getenv('PORT', '5000')),
        debug=_env_flag('FLASK_DEBUG'),
    )


# Singleton instance
config = load_config()
