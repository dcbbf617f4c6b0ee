"""
OpenWeatherMap current-conditions client.

Only the fields the map popup shows are relied upon:
main.temp, wind.speed, wind.deg and weather[0].description.
The full payload is returned untouched so it can be cached as-is.
"""

import logging
from typing import Any, Dict, Optional

import requests

from balloon_tracker.config import config

logger = logging.getLogger(__name__)


class WeatherUnavailableError(Exception):
    """Raised when a weather lookup fails for any reason."""


class OpenWeatherClient:
    """Thin wrapper around GET /weather."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = 'https://api.openweathermap.org/data/2.5',
        units: str = 'metric',
        timeout: Optional[float] = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.units = units
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls) -> 'OpenWeatherClient':
        """Create client from application configuration."""
        return cls(
            api_key=config.weather.api_key,
            base_url=config.weather.base_url,
            units=config.weather.units,
            timeout=config.weather.timeout_seconds,
        )

    def get_current(self, latitude: float, longitude: float) -> Dict[str, Any]:
        """
        Fetch current weather at a coordinate.

        Raises:
            WeatherUnavailableError on network errors, non-2xx responses
            or a body that is not a JSON object
        """
        params = {
            'lat': latitude,
            'lon': longitude,
            'appid': self.api_key,
            'units': self.units,
        }

        try:
            response = self.session.get(
                f'{self.base_url}/weather',
                params=params,
                timeout=self.timeout,
            )
            # Error payloads ({"cod": 401, ...}) must never reach the cache
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.HTTPError as e:
            raise WeatherUnavailableError(
                f'Weather provider returned HTTP {e.response.status_code}'
            ) from e
        except requests.exceptions.RequestException as e:
            raise WeatherUnavailableError(f'Weather request failed: {e}') from e
        except ValueError as e:
            raise WeatherUnavailableError('Weather response is not JSON') from e

        if not isinstance(data, dict):
            raise WeatherUnavailableError('Weather response is not a JSON object')

        return data


def summarize_reading(reading: Any) -> Optional[Dict[str, Any]]:
    """
    Extract the popup fields from a provider payload.

    Returns None when the payload lacks any of them.
    """
    try:
        return {
            'temperature_c': reading['main']['temp'],
            'wind_speed_ms': reading['wind']['speed'],
            'wind_deg': reading['wind'].get('deg'),
            'description': reading['weather'][0]['description'],
        }
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
