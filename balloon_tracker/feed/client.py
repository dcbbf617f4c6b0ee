"""
WindBorne treasure feed client.

The feed publishes one JSON document per hour bucket:

    GET https://a.windbornesystems.com/treasure/{hh}.json

Each document is an ordered array of balloon records, oldest first.
A record is normally ``[latitude, longitude, altitude_km]``; richer
records are accepted as long as their last three numeric fields carry
the position.
"""

import json
import logging
import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Optional

import requests

from balloon_tracker.config import config

logger = logging.getLogger(__name__)


class FeedUnavailableError(Exception):
    """Raised when an hour bucket cannot be fetched or decoded."""

    def __init__(self, hour: str, message: str):
        super().__init__(f'Hour {hour}: {message}')
        self.hour = hour


def _reject_constant(name: str) -> Any:
    raise ValueError(f'{name} is not valid JSON')


def parse_strict_json(text: str) -> Any:
    """
    Decode a JSON document, rejecting the non-standard NaN and Infinity
    tokens that json.loads accepts by default.
    """
    return json.loads(text, parse_constant=_reject_constant)


def pad_hour(hour: Any) -> str:
    """
    Left-pad an hour value to two characters.

    No range check: '7' -> '07', '23' -> '23', '123' -> '123'.
    The upstream decides what an odd value means.
    """
    return str(hour).rjust(2, '0')


@dataclass(frozen=True)
class PositionRecord:
    """A single balloon fix."""
    latitude: float
    longitude: float
    altitude: float

    @classmethod
    def from_raw(cls, record: Any) -> Optional['PositionRecord']:
        """
        Parse a raw feed record.

        Returns None if the record does not end in three finite numbers.
        """
        if not isinstance(record, (list, tuple)):
            return None

        try:
            numbers = [
                float(v) for v in record
                if isinstance(v, Real) and not isinstance(v, bool)
            ]
        except OverflowError:
            # JSON integers can exceed the float range
            return None
        if len(numbers) < 3:
            return None

        lat, lon, alt = numbers[-3:]
        if not all(math.isfinite(v) for v in (lat, lon, alt)):
            return None

        return cls(latitude=lat, longitude=lon, altitude=alt)


class TreasureFeedClient:
    """
    Client for the hourly treasure documents.

    Performs a single GET per call. No retries: a failed bucket is the
    caller's to drop.
    """

    def __init__(
        self,
        base_url: str = 'https://a.windbornesystems.com/treasure',
        timeout: Optional[float] = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls) -> 'TreasureFeedClient':
        """Create client from application configuration."""
        return cls(
            base_url=config.feed.base_url,
            timeout=config.feed.timeout_seconds,
        )

    def url_for(self, hour: Any) -> str:
        return f'{self.base_url}/{pad_hour(hour)}.json'

    def fetch_hour(self, hour: Any) -> Any:
        """
        Fetch one hour bucket and return the decoded JSON body unchanged.

        Raises:
            FeedUnavailableError on network errors or a non-JSON body
        """
        hh = pad_hour(hour)
        url = self.url_for(hh)
        logger.debug(f'Fetching feed bucket {url}')

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f'Feed request failed for hour {hh}: {e}')
            raise FeedUnavailableError(hh, str(e)) from e

        try:
            return parse_strict_json(response.text)
        except ValueError as e:
            logger.error(f'Feed hour {hh} returned non-JSON body (HTTP {response.status_code})')
            raise FeedUnavailableError(hh, 'response is not JSON') from e
