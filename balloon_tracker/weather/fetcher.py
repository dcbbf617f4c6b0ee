"""
Weather fetcher - cached weather lookups for a set of balloon positions.

Per position key the lifecycle is:

    no entry -> fetch -> cached (fresh)
    cached (fresh) -> TTL elapsed -> cached (stale) -> fetch -> cached (fresh)

A failed fetch leaves the key without a reading for this cycle. There
is no retry and no fallback to a stale entry.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from balloon_tracker.config import config
from balloon_tracker.feed.client import PositionRecord
from balloon_tracker.weather.cache import SqlWeatherStore, WeatherCacheEntry, WeatherCacheStore
from balloon_tracker.weather.client import OpenWeatherClient, WeatherUnavailableError

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def format_coordinate(value: float) -> str:
    """
    Stringify a coordinate the way the browser did (JavaScript Number#toString).

    Uses the shortest round-trip digits, then places the decimal point by
    the ECMAScript rules: 10.0 -> '10', 0.00001 -> '0.00001', 1e-7 -> '1e-7',
    1e21 -> '1e+21'.
    """
    value = float(value)
    if value == 0:
        return '0'

    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = ''.join(map(str, digit_tuple)).rstrip('0')
    exponent += len(digit_tuple) - len(digits)

    # Decimal point sits after the first `point` digits
    k = len(digits)
    point = exponent + k
    prefix = '-' if sign else ''

    if k <= point <= 21:
        return prefix + digits + '0' * (point - k)
    if 0 < point <= 21:
        return prefix + digits[:point] + '.' + digits[point:]
    if -6 < point <= 0:
        return prefix + '0.' + '0' * -point + digits

    e = point - 1
    mantissa = digits if k == 1 else digits[0] + '.' + digits[1:]
    return f'{prefix}{mantissa}e{"+" if e >= 0 else "-"}{abs(e)}'


def position_key(latitude: float, longitude: float) -> str:
    return f'{format_coordinate(latitude)},{format_coordinate(longitude)}'


class WeatherFetcher:
    """
    Resolves weather readings for positions through a TTL cache.

    All lookups of one cycle run concurrently; keys are distinct within
    a cycle so workers never write the same entry.
    """

    def __init__(
        self,
        client: Optional[OpenWeatherClient] = None,
        store: Optional[WeatherCacheStore] = None,
        ttl_ms: Optional[int] = None,
        enabled: Optional[bool] = None,
        max_workers: Optional[int] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.client = client if client is not None else OpenWeatherClient.from_config()
        self.store = store if store is not None else SqlWeatherStore()
        self.ttl_ms = ttl_ms if ttl_ms is not None else config.weather.cache_ttl_ms
        self.enabled = config.weather.is_enabled if enabled is None else enabled
        self.max_workers = max_workers if max_workers is not None else config.weather.max_workers
        self.clock = clock or now_ms

        # Statistics
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._errors = 0

        if not self.enabled:
            logger.info('Weather lookups disabled')

    def get_reading(self, key: str, latitude: float, longitude: float) -> Optional[Any]:
        """
        Return a fresh reading for one position, fetching on miss or expiry.

        Returns None if the fetch fails.
        """
        entry = self.store.get(key)
        if entry is not None and entry.is_valid(self.clock(), self.ttl_ms):
            with self._lock:
                self._hits += 1
            logger.debug(f'Weather cache hit for {key}')
            return entry.data

        with self._lock:
            self._misses += 1

        try:
            reading = self.client.get_current(latitude, longitude)
        except WeatherUnavailableError as e:
            with self._lock:
                self._errors += 1
            logger.error(f'Weather fetch failed for {key}: {e}')
            return None

        self.store.put(key, WeatherCacheEntry(data=reading, timestamp=self.clock()))
        logger.debug(f'Weather cached for {key}')
        return reading

    def _resolve(self, key: str, latitude: float, longitude: float) -> Tuple[str, Optional[Any]]:
        try:
            return key, self.get_reading(key, latitude, longitude)
        except Exception as e:
            # Store failures degrade the same way as provider failures
            with self._lock:
                self._errors += 1
            logger.error(f'Weather lookup error for {key}: {e}')
            return key, None

    def load(self, positions: Iterable[PositionRecord]) -> Dict[str, Any]:
        """
        Resolve weather for every distinct position.

        Returns a mapping of position key to reading, containing only the
        keys that resolved. Empty when disabled or given no positions.
        """
        if not self.enabled:
            return {}

        coordinates: Dict[str, Tuple[float, float]] = {}
        for position in positions:
            key = position_key(position.latitude, position.longitude)
            coordinates.setdefault(key, (position.latitude, position.longitude))

        if not coordinates:
            return {}

        with ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix='weather',
        ) as executor:
            futures = [
                executor.submit(self._resolve, key, lat, lon)
                for key, (lat, lon) in coordinates.items()
            ]
            results = [future.result() for future in futures]

        readings = {key: reading for key, reading in results if reading is not None}
        logger.info(f'Weather resolved for {len(readings)}/{len(coordinates)} positions')
        return readings

    @property
    def stats(self) -> dict:
        """Get cache statistics."""
        with self._lock:
            lookups = self._hits + self._misses
            return {
                'enabled': self.enabled,
                'hits': self._hits,
                'misses': self._misses,
                'errors': self._errors,
                'hit_rate': self._hits / lookups if lookups > 0 else 0,
                'ttl_ms': self.ttl_ms,
            }
