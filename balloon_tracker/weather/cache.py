"""
Weather cache stores.

Entries mirror what the browser kept in localStorage:

    weather_<lat>,<lon>  ->  {"data": <provider payload>, "timestamp": <epoch ms>}

An entry is fresh while ``now - timestamp < ttl``. Nothing is ever
evicted; stale rows are simply overwritten by the next fetch.

Two interchangeable stores share the get/put contract:
- InMemoryWeatherStore: process-local, used in tests
- SqlWeatherStore: SQLAlchemy-backed, survives restarts
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy.orm import sessionmaker

from balloon_tracker.models import SessionLocal, WeatherCacheRecord, get_session

logger = logging.getLogger(__name__)

KEY_PREFIX = 'weather_'


def storage_key(position_key: str) -> str:
    return f'{KEY_PREFIX}{position_key}'


@dataclass(frozen=True)
class WeatherCacheEntry:
    """A weather reading and the epoch-ms time it was captured."""
    data: Any
    timestamp: int

    def is_valid(self, now_ms: int, ttl_ms: int) -> bool:
        return now_ms - self.timestamp < ttl_ms

    def to_dict(self) -> dict:
        return {'data': self.data, 'timestamp': self.timestamp}

    @classmethod
    def from_dict(cls, raw: Any) -> Optional['WeatherCacheEntry']:
        """Returns None if raw is not a well-formed entry."""
        if not isinstance(raw, dict) or 'data' not in raw:
            return None
        timestamp = raw.get('timestamp')
        if not isinstance(timestamp, int) or isinstance(timestamp, bool):
            return None
        return cls(data=raw['data'], timestamp=timestamp)


class WeatherCacheStore(ABC):
    """Key-value store for weather entries, keyed by position key."""

    @abstractmethod
    def get(self, position_key: str) -> Optional[WeatherCacheEntry]:
        """Return the stored entry, fresh or not, or None."""

    @abstractmethod
    def put(self, position_key: str, entry: WeatherCacheEntry) -> None:
        """Store an entry, replacing any previous one."""


class InMemoryWeatherStore(WeatherCacheStore):
    """
    Dict-backed store holding serialized entries.

    Values are kept as JSON text, like localStorage, so a reading read
    back is a fresh copy rather than the object that was written.
    """

    def __init__(self):
        self._items: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, position_key: str) -> Optional[WeatherCacheEntry]:
        with self._lock:
            raw = self._items.get(storage_key(position_key))
        if raw is None:
            return None
        try:
            return WeatherCacheEntry.from_dict(json.loads(raw))
        except ValueError:
            logger.warning(f'Discarding undecodable cache entry for {position_key}')
            return None

    def put(self, position_key: str, entry: WeatherCacheEntry) -> None:
        raw = json.dumps(entry.to_dict())
        with self._lock:
            self._items[storage_key(position_key)] = raw


class SqlWeatherStore(WeatherCacheStore):
    """
    Persistent store on the weather_cache table.

    Opens one session per operation so concurrent weather workers never
    share a session.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or SessionLocal

    def get(self, position_key: str) -> Optional[WeatherCacheEntry]:
        with self.session_factory() as session:
            record = session.get(WeatherCacheRecord, storage_key(position_key))
            if record is None:
                return None
            return WeatherCacheEntry.from_dict({
                'data': record.data,
                'timestamp': record.timestamp,
            })

    def put(self, position_key: str, entry: WeatherCacheEntry) -> None:
        with get_session(self.session_factory) as session:
            session.merge(WeatherCacheRecord(
                key=storage_key(position_key),
                data=entry.data,
                timestamp=entry.timestamp,
            ))
