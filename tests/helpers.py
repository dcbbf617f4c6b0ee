from __future__ import annotations

from balloon_tracker.feed.client import FeedUnavailableError, pad_hour
from balloon_tracker.weather.cache import storage_key
from balloon_tracker.weather.client import WeatherUnavailableError


class ClockStub:
    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def advance(self, ms: int) -> None:
        self.now += ms

    def __call__(self) -> int:
        return self.now


class FeedClientStub:
    """Serves canned hour buckets; hours listed in `failing` raise."""

    def __init__(self, buckets: dict[int, object], failing: set[int] | None = None) -> None:
        self.buckets = buckets
        self.failing = failing or set()
        self.requested: list[int] = []

    def fetch_hour(self, hour):
        self.requested.append(hour)
        if hour in self.failing:
            raise FeedUnavailableError(pad_hour(hour), "boom")
        return self.buckets.get(hour, [])


class WeatherClientStub:
    def __init__(self, fail: bool = False) -> None:
        self.calls: list[tuple[float, float]] = []
        self.fail = fail

    def get_current(self, latitude: float, longitude: float) -> dict:
        self.calls.append((latitude, longitude))
        if self.fail:
            raise WeatherUnavailableError("provider down")
        return make_reading(temp=latitude + longitude)


def make_reading(temp: float = 12.5) -> dict:
    return {
        "main": {"temp": temp, "humidity": 40},
        "wind": {"speed": 7.2, "deg": 270},
        "weather": [{"id": 800, "description": "clear sky"}],
        "name": "",
    }


def write_raw(store, position_key: str, raw: str) -> None:
    """Put an arbitrary string where an in-memory store keeps its entries."""
    with store._lock:
        store._items[storage_key(position_key)] = raw
