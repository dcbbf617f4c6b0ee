from __future__ import annotations

import pytest
import requests

from balloon_tracker.feed.client import PositionRecord
from balloon_tracker.weather.cache import InMemoryWeatherStore, WeatherCacheEntry
from balloon_tracker.weather.client import OpenWeatherClient, WeatherUnavailableError, summarize_reading
from balloon_tracker.weather.fetcher import WeatherFetcher, format_coordinate, position_key

from helpers import WeatherClientStub, make_reading, write_raw

TTL_MS = 30 * 60 * 1000
WEATHER_URL = "https://weather.test/data/2.5/weather"


def make_fetcher(client, store=None, clock=None, enabled=True) -> WeatherFetcher:
    return WeatherFetcher(
        client=client,
        store=store if store is not None else InMemoryWeatherStore(),
        ttl_ms=TTL_MS,
        enabled=enabled,
        max_workers=4,
        clock=clock,
    )


@pytest.mark.parametrize(
    "value, expected",
    [
        (10, "10"),
        (10.0, "10"),
        (-0.5, "-0.5"),
        (45.123456, "45.123456"),
        (0.1 + 0.2, "0.30000000000000004"),
        (-0.0, "0"),
        (0.00001, "0.00001"),
        (1e-7, "1e-7"),
        (-1.5e-7, "-1.5e-7"),
        (1e20, "100000000000000000000"),
        (1e21, "1e+21"),
    ],
)
def test_format_coordinate(value, expected):
    assert format_coordinate(value) == expected


def test_position_key():
    assert position_key(10.0, 20.0) == "10,20"
    assert position_key(10.5, -20.25) == "10.5,-20.25"


def test_empty_injected_store_is_kept(clock):
    store = InMemoryWeatherStore()

    fetcher = make_fetcher(WeatherClientStub(), store=store, clock=clock)
    fetcher.load([PositionRecord(10.0, 20.0, 1.0)])

    assert fetcher.store is store
    assert store.get("10,20") is not None


def test_tiny_coordinate_key_uses_exponent():
    assert position_key(1e-7, 20.0) == "1e-7,20"


def test_second_lookup_within_ttl_hits_cache(clock):
    client = WeatherClientStub()
    fetcher = make_fetcher(client, clock=clock)
    positions = [PositionRecord(10.0, 20.0, 1.0)]

    first = fetcher.load(positions)
    clock.advance(TTL_MS - 1)
    second = fetcher.load(positions)

    assert len(client.calls) == 1
    assert second == first
    assert fetcher.stats["hits"] == 1
    assert fetcher.stats["misses"] == 1


def test_expired_entry_triggers_fresh_fetch(clock):
    store = InMemoryWeatherStore()
    store.put("10,20", WeatherCacheEntry(data={"stale": True}, timestamp=clock.now - TTL_MS - 1))
    client = WeatherClientStub()
    fetcher = make_fetcher(client, store=store, clock=clock)

    readings = fetcher.load([PositionRecord(10.0, 20.0, 1.0)])

    assert client.calls == [(10.0, 20.0)]
    assert readings["10,20"] == make_reading(temp=30.0)
    assert store.get("10,20") == WeatherCacheEntry(data=make_reading(temp=30.0), timestamp=clock.now)


def test_fresh_entry_skips_network(clock):
    store = InMemoryWeatherStore()
    cached = make_reading(temp=-5.0)
    store.put("10,20", WeatherCacheEntry(data=cached, timestamp=clock.now - 1000))
    client = WeatherClientStub()
    fetcher = make_fetcher(client, store=store, clock=clock)

    assert fetcher.load([PositionRecord(10.0, 20.0, 1.0)]) == {"10,20": cached}
    assert client.calls == []


def test_failure_leaves_position_without_reading(clock):
    store = InMemoryWeatherStore()
    store.put("10,20", WeatherCacheEntry(data={"stale": True}, timestamp=clock.now - TTL_MS))
    fetcher = make_fetcher(WeatherClientStub(fail=True), store=store, clock=clock)

    readings = fetcher.load([PositionRecord(10.0, 20.0, 1.0), PositionRecord(1.0, 2.0, 3.0)])

    assert readings == {}
    # no fallback to the stale entry, and nothing new written
    assert store.get("10,20").data == {"stale": True}
    assert store.get("1,2") is None
    assert fetcher.stats["errors"] == 2


def test_duplicate_positions_fetch_once(clock):
    client = WeatherClientStub()
    fetcher = make_fetcher(client, clock=clock)

    readings = fetcher.load([PositionRecord(10.0, 20.0, 1.0), PositionRecord(10.0, 20.0, 9.0)])

    assert len(client.calls) == 1
    assert list(readings) == ["10,20"]


def test_corrupt_entry_counts_as_miss(clock):
    store = InMemoryWeatherStore()
    write_raw(store, "10,20", "not-json")
    client = WeatherClientStub()
    fetcher = make_fetcher(client, store=store, clock=clock)

    assert "10,20" in fetcher.load([PositionRecord(10.0, 20.0, 1.0)])
    assert len(client.calls) == 1


def test_disabled_fetcher_does_nothing(clock):
    client = WeatherClientStub()
    fetcher = make_fetcher(client, clock=clock, enabled=False)

    assert fetcher.load([PositionRecord(10.0, 20.0, 1.0)]) == {}
    assert client.calls == []


def test_no_positions_no_lookups(clock):
    client = WeatherClientStub()

    assert make_fetcher(client, clock=clock).load([]) == {}
    assert client.calls == []


def test_client_sends_metric_query(requests_mock):
    requests_mock.get(WEATHER_URL, json=make_reading())
    client = OpenWeatherClient(api_key="secret", base_url="https://weather.test/data/2.5")

    assert client.get_current(10.5, -20.25) == make_reading()

    query = requests_mock.last_request.qs
    assert query["lat"] == ["10.5"]
    assert query["lon"] == ["-20.25"]
    assert query["appid"] == ["secret"]
    assert query["units"] == ["metric"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"json": {"cod": 401, "message": "Invalid API key"}, "status_code": 401},
        {"text": "<html>", "status_code": 200},
        {"json": [1, 2], "status_code": 200},
        {"exc": requests.exceptions.Timeout},
    ],
)
def test_client_failures_raise(requests_mock, kwargs):
    requests_mock.get(WEATHER_URL, **kwargs)
    client = OpenWeatherClient(api_key="secret", base_url="https://weather.test/data/2.5")

    with pytest.raises(WeatherUnavailableError):
        client.get_current(1.0, 2.0)


def test_summarize_reading():
    assert summarize_reading(make_reading(temp=-12.0)) == {
        "temperature_c": -12.0,
        "wind_speed_ms": 7.2,
        "wind_deg": 270,
        "description": "clear sky",
    }
    assert summarize_reading({"main": {"temp": 1}}) is None
    assert summarize_reading({"main": {"temp": 1}, "wind": {"speed": 2}, "weather": []}) is None
