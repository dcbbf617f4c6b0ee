"""
Balloon Tracker Package.

Live high-altitude balloon positions with weather overlays, built with
Flask, requests and SQLAlchemy.

Modules:
    api/         REST endpoints: feed proxy, balloon map view, status
    feed/        WindBorne hourly feed client and latest-position aggregator
    weather/     OpenWeatherMap client with a TTL cache per position
    models/      SQLAlchemy ORM model for the persisted weather cache
    map_view.py  Markers, path and bounds for the Leaflet page
    config.py    Centralized configuration from environment variables
"""

__version__ = '1.0.0'
