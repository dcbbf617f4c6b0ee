"""
Map view - what the Leaflet page draws.

Turns the latest-position set and the weather mapping into:
- markers: one per position, with popup fields
- path: the positions joined in bucket order
- bounds: south-west / north-east corners for fitBounds
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from balloon_tracker.feed.client import PositionRecord
from balloon_tracker.weather.client import summarize_reading
from balloon_tracker.weather.fetcher import position_key


def build_markers(
    positions: Sequence[PositionRecord],
    readings: Mapping[str, Any],
) -> List[Dict[str, Any]]:
    markers = []
    for position in positions:
        key = position_key(position.latitude, position.longitude)
        reading = readings.get(key)
        markers.append({
            'key': key,
            'latitude': position.latitude,
            'longitude': position.longitude,
            'altitude': position.altitude,
            # None tells the page to show "Loading weather..."
            'weather': summarize_reading(reading) if reading is not None else None,
        })
    return markers


def compute_bounds(positions: Sequence[PositionRecord]) -> Optional[List[List[float]]]:
    """Returns [[min_lat, min_lon], [max_lat, max_lon]] or None if empty."""
    if not positions:
        return None
    lats = [p.latitude for p in positions]
    lons = [p.longitude for p in positions]
    return [[min(lats), min(lons)], [max(lats), max(lons)]]


def build_map_view(
    positions: Sequence[PositionRecord],
    readings: Mapping[str, Any],
) -> Dict[str, Any]:
    return {
        'markers': build_markers(positions, readings),
        'path': [[p.latitude, p.longitude] for p in positions],
        'bounds': compute_bounds(positions),
    }
