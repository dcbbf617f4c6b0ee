"""
Balloon map and status endpoints.

Provides endpoints for:
- GET /api/balloons - Latest position per balloon with weather, path and bounds
- GET /api/status - Aggregator and weather cache statistics
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

from balloon_tracker.config import config
from balloon_tracker.map_view import build_map_view

logger = logging.getLogger(__name__)

balloons_bp = Blueprint('balloons', __name__, url_prefix='/api')


@balloons_bp.route('/balloons', methods=['GET'])
def get_balloons():
    """
    Run one aggregation cycle and one weather cycle.

    The weather cycle only starts once positions are known; with no
    positions it is skipped entirely.

    Returns:
    - markers with altitude and optional weather summary
    - path connecting the markers in bucket order
    - bounds for auto-fitting the map viewport
    """
    start_time = time.perf_counter()

    aggregator = current_app.config['AGGREGATOR']
    weather = current_app.config['WEATHER_FETCHER']

    positions = aggregator.fetch_latest_positions()
    readings = weather.load(positions) if positions else {}

    view = build_map_view(positions, readings)

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        **view,
        'count': len(positions),
        'weather_count': len(readings),
        'weather_enabled': weather.enabled,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })


@balloons_bp.route('/status', methods=['GET'])
def get_system_status():
    """
    Get system status information.

    Returns:
    - Aggregator statistics
    - Weather cache statistics
    - Configuration info
    """
    aggregator = current_app.config['AGGREGATOR']
    weather = current_app.config['WEATHER_FETCHER']

    return jsonify({
        'status': 'ok',
        'feed': aggregator.stats,
        'weather': weather.stats,
        'config': {
            'feed_base_url': config.feed.base_url,
            'weather_enabled': weather.enabled,
            'database': 'sqlite' if config.database.is_sqlite else 'other',
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })
