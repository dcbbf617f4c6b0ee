"""
Feed proxy endpoint.

- GET /api/data/<hour> - relay one WindBorne hour bucket

The browser cannot read the feed directly (no CORS headers upstream),
so the body is fetched here and returned unchanged.
"""

import logging

from flask import Blueprint, current_app, jsonify

from balloon_tracker.feed.client import FeedUnavailableError

logger = logging.getLogger(__name__)

proxy_bp = Blueprint('proxy', __name__, url_prefix='/api/data')


@proxy_bp.route('/<hour>', methods=['GET'])
def get_hour_bucket(hour: str):
    """
    Relay the treasure document for an hour.

    The hour is zero-padded to two characters and otherwise passed
    through as-is; the upstream decides what odd values mean.

    Returns:
    - 200 with the upstream JSON body
    - 500 with {"error": "Failed to fetch data"} on any failure
    """
    client = current_app.config['FEED_CLIENT']

    try:
        payload = client.fetch_hour(hour)
    except FeedUnavailableError as e:
        logger.error(f'Proxy fetch failed: {e}')
        return jsonify({'error': 'Failed to fetch data'}), 500

    return jsonify(payload)
