"""
Balloon feed module.

Fetches the hourly WindBorne documents and reduces them to the latest
position of each balloon.
"""

from balloon_tracker.feed.client import (
    FeedUnavailableError,
    PositionRecord,
    TreasureFeedClient,
    pad_hour,
)
from balloon_tracker.feed.aggregator import FlightDataAggregator, latest_position

__all__ = [
    'FeedUnavailableError',
    'PositionRecord',
    'TreasureFeedClient',
    'pad_hour',
    'FlightDataAggregator',
    'latest_position',
]
