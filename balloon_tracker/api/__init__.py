"""
API module for Balloon Tracker.

Provides REST endpoints for:
- Feed proxy (raw hour buckets)
- Balloon map view
- System status
"""

from balloon_tracker.api.proxy import proxy_bp
from balloon_tracker.api.balloons import balloons_bp

__all__ = ['proxy_bp', 'balloons_bp']
