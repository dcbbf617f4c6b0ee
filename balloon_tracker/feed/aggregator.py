"""
Flight data aggregator - reduces the 24 hourly buckets to one fix each.

Cycle stages:
1. Fan out: request every hour bucket concurrently
2. Settle: each failed bucket becomes a None placeholder
3. Reduce: drop placeholders, keep the last record of each bucket

Results follow bucket index, not completion order.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional

from balloon_tracker.config import config
from balloon_tracker.feed.client import FeedUnavailableError, PositionRecord, TreasureFeedClient

logger = logging.getLogger(__name__)


def latest_position(payload: Any) -> Optional[PositionRecord]:
    """
    Select the most recent record of a bucket.

    Buckets are ordered oldest first, so this is the last element.
    Empty or non-sequence payloads yield None.
    """
    if not isinstance(payload, list) or not payload:
        return None
    return PositionRecord.from_raw(payload[-1])


class FlightDataAggregator:
    """
    Builds the latest-position set from the hourly feed.

    One failed bucket never affects its siblings: each fetch is caught
    on its own worker.
    """

    def __init__(
        self,
        client: Optional[TreasureFeedClient] = None,
        hours: Optional[int] = None,
        max_workers: Optional[int] = None,
    ):
        self.client = client if client is not None else TreasureFeedClient.from_config()
        self.hours = hours if hours is not None else config.feed.hours
        self.max_workers = max_workers if max_workers is not None else config.feed.max_workers

        # Statistics
        self._lock = threading.Lock()
        self._cycle_count = 0
        self._failed_buckets = 0
        self._last_duration_ms: Optional[float] = None
        self._last_position_count: Optional[int] = None

    def _fetch_bucket(self, hour: int) -> Optional[Any]:
        try:
            return self.client.fetch_hour(hour)
        except FeedUnavailableError as e:
            logger.warning(f'Dropping bucket: {e}')
            return None
        except Exception as e:
            logger.error(f'Unexpected error fetching hour {hour}: {e}')
            return None

    def fetch_buckets(self) -> List[Optional[Any]]:
        """
        Fetch every hour bucket concurrently.

        Returns payloads in bucket index order, None for failures.
        """
        with ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix='feed',
        ) as executor:
            futures = [executor.submit(self._fetch_bucket, hour) for hour in range(self.hours)]
            # Join in submission order to keep bucket ordering
            return [future.result() for future in futures]

    def fetch_latest_positions(self) -> List[PositionRecord]:
        """Run one aggregation cycle and return the latest fix per bucket."""
        start_time = time.perf_counter()

        buckets = self.fetch_buckets()
        payloads = [b for b in buckets if b is not None]
        positions = [p for p in (latest_position(b) for b in payloads) if p]

        failed = len(buckets) - len(payloads)
        duration_ms = (time.perf_counter() - start_time) * 1000

        with self._lock:
            self._cycle_count += 1
            self._failed_buckets += failed
            self._last_duration_ms = duration_ms
            self._last_position_count = len(positions)

        logger.info(
            f'Aggregated {len(positions)} positions from {len(buckets)} buckets '
            f'({failed} failed) in {duration_ms:.0f}ms'
        )
        return positions

    @property
    def stats(self) -> dict:
        """Get aggregation statistics."""
        with self._lock:
            return {
                'cycles': self._cycle_count,
                'failed_buckets': self._failed_buckets,
                'last_position_count': self._last_position_count,
                'last_duration_ms': round(self._last_duration_ms, 2) if self._last_duration_ms is not None else None,
                'hours': self.hours,
                'max_workers': self.max_workers,
            }
