"""
WeatherCacheRecord model - persisted weather readings.

Server-side counterpart of the browser's localStorage entries
``weather_<lat>,<lon> -> {data, timestamp}``. Rows are overwritten on
refresh and never deleted; readers decide freshness from the timestamp.
"""

from typing import Any

from sqlalchemy import BigInteger, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from balloon_tracker.models.base import Base


class WeatherCacheRecord(Base):
    """One cached weather reading per position key."""

    __tablename__ = 'weather_cache'

    # Full storage key, e.g. 'weather_10,20'
    key: Mapped[str] = mapped_column(
        String(96),
        primary_key=True,
        comment='weather_ prefixed position key'
    )

    # Raw provider payload, stored as-is
    data: Mapped[Any] = mapped_column(
        JSON,
        nullable=False,
        comment='Weather provider JSON payload'
    )

    # Capture time in epoch milliseconds
    timestamp: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment='Epoch ms when the reading was fetched'
    )

    def __repr__(self) -> str:
        return f'<WeatherCacheRecord {self.key} @ {self.timestamp}>'
