from __future__ import annotations

import os

# Must be set before balloon_tracker.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("WEATHER_ENABLED", "0")
os.environ.setdefault("FLASK_DEBUG", "0")

import pytest
import requests_mock as requests_mock_lib

from helpers import ClockStub


@pytest.fixture()
def requests_mock():
    with requests_mock_lib.Mocker() as mocker:
        yield mocker


@pytest.fixture()
def clock() -> ClockStub:
    return ClockStub()
