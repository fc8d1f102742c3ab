"""
Pytest configuration and shared fixtures.

This module provides common fixtures and utilities used across all tests.
"""

import random
from datetime import date, datetime, timezone

import pytest

from nimbus.solar import SolarWindow

# ============================================================================
# Time Fixtures
# ============================================================================


@pytest.fixture
def summer_day():
    """A calendar day with a 12-hour daylight window used across tests."""
    return date(2024, 6, 21)


@pytest.fixture
def sunrise():
    return datetime(2024, 6, 21, 6, 0, tzinfo=timezone.utc)


@pytest.fixture
def sunset():
    return datetime(2024, 6, 21, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def solar_window(sunrise, sunset, summer_day):
    return SolarWindow(sunrise=sunrise, sunset=sunset, day=summer_day)


@pytest.fixture
def rng():
    """Seeded random source for reproducible synthetic readings."""
    return random.Random(42)


# ============================================================================
# Mock Data for API Testing
# ============================================================================


@pytest.fixture
def feed_row():
    """One feed row, as strings, in feed column order."""
    return [
        "27.4",  # temperature
        "61",  # humidity
        "31.2",  # high temp
        "19.8",  # low temp
        "1009",  # pressure
        "7",  # UV index
        "60",  # PM2.5
        "100",  # PM10
        "2",  # CO
        "10",  # wind speed (m/s)
        "NE",  # wind direction
        "1.4",  # rainfall
    ]


@pytest.fixture
def mock_feed_response(feed_row):
    """Mock feed response with 30 rows, most recent first."""
    rows = [feed_row]
    for i in range(1, 30):
        rows.append([str(27.4 - i * 0.1)] + feed_row[1:])
    return {"status": "success", "data": rows}


@pytest.fixture
def mock_sun_times_response():
    """Mock sunrise-sunset.org response requested with formatted=0."""
    return {
        "results": {
            "sunrise": "2024-06-21T06:00:00+00:00",
            "sunset": "2024-06-21T18:00:00+00:00",
            "solar_noon": "2024-06-21T12:00:00+00:00",
            "day_length": 43200,
            "civil_twilight_begin": "2024-06-21T05:30:00+00:00",
            "civil_twilight_end": "2024-06-21T18:30:00+00:00",
        },
        "status": "OK",
        "tzid": "UTC",
    }
