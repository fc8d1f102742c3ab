# Nimbus: derived metrics for a personal weather dashboard
# Copyright (C) 2025 Ruaraidh Dobson, South London Scientific

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Weather feed data source.

The feed is a single JSON endpoint (a published spreadsheet script) that
returns the most recent readings first:

    {"status": "success", "data": [[temperature, humidity, ...], ...]}

Parsing is best-effort: a field that is missing or cannot be read becomes 0
(or "N" for the wind heading) rather than failing the whole reading. If the
request itself fails, a synthetic reading is substituted so the dashboard
always has something to show.
"""

import math
import os
import random
import re
from dataclasses import dataclass, field
from datetime import datetime
from logging import getLogger
from typing import Any, Sequence

import pandas as pd
import requests

from ..decorators import retry_on_network_error, with_logging
from ..metrics import estimate_aqi
from ..types import NormalizedReading, Reading, WindDirection
from ..wind import is_compass_label, normalize_wind, parse_degrees
from .sample import sample_reading

logger = getLogger(__name__)

# Configuration
FEED_URL_ENV = "NIMBUS_FEED_URL"
FEED_TIMEOUT = 30

# Number of rows plotted on the temperature chart
HISTORY_LENGTH = 24

# Leading decimal number of a cell, as read by the spreadsheet feed
LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

# Feed column order
COLUMNS = [
    "temperature",
    "humidity",
    "high_temp",
    "low_temp",
    "pressure",
    "uv_index",
    "pm25",
    "pm10",
    "co_level",
    "wind_speed",
    "wind_direction",
    "rainfall",
]


class FeedError(Exception):
    """The feed answered, but without usable data."""


@dataclass(frozen=True)
class FeedResult:
    """Outcome of one fetch cycle."""

    observation: NormalizedReading
    history: pd.Series = field(default_factory=lambda: pd.Series(dtype=float))
    synthetic: bool = False


# ============================================================================
# CONFIGURATION
# ============================================================================


def get_feed_url() -> str:
    """
    Get the feed URL from the environment.

    Raises:
        ValueError: If the URL is not configured
    """
    url = os.getenv(FEED_URL_ENV)
    if not url:
        raise ValueError(
            f"Weather feed URL required. Set {FEED_URL_ENV} to the published "
            "script endpoint that serves the readings."
        )
    return url


# ============================================================================
# PARSING
# ============================================================================


def _parse_float(value: Any) -> float:
    """
    Best-effort float conversion; anything unreadable or non-finite is 0.

    Strings are read up to the end of their leading number, so spreadsheet
    cells carrying units ("27.4 C", "61%") keep their value.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, str):
        match = LEADING_NUMBER.match(value)
        if match is None:
            return 0.0
        value = match.group(0)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _parse_direction(value: Any) -> WindDirection:
    """Wind heading as degrees or an upper-case compass label, "N" if unusable."""
    degrees = parse_degrees(value) if value is not None else None
    if degrees is not None:
        return degrees
    if is_compass_label(value):
        return value.strip().upper()
    if value not in (None, ""):
        logger.warning(f"Unrecognised wind direction {value!r}, using 'N'")
    return "N"


def parse_reading(row: Sequence[Any]) -> Reading:
    """
    Convert one feed row into a Reading.

    Args:
        row: Values in COLUMNS order. Short rows are padded with missing values.

    Returns:
        Reading with every field populated
    """
    values = dict(zip(COLUMNS, row))
    fields = {
        name: _parse_float(values.get(name))
        for name in COLUMNS
        if name != "wind_direction"
    }
    fields["wind_direction"] = _parse_direction(values.get("wind_direction"))
    return Reading(**fields)


def parse_temperature_history(rows: Sequence[Sequence[Any]]) -> pd.Series:
    """
    Temperatures from the first HISTORY_LENGTH rows, most recent first.

    Unreadable values become 0, as for single readings.
    """
    raw = pd.Series(
        [row[0] if len(row) else None for row in rows[:HISTORY_LENGTH]],
        dtype=object,
    )
    return raw.map(_parse_float).astype(float).rename("temperature")


def parse_payload(payload: Any) -> list[Sequence[Any]]:
    """
    Extract the data rows from a feed payload.

    Raises:
        FeedError: If the payload does not report success, holds no rows or
            holds rows that are not lists
    """
    if not isinstance(payload, dict):
        raise FeedError(f"Unexpected feed payload of type {type(payload).__name__}")

    rows = payload.get("data") or []
    if payload.get("status") != "success" or not rows:
        raise FeedError(payload.get("message") or "No data available")
    if not isinstance(rows, list):
        raise FeedError(
            f"Feed data must be a list of rows, got {type(rows).__name__}"
        )
    for position, row in enumerate(rows[:HISTORY_LENGTH]):
        if not isinstance(row, (list, tuple)):
            raise FeedError(
                f"Feed row {position} must be a list, got {type(row).__name__}"
            )
    return rows


def normalize_reading(reading: Reading) -> NormalizedReading:
    """Attach the derived AQI and normalised wind to a reading."""
    return NormalizedReading(
        reading=reading,
        aqi=estimate_aqi(reading.pm25, reading.pm10, reading.co_level),
        wind=normalize_wind(reading.wind_speed, reading.wind_direction),
    )


# ============================================================================
# FETCHING
# ============================================================================


@retry_on_network_error
def _call_feed(url: str) -> Any:
    """
    Low-level feed caller.

    Raises:
        requests.HTTPError: If the feed returns an error status
        requests.JSONDecodeError: If the body is not JSON
    """
    headers = {"Accept": "application/json"}
    response = requests.get(url, headers=headers, timeout=FEED_TIMEOUT)
    response.raise_for_status()
    return response.json()


def sample_result(
    now: datetime | None = None, rng: random.Random | None = None
) -> FeedResult:
    """A FeedResult built from a synthetic reading."""
    reading = sample_reading(now, rng)
    return FeedResult(observation=normalize_reading(reading), synthetic=True)


@with_logging()
def fetch_weather(
    url: str | None = None,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> FeedResult:
    """
    Fetch and normalise the latest reading.

    Args:
        url: Feed URL (default: NIMBUS_FEED_URL from the environment)
        now: Time used for the synthetic fallback
        rng: Random source used for the synthetic fallback

    Returns:
        FeedResult. ``synthetic`` is True when the feed could not be used.

    Raises:
        ValueError: If no URL is given and NIMBUS_FEED_URL is not set
    """
    url = url or get_feed_url()

    try:
        rows = parse_payload(_call_feed(url))
    except (requests.RequestException, ValueError, FeedError) as e:
        logger.error(f"Error fetching weather data: {e}")
        return sample_result(now, rng)

    return FeedResult(
        observation=normalize_reading(parse_reading(rows[0])),
        history=parse_temperature_history(rows),
        synthetic=False,
    )
