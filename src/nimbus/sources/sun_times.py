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
Sunrise and sunset times from the sunrise-sunset.org API.

API Documentation: https://sunrise-sunset.org/api

The dashboard shows one fixed location, configured through NIMBUS_LATITUDE
and NIMBUS_LONGITUDE (default: New Delhi).
"""

import os
from datetime import date, datetime
from logging import getLogger

import requests

from ..decorators import retry_on_network_error
from ..solar import SolarWindow

logger = getLogger(__name__)

# Configuration
SUN_TIMES_API = "https://api.sunrise-sunset.org/json"
SUN_TIMES_TIMEOUT = 10

DEFAULT_LATITUDE = 28.6139
DEFAULT_LONGITUDE = 77.2090


class SunTimesError(Exception):
    """The sunrise/sunset service answered without usable times."""


def get_location() -> tuple[float, float]:
    """
    Configured (latitude, longitude).

    Raises:
        ValueError: If an environment override is not a number
    """
    latitude = os.getenv("NIMBUS_LATITUDE")
    longitude = os.getenv("NIMBUS_LONGITUDE")
    try:
        return (
            float(latitude) if latitude else DEFAULT_LATITUDE,
            float(longitude) if longitude else DEFAULT_LONGITUDE,
        )
    except ValueError as e:
        raise ValueError(
            f"NIMBUS_LATITUDE and NIMBUS_LONGITUDE must be decimal degrees: {e}"
        ) from e


@retry_on_network_error
def _call_sun_times_api(params: dict) -> dict:
    """
    Low-level API caller.

    Raises:
        requests.HTTPError: If the API returns an error status
    """
    headers = {"Accept": "application/json"}
    response = requests.get(
        SUN_TIMES_API, params=params, headers=headers, timeout=SUN_TIMES_TIMEOUT
    )
    response.raise_for_status()
    return response.json()


def parse_sun_times(payload: dict, day: date | None = None) -> SolarWindow:
    """
    Build a SolarWindow from an API response requested with formatted=0.

    Raises:
        SunTimesError: If the response status is not OK or times are missing
    """
    if payload.get("status") != "OK":
        raise SunTimesError(
            f"Sunrise/sunset API returned status {payload.get('status')!r}"
        )

    results = payload.get("results") or {}
    try:
        sunrise = datetime.fromisoformat(results["sunrise"])
        sunset = datetime.fromisoformat(results["sunset"])
        return SolarWindow(sunrise=sunrise, sunset=sunset, day=day)
    except (KeyError, TypeError, ValueError) as e:
        raise SunTimesError(f"Sunrise/sunset API returned unusable times: {e}") from e


def fetch_solar_window(
    day: date,
    latitude: float | None = None,
    longitude: float | None = None,
) -> SolarWindow:
    """
    Fetch sunrise and sunset for one day.

    Args:
        day: Calendar day to fetch
        latitude: Decimal degrees (default: configured location)
        longitude: Decimal degrees (default: configured location)

    Returns:
        SolarWindow with timezone-aware UTC instants

    Raises:
        SunTimesError: If the API response is unusable
        requests.RequestException: If the request fails after retries
    """
    default_latitude, default_longitude = get_location()
    params = {
        "lat": default_latitude if latitude is None else latitude,
        "lng": default_longitude if longitude is None else longitude,
        "date": day.isoformat(),
        "formatted": 0,
    }

    logger.info(f"Fetching sunrise/sunset for {params['date']}")
    payload = _call_sun_times_api(params)
    return parse_sun_times(payload, day)
