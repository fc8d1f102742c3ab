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
Core type definitions for Nimbus.

All records are immutable value types: a Reading is built fresh from one
fetch cycle, normalised, rendered and then discarded.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

# A wind heading as supplied by the feed: a compass label or degrees
WindDirection = str | float


def as_utc(instant: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


@dataclass(frozen=True)
class Reading:
    """
    One row of raw measurements from the weather feed.

    Units:
        temperature, high_temp, low_temp: °C
        humidity: %
        pressure: hPa
        pm25, pm10: µg/m³
        co_level: ppm
        wind_speed: m/s
        rainfall: mm
    """

    temperature: float = 0.0
    humidity: float = 0.0
    high_temp: float = 0.0
    low_temp: float = 0.0
    pressure: float = 0.0
    uv_index: float = 0.0
    pm25: float = 0.0
    pm10: float = 0.0
    co_level: float = 0.0
    wind_speed: float = 0.0
    wind_direction: WindDirection = "N"
    rainfall: float = 0.0


@dataclass(frozen=True)
class WindReading:
    """Wind heading in canonical degrees plus its 16-point compass label."""

    degrees: float
    compass_label: str
    speed_kmh: float


@dataclass(frozen=True)
class NormalizedReading:
    """A Reading with its derived AQI and normalised wind."""

    reading: Reading
    aqi: float
    wind: WindReading


@dataclass(frozen=True)
class SolarPosition:
    """
    Position of the sun indicator on a semicircular arc.

    x and y are percentages of the canvas (0-100), not pixels.
    """

    visible: bool
    progress: float
    x: float
    y: float
    warm: bool


@dataclass(frozen=True)
class MoonPhase:
    """Lunar phase at an instant."""

    phase_fraction: float  # 0 = new moon, 0.5 = full moon
    illumination: float  # Percent lit, one decimal place
    name: str
    icon: str
    age_days: float
    instant: datetime | None = None
