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
Composite Air Quality Index estimator.

The dashboard reports a single 0-500 index built from three pollutants.
Each pollutant is converted to a sub-index by interpolating over its
breakpoint table, and the overall index is the worst (largest) sub-index.

Pollutants and units:
- PM2.5: µg/m³
- PM10: µg/m³
- CO: ppm

The index scale (0/50/100/200/300/400/500) and band names follow the
India National Air Quality Index.
"""

from dataclasses import dataclass, field

from .bands import AQI_SCALE
from .base import BreakpointTable, interpolate

# =============================================================================
# Breakpoints
# =============================================================================

INDEX_SCALE = (0, 50, 100, 200, 300, 400, 500)

PM25_TABLE = BreakpointTable(
    pollutant="PM2.5",
    breakpoints=(0, 30, 60, 90, 120, 250),
    indices=INDEX_SCALE,
)

PM10_TABLE = BreakpointTable(
    pollutant="PM10",
    breakpoints=(0, 50, 100, 250, 350, 430),
    indices=INDEX_SCALE,
)

CO_TABLE = BreakpointTable(
    pollutant="CO",
    breakpoints=(0, 1, 2, 10, 17, 34),
    indices=INDEX_SCALE,
    unit="ppm",
)

TABLES = {
    "PM2.5": PM25_TABLE,
    "PM10": PM10_TABLE,
    "CO": CO_TABLE,
}


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class AQIResult:
    """Overall AQI with its band and the sub-index of every pollutant."""

    value: float
    category: str
    color: str
    dominant_pollutant: str
    sub_indices: dict[str, float] = field(default_factory=dict)


# =============================================================================
# Calculation Functions
# =============================================================================


def calculate_sub_index(concentration: float, pollutant: str) -> float:
    """
    Calculate the sub-index for a single pollutant.

    Raises:
        ValueError: If pollutant has no breakpoint table
    """
    table = TABLES.get(pollutant.upper())
    if table is None:
        raise ValueError(
            f"No breakpoint table for '{pollutant}'. Supported: {list(TABLES)}"
        )
    return interpolate(concentration, table)


def calculate_sub_indices(pm25: float, pm10: float, co: float) -> dict[str, float]:
    """Sub-index for each pollutant, keyed by pollutant name."""
    return {
        "PM2.5": interpolate(pm25, PM25_TABLE),
        "PM10": interpolate(pm10, PM10_TABLE),
        "CO": interpolate(co, CO_TABLE),
    }


def estimate_aqi(pm25: float, pm10: float, co: float) -> float:
    """
    Estimate the overall AQI from PM2.5, PM10 and CO.

    Example:
        >>> estimate_aqi(pm25=60, pm10=100, co=2)
        100
    """
    return max(calculate_sub_indices(pm25, pm10, co).values())


def aqi_summary(pm25: float, pm10: float, co: float) -> AQIResult:
    """
    Estimate the AQI and describe it.

    The dominant pollutant is the one with the largest sub-index; ties go to
    the first in PM2.5, PM10, CO order.
    """
    sub_indices = calculate_sub_indices(pm25, pm10, co)
    dominant = max(sub_indices, key=sub_indices.get)
    value = sub_indices[dominant]
    band = AQI_SCALE.classify(value)

    return AQIResult(
        value=value,
        category=band.label,
        color=band.color,
        dominant_pollutant=dominant,
        sub_indices=sub_indices,
    )
