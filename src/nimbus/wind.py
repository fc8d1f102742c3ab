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
Wind speed and heading normalisation.

Headings arrive either as a 16-point compass label ("NE") or as degrees
(45 or "45"). Both are converted to degrees, and the compass label shown on
the dashboard is always recomputed from the degrees.
"""

import math

from .metrics.base import round_half_up
from .types import WindDirection, WindReading

COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)  # fmt: skip

# Degrees between neighbouring compass points
POINT_SPACING = 360 / len(COMPASS_POINTS)

# Metres per second to kilometres per hour
MS_TO_KMH = 3.6


def parse_degrees(direction: WindDirection) -> float | None:
    """Return the heading as a float if it is numeric, otherwise None."""
    if isinstance(direction, bool):
        return None
    if isinstance(direction, (int, float)):
        value = float(direction)
    else:
        try:
            value = float(str(direction).strip())
        except ValueError:
            return None
    return value if math.isfinite(value) else None


def is_compass_label(direction: WindDirection) -> bool:
    """True if direction is one of the 16 compass labels (case-insensitive)."""
    return isinstance(direction, str) and direction.strip().upper() in COMPASS_POINTS


def compass_to_degrees(label: str) -> float:
    """
    Convert a compass label to degrees, N = 0 and clockwise.

    Raises:
        ValueError: If label is not one of the 16 compass points
    """
    normalised = label.strip().upper()
    if normalised not in COMPASS_POINTS:
        raise ValueError(
            f"Unknown compass direction '{label}'. "
            f"Expected one of: {', '.join(COMPASS_POINTS)}"
        )
    return COMPASS_POINTS.index(normalised) * POINT_SPACING


def degrees_to_compass(degrees: float) -> str:
    """
    Convert degrees to the nearest 16-point compass label.

    Headings outside 0-360 (including negative ones) wrap around; Python's %
    always returns a non-negative index for a positive divisor.
    """
    index = round_half_up(degrees / POINT_SPACING) % len(COMPASS_POINTS)
    return COMPASS_POINTS[index]


def normalize_wind(speed: float, direction: WindDirection) -> WindReading:
    """
    Normalise a wind speed and heading.

    Args:
        speed: Wind speed in m/s
        direction: Compass label or degrees. Numeric headings are kept as
                   given, not wrapped to 0-360.

    Returns:
        WindReading with degrees, compass label and speed in km/h

    Raises:
        ValueError: If direction is neither numeric nor a compass label

    Example:
        >>> normalize_wind(10, "NE")
        WindReading(degrees=45.0, compass_label='NE', speed_kmh=36.0)
    """
    degrees = parse_degrees(direction)
    if degrees is None:
        degrees = compass_to_degrees(str(direction))

    return WindReading(
        degrees=degrees,
        compass_label=degrees_to_compass(degrees),
        speed_kmh=speed * MS_TO_KMH,
    )


def format_wind_direction(wind: WindReading) -> str:
    """Display text for a heading, e.g. "NE 45°"."""
    return f"{wind.compass_label} {round_half_up(wind.degrees)}°"
