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
Band scales used to style dashboard widgets.

Each scale maps a scalar to a color token and a label. Scales register
themselves on import and can be looked up by name:

    >>> from nimbus.metrics.bands import get_scale
    >>> get_scale("uv").classify(7).label
    'High'

Scales:
- aqi: 50/100/200/300/400, upper bound inclusive (an AQI of exactly 50 is Good)
- uv: 3/6/8/11, lower bound inclusive
- temperature: 10/25/35 °C, lower bound inclusive
- rain: 0.1/2.5/7.6/50 mm, lower bound inclusive
"""

from .base import BandScale, make_scale

# Registry of available scales
_SCALES: dict[str, BandScale] = {}


def register_scale(scale: BandScale) -> BandScale:
    """Register a band scale under its name."""
    _SCALES[scale.name.lower()] = scale
    return scale


def get_scale(name: str) -> BandScale | None:
    """Get a registered scale by name (case-insensitive)."""
    return _SCALES.get(name.lower())


def list_scales() -> list[str]:
    """List all registered scale names."""
    return list(_SCALES.keys())


# =============================================================================
# Colors
# =============================================================================

GREEN = "#4caf50"
YELLOW = "#ffeb3b"
ORANGE = "#ff9800"
RED = "#f44336"
PURPLE = "#9c27b0"
BROWN = "#795548"
BLUE = "#42a5f5"
GREY = "#9e9e9e"


# =============================================================================
# Scales
# =============================================================================

AQI_SCALE = register_scale(
    make_scale(
        "aqi",
        thresholds=[50, 100, 200, 300, 400],
        colors=[GREEN, YELLOW, ORANGE, RED, PURPLE, BROWN],
        labels=["Good", "Satisfactory", "Moderate", "Poor", "Very Poor", "Severe"],
        closed="right",
    )
)

UV_SCALE = register_scale(
    make_scale(
        "uv",
        thresholds=[3, 6, 8, 11],
        colors=[GREEN, YELLOW, ORANGE, RED, PURPLE],
        labels=["Low", "Moderate", "High", "Very High", "Extreme"],
    )
)

TEMPERATURE_SCALE = register_scale(
    make_scale(
        "temperature",
        thresholds=[10, 25, 35],
        colors=[BLUE, GREEN, ORANGE, RED],
        labels=["Cold", "Mild", "Warm", "Hot"],
    )
)

RAIN_SCALE = register_scale(
    make_scale(
        "rain",
        thresholds=[0.1, 2.5, 7.6, 50],
        colors=[GREY, BLUE, GREEN, ORANGE, RED],
        labels=["No Rain", "Light", "Moderate", "Heavy", "Violent"],
    )
)


# =============================================================================
# Thermometer
# =============================================================================

# Temperature (°C) at which the thermometer bar is full
THERMOMETER_MAX = 50.0


def thermometer_fill(temperature: float, maximum: float = THERMOMETER_MAX) -> float:
    """Height of the thermometer bar as a percentage, clamped to 0-100."""
    return min(100.0, max(0.0, temperature / maximum * 100))
