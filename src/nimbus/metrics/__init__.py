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
Derived metrics for the weather dashboard.

Quick Start:
    >>> from nimbus import metrics
    >>>
    >>> metrics.estimate_aqi(pm25=60, pm10=100, co=2)
    100
    >>> metrics.aqi_summary(pm25=75, pm10=40, co=0.5).category
    'Moderate'
    >>> metrics.classify(7, "uv").color
    '#ff9800'
    >>> metrics.list_scales()
    ['aqi', 'uv', 'temperature', 'rain']
"""

from .aqi import (
    AQIResult,
    aqi_summary,
    calculate_sub_index,
    calculate_sub_indices,
    estimate_aqi,
)
from .bands import get_scale, list_scales, register_scale, thermometer_fill
from .base import (
    Band,
    BandScale,
    BreakpointTable,
    ConfigurationError,
    interpolate,
    make_scale,
)
from .base import classify as _classify

__all__ = [
    # AQI
    "estimate_aqi",
    "aqi_summary",
    "calculate_sub_index",
    "calculate_sub_indices",
    "interpolate",
    # Bands
    "classify",
    "get_scale",
    "list_scales",
    "register_scale",
    "make_scale",
    "thermometer_fill",
    # Types
    "AQIResult",
    "Band",
    "BandScale",
    "BreakpointTable",
    "ConfigurationError",
]


def classify(value: float, scale: BandScale | str) -> Band:
    """
    Classify a value on a band scale.

    Args:
        value: Scalar to classify
        scale: A BandScale, or the name of a registered scale
               ("aqi", "uv", "temperature", "rain")

    Raises:
        ValueError: If scale is a name that is not registered
    """
    if isinstance(scale, str):
        scale_obj = get_scale(scale)
        if scale_obj is None:
            raise ValueError(f"Unknown scale '{scale}'. Available: {list_scales()}")
        scale = scale_obj
    return _classify(value, scale)
