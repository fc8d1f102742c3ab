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

"""Derived metrics for a personal weather dashboard"""

from .lunar import moon_phase, next_full_moon, next_new_moon
from .metrics import aqi_summary, classify, estimate_aqi, interpolate
from .solar import SolarWindow, project_sun
from .types import (
    MoonPhase,
    NormalizedReading,
    Reading,
    SolarPosition,
    WindReading,
)
from .wind import degrees_to_compass, normalize_wind

__version__ = "0.1.0"

__all__ = [
    "aqi_summary",
    "classify",
    "degrees_to_compass",
    "estimate_aqi",
    "interpolate",
    "moon_phase",
    "next_full_moon",
    "next_new_moon",
    "normalize_wind",
    "project_sun",
    "MoonPhase",
    "NormalizedReading",
    "Reading",
    "SolarPosition",
    "SolarWindow",
    "WindReading",
]
