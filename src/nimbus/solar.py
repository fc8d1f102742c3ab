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
Sun position indicator.

The sun is drawn on a semicircular arc: it starts at the right end of the
arc at sunrise (angle 0), peaks at the top half-way through the daylight
window and reaches the left end at sunset (angle pi). Coordinates are
percentages of the canvas, with y growing downwards as on screen.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .types import SolarPosition, as_utc

# Arc geometry in percentage space
CENTER_X = 50.0
CENTER_Y = 50.0
RADIUS = 40.0

# Progress before / after which the sun gets the dawn and dusk tint
WARM_BEFORE = 0.25
WARM_AFTER = 0.75


@dataclass(frozen=True)
class SolarWindow:
    """Sunrise and sunset for one calendar day at a fixed location."""

    sunrise: datetime
    sunset: datetime
    day: date | None = None

    def __post_init__(self):
        if not as_utc(self.sunset) > as_utc(self.sunrise):
            raise ValueError(
                f"Sunset ({self.sunset.isoformat()}) must be after "
                f"sunrise ({self.sunrise.isoformat()})"
            )

    @property
    def day_length(self) -> timedelta:
        return as_utc(self.sunset) - as_utc(self.sunrise)

    def project(self, now: datetime) -> SolarPosition:
        return project_sun(now, self.sunrise, self.sunset)


def daylight_progress(now: datetime, sunrise: datetime, sunset: datetime) -> float:
    """Fraction of the daylight window elapsed at now, clamped to 0-1."""
    now, sunrise, sunset = as_utc(now), as_utc(sunrise), as_utc(sunset)
    if not sunset > sunrise:
        raise ValueError("Sunset must be after sunrise")
    progress = (now - sunrise) / (sunset - sunrise)
    return min(1.0, max(0.0, progress))


def arc_point(progress: float) -> tuple[float, float]:
    """(x, y) on the arc for a daylight progress value."""
    angle = progress * math.pi
    x = CENTER_X + RADIUS * math.cos(angle)
    y = CENTER_Y - RADIUS * math.sin(angle)
    return x, y


def project_sun(now: datetime, sunrise: datetime, sunset: datetime) -> SolarPosition:
    """
    Project the current time onto the sun arc.

    Outside the daylight window the position is clamped to the nearest end of
    the arc and ``visible`` is False; callers hide the indicator.
    Naive datetimes are taken as UTC.

    Raises:
        ValueError: If sunset is not after sunrise
    """
    now, sunrise, sunset = as_utc(now), as_utc(sunrise), as_utc(sunset)
    progress = daylight_progress(now, sunrise, sunset)
    x, y = arc_point(progress)

    return SolarPosition(
        visible=sunrise <= now <= sunset,
        progress=progress,
        x=x,
        y=y,
        warm=progress < WARM_BEFORE or progress > WARM_AFTER,
    )
