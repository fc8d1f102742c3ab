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
Synthetic readings used when the weather feed is unavailable.

Values follow a smooth daily curve driven by the hour of day, with a little
bounded noise, so the dashboard keeps moving while offline.
"""

import math
import random
from datetime import datetime

from ..metrics.base import round_half_up
from ..types import Reading


def _daily_curve(hour: int) -> float:
    """-1 to 1 over the day, peaking at 06:00 and bottoming at 18:00."""
    return math.sin(hour * math.pi / 12)


def sample_reading(
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> Reading:
    """
    Generate a plausible Reading for the given time.

    Args:
        now: Time to generate for (default: current local time)
        rng: Random source, for reproducible output in tests

    Returns:
        Reading with every field populated
    """
    now = now or datetime.now()
    rng = rng or random.Random()
    s = _daily_curve(now.hour)

    return Reading(
        temperature=25 + 10 * s,
        humidity=50 + 30 * s,
        high_temp=32.0,
        low_temp=18.0,
        pressure=1012 + rng.uniform(-2, 2),
        uv_index=float(min(10, max(1, round_half_up(3 + 5 * s)))),
        pm25=max(0.0, 35 + 25 * s + rng.uniform(-5, 5)),
        pm10=max(0.0, 60 + 40 * s + rng.uniform(-10, 10)),
        co_level=0.5 + rng.uniform(0, 2),
        wind_speed=2 + rng.uniform(0, 5),
        wind_direction=float(round_half_up(rng.uniform(0, 360))),
        rainfall=0.0,
    )
