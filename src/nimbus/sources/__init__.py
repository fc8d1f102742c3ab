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
Data sources for the dashboard.

- feed: the weather readings endpoint, with a synthetic fallback
- sample: synthetic readings
- sun_times: sunrise and sunset for the configured location
"""

from .feed import FeedError, FeedResult, fetch_weather, parse_reading
from .sample import sample_reading
from .sun_times import SunTimesError, fetch_solar_window

__all__ = [
    "FeedError",
    "FeedResult",
    "SunTimesError",
    "fetch_solar_window",
    "fetch_weather",
    "parse_reading",
    "sample_reading",
]
