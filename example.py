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
Example usage of the Nimbus API.

This script demonstrates how to:
1. Estimate the AQI from pollutant readings
2. Normalise wind and classify values into bands
3. Place the sun on its arc and find the moon phase
4. Run the dashboard (live with NIMBUS_FEED_URL set, otherwise offline)
"""

import argparse
import logging
import os
import threading
from datetime import datetime, timedelta, timezone

from nimbus import metrics
from nimbus.dashboard import Dashboard, render_text
from nimbus.lunar import moon_phase, next_full_moon
from nimbus.solar import SolarWindow
from nimbus.wind import format_wind_direction, normalize_wind


def example_1_aqi():
    """Example 1: AQI from PM2.5, PM10 and CO."""
    print("=" * 60)
    print("Example 1: Air Quality Index")
    print("=" * 60)

    for pm25, pm10, co in [(12, 20, 0.4), (60, 100, 2), (95, 180, 3.5), (300, 40, 1)]:
        result = metrics.aqi_summary(pm25, pm10, co)
        print(
            f"  PM2.5={pm25:>5} PM10={pm10:>5} CO={co:>4} -> "
            f"AQI {result.value:>3} {result.category:<12} "
            f"(dominant: {result.dominant_pollutant})"
        )
    print()


def example_2_wind_and_bands():
    """Example 2: Wind headings and band scales."""
    print("=" * 60)
    print("Example 2: Wind and Bands")
    print("=" * 60)

    for speed, direction in [(10, "NE"), (3.2, "wsw"), (5, 200), (1, "350")]:
        wind = normalize_wind(speed, direction)
        print(
            f"  {speed} m/s from {direction!r:<6} -> {wind.speed_kmh:.1f} km/h "
            f"{format_wind_direction(wind)}"
        )

    print()
    for scale in metrics.list_scales():
        thresholds = ", ".join(f"{t:g}" for t in metrics.get_scale(scale).thresholds)
        print(f"  {scale:<12} thresholds: {thresholds}")
    print(f"  UV 7 is {metrics.classify(7, 'uv').label}")
    print()


def example_3_sun_and_moon():
    """Example 3: Sun arc position and moon phase."""
    print("=" * 60)
    print("Example 3: Sun and Moon")
    print("=" * 60)

    now = datetime.now(timezone.utc)
    sunrise = now.replace(hour=0, minute=30, second=0, microsecond=0)
    window = SolarWindow(sunrise=sunrise, sunset=sunrise + timedelta(hours=12))
    position = window.project(now)
    print(
        f"  Daylight {window.day_length}, progress {position.progress:.0%}, "
        f"arc point ({position.x:.1f}, {position.y:.1f})"
    )

    phase = moon_phase(now)
    print(f"  Moon: {phase.icon} {phase.name}, {phase.illumination}% lit")
    print(f"  Next full moon: {next_full_moon(now):%d %B %Y}")
    print()


def example_4_dashboard(seconds: float):
    """Example 4: Run the dashboard scheduler for a few seconds."""
    print("=" * 60)
    print("Example 4: Dashboard")
    print("=" * 60)

    offline = not os.getenv("NIMBUS_FEED_URL")
    dashboard = Dashboard(offline=offline)
    scheduler = dashboard.build_scheduler()

    stop = threading.Event()
    timer = threading.Timer(seconds, stop.set)
    timer.start()
    scheduler.run_forever(stop)

    print(render_text(dashboard.state))
    print()


def main():
    parser = argparse.ArgumentParser(description="Nimbus examples")
    parser.add_argument(
        "--seconds",
        type=float,
        default=2.0,
        help="How long to run the dashboard example",
    )
    parser.add_argument("--verbose", action="store_true", help="Show log output")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    example_1_aqi()
    example_2_wind_and_bands()
    example_3_sun_and_moon()
    example_4_dashboard(args.seconds)


if __name__ == "__main__":
    main()
