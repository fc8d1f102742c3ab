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
Headless dashboard shell.

The Dashboard holds the display state for one screen and refreshes each
part of it on its own cadence:

- clock: every second
- weather: every 5 minutes
- sun position: every minute (sunrise/sunset re-fetched once per day)
- moon phase: every hour

A Scheduler drives those refreshes. It never starts a tick while the same
tick is still running, and a failing refresh is logged without stopping the
others.

Example:
    >>> dashboard = Dashboard(offline=True)
    >>> dashboard.refresh_all()
    >>> print(render_text(dashboard.state))
"""

import random
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from logging import getLogger
from typing import Any, Callable

import pandas as pd
import requests

from .lunar import moon_phase
from .metrics import Band, classify, thermometer_fill
from .solar import SolarWindow
from .sources.feed import FeedResult, fetch_weather, get_feed_url, sample_result
from .sources.sun_times import SunTimesError, fetch_solar_window
from .types import MoonPhase, NormalizedReading, SolarPosition
from .wind import format_wind_direction

logger = getLogger(__name__)

CLOCK_INTERVAL = timedelta(seconds=1)
WEATHER_INTERVAL = timedelta(minutes=5)
SUN_INTERVAL = timedelta(minutes=1)
MOON_INTERVAL = timedelta(hours=1)

CLOCK_FORMAT = "%A, %d %B %Y, %I:%M:%S %p"


def local_now() -> datetime:
    """Current time as a timezone-aware local datetime."""
    return datetime.now().astimezone()


# ============================================================================
# SCHEDULER
# ============================================================================


@dataclass
class Tick:
    """A named callback repeated at a fixed interval."""

    name: str
    interval: timedelta
    callback: Callable[[datetime], Any]
    next_due: datetime | None = None
    running: bool = False


class Scheduler:
    """
    Runs periodic ticks against a clock.

    Ticks are due immediately when first added, then every ``interval``
    after the time they last ran.
    """

    def __init__(self, clock: Callable[[], datetime] = local_now):
        self._clock = clock
        self._ticks: dict[str, Tick] = {}
        self._lock = threading.Lock()

    @property
    def ticks(self) -> list[Tick]:
        return list(self._ticks.values())

    def every(
        self, name: str, interval: timedelta, callback: Callable[[datetime], Any]
    ) -> Tick:
        """Register (or replace) a tick."""
        if interval <= timedelta(0):
            raise ValueError(f"Tick '{name}' needs a positive interval, got {interval}")
        tick = Tick(name=name, interval=interval, callback=callback)
        self._ticks[name] = tick
        return tick

    def _claim(self, tick: Tick, now: datetime) -> bool:
        with self._lock:
            if tick.running:
                return False
            if tick.next_due is not None and now < tick.next_due:
                return False
            tick.running = True
            return True

    def run_pending(self, now: datetime | None = None) -> list[str]:
        """
        Run every due tick once.

        Returns:
            Names of the ticks that were started, in registration order
        """
        now = now or self._clock()
        started = []

        for tick in self.ticks:
            if not self._claim(tick, now):
                continue
            started.append(tick.name)
            try:
                tick.callback(now)
            except Exception:
                logger.exception(f"Tick '{tick.name}' failed")
            finally:
                with self._lock:
                    tick.next_due = now + tick.interval
                    tick.running = False

        return started

    def run_forever(self, stop_event: threading.Event, resolution: float = 0.5) -> None:
        """Run due ticks until stop_event is set, polling every resolution seconds."""
        logger.info(f"Scheduler started with ticks: {list(self._ticks)}")
        while not stop_event.is_set():
            self.run_pending()
            stop_event.wait(resolution)
        logger.info("Scheduler stopped")


# ============================================================================
# DASHBOARD
# ============================================================================


@dataclass
class DashboardState:
    """Everything currently on screen."""

    clock_text: str = ""
    observation: NormalizedReading | None = None
    history: pd.Series = field(default_factory=lambda: pd.Series(dtype=float))
    synthetic: bool = False
    weather_updated_at: datetime | None = None
    bands: dict[str, Band] = field(default_factory=dict)
    thermometer: float = 0.0
    solar_window: SolarWindow | None = None
    sun: SolarPosition | None = None
    moon: MoonPhase | None = None


class Dashboard:
    """
    Display state plus the refresh operations that keep it current.

    Args:
        feed_url: Weather feed URL (default: NIMBUS_FEED_URL)
        latitude: Location for sunrise/sunset (default: configured location)
        longitude: Location for sunrise/sunset (default: configured location)
        rng: Random source for synthetic readings
        offline: Never touch the network; show synthetic readings and hide
                 the sun indicator

    Raises:
        ValueError: If not offline and no feed URL is configured
    """

    def __init__(
        self,
        feed_url: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        rng: random.Random | None = None,
        offline: bool = False,
    ):
        self.offline = offline
        self.feed_url = None if offline else feed_url or get_feed_url()
        self.latitude = latitude
        self.longitude = longitude
        self.rng = rng or random.Random()
        self.state = DashboardState()

    def update_clock(self, now: datetime) -> None:
        self.state.clock_text = now.strftime(CLOCK_FORMAT)

    def refresh_weather(self, now: datetime) -> FeedResult:
        """Fetch a new reading and restyle the widgets."""
        if self.offline:
            result = sample_result(now, self.rng)
        else:
            result = fetch_weather(self.feed_url, now=now, rng=self.rng)

        if result.synthetic:
            logger.warning("Showing synthetic weather data")

        observation = result.observation
        reading = observation.reading
        state = self.state
        state.observation = observation
        state.synthetic = result.synthetic
        state.weather_updated_at = now
        state.thermometer = thermometer_fill(reading.temperature)
        state.bands = {
            "aqi": classify(observation.aqi, "aqi"),
            "uv": classify(reading.uv_index, "uv"),
            "temperature": classify(reading.temperature, "temperature"),
            "rain": classify(reading.rainfall, "rain"),
        }
        # The chart keeps its last real history while the feed is down
        if not result.synthetic:
            state.history = result.history
        return result

    def refresh_sun(self, now: datetime) -> SolarPosition | None:
        """Move the sun indicator, fetching the day's sun times when needed."""
        state = self.state
        if self.offline:
            state.sun = None
            return None

        window = state.solar_window
        if window is None or window.day != now.date():
            try:
                window = fetch_solar_window(now.date(), self.latitude, self.longitude)
            except (requests.RequestException, SunTimesError) as e:
                logger.error(f"Error fetching sunrise/sunset: {e}")
                state.solar_window = None
                state.sun = None
                return None
            state.solar_window = window

        state.sun = window.project(now)
        return state.sun

    def refresh_moon(self, now: datetime) -> MoonPhase:
        self.state.moon = moon_phase(now)
        return self.state.moon

    def refresh_all(self, now: datetime | None = None) -> None:
        """Refresh every part of the display once."""
        now = now or local_now()
        self.update_clock(now)
        self.refresh_weather(now)
        self.refresh_sun(now)
        self.refresh_moon(now)

    def build_scheduler(self, clock: Callable[[], datetime] = local_now) -> Scheduler:
        """Scheduler wired to this dashboard's refresh operations."""
        scheduler = Scheduler(clock)
        scheduler.every("clock", CLOCK_INTERVAL, self.update_clock)
        scheduler.every("weather", WEATHER_INTERVAL, self.refresh_weather)
        scheduler.every("sun", SUN_INTERVAL, self.refresh_sun)
        scheduler.every("moon", MOON_INTERVAL, self.refresh_moon)
        return scheduler


# ============================================================================
# TEXT RENDERING
# ============================================================================


def render_text(state: DashboardState) -> str:
    """Plain-text rendering of the dashboard for terminals and logs."""
    lines = [state.clock_text] if state.clock_text else []

    observation = state.observation
    if observation is None:
        lines.append("Weather: waiting for data")
    else:
        r = observation.reading
        bands = state.bands
        lines += [
            f"Temperature {r.temperature:.1f}°C "
            f"(H {r.high_temp:.1f}°C / L {r.low_temp:.1f}°C) "
            f"[{bands['temperature'].label}, bar {state.thermometer:.0f}%]",
            f"Humidity {r.humidity:.0f}% | Pressure {r.pressure:.0f} hPa",
            f"UV {r.uv_index:.0f} [{bands['uv'].label}] | "
            f"AQI {observation.aqi:.0f} [{bands['aqi'].label}]",
            f"PM2.5 {r.pm25:.1f} µg/m³ | PM10 {r.pm10:.1f} µg/m³ | "
            f"CO {r.co_level:.1f} ppm",
            f"Wind {observation.wind.speed_kmh:.1f} km/h "
            f"{format_wind_direction(observation.wind)}",
            f"Rain {r.rainfall:.1f} mm [{bands['rain'].label}]",
        ]
        if state.synthetic:
            lines.append("(feed unavailable, showing synthetic data)")

    if state.sun is None:
        lines.append("Sun: unavailable")
    elif state.sun.visible:
        lines.append(f"Sun: {state.sun.progress:.0%} of daylight elapsed")
    else:
        lines.append("Sun: below the horizon")

    if state.moon is not None:
        lines.append(
            f"Moon: {state.moon.icon} {state.moon.name} "
            f"({state.moon.illumination:.1f}% lit)"
        )

    return "\n".join(lines)
