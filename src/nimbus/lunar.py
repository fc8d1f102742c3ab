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
Lunar phase from a mean synodic month.

The phase is measured from a known new moon (6 January 2000, 18:14 UTC)
and assumes every lunation lasts exactly one mean synodic month. This is
accurate to within about a day, which is plenty for a dashboard icon.

Phase fraction 0 is new moon, 0.25 first quarter, 0.5 full moon and 0.75
last quarter.
"""

import math
from datetime import datetime, timedelta, timezone

from .types import MoonPhase, as_utc

REFERENCE_NEW_MOON = datetime(2000, 1, 6, 18, 14, tzinfo=timezone.utc)

SYNODIC_MONTH_DAYS = 29.53058867
SYNODIC_MONTH = timedelta(days=SYNODIC_MONTH_DAYS)

# Half-open [start, end) intervals of phase fraction, in order. New moon
# wraps around 0, so it appears at both ends.
PHASES = [
    (0.0, 0.0339, "New Moon", "🌑"),
    (0.0339, 0.1, "Early Waxing Crescent", "🌒"),
    (0.1, 0.17, "Mid Waxing Crescent", "🌒"),
    (0.17, 0.2161, "Late Waxing Crescent", "🌒"),
    (0.2161, 0.2839, "First Quarter", "🌓"),
    (0.2839, 0.35, "Early Waxing Gibbous", "🌔"),
    (0.35, 0.42, "Mid Waxing Gibbous", "🌔"),
    (0.42, 0.4661, "Late Waxing Gibbous", "🌔"),
    (0.4661, 0.5339, "Full Moon", "🌕"),
    (0.5339, 0.6, "Early Waning Gibbous", "🌖"),
    (0.6, 0.67, "Mid Waning Gibbous", "🌖"),
    (0.67, 0.7161, "Late Waning Gibbous", "🌖"),
    (0.7161, 0.7839, "Last Quarter", "🌗"),
    (0.7839, 0.85, "Early Waning Crescent", "🌘"),
    (0.85, 0.92, "Mid Waning Crescent", "🌘"),
    (0.92, 0.9661, "Late Waning Crescent", "🌘"),
    (0.9661, 1.0, "New Moon", "🌑"),
]


def phase_fraction(instant: datetime) -> float:
    """
    Fraction of the current lunation elapsed at instant, in [0, 1).

    Instants before the reference new moon give a negative offset; Python's
    % takes the sign of the divisor, so the result is still non-negative.
    """
    elapsed = as_utc(instant) - REFERENCE_NEW_MOON
    fraction = (elapsed % SYNODIC_MONTH) / SYNODIC_MONTH
    # Guard against float rounding pushing a tiny negative offset to 1.0
    if fraction >= 1.0:
        return 0.0
    return fraction


def illumination(fraction: float) -> float:
    """Percentage of the disc lit for a phase fraction, to one decimal place."""
    return round(100 * (1 - math.cos(2 * math.pi * fraction)) / 2, 1)


def phase_name(fraction: float) -> tuple[str, str]:
    """Name and icon of the phase containing fraction."""
    for start, end, name, icon in PHASES:
        if start <= fraction < end:
            return name, icon
    return "New Moon", "🌑"


def moon_phase(instant: datetime) -> MoonPhase:
    """
    Calculate the moon phase at an instant.

    Args:
        instant: Timezone-aware datetime (naive values are taken as UTC)

    Returns:
        MoonPhase with phase fraction, illumination, name, icon and age

    Example:
        >>> moon_phase(datetime(2000, 1, 21, 4, 40, tzinfo=timezone.utc)).name
        'Full Moon'
    """
    fraction = phase_fraction(instant)
    name, icon = phase_name(fraction)

    return MoonPhase(
        phase_fraction=fraction,
        illumination=illumination(fraction),
        name=name,
        icon=icon,
        age_days=fraction * SYNODIC_MONTH_DAYS,
        instant=instant,
    )


def _next_at_fraction(instant: datetime, target: float) -> datetime:
    remaining = (target - phase_fraction(instant)) % 1.0
    if remaining == 0:
        remaining = 1.0
    return instant + SYNODIC_MONTH * remaining


def next_new_moon(instant: datetime) -> datetime:
    """First mean new moon strictly after instant."""
    return _next_at_fraction(instant, 0.0)


def next_full_moon(instant: datetime) -> datetime:
    """First mean full moon strictly after instant."""
    return _next_at_fraction(instant, 0.5)
