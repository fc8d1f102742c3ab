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
Base types and utilities for derived-metric calculations.

This module provides the foundation shared by the AQI estimator and the
band scales: validated breakpoint tables, piecewise-linear interpolation
and first-match band classification.
"""

import math
from dataclasses import dataclass
from typing import Literal, Sequence

# =============================================================================
# Errors
# =============================================================================


class ConfigurationError(ValueError):
    """Raised when a constant table (breakpoints or bands) is malformed."""


# =============================================================================
# Rounding
# =============================================================================


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, with halves rounded towards +infinity.

    Python's built-in round() uses banker's rounding, which would send
    e.g. 0.5 to 0. The dashboard has always rounded halves up.
    """
    return math.floor(value + 0.5)


# =============================================================================
# Breakpoint Tables
# =============================================================================


@dataclass(frozen=True)
class BreakpointTable:
    """
    Ordered (breakpoint, index) table for one pollutant.

    ``indices`` has one more entry than ``breakpoints``: ``indices[i]`` is the
    sub-index reached at ``breakpoints[i]`` and the final entry is the value
    reported once a concentration exceeds every breakpoint.
    """

    pollutant: str
    breakpoints: tuple[float, ...]
    indices: tuple[float, ...]
    unit: str = "µg/m³"

    def __post_init__(self):
        # Accept any sequence but store tuples so the table stays hashable
        object.__setattr__(self, "breakpoints", tuple(self.breakpoints))
        object.__setattr__(self, "indices", tuple(self.indices))
        validate_breakpoints(self.pollutant, self.breakpoints, self.indices)


def validate_breakpoints(
    pollutant: str,
    breakpoints: Sequence[float],
    indices: Sequence[float],
) -> None:
    """
    Validate a breakpoint table.

    Raises:
        ConfigurationError: If the table is empty, does not start at 0, is not
            strictly increasing, or the index table is not one entry longer.
    """
    if len(breakpoints) < 2:
        raise ConfigurationError(
            f"Breakpoint table for {pollutant} needs at least two breakpoints, "
            f"got {len(breakpoints)}"
        )

    if len(indices) != len(breakpoints) + 1:
        raise ConfigurationError(
            f"Breakpoint table for {pollutant} has {len(breakpoints)} breakpoints "
            f"and {len(indices)} indices; expected {len(breakpoints) + 1} indices"
        )

    if breakpoints[0] != 0:
        raise ConfigurationError(
            f"Breakpoint table for {pollutant} must start at 0, "
            f"got {breakpoints[0]}"
        )

    for name, values in (("breakpoints", breakpoints), ("indices", indices)):
        for low, high in zip(values, values[1:]):
            if not high > low:
                raise ConfigurationError(
                    f"{name.capitalize()} for {pollutant} must be strictly "
                    f"increasing, found {low} followed by {high}"
                )


# =============================================================================
# Breakpoint Interpolation
# =============================================================================


def interpolate(value: float, table: BreakpointTable) -> float:
    """
    Calculate a sub-index using linear interpolation between breakpoints.

    sub_index = idx[i-1] + (idx[i] - idx[i-1]) * (value - bp[i-1]) / (bp[i] - bp[i-1])

    where ``i`` is the first breakpoint with ``value <= bp[i]``. The result is
    rounded to the nearest integer.

    Args:
        value: Concentration in the table's unit
        table: Validated breakpoint table

    Returns:
        0 at or below the first breakpoint, the interpolated sub-index inside
        the table, or the table's last index above the final breakpoint.

    Raises:
        ValueError: If value is NaN
    """
    if math.isnan(value):
        raise ValueError(f"Cannot interpolate NaN concentration for {table.pollutant}")

    breakpoints = table.breakpoints
    indices = table.indices

    if value <= breakpoints[0]:
        return 0

    for i in range(1, len(breakpoints)):
        if value <= breakpoints[i]:
            bp_low, bp_high = breakpoints[i - 1], breakpoints[i]
            idx_low, idx_high = indices[i - 1], indices[i]
            sub_index = idx_low + (idx_high - idx_low) * (value - bp_low) / (
                bp_high - bp_low
            )
            return round_half_up(sub_index)

    # Concentration above the top breakpoint
    return indices[-1]


# =============================================================================
# Bands
# =============================================================================


@dataclass(frozen=True)
class Band:
    """A contiguous value range mapped to one visual classification."""

    lower: float  # -inf for the first band of a scale
    upper: float  # +inf for the last band of a scale
    color: str  # Hex color token
    label: str


ClosedSide = Literal["left", "right"]


@dataclass(frozen=True)
class BandScale:
    """
    Ordered, contiguous bands covering the whole real line.

    ``closed`` follows pandas.cut: "left" makes every band [lower, upper),
    "right" makes every band (lower, upper].
    """

    name: str
    bands: tuple[Band, ...]
    closed: ClosedSide = "left"

    def __post_init__(self):
        object.__setattr__(self, "bands", tuple(self.bands))
        validate_bands(self.name, self.bands, self.closed)

    @property
    def thresholds(self) -> list[float]:
        """Inner boundaries between consecutive bands."""
        return [band.upper for band in self.bands[:-1]]

    def classify(self, value: float) -> Band:
        """Return the band containing value."""
        return classify(value, self)


def make_scale(
    name: str,
    thresholds: Sequence[float],
    colors: Sequence[str],
    labels: Sequence[str],
    closed: ClosedSide = "left",
) -> BandScale:
    """
    Build a scale from inner thresholds.

    ``n`` thresholds give ``n + 1`` bands; the first band is open below and
    the last band is open above.
    """
    if not (len(colors) == len(labels) == len(thresholds) + 1):
        raise ConfigurationError(
            f"Scale {name} has {len(thresholds)} thresholds, so it needs "
            f"{len(thresholds) + 1} colors and labels "
            f"(got {len(colors)} colors, {len(labels)} labels)"
        )

    edges = [-math.inf, *thresholds, math.inf]
    bands = [
        Band(lower=low, upper=high, color=color, label=label)
        for low, high, color, label in zip(edges, edges[1:], colors, labels)
    ]
    return BandScale(name=name, bands=tuple(bands), closed=closed)


def validate_bands(name: str, bands: Sequence[Band], closed: str) -> None:
    """
    Validate that bands partition the real line with no gaps or overlaps.

    Raises:
        ConfigurationError: If the scale is empty, has an unknown ``closed``
            side, is not contiguous, or does not cover -inf to +inf.
    """
    if closed not in ("left", "right"):
        raise ConfigurationError(
            f"Scale {name}: closed must be 'left' or 'right', got {closed!r}"
        )
    if not bands:
        raise ConfigurationError(f"Scale {name} has no bands")
    if bands[0].lower != -math.inf or bands[-1].upper != math.inf:
        raise ConfigurationError(
            f"Scale {name} must be open-ended at both ends "
            f"(got {bands[0].lower} to {bands[-1].upper})"
        )
    for band in bands:
        if not band.upper > band.lower:
            raise ConfigurationError(
                f"Scale {name}: band {band.label!r} is empty "
                f"({band.lower} to {band.upper})"
            )
    for previous, current in zip(bands, bands[1:]):
        if previous.upper != current.lower:
            raise ConfigurationError(
                f"Scale {name}: bands {previous.label!r} and {current.label!r} "
                f"are not contiguous ({previous.upper} != {current.lower})"
            )


def classify(value: float, scale: BandScale) -> Band:
    """
    Map a value to the first matching band of a scale.

    Args:
        value: Scalar to classify (AQI, UV index, temperature, ...)
        scale: Validated band scale

    Returns:
        The band containing value. NaN is placed in the first band.
    """
    for band in scale.bands:
        if scale.closed == "left":
            if band.lower <= value < band.upper:
                return band
        elif band.lower < value <= band.upper:
            return band

    # Only reachable for NaN or for +/-inf on the closed side
    if value == math.inf:
        return scale.bands[-1]
    return scale.bands[0]
