# mountainsnail/analyze/slope.py
"""
Slope-adjusted walking time model.

    speed   = 0.6 * exp(3.5 * (delta_elevation / distance_m + adjustment))
    seconds = round(speed * distance_m)

`adjustment` is the terrain knob: bigger means slower.
"""

from __future__ import annotations

import datetime as dt
import math

from mountainsnail.errors import ConfigurationError

BASE_FACTOR = 0.6
SLOPE_EXPONENT = 3.5

# Largest whole-second duration a timedelta can hold.
MAX_DURATION = dt.timedelta(days=dt.timedelta.max.days, seconds=86399)
MAX_SECONDS = MAX_DURATION.total_seconds()


def slope_duration(delta_elevation: float, distance_m: float, adjustment: float) -> dt.timedelta:
    """
    Estimated time to walk `distance_m` meters while gaining `delta_elevation`
    meters (negative for a net descent).

    A zero-length leg costs zero time. Near-vertical legs (a big climb over a
    few centimeters, usually GPS elevation noise) saturate at MAX_DURATION.
    """
    if distance_m < 0:
        raise ConfigurationError(f"Distance must not be negative (got {distance_m})")
    if distance_m == 0:
        return dt.timedelta(0)

    try:
        seconds = BASE_FACTOR * math.exp(SLOPE_EXPONENT * (delta_elevation / distance_m + adjustment)) * distance_m
    except OverflowError:
        return MAX_DURATION
    if seconds >= MAX_SECONDS:
        return MAX_DURATION
    return dt.timedelta(seconds=round(seconds))


def add_durations(total: dt.timedelta, step: dt.timedelta) -> dt.timedelta:
    """`total + step`, saturating at MAX_DURATION."""
    try:
        return min(total + step, MAX_DURATION)
    except OverflowError:
        return MAX_DURATION
