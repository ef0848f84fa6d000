# mountainsnail/analyze/splits.py
"""
Walking time estimation from fixed-length splits.

A split only knows its ascent and descent; its horizontal length is the
same nominal `split_length` for every split.
"""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import Any, NamedTuple, Sequence

from mountainsnail.analyze.slope import add_durations, slope_duration
from mountainsnail.errors import ConfigurationError


class Split(NamedTuple):
    ascent: int
    descent: int

    @property
    def delta(self) -> int:
        return self.ascent - self.descent


@dataclass(frozen=True)
class SplitTime:
    index: int
    duration: dt.timedelta
    cumulative: dt.timedelta


@dataclass(frozen=True)
class SplitSummary:
    splits: int
    distance_km: float
    ascent_m: int
    descent_m: int
    duration: dt.timedelta


def validate_split_length(value: Any) -> int:
    """Split length in meters: a positive integer."""
    if isinstance(value, bool):
        raise ConfigurationError(f"Split length must be an integer (got {value!r})")
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise ConfigurationError(f"Split length must be an integer (got {value!r})")
        value = int(value)
    try:
        length = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Split length must be an integer (got {value!r})") from None
    if length <= 0:
        raise ConfigurationError(f"Split length must be > 0 meters (got {length})")
    return length


def estimate_splits(splits: Sequence[Split], split_length: int, adjustment: float) -> list[dt.timedelta]:
    """Estimated duration of each split, in split order."""
    return [slope_duration(float(s.delta), float(split_length), adjustment) for s in splits]


def split_timetable(splits: Sequence[Split], split_length: int, adjustment: float) -> list[SplitTime]:
    """Per-split durations alongside the running total."""
    rows: list[SplitTime] = []
    total = dt.timedelta(0)
    for i, duration in enumerate(estimate_splits(splits, split_length, adjustment)):
        total = add_durations(total, duration)
        rows.append(SplitTime(index=i, duration=duration, cumulative=total))
    return rows


def summarize_splits(splits: Sequence[Split], split_length: int, adjustment: float) -> SplitSummary:
    rows = split_timetable(splits, split_length, adjustment)
    return SplitSummary(
        splits=len(splits),
        distance_km=len(splits) * split_length / 1000.0,
        ascent_m=sum(s.ascent for s in splits),
        descent_m=sum(s.descent for s in splits),
        duration=rows[-1].cumulative if rows else dt.timedelta(0),
    )
