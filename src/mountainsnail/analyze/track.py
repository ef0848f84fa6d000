# mountainsnail/analyze/track.py
"""
Track statistics and walking time estimation for Mountain Snail.

A track is walked leg by leg (consecutive point pairs inside each segment).
Legs are measured independently by `iter_track_legs`; `analyze_track` folds
them strictly in order, because the altitude average and the rewritten
timestamps depend on that order.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from mountainsnail.analyze.geodesy import DistanceFunc, haversine_km, with_elevation
from mountainsnail.analyze.slope import add_durations, slope_duration
from mountainsnail.errors import GeometryError
from mountainsnail.util.logging import log


@dataclass
class Waypoint:
    lat: float
    lon: float
    ele: Optional[float] = None
    time: Optional[dt.datetime] = None

    @property
    def latlon(self) -> tuple[float, float]:
        return (self.lat, self.lon)


@dataclass
class Segment:
    points: list[Waypoint] = field(default_factory=list)


@dataclass
class Track:
    name: Optional[str] = None
    segments: list[Segment] = field(default_factory=list)

    @property
    def point_count(self) -> int:
        return sum(len(s.points) for s in self.segments)


@dataclass(frozen=True)
class Leg:
    """One measured point pair."""
    segment_index: int
    start_index: int
    end_index: int
    distance_km: float
    delta_elevation: float      # 0.0 when either side lacks elevation
    elevation: Optional[float]  # later point's elevation, only when both sides have one
    duration: dt.timedelta


@dataclass(frozen=True)
class LegFailure:
    """A point pair that could not be measured."""
    segment_index: int
    start_index: int
    end_index: int
    reason: str


@dataclass(frozen=True)
class PathStatistics:
    """
    Summary of one analysis run.

    min_height_m / max_height_m / mean_altitude_m are None when no leg had
    elevation on both ends. average_altitude_m is the running
    `(average + elevation) / 2` figure starting at 0.0; mean_altitude_m is
    the arithmetic mean of the same samples.
    """
    distance_km: float = 0.0
    ascent_m: float = 0.0
    descent_m: float = 0.0
    min_height_m: Optional[float] = None
    max_height_m: Optional[float] = None
    average_altitude_m: float = 0.0
    mean_altitude_m: Optional[float] = None
    duration: dt.timedelta = dt.timedelta(0)
    segments: int = 0
    points: int = 0
    legs: int = 0
    failures: tuple[LegFailure, ...] = ()

    @property
    def has_elevation(self) -> bool:
        return self.min_height_m is not None


def iter_track_legs(
        track: Track,
        adjustment: float, *,
        distance: DistanceFunc = haversine_km,
        distance_3d: bool = False,
) -> Iterator[Union[Leg, LegFailure]]:
    """Yield a Leg (or LegFailure) for every consecutive point pair, in track order."""
    for seg_idx, segment in enumerate(track.segments):
        pts = segment.points
        for i in range(1, len(pts)):
            a, b = pts[i - 1], pts[i]

            try:
                d_km = distance(a.latlon, b.latlon)
            except GeometryError as e:
                yield LegFailure(seg_idx, i - 1, i, str(e))
                continue

            if distance_3d:
                d_km = with_elevation(d_km, a.ele, b.ele)

            if a.ele is not None and b.ele is not None:
                delta = b.ele - a.ele
                elevation = b.ele
            else:
                delta = 0.0
                elevation = None

            duration = slope_duration(delta, d_km * 1000.0, adjustment)

            yield Leg(
                segment_index=seg_idx,
                start_index=i - 1,
                end_index=i,
                distance_km=d_km,
                delta_elevation=delta,
                elevation=elevation,
                duration=duration,
            )


def _offset(start: dt.datetime, elapsed: dt.timedelta) -> dt.datetime:
    try:
        return start + elapsed
    except OverflowError:
        return dt.datetime.max.replace(tzinfo=start.tzinfo)


def analyze_track(
        track: Track,
        adjustment: float,
        rewrite_times: bool = False, *,
        distance: DistanceFunc = haversine_km,
        distance_3d: bool = False,
        start_time: Optional[dt.datetime] = None,
        verbose: bool = False,
) -> PathStatistics:
    """
    Compute distance, ascent/descent, altitude range and estimated duration.

    With rewrite_times=True every point of a measured leg gets
    `start_time + duration so far` as its time (start_time defaults to UTC now,
    taken once). Points touched by no measured leg lose their time, so the
    rewritten times never go backwards. Unmeasurable legs are logged and
    listed in `failures`; they add nothing to any total.
    """
    if verbose:
        log(f"{len(track.segments)} segments found.")
        for segment in track.segments:
            log(f"{len(segment.points)} points.")
    if rewrite_times:
        if start_time is None:
            start_time = dt.datetime.now(dt.timezone.utc)
        for segment in track.segments:
            for wp in segment.points:
                wp.time = None

    distance_total = 0.0
    ascent = 0.0
    descent = 0.0
    min_height: Optional[float] = None
    max_height: Optional[float] = None
    average = 0.0
    samples: list[float] = []
    duration = dt.timedelta(0)
    legs = 0
    failures: list[LegFailure] = []

    for leg in iter_track_legs(track, adjustment, distance=distance, distance_3d=distance_3d):
        if isinstance(leg, LegFailure):
            log(f"failed to calculate distance between point {leg.start_index} and {leg.end_index}"
                f" (segment {leg.segment_index}): {leg.reason}")
            failures.append(leg)
            continue

        if leg.elevation is not None:
            if leg.delta_elevation > 0:
                ascent += leg.delta_elevation
            else:
                descent -= leg.delta_elevation
            if max_height is None or leg.elevation > max_height:
                max_height = leg.elevation
            if min_height is None or leg.elevation < min_height:
                min_height = leg.elevation
            average = (average + leg.elevation) / 2.0
            samples.append(leg.elevation)

        if rewrite_times:
            points = track.segments[leg.segment_index].points
            points[leg.start_index].time = _offset(start_time, duration)
            duration = add_durations(duration, leg.duration)
            points[leg.end_index].time = _offset(start_time, duration)
        else:
            duration = add_durations(duration, leg.duration)

        distance_total += leg.distance_km
        legs += 1

    return PathStatistics(
        distance_km=distance_total,
        ascent_m=ascent,
        descent_m=descent,
        min_height_m=min_height,
        max_height_m=max_height,
        average_altitude_m=average,
        mean_altitude_m=(sum(samples) / len(samples)) if samples else None,
        duration=duration,
        segments=len(track.segments),
        points=track.point_count,
        legs=legs,
        failures=tuple(failures),
    )
