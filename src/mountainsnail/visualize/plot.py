# mountainsnail/visualize/plot.py
"""
Plotting routines for Mountain Snail
"""

from __future__ import annotations

from typing import Sequence

import matplotlib.pyplot as plt

from mountainsnail.analyze.splits import SplitTime
from mountainsnail.analyze.track import Leg, Track


def leg_speeds_kmh(legs: Sequence[Leg]) -> list[float]:
    """Estimated walking speed of each leg (km/h); zero-duration legs give 0."""
    out = []
    for leg in legs:
        hours = leg.duration.total_seconds() / 3600.0
        out.append(leg.distance_km / hours if hours > 0 else 0.0)
    return out


def plot_track_speed(track: Track, legs: Sequence[Leg]) -> None:
    """Track map with each leg's start point coloured by estimated speed."""
    starts = [track.segments[leg.segment_index].points[leg.start_index] for leg in legs]
    lats = [p.lat for p in starts]
    lons = [p.lon for p in starts]

    plt.figure(figsize=(8,6))
    sc = plt.scatter(lons, lats, c=leg_speeds_kmh(legs), s=5, cmap="viridis")
    plt.colorbar(sc, label="Estimated speed (km/h)")
    plt.xlabel("Longitude")
    plt.ylabel("Latitude")
    plt.title(f"{track.name or 'Track'} coloured by estimated speed")
    plt.show()


def plot_split_times(rows: Sequence[SplitTime], split_length: int) -> None:
    """Cumulative hours against distance, one bar per split duration."""
    km = [(r.index + 1) * split_length / 1000.0 for r in rows]
    per_split_min = [r.duration.total_seconds() / 60.0 for r in rows]
    cumulative_h = [r.cumulative.total_seconds() / 3600.0 for r in rows]

    fig, ax = plt.subplots(figsize=(8,5))
    split_starts = [r.index * split_length / 1000.0 for r in rows]
    ax.bar(split_starts, per_split_min, width=split_length / 1000.0 * 0.8, align="edge", alpha=0.4, label="Split (min)")
    ax.set_xlabel("Distance (km)")
    ax.set_ylabel("Split time (min)")

    ax2 = ax.twinx()
    ax2.plot(km, cumulative_h, marker="o", color="tab:red", label="Cumulative (h)")
    ax2.set_ylabel("Cumulative time (h)")

    ax.set_title("Estimated split times")
    plt.show()
