#!/usr/bin/env python3
"""
hike_estimate.py: Mountain Snail hiking time calculator

Estimate walking time for either
- a GPX track (distance, D+/D-, altitude range, estimated time), or
- a JSON splits file (fixed-length splits with ascent/descent each).

Anything not given on the command line is asked for interactively when stdin
is a terminal, otherwise taken from configuration (see mountainsnail.config).
"""

from __future__ import annotations

import argparse
import datetime as dt
import sys
from pathlib import Path
from typing import Optional

from mountainsnail.analyze.geodesy import get_distance_function
from mountainsnail.analyze.splits import (
    Split,
    SplitTime,
    split_timetable,
    summarize_splits,
    validate_split_length,
)
from mountainsnail.analyze.track import Leg, PathStatistics, analyze_track, iter_track_legs
from mountainsnail.config import SnailConfig, load_config
from mountainsnail.errors import FzfNotFoundError, MountainSnailError
from mountainsnail.formats.gpx import (
    apply_track_times,
    count_routes,
    extract_tracks,
    read_gpx,
    write_gpx,
)
from mountainsnail.formats.splits import load_splits
from mountainsnail.terrain import (
    MANUAL,
    TERRAIN_CHOICES,
    parse_terrain,
    resolve_adjustment,
    validate_adjustment,
)
from mountainsnail.util.fzf import fzf_select_paths
from mountainsnail.util.logging import log
from mountainsnail.util.paths import list_gpx_candidates
from mountainsnail.util.prompt import prompt_bool, prompt_choice, prompt_str, prompt_value


# ----------------------------
# Formatting
# ----------------------------
def format_duration(td: dt.timedelta, *, seconds: bool = True) -> str:
    """
    "2h 05m 10s" style. With seconds=False the result is truncated to minutes.
    """
    total = int(td.total_seconds())
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    if not seconds:
        return f"{h}h {m:02d}m" if h else f"{m}m"
    if h:
        return f"{h}h {m:02d}m {s:02d}s"
    if m:
        return f"{m}m {s:02d}s"
    return f"{s}s"


def _fmt_height(v: Optional[float]) -> str:
    return "n/a" if v is None else f"{v:g} m"


def print_track_report(name: str, stats: PathStatistics, *, tsv: bool) -> None:
    if tsv:
        print(
            f"{name}\t"
            f"{stats.distance_km:.3f}\t"
            f"{stats.ascent_m:.0f}\t"
            f"{stats.descent_m:.0f}\t"
            f"{'' if stats.min_height_m is None else stats.min_height_m}\t"
            f"{'' if stats.max_height_m is None else stats.max_height_m}\t"
            f"{stats.average_altitude_m:.0f}\t"
            f"{int(stats.duration.total_seconds())}\t"
            f"{len(stats.failures)}"
        )
        return

    print("  Track info:")
    print(f"    > {round(stats.ascent_m)} m D+ {round(stats.descent_m)} m D-")
    print(f"    > {round(stats.distance_km, 2)} km")
    if stats.has_elevation:
        print(f"    > Range: {_fmt_height(stats.min_height_m)} - {_fmt_height(stats.max_height_m)}")
        print(f"    > Average altitude: {round(stats.average_altitude_m)} m")
    else:
        print("    > Range: no elevation data")
    print(f"    > Time: {format_duration(stats.duration)}")
    if stats.failures:
        print(f"    > {len(stats.failures)} leg(s) could not be measured")


def print_split_report(splits: list[Split], rows: list[SplitTime], split_length: int,
                       adjustment: float, *, tsv: bool) -> None:
    if tsv:
        print("split\tascent_m\tdescent_m\tduration_s\tcumulative_s")
        for s, r in zip(splits, rows):
            print(f"{r.index + 1}\t{s.ascent}\t{s.descent}\t"
                  f"{int(r.duration.total_seconds())}\t{int(r.cumulative.total_seconds())}")
        return

    summary = summarize_splits(splits, split_length, adjustment)
    print(f"{summary.splits} split(s) found.")
    print(f"Path info: {summary.distance_km:g} km - {summary.ascent_m} m D+ - {summary.descent_m} m D-")
    print("Splits:")
    for r in rows:
        print(f"[{r.index}, {r.index + 1}] : {format_duration(r.duration)} -- {format_duration(r.cumulative)}")
    print(f"Total time: {format_duration(summary.duration, seconds=False)}")


# ----------------------------
# Resolution of user choices
# ----------------------------
def _interactive(args: argparse.Namespace) -> bool:
    return not args.no_input and sys.stdin.isatty()


def choose_adjustment(args: argparse.Namespace, cfg: SnailConfig) -> float:
    """CLI --adjustment / --terrain, then a terrain menu, then config defaults."""
    est = cfg.estimate
    if args.adjustment is not None:
        return validate_adjustment(args.adjustment)
    if args.terrain is not None:
        if parse_terrain(args.terrain) is not None or not _interactive(args):
            return resolve_adjustment(args.terrain, est.manual_adjustment)
        terrain = MANUAL
    elif _interactive(args):
        terrain = TERRAIN_CHOICES[prompt_choice(
            "Terrain", TERRAIN_CHOICES, default=TERRAIN_CHOICES.index(est.default_terrain))]
    else:
        terrain = est.default_terrain

    if terrain == MANUAL and _interactive(args):
        return prompt_value(
            "Walking speed adjustment (bigger == slower)",
            default=str(est.manual_adjustment),
            convert=validate_adjustment,
        )
    return resolve_adjustment(terrain, est.manual_adjustment)


def choose_gpx_path(args: argparse.Namespace, cfg: SnailConfig) -> Optional[Path]:
    if args.path:
        return Path(args.path).expanduser()
    if not _interactive(args):
        log("No GPX file given (pass a path or run interactively).")
        return None

    candidates = list_gpx_candidates(cfg.paths.documents_root)
    if candidates:
        try:
            selected = fzf_select_paths(candidates, header="Choose file")
        except FzfNotFoundError as e:
            log(str(e))
            selected = []
        if selected:
            return selected[0]

    try:
        while True:
            p = Path(prompt_str("GPX file path")).expanduser()
            if p.is_file():
                return p
            print("Path doesn't exist")
    except (EOFError, KeyboardInterrupt):
        print()
        log("No GPX file chosen.")
        return None


def choose_output_path(args: argparse.Namespace, source: Path) -> Path:
    """--output, else `<stem>.timed.gpx` next to the source (offered as default when prompting)."""
    if args.output is not None:
        return Path(args.output).expanduser()
    default = source.with_name(f"{source.stem}.timed.gpx")
    if _interactive(args):
        return Path(prompt_str("Write GPX with times to", default=str(default))).expanduser()
    return default


def choose_track(names: list[Optional[str]], args: argparse.Namespace) -> int:
    if args.track is not None:
        if not 1 <= args.track <= len(names):
            raise MountainSnailError(f"--track must be between 1 and {len(names)}")
        return args.track - 1
    if len(names) > 1 and _interactive(args):
        return prompt_choice("Select GPX track", [n or "" for n in names])
    return 0


# ----------------------------
# Runs
# ----------------------------
def run_gpx(args: argparse.Namespace, cfg: SnailConfig) -> int:
    path = choose_gpx_path(args, cfg)
    if path is None:
        return 2
    adjustment = choose_adjustment(args, cfg)

    method = args.distance_method or cfg.estimate.distance_method
    distance = get_distance_function(method)
    distance_3d = args.distance_3d or cfg.estimate.distance_3d

    tree = read_gpx(path)
    tracks = extract_tracks(tree)
    log(f"GPX file has {len(tracks)} track(s), {count_routes(tree)} route(s).")
    if not tracks:
        log("Nothing to analyze: the GPX file has no tracks.")
        return 1

    idx = choose_track([t.name for t in tracks], args)
    track = tracks[idx]
    log(f"Chosen track: \"{track.name or 'Default'}\" (track n°{idx + 1})")

    rewrite_times = args.rewrite_times or args.output is not None
    if not rewrite_times and _interactive(args):
        rewrite_times = prompt_bool("Add time to GPX points?", default=False)
    out = choose_output_path(args, path) if rewrite_times else None

    stats = analyze_track(
        track, adjustment, rewrite_times,
        distance=distance, distance_3d=distance_3d, verbose=not args.tsv,
    )

    if args.tsv:
        print("track\tdistance_km\tascent_m\tdescent_m\tmin_m\tmax_m\tavg_alt_m\tduration_s\tfailed_legs")
    print_track_report(track.name or "Default", stats, tsv=args.tsv)

    if out is not None:
        written = apply_track_times(tree, idx, track)
        write_gpx(tree.getroot(), out)
        log(f"Wrote {written} point time(s) to {out}")

    if args.plot:
        from mountainsnail.visualize.plot import plot_track_speed

        legs = [leg for leg in iter_track_legs(track, adjustment, distance=distance, distance_3d=distance_3d)
                if isinstance(leg, Leg)]
        plot_track_speed(track, legs)

    return 0


def run_splits(args: argparse.Namespace, cfg: SnailConfig) -> int:
    if args.path:
        path = Path(args.path).expanduser()
    elif _interactive(args):
        path = Path(prompt_str("Splits file path", default=str(cfg.paths.splits_file))).expanduser()
    else:
        path = cfg.paths.splits_file

    adjustment = choose_adjustment(args, cfg)

    if args.split_length is not None:
        split_length = validate_split_length(args.split_length)
    elif _interactive(args):
        split_length = prompt_value(
            "Splits (meters)", default=str(cfg.estimate.split_length), convert=validate_split_length)
    else:
        split_length = cfg.estimate.split_length

    splits = load_splits(path)
    rows = split_timetable(splits, split_length, adjustment)
    print_split_report(splits, rows, split_length, adjustment, tsv=args.tsv)

    if args.plot and rows:
        from mountainsnail.visualize.plot import plot_split_times

        plot_split_times(rows, split_length)

    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Mountain Snail: hiking time calculator.")
    sub = ap.add_subparsers(dest="mode", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--terrain", default=None, choices=TERRAIN_CHOICES,
                        help="Terrain preset (default: from config, or asked for).")
    common.add_argument("--adjustment", default=None,
                        help="Walking speed adjustment, bigger == slower (overrides --terrain).")
    common.add_argument("--tsv", action="store_true",
                        help="Print tab-separated output (good for piping).")
    common.add_argument("--plot", action="store_true",
                        help="Show a matplotlib chart of the estimate.")
    common.add_argument("--no-input", action="store_true",
                        help="Never prompt; use config defaults for anything not given.")

    g = sub.add_parser("gpx", parents=[common], help="Estimate time for a GPX track.")
    g.add_argument("path", nargs="?", default=None,
                   help="GPX file. If omitted, pick one from the documents root with fzf.")
    g.add_argument("--track", type=int, default=None,
                   help="1-based track number when the file holds several tracks.")
    g.add_argument("--rewrite-times", action="store_true",
                   help="Write a copy of the GPX with estimated point times (default: <stem>.timed.gpx).")
    g.add_argument("--output", default=None,
                   help="Where to write the GPX with estimated point times (implies --rewrite-times).")
    g.add_argument("--distance-method", default=None, choices=["haversine", "geodesic"],
                   help="Distance backend (default: from config, haversine).")
    g.add_argument("--distance-3d", action="store_true",
                   help="Include elevation change in leg lengths.")

    s = sub.add_parser("splits", parents=[common], help="Estimate time from a JSON splits file.")
    s.add_argument("path", nargs="?", default=None,
                   help="Splits JSON file (default: from config, ./splits.json).")
    s.add_argument("--split-length", default=None,
                   help="Length of each split in meters (default: from config, 1000).")
    return ap


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if not args.tsv:
        print("Mountain snail - Hiking time calculator.")

    try:
        cfg = load_config()
        if args.mode == "gpx":
            return run_gpx(args, cfg)
        return run_splits(args, cfg)
    except MountainSnailError as e:
        log(f"ERROR: {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
