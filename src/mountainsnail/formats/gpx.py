# mountainsnail/formats/gpx.py
"""
GPX helpers for Mountain Snail

This module is intentionally format-focused:
- GPX namespace handling (1.1 and the older 1.0)
- safely reading and writing ElementTree
- turning <trk>/<trkseg>/<trkpt> into Track/Segment/Waypoint objects
- writing estimated times back into <trkpt><time>

Key design principle:
  Keep orchestration (paths, prompts, reporting) in the CLI, and the
  statistics in mountainsnail.analyze. Nothing here knows about walking speed.
"""

from __future__ import annotations

import datetime as _dt
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from mountainsnail.analyze.track import Segment, Track, Waypoint
from mountainsnail.errors import InvalidGpxError

GPX11 = "http://www.topografix.com/GPX/1/1"
GPX10 = "http://www.topografix.com/GPX/1/0"


def _namespace(root: ET.Element) -> str:
    """
    Return the GPX namespace URI used by this document.

    ElementTree represents namespaced tags internally as "{namespace-uri}tag".
    """
    tag = root.tag
    if tag.startswith("{"):
        uri = tag[1:].split("}", 1)[0]
        if uri not in (GPX11, GPX10):
            raise InvalidGpxError(f"Unsupported GPX namespace: {uri}")
        return uri
    return ""


def _qn(ns: str, tag: str) -> str:
    return f"{{{ns}}}{tag}" if ns else tag


def _parse_gpx_time(text: str) -> Optional[_dt.datetime]:
    """
    Parse an ISO-8601 timestamp commonly found in GPX <time> nodes.

    Expected examples:
      - "2026-01-02T21:14:44Z"
      - "2026-01-02T21:14:44.123Z"
      - "2026-01-02T21:14:44+00:00"
    """
    if not text:
        return None
    s = text.strip()
    if not s:
        return None

    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = _dt.datetime.fromisoformat(s)
    except ValueError:
        return None

    # Ensure tz-aware; if naive, assume UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)

    return dt.astimezone(_dt.timezone.utc)


def _format_gpx_time(dt: _dt.datetime) -> str:
    """
    Format a tz-aware datetime as GPX time (UTC with Z).
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)
    dt_utc = dt.astimezone(_dt.timezone.utc)
    return dt_utc.replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _parse_float(text: Optional[str], what: str) -> Optional[float]:
    if text is None or not text.strip():
        return None
    try:
        return float(text)
    except ValueError as e:
        raise InvalidGpxError(f"Invalid {what}: {text!r}") from e


def _indent(elem: ET.Element, level: int = 0, indent: str = "  ") -> None:
    """
    In-place pretty-printer for ElementTree output. Eliminates double blank-line
    issues by explicitly controlling .text/.tail.
    """
    i = "\n" + level * indent
    j = "\n" + (level -1) * indent if level > 0 else "\n"

    children = list(elem)
    if children:
        if elem.text is None or not elem.text.strip():
            elem.text = i + indent
        for child in children:
            _indent(child, level + 1, indent=indent)
        if children[-1].tail is None or not children[-1].tail.strip():
            children[-1].tail = i
    if elem.tail is None or not elem.tail.strip():
        elem.tail = j


def read_gpx(path: Path) -> ET.ElementTree:
    """
    Read a GPX file into an ElementTree.

    Raises:
      InvalidGpxError (unreadable file, malformed XML, non-GPX root)
    """
    try:
        tree = ET.parse(path)
    except ET.ParseError as e:
        raise InvalidGpxError(f"Error reading GPX file {path}: {e}") from e
    except OSError as e:
        raise InvalidGpxError(f"Cannot open GPX file {path}: {e}") from e

    root = tree.getroot()
    if root.tag.rsplit("}", 1)[-1] != "gpx":
        raise InvalidGpxError(f"{path} is not a GPX document (root <{root.tag}>)")
    _namespace(root)
    return tree


def write_gpx(root: ET.Element, out_path: Path) -> None:
    """
    Write a GPX XML tree to disk, indented, as UTF-8 with an XML declaration.
    """
    ns = _namespace(root)
    if ns:
        ET.register_namespace("", ns)
    _indent(root)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    tree = ET.ElementTree(root)
    tree.write(out_path, encoding="utf-8", xml_declaration=True)


def _trk_elements(root: ET.Element) -> list[ET.Element]:
    return root.findall(_qn(_namespace(root), "trk"))


def count_routes(tree: ET.ElementTree) -> int:
    root = tree.getroot()
    return len(root.findall(_qn(_namespace(root), "rte")))


def extract_tracks(tree: ET.ElementTree) -> list[Track]:
    """
    Extract every <trk> as a Track, keeping segment and point order.

    Points without <ele> or <time> are kept with None in those fields.
    """
    root = tree.getroot()
    ns = _namespace(root)
    tracks: list[Track] = []

    for trk in _trk_elements(root):
        name = trk.findtext(_qn(ns, "name"))
        name = name.strip() if name and name.strip() else None

        segments: list[Segment] = []
        for trkseg in trk.findall(_qn(ns, "trkseg")):
            pts: list[Waypoint] = []
            for trkpt in trkseg.findall(_qn(ns, "trkpt")):
                lat = _parse_float(trkpt.get("lat"), "latitude")
                lon = _parse_float(trkpt.get("lon"), "longitude")
                if lat is None or lon is None:
                    raise InvalidGpxError("Track point without lat/lon attributes")

                ele = _parse_float(trkpt.findtext(_qn(ns, "ele")), "elevation")
                time = _parse_gpx_time(trkpt.findtext(_qn(ns, "time")) or "")

                pts.append(Waypoint(lat=lat, lon=lon, ele=ele, time=time))
            segments.append(Segment(points=pts))

        tracks.append(Track(name=name, segments=segments))

    return tracks


def apply_track_times(tree: ET.ElementTree, track_index: int, track: Track) -> int:
    """
    Copy waypoint times from `track` into the matching <trkpt> nodes of the
    `track_index`-th <trk>. A point whose time is None loses its <time> node,
    so the document never mixes estimated and recorded times.

    <time> is placed after <ele> when creating it, as the GPX schema orders
    them. Returns the number of points written.
    """
    root = tree.getroot()
    ns = _namespace(root)
    trks = _trk_elements(root)
    if not 0 <= track_index < len(trks):
        raise InvalidGpxError(f"Track index {track_index} out of range (document has {len(trks)})")

    written = 0
    trksegs = trks[track_index].findall(_qn(ns, "trkseg"))
    for trkseg, segment in zip(trksegs, track.segments):
        for trkpt, wp in zip(trkseg.findall(_qn(ns, "trkpt")), segment.points):
            t = trkpt.find(_qn(ns, "time"))
            if wp.time is None:
                if t is not None:
                    trkpt.remove(t)
                continue
            if t is None:
                t = ET.Element(_qn(ns, "time"))
                ele = trkpt.find(_qn(ns, "ele"))
                pos = list(trkpt).index(ele) + 1 if ele is not None else 0
                trkpt.insert(pos, t)
            t.text = _format_gpx_time(wp.time)
            written += 1
    return written
