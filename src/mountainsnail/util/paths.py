# mountainsnail/util/paths.py
from __future__ import annotations

from pathlib import Path


def _is_gpx(p: Path) -> bool:
    return p.is_file() and p.suffix.lower() == ".gpx"


def list_gpx_candidates(root: Path) -> list[Path]:
    """
    GPX files directly in `root` or in its immediate subdirectories (no deeper).

    Returns [] if root is not a directory.
    """
    if not root.is_dir():
        return []
    out: list[Path] = []
    for entry in root.iterdir():
        if entry.is_dir():
            try:
                out.extend(p for p in entry.iterdir() if _is_gpx(p))
            except PermissionError:
                continue
        elif _is_gpx(entry):
            out.append(entry)
    out.sort()
    return out
