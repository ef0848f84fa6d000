# mountainsnail/formats/splits.py
"""
Splits file reader.

Expected layout:

    {"splits": [[ascent, descent], [ascent, descent], ...]}

Ascent and descent are whole, non-negative meters.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from mountainsnail.analyze.splits import Split
from mountainsnail.errors import InvalidSplitsError


def _as_meters(v: Any, where: str) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise InvalidSplitsError(f"{where}: expected an integer number of meters, got {v!r}")
    if v < 0:
        raise InvalidSplitsError(f"{where}: meters must not be negative, got {v}")
    return v


def parse_splits(doc: Any, *, source: str = "<splits>") -> list[Split]:
    if not isinstance(doc, dict) or "splits" not in doc:
        raise InvalidSplitsError(f"{source}: expected an object with a 'splits' list")
    raw = doc["splits"]
    if not isinstance(raw, list):
        raise InvalidSplitsError(f"{source}: 'splits' must be a list")

    out: list[Split] = []
    for i, item in enumerate(raw):
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise InvalidSplitsError(f"{source}: split {i} must be a [ascent, descent] pair, got {item!r}")
        out.append(Split(
            ascent=_as_meters(item[0], f"{source}: split {i} ascent"),
            descent=_as_meters(item[1], f"{source}: split {i} descent"),
        ))
    return out


def load_splits(path: Path) -> list[Split]:
    """
    Read a splits JSON file.

    Raises:
      InvalidSplitsError (unreadable file, bad JSON, bad values)
    """
    try:
        doc = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise InvalidSplitsError(f"Cannot open splits file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidSplitsError(f"Failed to read splits file {path}: {e}") from e
    return parse_splits(doc, source=str(path))
