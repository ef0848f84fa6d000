# mountainsnail/terrain.py
"""
Terrain presets for the slope speed model.

Each preset maps to a fixed adjustment value. "manual" is not a preset: it
asks the caller for a free-form adjustment instead.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional

from mountainsnail.errors import ConfigurationError

MANUAL = "manual"
DEFAULT_MANUAL_ADJUSTMENT = 0.16


class Terrain(Enum):
    ROAD = "road"
    PATH = "path"
    TRACK = "track"
    ALPINE = "alpine"

    @property
    def adjustment(self) -> float:
        return TERRAIN_ADJUSTMENTS[self]


TERRAIN_ADJUSTMENTS: dict[Terrain, float] = {
    Terrain.ROAD: 0.05,
    Terrain.PATH: 0.08,
    Terrain.TRACK: 0.175,
    Terrain.ALPINE: 0.28,
}

# Menu order offered to users; "manual" comes last.
TERRAIN_CHOICES: list[str] = [t.value for t in Terrain] + [MANUAL]


def parse_terrain(name: str) -> Optional[Terrain]:
    """
    Map a terrain name to a preset.

    Returns None for "manual". Raises ConfigurationError for unknown names.
    """
    key = (name or "").strip().lower()
    if key == MANUAL:
        return None
    try:
        return Terrain(key)
    except ValueError:
        raise ConfigurationError(
            f"Unknown terrain {name!r}. Valid: {', '.join(TERRAIN_CHOICES)}."
        ) from None


def validate_adjustment(value: Any) -> float:
    """Coerce a free-form adjustment into a finite, non-negative float."""
    if isinstance(value, bool):
        raise ConfigurationError(f"Adjustment must be a number (got {value!r})")
    try:
        adj = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Adjustment must be a number (got {value!r})") from None
    if not math.isfinite(adj) or adj < 0:
        raise ConfigurationError(f"Adjustment must be a finite value >= 0 (got {value!r})")
    return adj


def resolve_adjustment(terrain: Optional[str], manual: Any = None) -> float:
    """
    Resolve the adjustment for a terrain choice.

    - preset name: its fixed value (`manual` is ignored)
    - "manual" or None: the validated `manual` value
    """
    preset = parse_terrain(terrain) if terrain is not None else None
    if preset is not None:
        return preset.adjustment
    if manual is None:
        raise ConfigurationError("Manual terrain selected but no adjustment value was given")
    return validate_adjustment(manual)
