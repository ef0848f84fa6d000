"""
Mountain Snail configuration loader

This module centralizes *all* configuration handling for Mountain Snail.

Design goals:
- Keep the CLI Unix-friendly: CLI flags override everything.
- Provide sensible defaults if no config exists.
- Allow per-machine config without committing personal paths:
    ~/.config/mountainsnail/config.toml
- Allow repo-local config:
    <repo_root>/config/config.toml
- Allow environment variable overrides for automation.

Precedence (highest to lowest) for any given value:
1) CLI argument (handled by the CLI)
2) Environment variables (MOUNTAINSNAIL_*)
3) User config: ~/.config/mountainsnail/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults

Sections understood:

    [paths]
    documents_root = "~/Documents"     # where GPX files are looked up
    splits_file = "./splits.json"      # default splits file

    [estimate]
    default_terrain = "path"           # road | path | track | alpine | manual
    manual_adjustment = 0.16           # offered when terrain is manual
    split_length = 1000                # meters
    distance_method = "haversine"      # haversine | geodesic
    distance_3d = false                # include elevation delta in leg length

Unlike paths, estimate values are validated here: a bad terrain name or a
negative split length in a config file is a ConfigurationError, not a
silent fallback.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from mountainsnail.analyze.geodesy import get_distance_function
from mountainsnail.analyze.splits import validate_split_length
from mountainsnail.errors import ConfigurationError
from mountainsnail.terrain import DEFAULT_MANUAL_ADJUSTMENT, parse_terrain, validate_adjustment

# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    Behavior:
    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise a ConfigurationError
      with a clear, user-facing message.
    """
    if not path.is_file():
        return {}

    try:
        return tomllib.loads(path.read_text(encoding="utf-8")) or {}
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "paths.documents_root")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_path(v: Any) -> Optional[Path]:
    """
    Coerce a config value into a pathlib.Path if possible.

    Returns None if value cannot be interpreted as a path.
    """
    if v is None:
        return None
    if isinstance(v, Path):
        return v.expanduser()
    if isinstance(v, str):
        return Path(v).expanduser()
    return None


def _as_bool(v: Any, key: str) -> bool:
    """
    Coerce loosely-typed config values into booleans.

    Accepts common truthy / falsy representations so that TOML and
    environment variables behave consistently.
    """
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        s = v.strip().lower()
        if s in ("true", "yes", "y", "1", "on"):
            return True
        if s in ("false", "no", "n", "0", "off"):
            return False
    raise ConfigurationError(f"{key}: expected a boolean, got {v!r}")


def _as_terrain(v: Any, key: str) -> str:
    if not isinstance(v, str):
        raise ConfigurationError(f"{key}: expected a terrain name, got {v!r}")
    parse_terrain(v)
    return v.strip().lower()


def _as_method(v: Any, key: str) -> str:
    if not isinstance(v, str):
        raise ConfigurationError(f"{key}: expected a distance method name, got {v!r}")
    get_distance_function(v)
    return v.strip().lower()


# key -> coercion applied to raw TOML/env values
_ESTIMATE_KEYS = {
    "estimate.default_terrain": _as_terrain,
    "estimate.manual_adjustment": lambda v, key: validate_adjustment(v),
    "estimate.split_length": lambda v, key: validate_split_length(v),
    "estimate.distance_method": _as_method,
    "estimate.distance_3d": _as_bool,
}

_PATH_KEYS = ("paths.documents_root", "paths.splits_file")


# ---------------------------------------------------------------------------
# Repo discovery + defaults
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for the repo root.

    Heuristic:
    - The presence of a `config/` directory marks the repo root
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


def default_documents_root() -> Path:
    """Default directory browsed for GPX files."""
    return Path.home() / "Documents"


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SnailPaths:
    """
    Canonical resolved filesystem paths.
    """

    documents_root: Path
    splits_file: Path


@dataclass(frozen=True)
class EstimateConfig:
    """
    Defaults for an estimation run. CLI flags override each of these.
    """

    default_terrain: str = "path"
    manual_adjustment: float = DEFAULT_MANUAL_ADJUSTMENT
    split_length: int = 1000
    distance_method: str = "haversine"
    distance_3d: bool = False


@dataclass(frozen=True)
class SnailConfig:
    """
    Fully merged configuration.

    Attributes:
    - paths: resolved filesystem layout
    - estimate: estimation defaults
    - source: provenance map showing where each value came from
    """

    paths: SnailPaths
    estimate: EstimateConfig
    source: dict[str, str]


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
    environ: Optional[dict[str, str]] = None,
) -> SnailConfig:
    """
    Load, merge, and validate all configuration.

    This function is the single authoritative entry point
    for configuration access.
    """
    if environ is None:
        environ = dict(os.environ)

    # Locate repo and config files
    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "mountainsnail" / "config.toml"

    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    # ------------------------------------------------------------------
    # Defaults
    # ------------------------------------------------------------------
    values: dict[str, Any] = {
        "paths.documents_root": default_documents_root(),
        "paths.splits_file": Path("splits.json"),
    }
    defaults = EstimateConfig()
    for key in _ESTIMATE_KEYS:
        values[key] = getattr(defaults, key.split(".", 1)[1])

    # Track provenance for debugging
    src = {key: "default" for key in values}

    # ------------------------------------------------------------------
    # Repo then user config (user overrides repo)
    # ------------------------------------------------------------------
    for cfg, label, cfg_path in ((repo_cfg, "repo", repo_config_path), (user_cfg, "user", user_config_path)):
        for key in _PATH_KEYS:
            v = _as_path(_deep_get(cfg, key))
            if v is None:
                continue
            values[key] = v
            src[key] = f"{label}:{cfg_path}"

        for key, coerce in _ESTIMATE_KEYS.items():
            raw = _deep_get(cfg, key)
            if raw is None:
                continue
            try:
                values[key] = coerce(raw, key)
            except ConfigurationError as e:
                raise ConfigurationError(f"{cfg_path}: {e}") from e
            src[key] = f"{label}:{cfg_path}"

    # ------------------------------------------------------------------
    # Environment variable overrides (highest non-CLI precedence)
    # ------------------------------------------------------------------
    env_map = {
        "MOUNTAINSNAIL_DOCUMENTS_ROOT": "paths.documents_root",
        "MOUNTAINSNAIL_SPLITS_FILE": "paths.splits_file",
        "MOUNTAINSNAIL_TERRAIN": "estimate.default_terrain",
        "MOUNTAINSNAIL_MANUAL_ADJUSTMENT": "estimate.manual_adjustment",
        "MOUNTAINSNAIL_SPLIT_LENGTH": "estimate.split_length",
        "MOUNTAINSNAIL_DISTANCE_METHOD": "estimate.distance_method",
        "MOUNTAINSNAIL_DISTANCE_3D": "estimate.distance_3d",
    }

    for env, key in env_map.items():
        raw = environ.get(env)
        if not raw:
            continue
        if key in _PATH_KEYS:
            values[key] = Path(raw).expanduser()
        else:
            try:
                values[key] = _ESTIMATE_KEYS[key](raw, key)
            except ConfigurationError as e:
                raise ConfigurationError(f"{env}: {e}") from e
        src[key] = f"env:{env}"

    paths = SnailPaths(
        documents_root=values["paths.documents_root"].expanduser(),
        splits_file=values["paths.splits_file"].expanduser(),
    )
    estimate = EstimateConfig(
        default_terrain=values["estimate.default_terrain"],
        manual_adjustment=values["estimate.manual_adjustment"],
        split_length=values["estimate.split_length"],
        distance_method=values["estimate.distance_method"],
        distance_3d=values["estimate.distance_3d"],
    )

    return SnailConfig(paths=paths, estimate=estimate, source=src)
