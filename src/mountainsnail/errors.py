# mountainsnail/errors

"""
mountainsnail.errors

Central exception hierarchy for Mountain Snail.

Rationale:
  - Modules raise specific, meaningful errors.
  - Callers can catch MountainSnailError (broad) or specific subclasses (narrow).
"""


class MountainSnailError(RuntimeError):
    """Base class for all Mountain Snail runtime errors."""


# ---- Geometry errors ---------------------------

class GeometryError(MountainSnailError):
    """Distance between two points could not be computed."""


# ---- Input file errors -------------------------

class ParseError(MountainSnailError):
    """An input file could not be read into the expected structure."""

class InvalidGpxError(ParseError):
    """GPX file could not be parsed or did not contain expected data structures."""

class InvalidSplitsError(ParseError):
    """Splits JSON file is malformed or holds invalid split values."""


# ---- Configuration errors ----------------------

class ConfigurationError(MountainSnailError):
    """A supplied setting (adjustment, split length, terrain, config file) is invalid."""


# ---- Selection errors --------------------------

class SelectionError(MountainSnailError):
    """Interactive file or track selection failed."""

class FzfNotFoundError(SelectionError):
    """fzf is required but not available on PATH."""
