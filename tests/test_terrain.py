import pytest

from mountainsnail.errors import ConfigurationError
from mountainsnail.terrain import (
    TERRAIN_CHOICES,
    Terrain,
    parse_terrain,
    resolve_adjustment,
    validate_adjustment,
)


@pytest.mark.parametrize(
    "name, expected",
    [("road", 0.05), ("path", 0.08), ("track", 0.175), ("alpine", 0.28)],
)
def test_preset_values(name, expected):
    assert resolve_adjustment(name) == expected
    assert Terrain(name).adjustment == expected


def test_menu_order_ends_with_manual():
    assert TERRAIN_CHOICES == ["road", "path", "track", "alpine", "manual"]


def test_parse_is_case_insensitive():
    assert parse_terrain(" Alpine ") is Terrain.ALPINE


def test_manual_uses_given_value():
    assert parse_terrain("manual") is None
    assert resolve_adjustment("manual", "0.16") == 0.16
    assert resolve_adjustment(None, 0.3) == 0.3


def test_preset_ignores_manual_value():
    assert resolve_adjustment("track", 9.0) == 0.175


def test_manual_without_value():
    with pytest.raises(ConfigurationError):
        resolve_adjustment("manual")


def test_unknown_terrain():
    with pytest.raises(ConfigurationError, match="Unknown terrain"):
        parse_terrain("glacier")


@pytest.mark.parametrize("bad", ["abc", "", None, True, -0.01, float("nan"), float("inf"), "-1"])
def test_invalid_adjustments(bad):
    with pytest.raises(ConfigurationError):
        validate_adjustment(bad)


def test_zero_adjustment_allowed():
    assert validate_adjustment("0") == 0.0
