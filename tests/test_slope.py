import datetime as dt
import math

import pytest

from mountainsnail.analyze.slope import MAX_DURATION, add_durations, slope_duration
from mountainsnail.errors import ConfigurationError


def formula_seconds(delta, distance_m, adjustment):
    return round(0.6 * math.exp(3.5 * (delta / distance_m + adjustment)) * distance_m)


@pytest.mark.parametrize(
    "delta, distance_m, adjustment",
    [
        (100, 1000, 0.08),
        (-50, 1000, 0.08),
        (0, 250.5, 0.05),
        (12.3, 37.9, 0.28),
        (-300, 800, 0.175),
    ],
)
def test_matches_formula(delta, distance_m, adjustment):
    assert slope_duration(delta, distance_m, adjustment) == dt.timedelta(
        seconds=formula_seconds(delta, distance_m, adjustment)
    )


def test_whole_seconds_only():
    d = slope_duration(17.0, 123.4, 0.08)
    assert d.microseconds == 0


@pytest.mark.parametrize("delta", [-500, -1, 0, 1, 500])
@pytest.mark.parametrize("adjustment", [0.0, 0.08, 0.28, 1.0])
def test_zero_distance_costs_nothing(delta, adjustment):
    assert slope_duration(delta, 0, adjustment) == dt.timedelta(0)


@pytest.mark.parametrize("delta", [-900, -100, 0, 100, 900])
@pytest.mark.parametrize("distance_m", [0, 1, 50, 1000, 25000])
@pytest.mark.parametrize("adjustment", [0.0, 0.05, 0.175, 0.5])
def test_never_negative(delta, distance_m, adjustment):
    assert slope_duration(delta, distance_m, adjustment) >= dt.timedelta(0)


def test_slower_with_bigger_adjustment():
    adjustments = [0.0, 0.05, 0.08, 0.175, 0.28, 0.5]
    durations = [slope_duration(50, 1000, a) for a in adjustments]
    assert all(a < b for a, b in zip(durations, durations[1:]))


def test_slower_with_steeper_ascent():
    deltas = [-200, -100, 0, 100, 200]
    durations = [slope_duration(d, 1000, 0.08) for d in deltas]
    assert all(a < b for a, b in zip(durations, durations[1:]))


def test_negative_distance_rejected():
    with pytest.raises(ConfigurationError):
        slope_duration(0, -1, 0.08)


@pytest.mark.parametrize(
    "distance_m, expected",
    [
        (7.5, 4),   # 0.6 * 7.5 == 4.5
        (2.5, 2),   # 0.6 * 2.5 == 1.5
    ],
)
def test_half_seconds_round_to_even(distance_m, expected):
    assert slope_duration(0, distance_m, 0.0) == dt.timedelta(seconds=expected)


@pytest.mark.parametrize(
    "delta, distance_m",
    [(100, 1), (10, 1), (1000, 0.001), (900, 1), (1e6, 5e-324)],
)
def test_near_vertical_leg_saturates(delta, distance_m):
    d = slope_duration(delta, distance_m, 0.0)
    assert dt.timedelta(0) <= d <= MAX_DURATION
    assert d.microseconds == 0


def test_steeper_never_faster_past_saturation():
    durations = [slope_duration(d, 1, 0.08) for d in (0, 5, 10, 50, 100, 1000)]
    assert durations == sorted(durations)
    assert durations[-1] == MAX_DURATION


def test_steep_descent_is_zero_not_an_error():
    assert slope_duration(-1000, 0.001, 0.0) == dt.timedelta(0)


def test_add_durations_saturates():
    assert add_durations(dt.timedelta(seconds=1), dt.timedelta(seconds=2)) == dt.timedelta(seconds=3)
    assert add_durations(MAX_DURATION, MAX_DURATION) == MAX_DURATION
    assert add_durations(MAX_DURATION, dt.timedelta(seconds=1)) == MAX_DURATION
