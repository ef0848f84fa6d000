import datetime as dt
import json
from pathlib import Path

import pytest

from mountainsnail.analyze.slope import slope_duration
from mountainsnail.analyze.splits import (
    Split,
    estimate_splits,
    split_timetable,
    summarize_splits,
    validate_split_length,
)
from mountainsnail.errors import ConfigurationError, InvalidSplitsError
from mountainsnail.formats.splits import load_splits, parse_splits


def test_two_split_example():
    splits = [Split(100, 0), Split(0, 50)]
    first = slope_duration(100, 1000, 0.08)
    second = slope_duration(-50, 1000, 0.08)

    assert estimate_splits(splits, 1000, 0.08) == [first, second]

    rows = split_timetable(splits, 1000, 0.08)
    assert [(r.index, r.duration, r.cumulative) for r in rows] == [
        (0, first, first),
        (1, second, first + second),
    ]


@pytest.mark.parametrize(
    "splits",
    [
        [Split(0, 0)],
        [Split(100, 0), Split(0, 50), Split(30, 30)],
        [Split(a, (7 * a) % 130) for a in range(0, 400, 37)],
    ],
)
def test_final_cumulative_is_sum(splits):
    rows = split_timetable(splits, 750, 0.175)
    assert rows[-1].cumulative == sum((r.duration for r in rows), dt.timedelta(0))


def test_signed_delta_uses_ascent_minus_descent():
    assert Split(120, 20).delta == 100
    assert estimate_splits([Split(120, 20)], 1000, 0.05) == [slope_duration(100, 1000, 0.05)]


def test_empty_splits():
    assert estimate_splits([], 1000, 0.08) == []
    assert split_timetable([], 1000, 0.08) == []
    assert summarize_splits([], 1000, 0.08).duration == dt.timedelta(0)


def test_summary():
    splits = [Split(100, 0), Split(0, 50), Split(10, 10)]
    s = summarize_splits(splits, 500, 0.08)
    assert s.splits == 3
    assert s.distance_km == 1.5
    assert s.ascent_m == 110
    assert s.descent_m == 60
    assert s.duration == split_timetable(splits, 500, 0.08)[-1].cumulative


@pytest.mark.parametrize("value, expected", [(1000, 1000), ("250", 250), (500.0, 500)])
def test_split_length_accepted(value, expected):
    assert validate_split_length(value) == expected


@pytest.mark.parametrize("bad", [0, -1000, "-5", "abc", "10.5", 12.5, None, True])
def test_split_length_rejected(bad):
    with pytest.raises(ConfigurationError):
        validate_split_length(bad)


# ---- splits file ----

def test_load_splits(tmp_path: Path):
    p = tmp_path / "splits.json"
    p.write_text(json.dumps({"splits": [[100, 0], [0, 50]]}), encoding="utf-8")
    assert load_splits(p) == [Split(100, 0), Split(0, 50)]


def test_load_splits_missing_file(tmp_path: Path):
    with pytest.raises(InvalidSplitsError, match="Cannot open"):
        load_splits(tmp_path / "nope.json")


def test_load_splits_bad_json(tmp_path: Path):
    p = tmp_path / "splits.json"
    p.write_text("{splits: [", encoding="utf-8")
    with pytest.raises(InvalidSplitsError):
        load_splits(p)


@pytest.mark.parametrize(
    "doc",
    [
        [],
        {"laps": []},
        {"splits": {"0": [1, 2]}},
        {"splits": [[1, 2, 3]]},
        {"splits": [[1.5, 0]]},
        {"splits": [["100", 0]]},
        {"splits": [[-10, 0]]},
        {"splits": [[True, 0]]},
    ],
)
def test_parse_splits_rejects(doc):
    with pytest.raises(InvalidSplitsError):
        parse_splits(doc)
