"""Tests for the interval value type and time helpers."""

import pytest

from scheduling.intervals import Interval, format_hhmm, overlaps, parse_hhmm


@pytest.mark.parametrize(
    "a, b",
    [
        (Interval(540, 60), Interval(570, 30)),   # 09:00-10:00 vs 09:30-10:00
        (Interval(540, 60), Interval(500, 60)),   # starts before, ends inside
        (Interval(540, 60), Interval(480, 180)),  # fully contained
        (Interval(540, 60), Interval(540, 60)),   # identical
    ],
)
def test_overlapping_intervals_conflict(a, b):
    assert overlaps(a, b)
    assert overlaps(b, a)


@pytest.mark.parametrize(
    "a, b",
    [
        (Interval(540, 60), Interval(600, 30)),  # touches at 10:00
        (Interval(540, 60), Interval(480, 60)),  # ends exactly at 09:00
        (Interval(540, 60), Interval(720, 60)),  # far apart
    ],
)
def test_boundary_touching_or_disjoint_intervals_do_not_conflict(a, b):
    assert not overlaps(a, b)
    assert not overlaps(b, a)


def test_zero_duration_never_overlaps():
    assert not overlaps(Interval(570, 0), Interval(540, 60))
    assert not overlaps(Interval(540, 60), Interval(570, 0))


def test_clamp_into_window():
    assert Interval(300, 120).clamp(360, 1320) == Interval(360, 60)
    assert Interval(1300, 60).clamp(360, 1320) == Interval(1300, 20)
    assert Interval(100, 60).clamp(360, 1320).is_empty


def test_parse_and_format_hhmm():
    assert parse_hhmm("09:30") == 570
    assert parse_hhmm("00:00") == 0
    assert format_hhmm(570) == "09:30"
    assert format_hhmm(1440) == "24:00"


@pytest.mark.parametrize("value", ["", "9", "25:00", "09:75", "ab:cd", None])
def test_parse_hhmm_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_hhmm(value)
