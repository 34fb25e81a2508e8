"""Tests for free-gap computation in the day view."""

from scheduling.gaps import compute_gaps
from scheduling.intervals import Interval

WINDOW = (6 * 60, 22 * 60)


def test_empty_day_is_one_full_gap():
    assert compute_gaps([], [], *WINDOW) == [Interval(360, 960)]


def test_booking_covering_window_leaves_no_gaps():
    assert compute_gaps([Interval(360, 960)], [], *WINDOW) == []


def test_bookings_and_blocks_are_merged():
    bookings = [Interval(540, 60), Interval(570, 60)]   # 09:00-10:00, 09:30-10:30
    blocks = [Interval(720, 60)]                        # 12:00-13:00
    gaps = compute_gaps(bookings, blocks, *WINDOW)
    assert gaps == [
        Interval(360, 180),   # 06:00-09:00
        Interval(630, 90),    # 10:30-12:00
        Interval(780, 540),   # 13:00-22:00
    ]


def test_contained_interval_does_not_move_cursor_back():
    gaps = compute_gaps([Interval(480, 240), Interval(500, 30)], [], *WINDOW)
    assert gaps == [Interval(360, 120), Interval(720, 600)]


def test_out_of_window_intervals_are_clamped_or_dropped():
    bookings = [Interval(300, 90), Interval(1300, 100), Interval(0, 60)]
    gaps = compute_gaps(bookings, [], *WINDOW)
    assert gaps == [Interval(390, 910)]


def test_zero_length_entries_are_ignored():
    assert compute_gaps([Interval(600, 0)], [], *WINDOW) == [Interval(360, 960)]


def test_accepts_model_rows(make_client, make_booking, make_block):
    alice = make_client()
    booking = make_booking(alice, start="06:00", duration=120)
    block = make_block(start="21:00", duration=60)
    assert compute_gaps([booking], [block], *WINDOW) == [Interval(480, 780)]
