from typing import Iterable, List

from scheduling.intervals import Interval


def compute_gaps(day_bookings: Iterable, day_blocks: Iterable, working_start: int, working_end: int) -> List[Interval]:
    """
    Free sub-intervals of [working_start, working_end) on one day.

    Bookings and blocks may be model rows (anything with ``.interval``) or
    plain Interval values. Everything is clamped into the window first and
    zero-length leftovers are dropped.
    """
    occupied = []
    for item in list(day_bookings) + list(day_blocks):
        interval = item if isinstance(item, Interval) else item.interval
        clamped = interval.clamp(working_start, working_end)
        if not clamped.is_empty:
            occupied.append(clamped)
    occupied.sort(key=lambda iv: (iv.start, iv.end))

    gaps = []
    cursor = working_start
    for iv in occupied:
        if iv.start > cursor:
            gaps.append(Interval(cursor, iv.start - cursor))
        cursor = max(cursor, iv.end)
    if cursor < working_end:
        gaps.append(Interval(cursor, working_end - cursor))
    return gaps
