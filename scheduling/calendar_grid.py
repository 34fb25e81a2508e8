from collections import namedtuple
from datetime import date, timedelta

from sqlalchemy import func

from models import db, Booking, BookingStatus

GRID_CELLS = 42  # six full weeks

GridCell = namedtuple("GridCell", ["date", "in_current_month", "booking_count"])


def month_bounds(year: int, month: int):
    """Return (first day of month, first day of next month)."""
    first = date(year, month, 1)
    year_next, month_next = shift_month(year, month, 1)
    return first, date(year_next, month_next, 1)


def shift_month(year: int, month: int, delta: int):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def build_month_grid(year: int, month: int, booking_counts_by_date=None):
    counts = booking_counts_by_date or {}
    first, _ = month_bounds(year, month)
    # date.weekday() is already Monday=0
    grid_start = first - timedelta(days=first.weekday())

    cells = []
    for offset in range(GRID_CELLS):
        day = grid_start + timedelta(days=offset)
        in_month = day.year == year and day.month == month
        cells.append(GridCell(day, in_month, counts.get(day, 0) if in_month else 0))
    return cells


def booking_counts_for_month(year: int, month: int):
    first, next_first = month_bounds(year, month)
    rows = (
        db.session.query(Booking.date, func.count(Booking.id))
        .filter(
            Booking.status == BookingStatus.SCHEDULED,
            Booking.date >= first,
            Booking.date < next_first,
        )
        .group_by(Booking.date)
        .all()
    )
    return {day: count for day, count in rows}


def cell_to_dict(cell: GridCell):
    return {
        "date": cell.date.isoformat(),
        "in_current_month": cell.in_current_month,
        "booking_count": cell.booking_count,
    }
