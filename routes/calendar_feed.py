from datetime import date, timedelta

from flask import Blueprint, Response, current_app
from models.booking import Booking, BookingStatus
from utils.ical import build_calendar

calendar_bp = Blueprint("calendar", __name__)


@calendar_bp.get("/calendar.ics")
def calendar_feed():
    lookback = current_app.config.get("CALENDAR_FEED_LOOKBACK_DAYS", 7)
    from_date = date.today() - timedelta(days=lookback)

    items = (
        Booking.query
        .filter(Booking.status == BookingStatus.SCHEDULED, Booking.date >= from_date)
        .order_by(Booking.date.asc(), Booking.start_minutes.asc())
        .all()
    )

    return Response(
        build_calendar(items),
        mimetype="text/calendar",
        headers={"Content-Disposition": "attachment; filename=calendar.ics"},
    )
