import json
from datetime import date, datetime, timedelta

from flask import Blueprint, request, jsonify, current_app, redirect, url_for
from models.audit_log import AuditLog
from models.booking import Booking, BookingStatus
from models.client import Client
from scheduling.availability import blocks_on, bookings_on
from scheduling.calendar_grid import booking_counts_for_month, build_month_grid, cell_to_dict, shift_month
from scheduling.gaps import compute_gaps
from scheduling.intervals import format_hhmm, parse_hhmm
from utils.forms import parse_date

dashboard_bp = Blueprint("dashboard", __name__)

MAX_GRID_YEAR = 9998


def _working_window():
    start = parse_hhmm(current_app.config.get("WORKING_DAY_START", "06:00"))
    end = parse_hhmm(current_app.config.get("WORKING_DAY_END", "22:00"))
    return start, end


@dashboard_bp.get("/")
def index():
    return redirect(url_for("dashboard.month_dashboard"))


@dashboard_bp.get("/dashboard")
def month_dashboard():
    today = date.today()
    try:
        year = int(request.args.get("year") or today.year)
        month = int(request.args.get("month") or today.month)
    except ValueError:
        return jsonify(error="Invalid year/month"), 400
    # the grid reaches into the following month, so December 9999 has no room
    if not 1 <= month <= 12 or not 1 <= year <= MAX_GRID_YEAR:
        return jsonify(error="Invalid year/month"), 400

    selected_str = request.args.get("selected")
    try:
        selected = parse_date(selected_str) if selected_str else today
    except ValueError as exc:
        return jsonify(error=str(exc)), 400

    cells = build_month_grid(year, month, booking_counts_for_month(year, month))

    day_bookings = bookings_on(selected)
    day_blocks = blocks_on(selected)
    window_start, window_end = _working_window()
    gaps = compute_gaps(day_bookings, day_blocks, window_start, window_end)

    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)

    return jsonify(
        year=year,
        month=month,
        prev={"year": prev_year, "month": prev_month},
        next={"year": next_year, "month": next_month},
        cells=[cell_to_dict(c) for c in cells],
        selected={
            "date": selected.isoformat(),
            "bookings": [b.to_dict() for b in day_bookings],
            "blocks": [b.to_dict() for b in day_blocks],
            "gaps": [
                {"start": format_hhmm(g.start), "end": format_hhmm(g.end), "minutes": g.duration}
                for g in gaps
            ],
        },
    ), 200


@dashboard_bp.get("/dashboard/week")
def week_dashboard():
    start = date.today()
    end = start + timedelta(days=7)

    rows = (
        Booking.query
        .filter(
            Booking.status == BookingStatus.SCHEDULED,
            Booking.date >= start,
            Booking.date <= end,
        )
        .order_by(Booking.date.asc(), Booking.start_minutes.asc())
        .all()
    )
    return jsonify(bookings=[b.to_dict() for b in rows]), 200


@dashboard_bp.get("/management")
def management_summary():
    today = date.today()
    start_of_week = today - timedelta(days=today.weekday())
    end_of_week = start_of_week + timedelta(days=7)

    total_clients = Client.query.count()
    bookings_this_week = Booking.query.filter(
        Booking.status == BookingStatus.SCHEDULED,
        Booking.date >= start_of_week,
        Booking.date < end_of_week,
    ).count()
    # cancellations made this week, whatever date the booking was for
    cancellations_this_week = Booking.query.filter(
        Booking.status == BookingStatus.CANCELLED,
        Booking.updated_at >= datetime.combine(start_of_week, datetime.min.time()),
    ).count()

    limit = request.args.get("limit", type=int) or 10
    limit = max(1, min(limit, 100))
    recent = AuditLog.query.order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).limit(limit).all()

    return jsonify(
        total_clients=total_clients,
        bookings_this_week=bookings_this_week,
        cancellations_this_week=cancellations_this_week,
        recent_changes=[
            {
                "timestamp": r.timestamp.isoformat(),
                "action": r.action,
                "entity": r.entity,
                "entity_id": r.entity_id,
                "metadata": json.loads(r.metadata_json) if r.metadata_json else None,
            }
            for r in recent
        ],
    ), 200
