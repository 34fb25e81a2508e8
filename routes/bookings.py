from datetime import datetime

from flask import Blueprint, request, jsonify, current_app
from models import db
from models.client import Client
from models.booking import Booking, BookingStatus
from scheduling.availability import apply_override, check_availability, check_bulk_move
from scheduling.counters import complete_booking, undo_complete_booking
from scheduling.intervals import format_hhmm
from utils.audit import log_event
from utils.forms import clean_str, parse_bool, parse_date, parse_duration, parse_ids, parse_time
from utils.messaging import send_text

bookings_bp = Blueprint("bookings", __name__)


def _conflict_response(result):
    if result.overridable:
        message = "Booking conflicts with existing bookings; resubmit with override to cancel them"
    else:
        message = "Requested time overlaps blocked time and cannot be overridden"
    return jsonify(error=message, **result.to_dict()), 409


def _get_booking(booking_id: int):
    return db.session.get(Booking, booking_id)


def _notify_booking_created(booking: Booking):
    client = booking.client
    if not client or not client.phone:
        return
    body = (
        f"Hi {client.name}, your {booking.session_type} session is booked for "
        f"{booking.date.strftime('%a %d %b')} at {format_hhmm(booking.start_minutes)}."
    )
    ok, error = send_text(client.phone, body)
    log_event(
        "BOOKING_NOTIFY",
        entity="booking",
        entity_id=booking.id,
        metadata={"sent": ok, "error": error},
    )


# ---------- list / view ----------
@bookings_bp.get("/bookings")
def list_bookings():
    # optional filters: date (YYYY-MM-DD), status, client_id
    status = (request.args.get("status") or "").strip().upper()
    client_id = request.args.get("client_id", type=int)
    date_str = request.args.get("date")

    q = Booking.query
    if status:
        if status not in BookingStatus.ALL:
            return jsonify(error="Unknown status"), 400
        q = q.filter(Booking.status == status)
    if client_id:
        q = q.filter(Booking.client_id == client_id)
    if date_str:
        try:
            day = parse_date(date_str)
        except ValueError as exc:
            return jsonify(error=str(exc)), 400
        q = q.filter(Booking.date == day)

    rows = q.order_by(Booking.date.asc(), Booking.start_minutes.asc()).limit(200).all()
    return jsonify([b.to_dict() for b in rows]), 200


@bookings_bp.get("/bookings/<int:booking_id>")
def get_booking(booking_id: int):
    booking = _get_booking(booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404
    return jsonify(booking.to_dict()), 200


# ---------- create (availability checked) ----------
@bookings_bp.post("/bookings")
def create_booking():
    data = request.get_json(silent=True) or {}
    try:
        client_id = int(data.get("client_id"))
    except (TypeError, ValueError):
        return jsonify(error="client_id required"), 400

    try:
        day = parse_date(data.get("date"))
        start = parse_time(data.get("start"))
        duration = parse_duration(
            data.get("duration_minutes"),
            current_app.config.get("DEFAULT_SESSION_MINUTES", 60),
        )
    except (TypeError, ValueError) as exc:
        return jsonify(error=str(exc)), 400

    session_type = clean_str(data.get("session_type")) or current_app.config.get("DEFAULT_SESSION_TYPE", "Training")
    if len(session_type) > 64:
        return jsonify(error="session_type must be at most 64 characters"), 400
    override = parse_bool(data.get("override"))

    client = db.session.get(Client, client_id)
    if not client:
        return jsonify(error="Client not found"), 404

    result = check_availability(day, start, duration, override=override)
    if not result.ok:
        return _conflict_response(result)

    cancelled_ids = [b.id for b in result.clashing]
    apply_override(result)

    booking = Booking(
        client_id=client.id,
        date=day,
        start_minutes=start,
        duration_minutes=duration,
        session_type=session_type,
        status=BookingStatus.SCHEDULED,
    )
    db.session.add(booking)
    db.session.commit()

    log_event(
        "BOOKING_CREATE",
        entity="booking",
        entity_id=booking.id,
        metadata={"client_id": client.id, "cancelled": cancelled_ids},
    )
    _notify_booking_created(booking)

    return jsonify(
        booking=booking.to_dict(),
        cancelled_ids=cancelled_ids,
        conflicts=[c.to_dict() for c in result.conflicts],
    ), 201


# ---------- reschedule one booking ----------
@bookings_bp.post("/bookings/<int:booking_id>/reschedule")
def reschedule_booking(booking_id: int):
    data = request.get_json(silent=True) or {}

    booking = _get_booking(booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404
    if booking.status == BookingStatus.CANCELLED:
        return jsonify(error="Cancelled bookings cannot be rescheduled"), 400

    try:
        day = parse_date(data.get("date"))
        start = parse_time(data.get("start"))
    except (TypeError, ValueError) as exc:
        return jsonify(error=str(exc)), 400
    override = parse_bool(data.get("override"))

    result = check_availability(
        day,
        start,
        booking.duration_minutes,
        exclude_booking_id=booking.id,
        override=override,
    )
    if not result.ok:
        return _conflict_response(result)

    cancelled_ids = [b.id for b in result.clashing]
    apply_override(result)

    previous = {"date": booking.date.isoformat(), "start": format_hhmm(booking.start_minutes)}
    booking.date = day
    booking.start_minutes = start
    booking.updated_at = datetime.utcnow()
    db.session.commit()

    log_event(
        "BOOKING_RESCHEDULE",
        entity="booking",
        entity_id=booking.id,
        metadata={"from": previous, "cancelled": cancelled_ids},
    )
    return jsonify(booking=booking.to_dict(), cancelled_ids=cancelled_ids), 200


# ---------- move several bookings to one new start ----------
@bookings_bp.post("/bookings/bulk-amend")
def bulk_amend_bookings():
    data = request.get_json(silent=True) or {}
    ids = parse_ids(data.get("ids"))
    if not ids:
        return jsonify(error="ids required"), 400

    try:
        day = parse_date(data.get("date"))
        start = parse_time(data.get("start"))
    except (TypeError, ValueError) as exc:
        return jsonify(error=str(exc)), 400
    override = parse_bool(data.get("override"))

    selected = Booking.query.filter(Booking.id.in_(ids)).all()
    if not selected:
        return jsonify(error="No matching bookings"), 404

    result = check_bulk_move(
        selected,
        day,
        start,
        override=override,
        self_overlap_blocks=current_app.config.get("BULK_SELF_OVERLAP_BLOCKS", True),
    )
    if not result.ok:
        return _conflict_response(result)

    cancelled_ids = [b.id for b in result.clashing]
    apply_override(result)

    now = datetime.utcnow()
    for booking in selected:
        booking.date = day
        booking.start_minutes = start
        booking.updated_at = now
    db.session.commit()

    log_event(
        "BOOKING_BULK_AMEND",
        entity="booking",
        metadata={"ids": [b.id for b in selected], "date": day.isoformat(), "cancelled": cancelled_ids},
    )
    return jsonify(
        updated=len(selected),
        cancelled_ids=cancelled_ids,
        conflicts=[c.to_dict() for c in result.conflicts],
    ), 200


# ---------- status changes ----------
@bookings_bp.post("/bookings/<int:booking_id>/complete")
def mark_completed(booking_id: int):
    booking = _get_booking(booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404

    try:
        complete_booking(booking)
    except ValueError as exc:
        return jsonify(error=str(exc)), 400
    db.session.commit()

    log_event("BOOKING_COMPLETE", entity="booking", entity_id=booking.id, metadata={"client_id": booking.client_id})
    return jsonify(booking=booking.to_dict(), client=booking.client.to_dict()), 200


@bookings_bp.post("/bookings/<int:booking_id>/undo-complete")
def undo_completed(booking_id: int):
    booking = _get_booking(booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404

    try:
        undo_complete_booking(booking)
    except ValueError as exc:
        return jsonify(error=str(exc)), 400
    db.session.commit()

    log_event("BOOKING_UNDO_COMPLETE", entity="booking", entity_id=booking.id, metadata={"client_id": booking.client_id})
    return jsonify(booking=booking.to_dict(), client=booking.client.to_dict()), 200


@bookings_bp.post("/bookings/<int:booking_id>/cancel")
def cancel_booking(booking_id: int):
    data = request.get_json(silent=True) or {}
    reason = clean_str(data.get("reason"))

    booking = _get_booking(booking_id)
    if not booking:
        return jsonify(error="Booking not found"), 404

    if booking.status != BookingStatus.SCHEDULED:
        return jsonify(error="Booking not cancellable"), 400

    booking.set_status(BookingStatus.CANCELLED)
    db.session.commit()

    log_event("BOOKING_CANCEL", entity="booking", entity_id=booking.id, metadata={"reason": reason})
    return jsonify(message="Cancelled"), 200
