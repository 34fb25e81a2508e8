from collections import defaultdict
from datetime import date, timedelta

from flask import Blueprint, request, jsonify, current_app
from models import db
from models.client import Client
from models.booking import Booking, BookingStatus
from scheduling.calendar_grid import month_bounds
from scheduling.counters import adjust_counter
from utils.audit import log_event
from utils.forms import clean_str, parse_bool

clients_bp = Blueprint("clients", __name__, url_prefix="/clients")

CLIENT_TEXT_FIELDS = {
    "phone": 30,
    "email": 255,
    "gym": 120,
    "preferred_time": 120,
}


def _duplicate_key(client: Client):
    return (
        (client.name or "").strip().lower(),
        (client.email or "").strip().lower(),
        (client.phone or "").strip(),
    )


def _duplicate_groups():
    """Groups of clients sharing name/email/phone; the lowest id is kept."""
    buckets = defaultdict(list)
    for c in Client.query.order_by(Client.id.asc()).all():
        buckets[_duplicate_key(c)].append(c)
    return [(group[0], group[1:]) for group in buckets.values() if len(group) > 1]


@clients_bp.get("")
def list_clients():
    clients = Client.query.order_by(Client.name.asc()).all()
    return jsonify([c.to_dict() for c in clients]), 200


@clients_bp.post("")
def create_client():
    data = request.get_json(silent=True) or {}
    name = clean_str(data.get("name"))
    if not name:
        return jsonify(error="Client name required"), 400
    if len(name) > 120:
        return jsonify(error="name must be at most 120 characters"), 400

    fields = {}
    for field, max_len in CLIENT_TEXT_FIELDS.items():
        value = clean_str(data.get(field))
        if value and len(value) > max_len:
            return jsonify(error=f"{field} must be at most {max_len} characters"), 400
        fields[field] = value

    try:
        sessions_left = int(data.get("sessions_left") or 0)
    except (TypeError, ValueError):
        return jsonify(error="sessions_left must be an integer"), 400

    client = Client(
        name=name,
        notes=data.get("notes") or None,
        on_holiday=parse_bool(data.get("on_holiday")),
        sessions_left=max(0, sessions_left),
        sessions_completed=0,
        **fields,
    )
    db.session.add(client)
    db.session.commit()

    log_event("CLIENT_CREATE", entity="client", entity_id=client.id, metadata={"name": client.name})
    return jsonify(client.to_dict()), 201


@clients_bp.get("/<int:client_id>")
def client_details(client_id: int):
    client = db.session.get(Client, client_id)
    if not client:
        return jsonify(error="Client not found"), 404

    today = date.today()
    start_of_week = today - timedelta(days=today.weekday())
    start_of_month, start_of_next_month = month_bounds(today.year, today.month)

    base = Booking.query.filter(
        Booking.client_id == client.id,
        Booking.status == BookingStatus.SCHEDULED,
    )

    upcoming = (
        base.filter(Booking.date >= today)
        .order_by(Booking.date.asc(), Booking.start_minutes.asc())
        .limit(10)
        .all()
    )
    recent = (
        base.filter(Booking.date < today)
        .order_by(Booking.date.desc(), Booking.start_minutes.desc())
        .limit(10)
        .all()
    )
    week_count = base.filter(
        Booking.date >= start_of_week,
        Booking.date < start_of_week + timedelta(days=7),
    ).count()
    month_count = base.filter(
        Booking.date >= start_of_month,
        Booking.date < start_of_next_month,
    ).count()

    return jsonify(
        client=client.to_dict(),
        upcoming=[b.to_dict() for b in upcoming],
        recent=[b.to_dict() for b in recent],
        week_count=week_count,
        month_count=month_count,
        preferred_time_chips=client.preferred_time_chips,
        holiday_text="On holiday" if client.on_holiday else None,
    ), 200


@clients_bp.post("/<int:client_id>/counters")
def adjust_client_counter(client_id: int):
    data = request.get_json(silent=True) or {}
    client = db.session.get(Client, client_id)
    if not client:
        return jsonify(error="Client not found"), 404

    try:
        delta = int(data.get("delta"))
    except (TypeError, ValueError):
        return jsonify(error="delta must be an integer"), 400

    target = data.get("target")
    try:
        moved = adjust_counter(client, target, delta, limit=current_app.config.get("COUNTER_DELTA_LIMIT", 5))
    except ValueError as exc:
        return jsonify(error=str(exc)), 400
    db.session.commit()

    log_event(
        "CLIENT_COUNTER_ADJUST",
        entity="client",
        entity_id=client.id,
        metadata={"target": target, "requested": delta, "applied": moved},
    )
    return jsonify(client=client.to_dict(), applied=moved), 200


@clients_bp.get("/duplicates")
def preview_duplicates():
    return jsonify([
        {"keep": keep.to_dict(), "duplicates": [d.to_dict() for d in dups]}
        for keep, dups in _duplicate_groups()
    ]), 200


@clients_bp.post("/duplicates/merge")
def merge_duplicates():
    merged = []
    moved_bookings = 0
    for keep, dups in _duplicate_groups():
        dup_ids = [d.id for d in dups]
        # re-point bookings first; client_id is NOT NULL with a restricting FK
        moved_bookings += (
            Booking.query
            .filter(Booking.client_id.in_(dup_ids))
            .update({Booking.client_id: keep.id}, synchronize_session=False)
        )
        for dup in dups:
            db.session.delete(dup)
        merged.append({"keep": keep.id, "removed": dup_ids})

    db.session.commit()

    if merged:
        log_event("CLIENT_MERGE", entity="client", metadata={"groups": merged, "bookings_moved": moved_bookings})
    return jsonify(message="Duplicate clients merged.", groups=merged, bookings_moved=moved_bookings), 200
