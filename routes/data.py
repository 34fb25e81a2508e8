import logging

from flask import Blueprint, Response, request, jsonify
from sqlalchemy.exc import IntegrityError

from models import db
from models.booking import Booking
from models.client import Client
from utils.audit import log_event
from utils.csv_io import CsvImportError, export_bookings, export_clients, parse_bookings, parse_clients

data_bp = Blueprint("data", __name__, url_prefix="/data")
log = logging.getLogger(__name__)


def _csv_response(text: str, filename: str):
    return Response(
        text,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


def _uploaded_text():
    upload = request.files.get("file")
    if upload:
        return upload.read().decode("utf-8-sig")
    return request.get_data().decode("utf-8-sig")


@data_bp.get("/clients.csv")
def export_clients_csv():
    clients = Client.query.order_by(Client.id.asc()).all()
    return _csv_response(export_clients(clients), "clients.csv")


@data_bp.get("/bookings.csv")
def export_bookings_csv():
    bookings = Booking.query.order_by(Booking.date.asc(), Booking.start_minutes.asc()).all()
    return _csv_response(export_bookings(bookings), "bookings.csv")


@data_bp.post("/clients.csv")
def import_clients_csv():
    try:
        text = _uploaded_text()
    except UnicodeDecodeError:
        return jsonify(error="CSV must be UTF-8"), 400
    if not text.strip():
        return jsonify(error="CSV body or file upload required"), 400
    try:
        rows = parse_clients(text)
    except CsvImportError as exc:
        return jsonify(error=str(exc), row=exc.row), 400

    created = updated = 0
    for row in rows:
        client = db.session.get(Client, row["id"]) if row["id"] else None
        if client:
            for field, value in row.items():
                if field != "id":
                    setattr(client, field, value)
            updated += 1
        else:
            if row["id"] is None:
                row.pop("id")
            db.session.add(Client(**row))
            created += 1

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify(error="Import conflicts with existing data"), 409

    log.info("Client import: %s created, %s updated", created, updated)
    log_event("DATA_IMPORT_CLIENTS", entity="client", metadata={"created": created, "updated": updated})
    return jsonify(created=created, updated=updated), 200


@data_bp.post("/bookings.csv")
def import_bookings_csv():
    """Replace every booking with the uploaded rows."""
    try:
        text = _uploaded_text()
    except UnicodeDecodeError:
        return jsonify(error="CSV must be UTF-8"), 400
    if not text.strip():
        return jsonify(error="CSV body or file upload required"), 400

    known_client_ids = {cid for (cid,) in db.session.query(Client.id).all()}
    try:
        rows = parse_bookings(text, known_client_ids)
    except CsvImportError as exc:
        return jsonify(error=str(exc), row=exc.row), 400

    removed = Booking.query.delete(synchronize_session=False)
    for row in rows:
        if row["id"] is None:
            row.pop("id")
        db.session.add(Booking(**row))

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify(error="Import conflicts with existing data (duplicate ids?)"), 409

    log.info("Booking import: replaced %s bookings with %s", removed, len(rows))
    log_event("DATA_IMPORT_BOOKINGS", entity="booking", metadata={"removed": removed, "imported": len(rows)})
    return jsonify(removed=removed, imported=len(rows)), 200
