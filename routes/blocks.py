from flask import Blueprint, request, jsonify
from models import db
from models.trainer_block import TrainerBlock
from scheduling.availability import bookings_on, describe_booking
from scheduling.intervals import Interval, overlaps
from utils.audit import log_event
from utils.forms import clean_str, parse_date, parse_duration, parse_time

blocks_bp = Blueprint("blocks", __name__, url_prefix="/blocks")


@blocks_bp.get("")
def list_blocks():
    date_str = request.args.get("date")
    q = TrainerBlock.query
    if date_str:
        try:
            q = q.filter(TrainerBlock.date == parse_date(date_str))
        except ValueError as exc:
            return jsonify(error=str(exc)), 400

    rows = q.order_by(TrainerBlock.date.asc(), TrainerBlock.start_minutes.asc()).limit(200).all()
    return jsonify([b.to_dict() for b in rows]), 200


@blocks_bp.post("")
def create_block():
    data = request.get_json(silent=True) or {}
    try:
        day = parse_date(data.get("date"))
        start = parse_time(data.get("start"))
        duration = parse_duration(data.get("duration_minutes"), 60)
    except (TypeError, ValueError) as exc:
        return jsonify(error=str(exc)), 400

    if duration == 0:
        return jsonify(error="duration_minutes must be greater than 0"), 400

    note = clean_str(data.get("note"))
    if note and len(note) > 160:
        return jsonify(error="note must be at most 160 characters"), 400

    block = TrainerBlock(date=day, start_minutes=start, duration_minutes=duration, note=note)
    db.session.add(block)
    db.session.commit()

    # existing bookings are left alone; the trainer decides what to move
    target = Interval(start, duration)
    affected = [describe_booking(b) for b in bookings_on(day) if overlaps(target, b.interval)]

    log_event("BLOCK_CREATE", entity="trainer_block", entity_id=block.id, metadata={"note": note})
    return jsonify(block=block.to_dict(), overlapping_bookings=affected), 201


@blocks_bp.delete("/<int:block_id>")
def delete_block(block_id: int):
    block = db.session.get(TrainerBlock, block_id)
    if not block:
        return jsonify(error="Block not found"), 404

    db.session.delete(block)
    db.session.commit()

    log_event("BLOCK_DELETE", entity="trainer_block", entity_id=block_id)
    return jsonify(message="Block removed"), 200
