from flask import Blueprint, jsonify
from models import db
from security.csrf import issue_csrf_token

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health():
    db.session.execute(db.text("SELECT 1"))
    return jsonify(status="ok"), 200


@health_bp.get("/csrf")
def csrf_token():
    resp = jsonify(message="CSRF cookie issued")
    return issue_csrf_token(resp), 200
