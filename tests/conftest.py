"""Test configuration and fixtures for the trainer booking backend."""

from datetime import date

import pytest

from app import create_app
from config import TestConfig
from models import db, Booking, BookingStatus, Client, TrainerBlock
from scheduling.intervals import parse_hhmm


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def make_client(app):
    def _make(name="Alice Johnson", **kwargs):
        kwargs.setdefault("sessions_left", 10)
        row = Client(name=name, **kwargs)
        db.session.add(row)
        db.session.commit()
        return row
    return _make


@pytest.fixture
def make_booking(app):
    def _make(client, day=date(2024, 6, 10), start="09:00", duration=60,
              status=BookingStatus.SCHEDULED, session_type="Training"):
        row = Booking(
            client_id=client.id,
            date=day,
            start_minutes=parse_hhmm(start),
            duration_minutes=duration,
            session_type=session_type,
            status=status,
        )
        db.session.add(row)
        db.session.commit()
        return row
    return _make


@pytest.fixture
def make_block(app):
    def _make(day=date(2024, 6, 10), start="12:00", duration=60, note="Lunch"):
        row = TrainerBlock(date=day, start_minutes=parse_hhmm(start), duration_minutes=duration, note=note)
        db.session.add(row)
        db.session.commit()
        return row
    return _make


@pytest.fixture
def reload(app):
    """Reload a row after a request wrote to it through another session."""
    def _reload(model, pk):
        db.session.expire_all()
        return db.session.get(model, pk)
    return _reload
