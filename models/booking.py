from datetime import datetime
from models.db import db
from scheduling.intervals import Interval, format_hhmm


class BookingStatus:
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    ALL = (SCHEDULED, COMPLETED, CANCELLED)


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    client_id = db.Column(
        db.Integer,
        db.ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    date = db.Column(db.Date, nullable=False, index=True)
    start_minutes = db.Column(db.Integer, nullable=False)  # minutes since midnight
    duration_minutes = db.Column(db.Integer, nullable=False, default=60)
    session_type = db.Column(db.String(64), nullable=False, default="Training")

    status = db.Column(db.String(20), nullable=False, default=BookingStatus.SCHEDULED, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    client = db.relationship("Client", back_populates="bookings")

    __table_args__ = (
        db.CheckConstraint("duration_minutes >= 0", name="ck_bookings_duration_nonneg"),
        db.CheckConstraint(
            "status IN ('SCHEDULED', 'COMPLETED', 'CANCELLED')",
            name="ck_bookings_status",
        ),
        db.Index("ix_bookings_date_status", "date", "status"),
    )

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration_minutes

    @property
    def interval(self) -> Interval:
        return Interval(self.start_minutes, self.duration_minutes)

    @property
    def client_name(self) -> str:
        return self.client.name if self.client else "Unknown"

    def set_status(self, status: str):
        if status not in BookingStatus.ALL:
            raise ValueError(f"Unknown booking status: {status}")
        self.status = status
        self.updated_at = datetime.utcnow()

    def to_dict(self):
        return {
            "id": self.id,
            "client_id": self.client_id,
            "client_name": self.client_name,
            "date": self.date.isoformat(),
            "start": format_hhmm(self.start_minutes),
            "end": format_hhmm(self.end_minutes),
            "duration_minutes": self.duration_minutes,
            "session_type": self.session_type,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
