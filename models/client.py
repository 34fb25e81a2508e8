from datetime import datetime
from models.db import db

class Client(db.Model):
    __tablename__ = "clients"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, index=True)

    phone = db.Column(db.String(30), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    gym = db.Column(db.String(120), nullable=True)

    # comma separated labels, e.g. "Mon 07:00, Thu 18:30"
    preferred_time = db.Column(db.String(120), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    on_holiday = db.Column(db.Boolean, default=False, nullable=False)

    # package counters; left + completed is the package size
    sessions_left = db.Column(db.Integer, default=0, nullable=False)
    sessions_completed = db.Column(db.Integer, default=0, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # deletes go through the DB foreign key, which restricts while bookings remain
    bookings = db.relationship("Booking", back_populates="client", passive_deletes="all")

    __table_args__ = (
        db.CheckConstraint("sessions_left >= 0", name="ck_clients_sessions_left_nonneg"),
        db.CheckConstraint("sessions_completed >= 0", name="ck_clients_sessions_completed_nonneg"),
    )

    @property
    def preferred_time_chips(self):
        if not self.preferred_time:
            return []
        return [part.strip() for part in self.preferred_time.split(",") if part.strip()]

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "gym": self.gym,
            "preferred_time": self.preferred_time,
            "notes": self.notes,
            "on_holiday": self.on_holiday,
            "sessions_left": self.sessions_left,
            "sessions_completed": self.sessions_completed,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
