from datetime import datetime
from models.db import db
from scheduling.intervals import Interval, format_hhmm

class TrainerBlock(db.Model):
    __tablename__ = "trainer_blocks"

    id = db.Column(db.Integer, primary_key=True)

    date = db.Column(db.Date, nullable=False, index=True)
    start_minutes = db.Column(db.Integer, nullable=False)
    duration_minutes = db.Column(db.Integer, nullable=False)
    note = db.Column(db.String(160), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint("duration_minutes >= 0", name="ck_trainer_blocks_duration_nonneg"),
    )

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration_minutes

    @property
    def interval(self) -> Interval:
        return Interval(self.start_minutes, self.duration_minutes)

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "start": format_hhmm(self.start_minutes),
            "end": format_hhmm(self.end_minutes),
            "duration_minutes": self.duration_minutes,
            "note": self.note,
        }
