from datetime import datetime
from timesheet_api.extensions import db

WEEKDAY_FIELDS = ("mon_hours", "tue_hours", "wed_hours", "thu_hours", "fri_hours", "sat_hours", "sun_hours")

# used when no Settings row applies
FALLBACK_HOURS = (8, 8, 8, 8, 8, 0, 0)


class Settings(db.Model):
    """Weekly expected-hours template (Mon..Sun). At most one row is flagged default."""
    __tablename__ = "settings"

    id         = db.Column(db.Integer, primary_key=True)
    name       = db.Column(db.String(120), nullable=False, default="Default")
    mon_hours  = db.Column(db.Numeric(4, 2), nullable=False, default=8)
    tue_hours  = db.Column(db.Numeric(4, 2), nullable=False, default=8)
    wed_hours  = db.Column(db.Numeric(4, 2), nullable=False, default=8)
    thu_hours  = db.Column(db.Numeric(4, 2), nullable=False, default=8)
    fri_hours  = db.Column(db.Numeric(4, 2), nullable=False, default=8)
    sat_hours  = db.Column(db.Numeric(4, 2), nullable=False, default=0)
    sun_hours  = db.Column(db.Numeric(4, 2), nullable=False, default=0)
    is_default = db.Column(db.Boolean, nullable=False, default=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    employees = db.relationship("Employee", back_populates="settings")

    def hours_by_weekday(self):
        """Expected hours as a 7-tuple, index 0 = Monday."""
        return tuple(float(getattr(self, f) or 0) for f in WEEKDAY_FIELDS)

    def to_dict(self):
        d = {
            "id": self.id,
            "name": self.name,
            "is_default": bool(self.is_default),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        for f, h in zip(WEEKDAY_FIELDS, self.hours_by_weekday()):
            d[f] = h
        return d
