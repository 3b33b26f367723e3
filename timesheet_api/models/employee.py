from datetime import datetime
from timesheet_api.extensions import db

class Employee(db.Model):
    __tablename__ = "employees"

    id = db.Column(db.Integer, primary_key=True)
    # external auth-user id (identity provider subject)
    user_id     = db.Column(db.String(64), unique=True, nullable=True)
    settings_id = db.Column(db.Integer, db.ForeignKey("settings.id", ondelete="SET NULL"), nullable=True)

    name    = db.Column(db.String(80), nullable=False)
    surname = db.Column(db.String(80), nullable=False)

    # employment window, inclusive; null = unbounded
    start_date = db.Column(db.Date, nullable=True)
    end_date   = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.Index("ix_emp_user_id", "user_id"),
        db.Index("ix_emp_start_end", "start_date", "end_date"),
    )

    settings = db.relationship("Settings", back_populates="employees")
    day_entries = db.relationship("DayEntry", back_populates="employee", cascade="all, delete-orphan")
    expectations = db.relationship("DayExpectation", back_populates="employee", cascade="all, delete-orphan")
    periods = db.relationship("Period", back_populates="employee", cascade="all, delete-orphan")

    @property
    def full_name(self):
        return f"{self.surname} {self.name}"

    def employed_on(self, d) -> bool:
        if self.start_date and d < self.start_date:
            return False
        if self.end_date and d > self.end_date:
            return False
        return True

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "surname": self.surname,
            "settings_id": self.settings_id,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
