from datetime import datetime
from timesheet_api.extensions import db

DAY_TYPES = ("work", "sick", "time_off")


class DayEntry(db.Model):
    """
    One hours line for an employee and date. A date may carry several rows
    (mixed types / projects); rows for a date are always replaced as a batch.
    Zero-hour rows are never stored.
    """
    __tablename__ = "day_entries"

    id          = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    work_date   = db.Column(db.Date, nullable=False)
    type        = db.Column(db.Enum(*DAY_TYPES, name="day_type"), nullable=False)
    project_id  = db.Column(db.Integer, db.ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    hours       = db.Column(db.Numeric(5, 2), nullable=False, default=0)
    note        = db.Column(db.Text, nullable=True)
    created_at  = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at  = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.Index("ix_day_entries_emp_date", "employee_id", "work_date"),
        db.Index("ix_day_entries_emp_proj", "employee_id", "project_id"),
    )

    employee = db.relationship("Employee", back_populates="day_entries")
    project  = db.relationship("Project")

    def to_dict(self):
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "work_date": self.work_date.isoformat(),
            "type": self.type,
            "project_id": self.project_id,
            "hours": float(self.hours or 0),
            "note": self.note,
        }


class DayExpectation(db.Model):
    """Expected hours frozen for (employee, date) when that date's entries were last saved."""
    __tablename__ = "day_expectations"

    id             = db.Column(db.Integer, primary_key=True)
    employee_id    = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    work_date      = db.Column(db.Date, nullable=False)
    expected_hours = db.Column(db.Numeric(4, 2), nullable=False, default=0)
    created_at     = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at     = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("employee_id", "work_date", name="uq_day_expectation_emp_date"),
    )

    employee = db.relationship("Employee", back_populates="expectations")
