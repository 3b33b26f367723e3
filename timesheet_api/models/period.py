from datetime import datetime
from timesheet_api.extensions import db

class Period(db.Model):
    """
    Weekly ledger header: one row per employee per ISO week.

      week_key        -> "YYYY-Www"
      week_start_date -> the Monday of that week
      closed          -> gate; entry writes for the week fail while set
      total_hours     -> snapshot of the week's entry sum
    """
    __tablename__ = "periods"

    id              = db.Column(db.Integer, primary_key=True)
    employee_id     = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    week_key        = db.Column(db.String(10), nullable=False, index=True)
    week_start_date = db.Column(db.Date, nullable=False, index=True)
    closed          = db.Column(db.Boolean, nullable=False, default=False)
    closed_at       = db.Column(db.DateTime, nullable=True)
    total_hours     = db.Column(db.Numeric(6, 2), nullable=False, default=0)
    created_at      = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at      = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("employee_id", "week_key", name="uq_period_employee_week"),
    )

    employee = db.relationship("Employee", back_populates="periods")

    def to_dict(self):
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "week_key": self.week_key,
            "week_start_date": self.week_start_date.isoformat(),
            "closed": bool(self.closed),
            "closed_at": self.closed_at.isoformat() if self.closed_at else None,
            "total_hours": float(self.total_hours or 0),
        }
