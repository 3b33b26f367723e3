from datetime import datetime
from timesheet_api.extensions import db

class Project(db.Model):
    __tablename__ = "projects"
    id         = db.Column(db.Integer, primary_key=True)
    name       = db.Column(db.String(120), nullable=False)
    code       = db.Column(db.String(32), nullable=True)   # e.g. "ACME-001"
    active     = db.Column(db.Boolean, nullable=False, default=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "code": self.code, "active": bool(self.active)}
