# timesheet_api/services/employees.py
from __future__ import annotations

import logging

from timesheet_api.common.errors import ConflictError, NotFoundError, ValidationError
from timesheet_api.extensions import db
from timesheet_api.models.employee import Employee
from timesheet_api.models.settings import Settings
from timesheet_api.services.weeks import is_date_iso, parse_iso

log = logging.getLogger(__name__)


def _opt_date(j: dict, field: str):
    v = j.get(field)
    if v in (None, ""):
        return None
    if not is_date_iso(v):
        raise ValidationError(f"{field} must be YYYY-MM-DD", payload={"field": field})
    try:
        return parse_iso(v)
    except ValueError:
        raise ValidationError(f"{field} must be YYYY-MM-DD", payload={"field": field})


def _opt_settings_id(j: dict):
    v = j.get("settings_id")
    if v in (None, ""):
        return None
    try:
        sid = int(v)
    except (TypeError, ValueError):
        raise ValidationError("settings_id must be integer", payload={"field": "settings_id"})
    if not db.session.get(Settings, sid):
        raise ValidationError("settings_id does not exist", payload={"field": "settings_id"})
    return sid


def _required_text(j: dict, field: str) -> str:
    v = j.get(field)
    if not isinstance(v, str) or not v.strip():
        raise ValidationError("Missing fields", payload={"field": field})
    return v.strip()


def _check_window(start, end):
    if start and end and start > end:
        raise ValidationError("start_date must be <= end_date", payload={"field": "end_date"})


def create_employee(j: dict) -> Employee:
    name = _required_text(j, "name")
    surname = _required_text(j, "surname")
    user_id = _required_text(j, "user_id")
    start, end = _opt_date(j, "start_date"), _opt_date(j, "end_date")
    _check_window(start, end)
    settings_id = _opt_settings_id(j)

    if Employee.query.filter_by(user_id=user_id).first():
        raise ConflictError("An employee is already linked to this user", code="DUPLICATE_USER")

    emp = Employee(name=name, surname=surname, user_id=user_id,
                   start_date=start, end_date=end, settings_id=settings_id)
    db.session.add(emp)
    db.session.commit()
    log.info("employee %s created for user %s", emp.id, user_id)
    return emp


def update_employee(emp_id: int, j: dict) -> Employee:
    emp = db.session.get(Employee, emp_id)
    if not emp:
        raise NotFoundError("Employee not found")

    try:
        if "name" in j:
            emp.name = _required_text(j, "name")
        if "surname" in j:
            emp.surname = _required_text(j, "surname")
        if "start_date" in j:
            emp.start_date = _opt_date(j, "start_date")
        if "end_date" in j:
            emp.end_date = _opt_date(j, "end_date")
        if "settings_id" in j:
            emp.settings_id = _opt_settings_id(j)
        _check_window(emp.start_date, emp.end_date)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return emp


def delete_employees(ids, caller_user_id=None) -> int:
    """Hard delete; entries, expectation snapshots and periods go with the employee."""
    if not isinstance(ids, list) or not ids or any(isinstance(x, bool) or not isinstance(x, int) or x <= 0 for x in ids):
        raise ValidationError("ids[] (positive integers) is required", payload={"field": "ids"})

    rows = Employee.query.filter(Employee.id.in_(ids)).all()
    if caller_user_id is not None and any(r.user_id and r.user_id == str(caller_user_id) for r in rows):
        raise ValidationError("You cannot delete your own employee record")

    try:
        for r in rows:
            db.session.delete(r)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    log.info("deleted %d employees", len(rows))
    return len(rows)
