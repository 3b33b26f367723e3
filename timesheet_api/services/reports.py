# timesheet_api/services/reports.py
from __future__ import annotations

from datetime import date, timedelta
from typing import List

from sqlalchemy import case, func

from timesheet_api.common.errors import ValidationError
from timesheet_api.extensions import db
from timesheet_api.models.day_entry import DayEntry, DayExpectation
from timesheet_api.models.employee import Employee
from timesheet_api.models.period import Period
from timesheet_api.services.period_view import parse_range
from timesheet_api.services.weeks import is_date_iso, iter_days, monday_of, parse_iso

MAX_REPORT_DAYS = 366


def _hours_of(typ):
    return func.coalesce(func.sum(case((DayEntry.type == typ, DayEntry.hours), else_=0)), 0)


def report_by_dates(from_iso, to_iso, employee_id: int | None = None) -> List[dict]:
    """
    One row per (employee, date) in the range:
    expected snapshot, hours split by type, total and extra work over expected.
    Sorted by date, then employee name.
    """
    start, end = parse_range(from_iso, to_iso)
    if (end - start).days >= MAX_REPORT_DAYS:
        raise ValidationError(f"Range must not exceed {MAX_REPORT_DAYS} days", payload={"from": from_iso, "to": to_iso})

    q = Employee.query
    if employee_id is not None:
        q = q.filter(Employee.id == employee_id)
    emps = q.all()
    if not emps:
        return []
    emp_ids = [e.id for e in emps]

    exp_map = {
        (r.employee_id, r.work_date): float(r.expected_hours or 0)
        for r in DayExpectation.query.filter(
            DayExpectation.employee_id.in_(emp_ids),
            DayExpectation.work_date >= start,
            DayExpectation.work_date <= end,
        ).all()
    }

    agg = (
        db.session.query(
            DayEntry.employee_id,
            DayEntry.work_date,
            _hours_of("work"),
            _hours_of("sick"),
            _hours_of("time_off"),
        )
        .filter(
            DayEntry.employee_id.in_(emp_ids),
            DayEntry.work_date >= start,
            DayEntry.work_date <= end,
        )
        .group_by(DayEntry.employee_id, DayEntry.work_date)
        .all()
    )
    agg_map = {(eid, d): (float(w or 0), float(s or 0), float(t or 0)) for eid, d, w, s, t in agg}

    rows = []
    for e in emps:
        for d in iter_days(start, end):
            work, sick, toff = agg_map.get((e.id, d), (0.0, 0.0, 0.0))
            expected = exp_map.get((e.id, d), 0.0)
            rows.append({
                "date": d.isoformat(),
                "employee_id": e.id,
                "employee_name": e.full_name,
                "expected_hours": expected,
                "work_hours": work,
                "sick_hours": sick,
                "time_off_hours": toff,
                "total_hours": work + sick + toff,
                "extra_work_hours": max(0.0, work - expected),
                "has_sick": sick > 0,
                "has_time_off": toff > 0,
            })

    rows.sort(key=lambda r: (r["date"], r["employee_name"]))
    return rows


def report_missing_periods(before_iso=None, only_active: bool = False, today: date | None = None) -> dict:
    """
    Open periods that started before a reference Monday (default: this week's).
    With `only_active`, weeks outside the employee's employment window are skipped.
    """
    if before_iso:
        if not is_date_iso(before_iso):
            raise ValidationError("before must be YYYY-MM-DD", payload={"field": "before"})
        try:
            ref = parse_iso(before_iso)
        except ValueError:
            raise ValidationError("before must be YYYY-MM-DD", payload={"field": "before"})
    else:
        ref = monday_of(today or date.today())

    base = (
        db.session.query(Period, Employee)
        .join(Employee, Employee.id == Period.employee_id)
        .filter(Period.closed.is_(False), Period.week_start_date < ref)
        .order_by(Period.week_start_date.asc(), Employee.surname.asc(), Employee.name.asc())
        .all()
    )

    rows = []
    for p, e in base:
        if only_active:
            week_end = p.week_start_date + timedelta(days=6)
            if e.start_date and week_end < e.start_date:
                continue
            if e.end_date and p.week_start_date > e.end_date:
                continue
        rows.append({
            "employee_id": e.id,
            "employee_name": e.full_name,
            "week_key": p.week_key,
            "week_start_date": p.week_start_date.isoformat(),
            "total_hours": float(p.total_hours or 0),
        })

    return {"ref_monday": ref.isoformat(), "count": len(rows), "rows": rows}
