# timesheet_api/services/period_view.py
from __future__ import annotations

from collections import OrderedDict

from timesheet_api.common.errors import ValidationError
from timesheet_api.extensions import db
from timesheet_api.models.day_entry import DayEntry, DayExpectation
from timesheet_api.services.period_store import get_or_create
from timesheet_api.services.weeks import is_date_iso, parse_iso, same_week

MIXED = "mixed"


def parse_range(from_iso, to_iso):
    """Validate a `from`/`to` pair of ISO dates. Returns (date, date)."""
    if not is_date_iso(from_iso) or not is_date_iso(to_iso):
        raise ValidationError("from/to are required and must be YYYY-MM-DD", payload={"from": from_iso, "to": to_iso})
    try:
        start, end = parse_iso(from_iso), parse_iso(to_iso)
    except ValueError:
        raise ValidationError("from/to must be real calendar dates", payload={"from": from_iso, "to": to_iso})
    if start > end:
        raise ValidationError("from must be on or before to", payload={"from": from_iso, "to": to_iso})
    return start, end


def get_period_view(employee_id: int, from_iso, to_iso) -> dict:
    """
    Entries, per-date totals and expectation snapshots for one week, plus its
    Period (created open when missing).

    totals[date] = {"total_hours": float, "type": first type seen, or "mixed"}
    expectations_by_date holds snapshots only; a missing date has no snapshot yet.
    """
    start, end = parse_range(from_iso, to_iso)
    if not same_week(start, end):
        raise ValidationError("from and to must fall in the same Monday-Sunday week",
                              payload={"from": from_iso, "to": to_iso})

    try:
        period = get_or_create(employee_id, start)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    rows = (
        DayEntry.query
        .filter(
            DayEntry.employee_id == employee_id,
            DayEntry.work_date >= start,
            DayEntry.work_date <= end,
        )
        .order_by(DayEntry.work_date.asc(), DayEntry.id.asc())
        .all()
    )
    exp_rows = DayExpectation.query.filter(
        DayExpectation.employee_id == employee_id,
        DayExpectation.work_date >= start,
        DayExpectation.work_date <= end,
    ).all()

    expectations_by_date = {r.work_date.isoformat(): float(r.expected_hours or 0) for r in exp_rows}

    entries_by_date = OrderedDict()
    totals = OrderedDict()
    for r in rows:
        key = r.work_date.isoformat()
        entries_by_date.setdefault(key, []).append(r.to_dict())

        t = totals.setdefault(key, {"total_hours": 0.0, "type": r.type})
        t["total_hours"] += float(r.hours or 0)
        if t["type"] != r.type:
            t["type"] = MIXED

    return {
        "period": period.to_dict(),
        "entries_by_date": entries_by_date,
        "totals": totals,
        "expectations_by_date": expectations_by_date,
        "total_days_with_entries": len(entries_by_date),
        "range": {"from": start.isoformat(), "to": end.isoformat()},
    }
