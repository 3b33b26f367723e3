# timesheet_api/services/period_store.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
import logging

from sqlalchemy import func

from timesheet_api.common.errors import ConflictError, NotFoundError
from timesheet_api.extensions import db, dialect_insert
from timesheet_api.models.day_entry import DayEntry, DayExpectation
from timesheet_api.models.period import Period
from timesheet_api.services.expectations import resolve_schedule
from timesheet_api.services.weeks import iso_week_key, monday_of, sunday_of, week_dates

log = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def as_hours(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(TWO_PLACES)


def find_period(employee_id: int, week_key: str, lock: bool = False) -> Period | None:
    q = Period.query.filter_by(employee_id=employee_id, week_key=week_key)
    if lock:
        q = q.with_for_update()
    return q.first()


def get_or_create(employee_id: int, week_start_date, total_hours=0, lock: bool = False) -> Period:
    """
    Return the one Period for (employee, week of `week_start_date`), inserting an
    open one when missing. A concurrent insert of the same key is absorbed by
    ON CONFLICT DO NOTHING and the existing row is returned.

    Does not commit; the caller owns the transaction.
    """
    monday = monday_of(week_start_date)
    week_key = iso_week_key(monday)

    p = find_period(employee_id, week_key, lock=lock)
    if p:
        return p

    now = datetime.utcnow()
    stmt = (
        dialect_insert(Period.__table__)
        .values(
            employee_id=employee_id,
            week_key=week_key,
            week_start_date=monday,
            closed=False,
            total_hours=as_hours(total_hours),
            created_at=now,
            updated_at=now,
        )
        .on_conflict_do_nothing(index_elements=["employee_id", "week_key"])
    )
    res = db.session.execute(stmt)
    if res.rowcount:
        log.debug("created period employee=%s week=%s", employee_id, week_key)

    return find_period(employee_id, week_key, lock=lock)


def week_total(employee_id: int, monday) -> Decimal:
    start = monday_of(monday)
    total = (
        db.session.query(func.coalesce(func.sum(DayEntry.hours), 0))
        .filter(
            DayEntry.employee_id == employee_id,
            DayEntry.work_date >= start,
            DayEntry.work_date <= sunday_of(start),
        )
        .scalar()
    )
    return as_hours(total)


def refresh_total(period: Period) -> Decimal:
    """Set the cached total from the week's entries. No commit."""
    period.total_hours = week_total(period.employee_id, period.week_start_date)
    return period.total_hours


def week_expected(employee_id: int, settings_id: int | None, monday) -> Decimal:
    """Snapshot where one exists for the day, resolved schedule otherwise."""
    days = week_dates(monday)
    snaps = {
        r.work_date: r.expected_hours
        for r in DayExpectation.query.filter(
            DayExpectation.employee_id == employee_id,
            DayExpectation.work_date >= days[0],
            DayExpectation.work_date <= days[-1],
        ).all()
    }
    schedule = resolve_schedule(settings_id)
    return sum((as_hours(snaps.get(d, schedule[d.weekday()])) for d in days), Decimal("0"))


def set_closed(employee_id: int, week_key: str, closed: bool,
               enforce_expected: bool = False, settings_id: int | None = None) -> Period:
    """
    Close or reopen a week. The cached total is refreshed from the week's entries.
    Raises NotFoundError when the period was never created.
    """
    try:
        p = find_period(employee_id, week_key, lock=True)
        if not p:
            raise NotFoundError(f"Period {week_key} not found")

        total = refresh_total(p)
        if closed and enforce_expected:
            expected = week_expected(employee_id, settings_id, p.week_start_date)
            if total < expected:
                raise ConflictError(
                    f"Week {week_key} has {total} of {expected} expected hours",
                    code="UNDER_HOURS",
                    payload={"total_hours": float(total), "expected_hours": float(expected)},
                )

        p.closed = closed
        p.closed_at = datetime.utcnow() if closed else None
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    log.info("period %s employee=%s week=%s", "closed" if closed else "reopened", employee_id, week_key)
    return p
